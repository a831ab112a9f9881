"""Account endpoint tests (register, login, refresh, logout, me)."""

from __future__ import annotations

import time
from unittest import mock

import jwt
from django.conf import settings
from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient

from access_control.roles import Role
from authentication.services import BlocklistUnavailable, TokenService
from tests.utils import FakeRedisMixin, create_user


class AuthFlowTests(FakeRedisMixin, TestCase):
    """End-to-end tests covering auth endpoints and credential revocation."""

    @classmethod
    def setUpTestData(cls):
        """Create a default active author for test cases."""
        cls.password = "StrongPass123"
        cls.user = create_user("user@example.com", cls.password, Role.AUTHOR, name="Una User")

    def setUp(self):
        """Fresh DRF APIClient per test."""
        self.api_client: APIClient = APIClient()

    def _login(self) -> dict:
        return self.api_client.post(
            "/auth/login/",
            {"email": self.user.email, "password": self.password},
            format="json",
        ).json()["data"]

    def test_register_success_defaults_to_reader(self):
        """Successful registration returns profile and envelope."""
        payload = {"name": "New Person", "email": "New@Example.com", "password": "secret1"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(body["errors"], [])
        self.assertEqual(body["data"]["email"], "new@example.com")
        self.assertEqual(body["data"]["role"], "READER")
        self.assertEqual(len(body["data"]["id"]), 24)

    def test_register_as_author(self):
        payload = {"name": "Writer", "email": "writer@example.com", "password": "secret1", "role": "AUTHOR"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        self.assertEqual(response.json()["data"]["role"], "AUTHOR")

    def test_register_cannot_self_assign_admin(self):
        payload = {"name": "Sneaky", "email": "sneaky@example.com", "password": "secret1", "role": "ADMIN"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 400)
        self.assertIsNone(body["data"])
        self.assertEqual(body["kind"], "validation_error")

    def test_register_short_password(self):
        payload = {"name": "Shorty", "email": "short@example.com", "password": "12345"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        self.assertEqual(response.status_code, 400)

    def test_register_duplicate_email_conflicts(self):
        payload = {"name": "Again", "email": "USER@example.com", "password": "secret1"}
        response = self.api_client.post("/auth/register/", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 409)
        self.assertEqual(body["kind"], "conflict")

    def test_login_success_returns_tokens(self):
        """Valid credentials return access and refresh tokens."""
        response = self.api_client.post(
            "/auth/login/",
            {"email": "User@Example.com", "password": self.password},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", body["data"])
        self.assertIn("refresh", body["data"])
        claims = TokenService.decode_token(body["data"]["access"], expected_type="access")
        self.assertEqual(claims["role"], "AUTHOR")
        self.assertEqual(claims["name"], "Una User")

    def test_login_invalid_credentials_401(self):
        """Bad password returns 401 with null data."""
        response = self.api_client.post(
            "/auth/login/",
            {"email": self.user.email, "password": "wrongpass"},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertEqual(body["kind"], "unauthenticated")

    def test_login_inactive_user_401(self):
        """Inactive user cannot log in and receives 401."""
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        response = self.api_client.post(
            "/auth/login/",
            {"email": self.user.email, "password": self.password},
            format="json",
        )
        self.assertEqual(response.status_code, 401)

    def test_me_returns_actor_from_token(self):
        tokens = self._login()
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        body = self.api_client.get("/auth/me/").json()

        self.assertEqual(
            body["data"],
            {"id": self.user.id, "email": "user@example.com", "name": "Una User", "role": "AUTHOR"},
        )

    def test_me_requires_credentials(self):
        response = self.api_client.get("/auth/me/")
        self.assertEqual(response.status_code, 401)
        self.assertIn("WWW-Authenticate", response)

    def test_refresh_picks_up_role_change(self):
        """Refresh re-reads the account, so the new access token has the current role."""
        tokens = self._login()
        self.user.role = Role.READER
        self.user.save(update_fields=["role"])

        response = self.api_client.post("/auth/refresh/", {"refresh": tokens["refresh"]}, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(body["data"]["access"], tokens["access"])
        claims = TokenService.decode_token(body["data"]["access"], expected_type="access")
        self.assertEqual(claims["role"], "READER")

    def test_refresh_with_access_token_rejected(self):
        """Providing an access token to refresh endpoint returns 401."""
        tokens = self._login()
        response = self.api_client.post("/auth/refresh/", {"refresh": tokens["access"]}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_refresh_for_inactive_user_rejected(self):
        tokens = self._login()
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        response = self.api_client.post("/auth/refresh/", {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_expired_refresh_token_returns_401(self):
        """Expired refresh tokens should be rejected with 401 Unauthorized."""
        now = int(time.time())
        payload = {
            "sub": self.user.id,
            "jti": "expired-jti",
            "exp": now - 60,  # expired 1 minute ago
            "iat": now - 120,
            "role": self.user.role,
            "type": "refresh",
        }
        expired_refresh = jwt.encode(payload, settings.SECRET_KEY, algorithm=TokenService.ALGORITHM)

        response = self.api_client.post("/auth/refresh/", {"refresh": expired_refresh}, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_logout_blocklists_token(self):
        """Logout blocklists current access token; the token then acts as anonymous."""
        tokens = self._login()
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        logout_response = self.api_client.post("/auth/logout/")
        self.assertEqual(logout_response.status_code, 204)

        self.assertEqual(self.api_client.get("/auth/me/").status_code, 401)
        create = self.api_client.post(
            "/posts/", {"title": "T", "slug": "after-logout", "content": "C"}, format="json"
        )
        self.assertEqual(create.status_code, 401)
        # Public reads keep working for the now-anonymous caller.
        self.assertEqual(self.api_client.get("/posts/").status_code, 200)

    def test_logout_without_token_401(self):
        self.assertEqual(self.api_client.post("/auth/logout/").status_code, 401)

    def test_logout_redis_down_returns_503(self):
        """If Redis is unavailable during logout, the API should fail-closed."""
        tokens = self._login()
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        with mock.patch.object(
            TokenService,
            "block_token",
            side_effect=BlocklistUnavailable("Redis unavailable while blocklisting"),
        ):
            response = self.api_client.post("/auth/logout/")

        body = response.json()
        self.assertEqual(response.status_code, 503)
        self.assertIsNone(body["data"])
        self.assertEqual(body["kind"], "service_unavailable")

    def test_blocklist_check_outage_returns_503(self):
        tokens = self._login()
        self.api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        with mock.patch.object(
            TokenService, "is_token_blocked", side_effect=BlocklistUnavailable("down")
        ):
            response = self.api_client.get("/posts/")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["kind"], "service_unavailable")

    def test_refresh_when_database_unavailable_returns_500_with_envelope(self):
        """Database errors during refresh surface as an internal error envelope."""
        refresh_token = self._login()["refresh"]

        with mock.patch(
            "authentication.views._get_active_user",
            side_effect=DatabaseError("DB down"),
        ):
            response = self.api_client.post("/auth/refresh/", {"refresh": refresh_token}, format="json")

        body = response.json()
        self.assertEqual(response.status_code, 500)
        self.assertIsNone(body["data"])
        self.assertEqual(body["kind"], "internal")
