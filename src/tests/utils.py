"""Shared helpers for tests (users, posts, tokens, fake Redis)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Dict
from unittest import mock

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from access_control.roles import Role
from authentication.managers import UserManager
from authentication.services import TokenService
from posts.models import Post

User = get_user_model()

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=dt_timezone.utc)


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


class FakeRedisMixin:
    """Patch the blocklist's Redis client with a per-class in-memory fake."""

    fake_redis: FakeRedis

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.redis_patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.redis_patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        for patcher in cls.redis_patchers:
            patcher.stop()
        super().tearDownClass()


def create_user(email: str, password: str, role: Role, **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    extra.setdefault("name", email.split("@", 1)[0].title())
    return User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        role=role,
        **extra,
    )


def create_post(author, slug: str, *, title: str | None = None, content: str = "Body text.",
                excerpt: str | None = None, published: bool = True, age_minutes: int = 0) -> Post:
    """Create a post whose ``created_at`` is ``age_minutes`` before BASE_TIME."""

    post = Post.objects.create(
        author=author,
        slug=slug,
        title=title or slug.replace("-", " ").title(),
        content=content,
        excerpt=excerpt,
        published=published,
    )
    # auto_now_add ignores explicit values on create; pin the timestamp afterwards.
    created_at = BASE_TIME - timedelta(minutes=age_minutes)
    Post.objects.filter(pk=post.pk).update(created_at=created_at)
    post.created_at = created_at
    return post


def access_token_for(user) -> str:
    access, _ = TokenService.generate_tokens(user)
    return access


def auth_client(user) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(user)}")
    return client
