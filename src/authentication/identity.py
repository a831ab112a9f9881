"""Identity resolution: signed access token -> Actor or ANONYMOUS.

The actor is rebuilt from token claims on every request. The role carried in
the token is authoritative until the token expires; the user row is never
re-read here, so a role change only takes effect on the next login or refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated

from access_control.roles import Role, parse_role
from .services import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as described by its access token."""

    id: str
    email: str
    name: str
    role: Role

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.id

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role.value}


class AnonymousActor:
    """Caller without a usable credential. Compares equal to any other anonymous."""

    id = None
    pk = None
    email = ""
    name = ""
    role = None
    is_authenticated = False
    is_anonymous = True

    def __eq__(self, other) -> bool:
        return isinstance(other, AnonymousActor)

    def __hash__(self) -> int:
        return 1

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "ANONYMOUS"


ANONYMOUS = AnonymousActor()


def actor_from_claims(payload: dict) -> Actor | None:
    """Build an Actor from decoded token claims, or None if claims are incomplete."""
    subject = payload.get("sub")
    role = parse_role(payload.get("role"))
    if not subject or role is None:
        return None
    return Actor(
        id=str(subject),
        email=payload.get("email") or "",
        name=payload.get("name") or "",
        role=role,
    )


def resolve_actor(token: str | None) -> Actor | AnonymousActor:
    """Resolve a bearer access token to an Actor.

    Missing, malformed, expired, revoked, or wrong-type tokens all resolve to
    ``ANONYMOUS``; callers decide whether anonymous access is acceptable.
    ``BlocklistUnavailable`` is not swallowed: a token whose revocation state
    cannot be checked must not be trusted or silently downgraded.
    """
    if not token:
        return ANONYMOUS

    try:
        payload = TokenService.decode_token(token, expected_type="access")
    except AuthenticationFailed as exc:
        logger.debug("Rejected access token: %s", exc.detail)
        return ANONYMOUS

    jti = payload.get("jti")
    if not jti:
        logger.debug("Rejected access token without jti")
        return ANONYMOUS
    if TokenService.is_token_blocked(jti):
        logger.debug("Rejected revoked access token %s", jti)
        return ANONYMOUS

    actor = actor_from_claims(payload)
    if actor is None:
        logger.debug("Rejected access token with incomplete claims")
        return ANONYMOUS
    return actor


def require_actor(actor) -> Actor:
    """Return ``actor`` if authenticated, otherwise raise 401."""
    if actor is None or not getattr(actor, "is_authenticated", False):
        raise NotAuthenticated("Authentication required")
    return actor


def get_bearer_token(request) -> str | None:
    """Extract the Bearer token from the Authorization header if present."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


__all__ = [
    "Actor",
    "AnonymousActor",
    "ANONYMOUS",
    "actor_from_claims",
    "resolve_actor",
    "require_actor",
    "get_bearer_token",
]
