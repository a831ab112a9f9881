"""Closed role hierarchy: ADMIN > AUTHOR > READER."""

from django.db import models


class Role(models.TextChoices):
    """Roles an actor can hold. Stored on the user row and embedded in tokens."""

    ADMIN = "ADMIN", "Admin"
    AUTHOR = "AUTHOR", "Author"
    READER = "READER", "Reader"


ROLE_LEVELS: dict[str, int] = {
    Role.ADMIN: 3,
    Role.AUTHOR: 2,
    Role.READER: 1,
}

# Roles a new account may pick for itself on registration.
SELF_ASSIGNABLE_ROLES = (Role.AUTHOR, Role.READER)


def role_level(role) -> int:
    """Return the numeric level of ``role``; unknown roles rank below READER."""
    return ROLE_LEVELS.get(role, 0)


def at_least(actor_role, required_role) -> bool:
    """True if ``actor_role`` is as privileged as ``required_role`` or more."""
    if required_role not in ROLE_LEVELS:
        raise ValueError(f"Unknown role: {required_role!r}")
    return role_level(actor_role) >= ROLE_LEVELS[required_role]


def parse_role(value) -> Role | None:
    """Return the Role for ``value`` or None when it is not a known role."""
    try:
        return Role(value)
    except ValueError:
        return None


__all__ = ["Role", "ROLE_LEVELS", "SELF_ASSIGNABLE_ROLES", "role_level", "at_least", "parse_role"]
