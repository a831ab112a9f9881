"""24-character hexadecimal identifiers shared by users and posts."""

import re
import secrets
import time

from rest_framework.exceptions import ValidationError

OBJECT_ID_LENGTH = 24
OBJECT_ID_RE = re.compile(r"^[a-fA-F0-9]{24}$")


def new_object_id() -> str:
    """Return a new id: 4-byte creation timestamp followed by 8 random bytes."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))


def validate_object_id(value, label: str = "id") -> str:
    """Return ``value`` lower-cased, or raise a 400 if it is not a 24-hex id."""
    if not is_object_id(value):
        raise ValidationError(
            {label: [f"Invalid {label} format; expected a 24-character hexadecimal string."]},
            code="invalid_id",
        )
    return value.lower()


__all__ = ["OBJECT_ID_LENGTH", "OBJECT_ID_RE", "new_object_id", "is_object_id", "validate_object_id"]
