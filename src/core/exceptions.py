"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from authentication.services import BlocklistUnavailable

logger = logging.getLogger(__name__)

ERROR_KINDS = {
    status.HTTP_400_BAD_REQUEST: "validation_error",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "internal",
    status.HTTP_503_SERVICE_UNAVAILABLE: "service_unavailable",
}

GENERIC_401_MESSAGE = (
    "Authentication credentials were not provided or are invalid, "
    "token revoked, or user is inactive."
)


class Conflict(APIException):
    """The request collides with existing state (duplicate slug or email)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource conflicts with an existing one."
    default_code = "conflict"


def error_kind(status_code: int) -> str:
    """Machine-readable kind for an error status code."""
    if status_code in ERROR_KINDS:
        return ERROR_KINDS[status_code]
    return "internal" if status_code >= 500 else "error"


def error_response(errors: list[Any], status_code: int) -> Response:
    return Response(
        {"data": None, "errors": errors, "kind": error_kind(status_code)},
        status=status_code,
    )


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap errors in `{ "data": null, "errors": [...], "kind": ... }` shape.

    - Uses DRF's default handler to produce the base response.
    - Normalizes auth messages; DEBUG_AUTH_ERRORS exposes the specific reason.
    - Persistence and unexpected failures become a 500 ``internal`` envelope.
    """
    # Revocation state could not be checked; fail closed.
    if isinstance(exc, BlocklistUnavailable):
        return error_response(
            ["Authentication service unavailable (blocklist)."],
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, DatabaseError):
        logger.exception("Persistence failure while handling %s", _describe(context))
        return error_response(["Internal server error."], status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("Unhandled error while handling %s", _describe(context))
        return error_response(["Internal server error."], status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Normalize auth-related status codes to 401, regardless of DRF's default
    # mapping, so that AuthenticationFailed/NotAuthenticated consistently
    # produce 401 responses.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code >= 400:
        if response.status_code == status.HTTP_401_UNAUTHORIZED and not getattr(
            settings, "DEBUG_AUTH_ERRORS", False
        ):
            errors = [GENERIC_401_MESSAGE]
        else:
            errors = _normalize_errors(response.data)

        response.data = {"data": None, "errors": errors, "kind": error_kind(response.status_code)}

    return response


def _describe(context: dict[str, Any]) -> str:
    request = context.get("request")
    view = context.get("view")
    if request is None:
        return type(view).__name__ if view is not None else "request"
    return f"{request.method} {request.path}"


__all__ = ["Conflict", "custom_exception_handler", "error_kind", "error_response"]
