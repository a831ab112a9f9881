"""Middleware resolving the request's actor from a JWT bearer token."""

import logging

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status

from authentication.identity import get_bearer_token, resolve_actor
from authentication.services import BlocklistUnavailable

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Attach ``request.actor`` (an Actor or ANONYMOUS) to every request.

    Invalid or missing credentials never fail the request here; endpoints
    that need an authenticated actor reject anonymous callers themselves.
    """

    def process_request(self, request):  # type: ignore[override]
        """Resolve the bearer token, if any, into an actor."""
        try:
            request.actor = resolve_actor(get_bearer_token(request))
        except BlocklistUnavailable:
            logger.error("Rejecting request to %s: token blocklist unavailable", request.path)
            return _service_unavailable()
        return None


def _service_unavailable() -> JsonResponse:
    return JsonResponse(
        {
            "data": None,
            "errors": ["Authentication service unavailable (blocklist)."],
            "kind": "service_unavailable",
        },
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["JWTAuthMiddleware"]
