"""Authentication helpers that bridge the JWT middleware into DRF.

DRF's ``Request.user`` normally relies on its own authentication classes.
Since this project resolves the actor in ``JWTAuthMiddleware``, this module
provides a lightweight authenticator that simply surfaces the actor already
attached to the underlying Django request.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareActorAuthentication(BaseAuthentication):
    """Expose ``request._request.actor`` (set by middleware) to DRF.

    This authenticator does *not* perform any credential parsing or token
    decoding. If the actor is anonymous or missing, authentication is skipped
    and DRF falls back to ``UNAUTHENTICATED_USER``.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        actor = getattr(django_request, "actor", None)
        if actor is None or not getattr(actor, "is_authenticated", False):
            return None

        return actor, None

    def authenticate_header(self, request) -> str:
        # Makes DRF answer NotAuthenticated with 401 + WWW-Authenticate.
        return 'Bearer realm="api"'


__all__ = ["MiddlewareActorAuthentication"]
