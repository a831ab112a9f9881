"""Process-wide Redis connection used by the token blocklist."""

import redis
from django.conf import settings

_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return the lazily created client for ``settings.REDIS_URL``.

    Short socket timeouts keep a Redis outage from stalling every
    authenticated request; callers turn the resulting errors into 503s.
    """

    global _client
    if _client is None:
        timeout = settings.REDIS_SOCKET_TIMEOUT
        _client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
        )
    return _client


__all__ = ["get_redis_client"]
