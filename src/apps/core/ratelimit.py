"""In-process sliding-window rate limiting for the public API endpoints."""

import logging
import threading
import time

from django.conf import settings

from .errors import RateLimited

logger = logging.getLogger(__name__)

# {key: [expiry, expiry, ...]} (per-process); one entry per counted hit
_rate_limit_store: dict[str, list[float]] = {}
_lock = threading.Lock()

# Counter for periodic cleanup (every ~100 checks)
_check_counter = 0
_CLEANUP_INTERVAL = 100


def _cleanup_expired(now: float) -> None:
    """Drop keys whose hits have all expired. Caller holds the lock."""
    expired = [key for key, hits in _rate_limit_store.items() if all(t <= now for t in hits)]
    for key in expired:
        del _rate_limit_store[key]


def check_rate_limit(key: str, limit: int, window: int) -> bool:
    """Record a hit for *key* and return True if it is within *limit* per *window* seconds."""
    global _check_counter

    now = time.monotonic()
    with _lock:
        _check_counter += 1
        if _check_counter >= _CLEANUP_INTERVAL:
            _check_counter = 0
            _cleanup_expired(now)

        hits = [t for t in _rate_limit_store.get(key, []) if t > now]
        if len(hits) >= limit:
            _rate_limit_store[key] = hits
            return False
        hits.append(now + window)
        _rate_limit_store[key] = hits
    return True


def reset_rate_limits() -> None:
    """Forget every recorded hit."""
    global _check_counter

    with _lock:
        _rate_limit_store.clear()
        _check_counter = 0


class RateLimitMixin:
    """
    Mixin for ``JSONAPIView`` subclasses that throttles requests per client IP.

    ``rate_limit_scope`` names a ``RATE_LIMITS`` settings entry of the form
    ``{"limit": int, "window": seconds, "message": str}``.
    """

    rate_limit_scope: str = ""

    def check_rate_limit(self, request) -> None:
        from .http import get_client_ip

        config = settings.RATE_LIMITS.get(self.rate_limit_scope)
        if not config:
            return
        ip = get_client_ip(request)
        if not check_rate_limit(f"{self.rate_limit_scope}:{ip}", config["limit"], config["window"]):
            logger.warning("Rate limit exceeded for %s from %s", self.rate_limit_scope, ip)
            raise RateLimited(config.get("message"))

    async def initial(self, request) -> None:
        await super().initial(request)
        self.check_rate_limit(request)
