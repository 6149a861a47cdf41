"""
Rate limiting for security-critical operations.
Challenge: Stop credential stuffing on login, reset and share passwords.
Design: In-process fixed-window counters keyed by (namespace, identifier) for
per-account limits; slowapi handles the generic per-IP limit on public routes.
"""

import logging
import threading
import time
from dataclasses import dataclass

from slowapi import Limiter
from slowapi.util import get_remote_address

from kalkyla.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

MINUTE = 60
HOUR = 60 * MINUTE


@dataclass(frozen=True)
class RateLimitRule:
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: float

    @property
    def minutes_until_reset(self) -> int:
        return max(1, int((self.reset_at - time.time() + 59) // 60))


LOGIN = RateLimitRule(limit=5, window_seconds=15 * MINUTE)
PASSWORD_RESET = RateLimitRule(limit=3, window_seconds=HOUR)
SHARE_PASSWORD = RateLimitRule(limit=5, window_seconds=15 * MINUTE)

SWEEP_INTERVAL_SECONDS = MINUTE


class RateLimiter:
    """Fixed-window counter. Identifiers are case-insensitive."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._stores: dict[str, dict[str, list[float]]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check(self, namespace: str, identifier: str, rule: RateLimitRule) -> RateLimitResult:
        key = identifier.lower()
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= SWEEP_INTERVAL_SECONDS:
                self._purge_expired(now)
            store = self._stores.setdefault(namespace, {})
            entry = store.get(key)  # [count, reset_at]

            if entry is None or entry[1] < now:
                reset_at = now + rule.window_seconds
                store[key] = [1, reset_at]
                return RateLimitResult(True, rule.limit - 1, reset_at)

            if entry[0] >= rule.limit:
                logger.info("Rate limit hit namespace=%s", namespace)
                return RateLimitResult(False, 0, entry[1])

            entry[0] += 1
            return RateLimitResult(True, rule.limit - int(entry[0]), entry[1])

    def reset(self, namespace: str, identifier: str) -> None:
        with self._lock:
            self._stores.get(namespace, {}).pop(identifier.lower(), None)

    def cleanup(self) -> int:
        """Drop expired windows. Returns number of entries removed."""
        with self._lock:
            return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        # caller holds the lock
        removed = 0
        for store in self._stores.values():
            for key in [k for k, (_, reset_at) in store.items() if reset_at < now]:
                del store[key]
                removed += 1
        self._last_sweep = now
        if removed:
            logger.debug("Purged %d expired rate limit windows", removed)
        return removed

    def size(self) -> int:
        with self._lock:
            return sum(len(store) for store in self._stores.values())

    def clear(self) -> None:
        with self._lock:
            self._stores.clear()


rate_limiter = RateLimiter()


def check_login_rate_limit(email: str) -> RateLimitResult:
    return rate_limiter.check("login", email, LOGIN)


def reset_login_rate_limit(email: str) -> None:
    rate_limiter.reset("login", email)


def check_password_reset_rate_limit(email: str) -> RateLimitResult:
    return rate_limiter.check("password-reset", email, PASSWORD_RESET)


def check_share_password_rate_limit(ip_hash: str) -> RateLimitResult:
    return rate_limiter.check("share-password", ip_hash, SHARE_PASSWORD)


# Per-IP limit for unauthenticated endpoints (public calculator, share links, leads)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    enabled=settings.rate_limit_enabled,
)
