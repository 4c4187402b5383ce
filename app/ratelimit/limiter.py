"""Fixed-window request limiting for the document analysis endpoints.

The limiter only reports decisions; turning a denial into an HTTP 429 is
left to the caller (see ``too_many_requests``).
"""

import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from app.logging.logger import Log
from app.ratelimit.store import BaseRateLimitStore, InMemoryRateLimitStore

DEFAULT_MESSAGE = "Too many requests. Please try again later."


@dataclass(frozen=True)
class RateLimitConfig:
    limit: int
    window_seconds: float
    message: str | None = None


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "standard": RateLimitConfig(limit=100, window_seconds=60),
    "strict": RateLimitConfig(limit=20, window_seconds=60),
    "auth": RateLimitConfig(
        limit=10,
        window_seconds=15 * 60,
        message="Too many login attempts. Please try again later.",
    ),
    "upload": RateLimitConfig(
        limit=10,
        window_seconds=60,
        message="Upload rate limit exceeded. Please wait before uploading more files.",
    ),
    "reports": RateLimitConfig(
        limit=5,
        window_seconds=60,
        message="Report generation rate limit exceeded.",
    ),
    "analysis": RateLimitConfig(
        limit=10,
        window_seconds=60,
        message=(
            "Document analysis rate limit exceeded. "
            "Please wait before analyzing more documents."
        ),
    ),
    "analytics": RateLimitConfig(limit=10, window_seconds=60),
    "webhook": RateLimitConfig(limit=30, window_seconds=60),
}


def client_ip(headers: Mapping[str, str]) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then ``unknown``."""
    lowered = {k.lower(): v for k, v in headers.items()}
    forwarded = lowered.get("x-forwarded-for", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return lowered.get("x-real-ip", "").strip() or "unknown"


def client_key(path: str, ip: str, user_id: str | None = None) -> str:
    identifier = f"{ip}:{user_id}" if user_id else ip
    return f"{path}:{identifier}"


class RateLimiter:
    def __init__(
        self,
        store: BaseRateLimitStore | None = None,
        clock: Callable[[], float] = time.time,
        purge_interval_seconds: float = 60,
    ) -> None:
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._purge_interval = purge_interval_seconds
        self._last_purge = clock()

    @property
    def store(self) -> BaseRateLimitStore:
        return self._store

    def check(self, key: str, limit: int, window_seconds: float) -> RateLimitDecision:
        """Count one request for ``key`` and report whether it is within ``limit``.

        Never raises. If the store fails the request is allowed and the
        failure is logged.
        """
        now = self._clock()
        try:
            self._maybe_purge(now)
            counter = self._store.increment(key, window_seconds, now)
        except Exception as exc:
            Log.error(f"Rate limit store failed for {key}: {exc}")
            return RateLimitDecision(allowed=True, remaining=limit, reset_at=now + window_seconds)

        if counter.count > limit:
            return RateLimitDecision(allowed=False, remaining=0, reset_at=counter.reset_at)
        return RateLimitDecision(
            allowed=True, remaining=limit - counter.count, reset_at=counter.reset_at
        )

    def check_preset(self, key: str, config: RateLimitConfig) -> RateLimitDecision:
        return self.check(key, config.limit, config.window_seconds)

    def _maybe_purge(self, now: float) -> None:
        if now - self._last_purge < self._purge_interval:
            return
        self._last_purge = now
        purged = self._store.purge_expired(now)
        if purged:
            Log.debug(f"Purged {purged} expired rate limit windows")


def rate_limit_headers(decision: RateLimitDecision, config: RateLimitConfig) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(config.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(math.ceil(decision.reset_at)),
    }


def too_many_requests(
    decision: RateLimitDecision,
    config: RateLimitConfig,
    now: float | None = None,
) -> tuple[int, dict[str, object], dict[str, str]]:
    """Status, JSON body and headers for a rejected request."""
    now = time.time() if now is None else now
    retry_after = max(0, math.ceil(decision.reset_at - now))
    body: dict[str, object] = {
        "error": config.message or DEFAULT_MESSAGE,
        "retryAfter": retry_after,
    }
    headers = rate_limit_headers(decision, config)
    headers["Retry-After"] = str(retry_after)
    return 429, body, headers
