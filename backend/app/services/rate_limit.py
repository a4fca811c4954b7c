from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
import time
from typing import Deque

from fastapi import Request

from app.core.exceptions import AppError


class RateLimitExceededError(AppError):
    def __init__(self, scope: str, retry_after: int):
        super().__init__(
            f"Too many requests for {scope}. Try again in {retry_after} second(s).",
            status_code=429,
            details={"retry_after": retry_after},
        )


class SlidingWindowRateLimiter:
    def __init__(self) -> None:
        self._buckets: dict[str, Deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def check(self, *, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        now = time.time()
        earliest = now - window_seconds
        with self._lock:
            bucket = self._buckets[key]
            while bucket and bucket[0] < earliest:
                bucket.popleft()
            if len(bucket) >= limit:
                return False, max(1, int(bucket[0] + window_seconds - now))
            bucket.append(now)
        return True, 0

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()


_limiter = SlidingWindowRateLimiter()


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(
    *,
    request: Request,
    scope: str,
    limit: int,
    window_seconds: int,
    identity: str | None = None,
) -> None:
    key = f"{scope}|{_client_ip(request)}|{(identity or '').strip().lower()}"
    allowed, retry_after = _limiter.check(key=key, limit=limit, window_seconds=window_seconds)
    if not allowed:
        raise RateLimitExceededError(scope, retry_after)


def clear_rate_limiter() -> None:
    _limiter.clear()
