"""Fixed-window request limiters keyed by client address."""

from __future__ import annotations

import threading
import time
from collections import Counter
from dataclasses import dataclass, field


class RateLimitExceeded(Exception):
    """Raised when a client has used up its requests for the current window."""

    status_code = 429

    def __init__(self, message: str, limiter: str, ip: str, retry_after: float) -> None:
        super().__init__(message)
        self.message = message
        self.limiter = limiter
        self.ip = ip
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


@dataclass
class _Window:
    hits: int
    expires_at: float


@dataclass
class RateLimiter:
    """Allows ``max_requests`` per key within each window of ``expiration`` seconds."""

    name: str
    max_requests: int
    expiration: float
    message: str
    key_suffix: str = ""
    exceeded: Counter = field(default_factory=Counter, init=False, repr=False)
    _windows: dict[str, _Window] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def key_for(self, ip: str) -> str:
        return ip + self.key_suffix

    def check(self, ip: str, now: float | None = None) -> int:
        """Record one request from *ip* and return how many remain in the window."""
        if now is None:
            now = time.monotonic()
        key = self.key_for(ip)
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.expires_at:
                window = _Window(hits=0, expires_at=now + self.expiration)
                self._windows[key] = window
            window.hits += 1
            remaining = self.max_requests - window.hits
            retry_after = window.expires_at - now
            if remaining < 0:
                self.exceeded[ip] += 1
                raise RateLimitExceeded(self.message, self.name, ip, retry_after)
        return remaining

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self.exceeded.clear()


def auth_rate_limiter() -> RateLimiter:
    return RateLimiter(
        name="auth",
        max_requests=5,
        expiration=60,
        message="Too many requests. Please try again later.",
    )


def login_rate_limiter() -> RateLimiter:
    return RateLimiter(
        name="login",
        max_requests=3,
        expiration=5 * 60,
        message="Too many login attempts. Please try again in 5 minutes.",
        key_suffix=":login",
    )


def general_rate_limiter() -> RateLimiter:
    return RateLimiter(
        name="general",
        max_requests=100,
        expiration=60,
        message="Rate limit exceeded. Please try again later.",
    )


def admin_rate_limiter() -> RateLimiter:
    return RateLimiter(
        name="admin",
        max_requests=20,
        expiration=60,
        message="Admin rate limit exceeded.",
        key_suffix=":admin",
    )