"""
Rate limiting.

Two limiters live here:

* ``limiter``: the global per-client request limit, built on SlowAPI and
  applied to every route by ``SlowAPIMiddleware``.  Clients are keyed by
  the first ``X-Forwarded-For`` address, falling back to the socket peer.
  Storage is in-memory, so each worker process counts on its own.
* ``login_rate_limiter``: failed-login throttling per email address.
  Only failures are counted and a successful login clears the key.
"""

import hashlib
import logging
import threading
import time
from dataclasses import dataclass

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from contracthub.core.config import settings
from contracthub.core.errors import RateLimited, error_response

logger = logging.getLogger(__name__)

IDENTIFIER_HASH_LENGTH = 32


# ── Global request limit ─────────────────────────────────────────────


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def global_request_limit() -> str:
    # Evaluated per request.
    return f"{settings.RATE_LIMIT_MAX_REQUESTS} per {settings.RATE_LIMIT_WINDOW_SECONDS} seconds"


limiter = Limiter(
    key_func=get_client_ip,
    application_limits=[global_request_limit],
    headers_enabled=True,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer with the standard 429 envelope plus ``Retry-After``."""
    logger.warning("Rate limit exceeded: %s on %s", get_client_ip(request), request.url.path)
    response = error_response(RateLimited())
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


# ── Failed-login throttling ──────────────────────────────────────────


@dataclass
class _Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    """In-process fixed-window counter for login failures.

    Every key gets `max_requests` hits per `window_seconds`; the window
    restarts on the first hit after it has elapsed.
    """

    def __init__(self, max_requests: int, window_seconds: int) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def _current(self, key: str, now: float) -> _Window | None:
        window = self._windows.get(key)
        if window is not None and now - window.started_at >= self.window_seconds:
            self._windows.pop(key, None)
            return None
        return window

    def is_limited(self, key: str, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        with self._lock:
            window = self._current(key, current)
            return window is not None and window.count >= self.max_requests

    def hit(self, key: str, now: float | None = None) -> bool:
        """Count one attempt.  Returns False when the key is over its limit."""
        current = time.time() if now is None else now
        with self._lock:
            window = self._current(key, current)
            if window is None:
                window = _Window(started_at=current, count=0)
                self._windows[key] = window
            if window.count >= self.max_requests:
                return False
            window.count += 1
            return True

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


def _login_key(email: str) -> str:
    digest = hashlib.sha256(email.strip().lower().encode()).hexdigest()
    return f"login:{digest[:IDENTIFIER_HASH_LENGTH]}"


login_rate_limiter = FixedWindowRateLimiter(
    max_requests=settings.LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
    window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
)


def check_login_rate_limit(email: str) -> str:
    """Return the limiter key for `email`, or raise RateLimited if it is locked out."""
    key = _login_key(email)
    if login_rate_limiter.is_limited(key):
        raise RateLimited("Too many login attempts, please try again later")
    return key


def record_login_failure(key: str) -> None:
    login_rate_limiter.hit(key)


def reset_login_limit(key: str) -> None:
    login_rate_limiter.reset(key)
