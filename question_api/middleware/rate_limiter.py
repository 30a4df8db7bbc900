"""In-memory sliding window rate limiter keyed by client address."""

import time
from collections import defaultdict, deque

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from question_api.config.settings import get_settings
from question_api.utils.responses import error_response

AUTH_PREFIX = "/api/auth/"
EXEMPT_PATHS = {"/health", "/api/health", "/docs", "/redoc", "/openapi.json"}


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        # client -> request timestamps inside the current window
        self._standard_windows: dict[str, deque[float]] = defaultdict(deque)
        self._auth_windows: dict[str, deque[float]] = defaultdict(deque)

    @staticmethod
    def _client_key(request: Request, trust_forwarded: bool) -> str:
        # The forwarded header is client supplied unless a trusted proxy sets it
        forwarded = request.headers.get("X-Forwarded-For") if trust_forwarded else None
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    @staticmethod
    def _check_limit(window: deque[float], limit: int, period: float, now: float) -> tuple[bool, int]:
        """Drop expired entries, check if under limit. Returns (allowed, retry_after_seconds)."""
        cutoff = now - period
        while window and window[0] < cutoff:
            window.popleft()

        if len(window) >= limit:
            return False, int(window[0] - cutoff) + 1

        window.append(now)
        return True, 0

    @staticmethod
    def _too_many(message: str, retry_after: int) -> Response:
        return JSONResponse(
            status_code=429,
            content=error_response("rate_limit", message),
            headers={"Retry-After": str(retry_after)},
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()
        path = request.url.path
        if not settings.RATE_LIMIT_ENABLED or path in EXEMPT_PATHS:
            return await call_next(request)

        key = self._client_key(request, settings.RATE_LIMIT_TRUST_FORWARDED)
        now = time.monotonic()
        period = float(settings.RATE_LIMIT_WINDOW_SECONDS)

        if path.startswith(AUTH_PREFIX):
            allowed, retry_after = self._check_limit(self._auth_windows[key], settings.RATE_LIMIT_AUTH, period, now)
            if not allowed:
                return self._too_many("Too many authentication attempts, please try again later", retry_after)

        allowed, retry_after = self._check_limit(self._standard_windows[key], settings.RATE_LIMIT_STANDARD, period, now)
        if not allowed:
            return self._too_many("Too many requests, please try again later", retry_after)

        return await call_next(request)
