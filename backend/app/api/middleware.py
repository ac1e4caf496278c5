"""HTTP Middleware — security headers and per-client rate limiting.

Invariants:
    - Every response carries nosniff, frame-deny, and no-referrer headers
    - Requests over the per-client budget get 429 with the uniform error envelope
      and Retry-After; they never reach routing
    - CORS preflight (OPTIONS) is not counted against the budget

Design Decisions:
    - BaseHTTPMiddleware: a few headers and a counter, no streaming concerns
    - Client key is the peer address; proxies must be configured at the server level
"""

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.errors import RateLimitExceededError
from app.infrastructure.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "X-DNS-Prefetch-Control": "off",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Applies standard security headers on all responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Applies a fixed-window request budget per client address."""

    def __init__(self, app: ASGIApp, *, limiter: FixedWindowRateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)

        client = request.client.host if request.client else "anonymous"
        decision = self.limiter.consume(client)
        if not decision.allowed:
            error = RateLimitExceededError(decision.retry_after)
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "client": client,
                    "path": request.url.path,
                    "error_code": error.code,
                },
            )
            return JSONResponse(
                status_code=error.http_status,
                content=error.to_response(),
                headers={
                    "Retry-After": str(decision.retry_after),
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(decision.limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(decision.remaining))
        return response
