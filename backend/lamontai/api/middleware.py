"""HTTP Middleware — security headers, per-client rate limiting and request deadlines.

Invariants:
    - Every response carries the security headers below
    - Rate-limited paths answer 429 {error, retry_after} with X-RateLimit-* and
      Retry-After headers; allowed responses carry X-RateLimit-* headers
    - Health probes and CORS preflights are never rate limited
    - A request exceeding its deadline answers 504 with the RequestTimeoutError envelope

Design Decisions:
    - Limiter lives on app.state: tests reset or replace it without monkeypatching
    - Generation endpoints get a longer deadline: three sequential model calls
      legitimately exceed the default
"""

import asyncio
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from lamontai.config import get_settings
from lamontai.core.errors import RequestTimeoutError
from lamontai.core.rate_limit_rules import (
    RateLimitRule, RateLimitRules, client_ip, client_key, select_rule,
)

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

EXEMPT_PREFIXES = ("/api/v1/health",)


def rules_from_settings() -> RateLimitRules:
    settings = get_settings()
    window = settings.rate_limit_window_seconds
    return RateLimitRules(
        default=RateLimitRule("default", settings.rate_limit_default, window),
        auth=RateLimitRule("auth", settings.rate_limit_auth, window),
        generate=RateLimitRule("generate", settings.rate_limit_generate, window),
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window limit per client IP and path, budget chosen by path."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        limiter = getattr(request.app.state, "rate_limiter", None)
        if (
            limiter is None
            or not get_settings().rate_limit_enabled
            or request.method == "OPTIONS"
            or path.startswith(EXEMPT_PREFIXES)
        ):
            return await call_next(request)

        rule = select_rule(path, rules_from_settings())
        ip = client_ip(
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None,
        )
        decision = await limiter.hit(client_key(ip, path), rule)
        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(int(decision.reset_at)),
        }

        if decision.limited:
            retry_after = decision.retry_after(time.time())
            logger.warning(
                f"Rate limit exceeded for {ip} on {path}",
                extra={"path": path, "status_code": 429},
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests, please try again later.",
                    "retry_after": retry_after,
                },
                headers={**headers, "Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request outlives its deadline."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        settings = get_settings()
        path = request.url.path
        timeout = (
            settings.generation_request_timeout_seconds
            if select_rule(path, rules_from_settings()).name == "generate"
            else settings.request_timeout_seconds
        )
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout)
        except asyncio.TimeoutError:
            error = RequestTimeoutError(timeout)
            logger.error(
                f"Request timed out after {timeout:g}s",
                extra={"path": path, "error_code": error.code, "status_code": 504},
            )
            return JSONResponse(status_code=504, content=error.to_response())
