"""Application-wide HTTP middleware: security headers, rate limiting, timing."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, status
from redis.exceptions import RedisError
from starlette.concurrency import run_in_threadpool

from .errors import error_response

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

RATE_LIMIT_EXEMPT_PATHS = frozenset({"/healthz", "/metrics"})


def client_key(request: Request) -> str:
    """Identify the caller for rate limiting purposes."""
    return request.client.host if request.client else "anonymous"


async def _allowed(limiter, key: str) -> bool:
    """Consult the limiter off the event loop; a failing Redis lets the request through."""
    try:
        return await run_in_threadpool(limiter.allow, key)
    except RedisError as exc:
        logger.warning("rate limiter unavailable, allowing request from %s: %s", key, exc)
        return True


def register_middleware(app: FastAPI) -> None:
    """Attach security headers, rate limiting and request timing.

    The rate limiter is read from ``app.state.rate_limiter`` on every request;
    when it is absent no limiting is applied.
    """

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        limiter = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or request.url.path in RATE_LIMIT_EXEMPT_PATHS:
            return await call_next(request)

        key = client_key(request)
        headers = {"X-RateLimit-Limit": str(limiter.limit)}
        if not await _allowed(limiter, key):
            logger.warning("rate limit exceeded for %s", key)
            headers["Retry-After"] = str(limiter.window_seconds)
            return error_response(
                status.HTTP_429_TOO_MANY_REQUESTS,
                f"Rate limit exceeded, retry in {limiter.window_seconds} seconds",
                headers,
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s %s %.3fs", request.method, request.url.path, response.status_code, elapsed)
        return response
