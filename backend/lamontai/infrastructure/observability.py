"""Structured Logging — JSON formatter, setup, and per-request access logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (user_id, error_code, path, status_code, duration_ms) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging is idempotent: calling it twice never duplicates handlers

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
    - Access log as Starlette middleware: one line per request, slow requests at WARNING
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("lamontai.access")

_EXTRA_KEYS = (
    "user_id", "error_code", "path", "method", "status_code", "duration_ms",
    "attempt", "input_tokens", "output_tokens", "cache_key", "url", "breaker",
)

SLOW_REQUEST_MS = 1000


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.set_name("lamontai")
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == "lamontai":
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log every request with its duration and expose it as X-Response-Time."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        message = f"{request.method} {request.url.path} -> {response.status_code}"
        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(f"Slow request: {message}", extra=extra)
        else:
            logger.info(message, extra=extra)
        return response
