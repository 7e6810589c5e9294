"""LamontAI API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LamontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, cache, rate limiter and LLM client initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Rate limiter created at import and stored on app.state so middleware and tests
      share one instance; lifespan only attaches Redis to it
    - Middleware order (outermost first): CORS, access log, security headers,
      rate limit, request timeout
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lamontai.api.error_handlers import register_error_handlers
from lamontai.api.middleware import (
    RateLimitMiddleware,
    RequestTimeoutMiddleware,
    SecurityHeadersMiddleware,
)
from lamontai.api.routes import (
    articles,
    auth,
    content,
    content_plans,
    generation,
    health,
    onboarding,
    settings as settings_routes,
    subscriptions,
    users,
)
from lamontai.config import get_settings
from lamontai.infrastructure.anthropic_client import init_llm_client
from lamontai.infrastructure.cache import RedisCache, close_cache, init_cache
from lamontai.infrastructure.database import init_db
from lamontai.infrastructure.observability import AccessLogMiddleware, setup_logging
from lamontai.infrastructure.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    cache = init_cache(
        settings.redis_url,
        default_ttl=settings.cache_default_ttl_seconds,
        key_prefix=settings.cache_key_prefix,
    )
    if isinstance(cache, RedisCache):
        app.state.rate_limiter.attach_redis(cache.client)
    init_llm_client(
        settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    logger.info("LamontAI API started")
    yield
    logger.info("LamontAI API shutting down")
    app.state.rate_limiter.attach_redis(None)
    await close_cache()
    await manager.dispose()


app = FastAPI(
    title="LamontAI API", version="1.0.0", lifespan=lifespan,
)
app.state.rate_limiter = RateLimiter()

# Middleware — added innermost first
settings = get_settings()
app.add_middleware(RequestTimeoutMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[
        "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset",
        "X-Response-Time",
    ],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(articles.router)
app.include_router(generation.router)
app.include_router(onboarding.router)
app.include_router(settings_routes.router)
app.include_router(content_plans.router)
app.include_router(content.router)
app.include_router(subscriptions.router)

register_error_handlers(app)
