"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in callers)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Rate limits expressed as (limit, window_seconds) pairs so core rules stay pure
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://lamont:lamont@db:5432/lamontai"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30
    bcrypt_rounds: int = 10
    password_reset_expire_minutes: int = 10

    # Anthropic
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 120
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000
    article_model: str = "claude-sonnet-4-5"
    copy_model: str = "claude-haiku-4-5"

    # Cache
    redis_url: str | None = None
    cache_default_ttl_seconds: int = 3600
    cache_key_prefix: str = "lamontai:"

    # Rate limiting — requests per window
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_auth: int = 10
    rate_limit_generate: int = 5
    rate_limit_window_seconds: int = 60

    # Outbound HTTP
    request_timeout_seconds: float = 30.0
    generation_request_timeout_seconds: float = 180.0
    sitemap_fetch_timeout_seconds: float = 10.0
    page_fetch_timeout_seconds: float = 15.0
    http_user_agent: str = "LamontAI-Crawler/1.0 (+https://lamontai.ai)"

    # Circuit breaker for outbound fetches
    breaker_failure_threshold: int = 3
    breaker_reset_timeout_seconds: float = 30.0
    breaker_half_open_successes: int = 2

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
