"""Async Session Factory — async DB sessions for the app and its test fixtures.

Invariants:
    - Every session factory uses expire_on_commit=False (no lazy loads after commit)
    - Shared by DatabaseSessionManager and the test fixtures

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures need a raw session
      factory without the error-mapping context manager
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo)


def create_session_factory(
    database_url: str | None = None,
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to engine, or to a new engine for database_url."""
    if engine is None:
        if database_url is None:
            raise ValueError("database_url or engine is required")
        engine = create_engine_for(database_url)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
