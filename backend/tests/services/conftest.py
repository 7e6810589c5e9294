"""Service test fixtures — async DB, fake LLM and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for background tasks that bypass get_db
    - Cache is a fresh MemoryCache; rate limiter and circuit breakers reset per test
    - get_llm_client overridden with FakeLLM (no network)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (ADR: PostgreSQL-specific features not exercised here)
    - FakeLLM answers from a queue so tests state exactly what the model "said"
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

import lamontai.infrastructure.database as db_module
import lamontai.models  # noqa: F401
from lamontai.db.base import Base
from lamontai.db.session import create_session_factory
from lamontai.infrastructure.anthropic_client import Completion, get_llm_client
from lamontai.infrastructure.cache import MemoryCache, set_cache
from lamontai.infrastructure.circuit_breaker import reset_breakers
from lamontai.infrastructure.database import DatabaseSessionManager, get_db
from lamontai.infrastructure.security import hash_password
from lamontai.main import app
from lamontai.models.user import User
from lamontai.models.user_settings import UserSettings


class FakeLLM:
    """Stands in for ResilientAnthropicClient.complete()."""

    def __init__(self):
        self.calls: list[dict] = []
        self.responses: list = []

    def queue(self, *responses) -> None:
        """Queue texts (or exceptions to raise) for the next calls, in order."""
        self.responses.extend(responses)

    async def complete(
        self, *, model, system, prompt, max_tokens=1024, temperature=0.7, context=None,
    ):
        self.calls.append({
            "model": model, "system": system, "prompt": prompt,
            "max_tokens": max_tokens, "temperature": temperature,
        })
        response = self.responses.pop(0) if self.responses else "Generated text"
        if isinstance(response, Exception):
            raise response
        return Completion(text=response, input_tokens=10, output_tokens=20)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def cache():
    memory = MemoryCache(key_prefix="test:")
    set_cache(memory)
    yield memory
    set_cache(None)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
async def client(test_engine, test_session_factory, cache, fake_llm):
    """FastAPI test client with DB, cache and LLM dependencies replaced."""
    # Patch db_manager for background tasks that use it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.state.rate_limiter.reset()
    reset_breakers()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _create_user(
    test_db, email, *, role="user", plan="free", credits=100,
    password="secret123", name="Test User",
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=4),
        role=role,
        plan=plan,
        credits=credits,
    )
    user.settings = UserSettings()
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def make_user(test_db):
    """Factory: insert a user directly into the test DB."""
    async def _make(email="writer@example.com", **kwargs) -> User:
        return await _create_user(test_db, email, **kwargs)
    return _make


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user."""
    from lamontai.services.auth_service import issue_token

    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _headers


@pytest.fixture
async def user(make_user):
    return await make_user()


@pytest.fixture
def headers(user, auth_headers):
    return auth_headers(user)
