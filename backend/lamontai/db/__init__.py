"""Database Package — SQLAlchemy Base and raw session factories.

Invariants:
    - Single async engine per process for the API (see infrastructure/database.py)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests (ADR: native async, no thread pool overhead)
"""
