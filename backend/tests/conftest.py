"""Root conftest — shared test configuration.

Environment defaults are set before any lamontai import so the cached Settings
pick them up.
"""

import os

# Ensure tests don't accidentally use real API keys or slow hashing
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
