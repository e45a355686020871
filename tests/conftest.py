"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally use real API keys or a real database
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-length-for-hs256")
# Minimum bcrypt work factor
os.environ.setdefault("BCRYPT_ROUNDS", "4")
