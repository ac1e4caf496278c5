"""Root conftest — shared test configuration."""

import os

# Deterministic keys; must be set before app.config.get_settings() is first called
os.environ.setdefault("JWT_SECRET", "test-signing-key-0123456789abcdef0123456789")
os.environ.setdefault("ENCRYPTION_KEY", "test-envelope-key-0123456789abcd")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_MAX_REQUESTS", "100000")
os.environ.setdefault("ENVIRONMENT", "development")
