"""Root conftest — shared test configuration."""

import os

# Tests never touch a real database or a real secret
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PASSWORD_HASH_SECRET", "test-secret")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("SEED_MENU", "false")
os.environ.setdefault("LOG_FORMAT", "text")
