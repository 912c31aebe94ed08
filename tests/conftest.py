"""Root conftest - shared test configuration."""

import os

# Tests never talk to real providers or a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault(
    "ENCRYPTION_KEY", "cGx1Yi10ZXN0LW9ubHktZW5jcnlwdGlvbi1rZXktMDA=",
)
os.environ.setdefault("JWT_SECRET_KEY", "plub-test-jwt-secret-key-not-for-production")
os.environ.setdefault("PUSH_GATEWAY_URL", "")
os.environ.setdefault("LOG_FORMAT", "text")
