"""
Test environment defaults.

Settings are read when botanical.core.config is first imported, so these
variables must be set before any test module imports the app. SQLite keeps
the suite independent of a running PostgreSQL; API tests additionally swap
get_db for an isolated in-memory engine (see tests/helpers.py).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-signing-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
