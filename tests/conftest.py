"""
tests/conftest.py -- Shared test fixtures for the account service.

This module provides:
  - _make_test_store(): creates an isolated in-memory DB for the user store
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - tokens: a TokenService with a fixed test secret
  - store: a fresh single-threaded in-memory UserStore per test
  - api_client: TestClient plus an admin token for HTTP integration tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the TestClient because sync route handlers run in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread.

DEBUG must be set before any api/ import so get_settings() auto-generates
JWT_ACCESS_SECRET instead of raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set DEBUG before any app import so get_settings() can auto-generate the
# signing secret in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Role, User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenService

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters"

ADMIN_EMAIL = "testadmin@example.com"
ADMIN_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_test_store(db_suffix: str) -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return UserStore(f"sqlite:///file:test_accounts_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.tokens = tokens
        yield

    return test_lifespan


def _make_user(email: str, role: Role = Role.user, password: str = "password123", **fields) -> User:
    """Build an unsaved User with a real bcrypt hash."""
    return User(
        full_name=fields.pop("full_name", "Test User"),
        birth_date=fields.pop("birth_date", "1990-01-01"),
        email=email,
        password_hash=hash_password(password),
        role=role,
        **fields,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def token_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def tokens(token_secret: str) -> TokenService:
    return TokenService(token_secret)


@pytest.fixture
def make_user():
    """Factory for unsaved Users: make_user(email, role=Role.user, password=..., **fields)."""
    return _make_user


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    """Fresh in-memory UserStore. Single-threaded use only."""
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, admin_token, admin_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use an isolated in-memory store. The admin
    user is created before the client starts.
    """
    user_store = _make_test_store(request.module.__name__.replace(".", "_"))
    tokens = TokenService(TEST_SECRET)

    admin_id = user_store.create_user(_make_user(ADMIN_EMAIL, role=Role.admin, password=ADMIN_PASSWORD))
    admin_token = tokens.issue(admin_id, Role.admin)

    app.router.lifespan_context = _patch_lifespan(user_store, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, admin_token, admin_id

    user_store.close()
