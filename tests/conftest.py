"""
Snippetbox — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before anything from snippetbox is
       imported, so the settings singleton and the engine are built for a
       throwaway SQLite database.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── db_schema:       Creates every table, drops them afterwards
    ├── db_session:      Real AsyncSession on the test database
    ├── test_client:     HTTPX AsyncClient talking to the ASGI app
    ├── error_client:    same, but app exceptions do not fail the test
    ├── csrf_token:      Fetches a page and extracts its CSRF token
    ├── signup / login:  Drive the real signup and login forms
    └── auth_client:     test_client already logged in as a fresh user
"""

import os
import re
import tempfile

# Must happen before snippetbox.config is imported anywhere
_test_dir = tempfile.mkdtemp(prefix="snippetbox_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/test.db"
os.environ["SECURE_COOKIES"] = "false"
os.environ["SESSION_STORE"] = "database"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import snippetbox.models  # noqa: F401  registers tables on Base.metadata
from snippetbox.database import Base, async_session_factory, engine

CSRF_RX = re.compile(r'name="csrf_token" value="([^"]+)"')

DEFAULT_PASSWORD = "pa$$word123"


def extract_csrf_token(html: str) -> str:
    match = CSRF_RX.search(html)
    assert match, "no CSRF token in page"
    return match.group(1)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_schema():
    """Fresh schema for one test; every table is dropped afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_schema):
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def sample_snippet_data():
    now = datetime.now(timezone.utc)
    return {
        "id": 1,
        "title": "An old silent pond",
        "content": "An old silent pond...\nA frog jumps into the pond,\nsplash! Silence again.",
        "created": now,
        "expires": now.replace(year=now.year + 1),
        "user_id": None,
    }


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_schema):
    """
    Provides an async HTTP test client for endpoint testing.

    Redirects are not followed, so tests can assert on 303 responses.
    """
    from snippetbox.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def error_client(db_schema, request):
    """
    Client for exercising 500 responses.

    Exceptions the app re-raises after answering are not propagated into the
    test, so the response itself can be inspected. Parametrize indirectly
    with a Settings object to build a dedicated app (e.g. debug=True).
    """
    from snippetbox.main import app, create_app
    config = getattr(request, "param", None)
    target = create_app(config) if config is not None else app
    transport = ASGITransport(app=target, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def csrf_token(test_client):
    """Returns an async function: GET a page and return its CSRF token."""
    async def _fetch(path: str = "/user/login") -> str:
        response = await test_client.get(path)
        assert response.status_code == 200
        return extract_csrf_token(response.text)
    return _fetch


@pytest.fixture
def signup(test_client, csrf_token):
    async def _signup(
        name: str = "Alice Jones",
        email: str = "alice@example.com",
        password: str = DEFAULT_PASSWORD,
    ):
        token = await csrf_token("/user/signup")
        return await test_client.post(
            "/user/signup",
            data={"name": name, "email": email, "password": password, "csrf_token": token},
        )
    return _signup


@pytest.fixture
def login(test_client, csrf_token):
    async def _login(email: str = "alice@example.com", password: str = DEFAULT_PASSWORD):
        token = await csrf_token("/user/login")
        return await test_client.post(
            "/user/login",
            data={"email": email, "password": password, "csrf_token": token},
        )
    return _login


@pytest_asyncio.fixture
async def auth_client(test_client, signup, login):
    """test_client with a signed-up and logged-in user (alice@example.com)."""
    response = await signup()
    assert response.status_code == 303
    response = await login()
    assert response.status_code == 303
    return test_client
