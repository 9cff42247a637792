"""Test fixtures — a fresh app and SQLite database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own app from create_app(), configured with a
   Settings object pointing at a temp-file SQLite database.
2. The schema is created with init_schema() (ASGITransport does not run
   the lifespan, so Redis is never connected and rate limiting is off).
3. bcrypt rounds are dropped to 4 so registering users is fast.

No state is shared between tests — each one has its own engine and file.
"""

import os

# Before any gamehound import builds the default Settings
os.environ.setdefault("GAMEHOUND_BCRYPT_ROUNDS", "4")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gamehound.config import Settings
from gamehound.db.engine import init_schema
from gamehound.main import create_app

TEST_JWT_SECRET = "test-secret-not-for-production"


@pytest_asyncio.fixture()
async def app(tmp_path):
    """An app bound to its own throwaway SQLite file."""
    test_settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'gamehound-test.db'}",
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        environment="test",
    )
    application = create_app(test_settings)
    await init_schema(application.state.engine)
    try:
        yield application
    finally:
        await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def db_session(app):
    """A session on the same database the app uses (for service tests)."""
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def register(client):
    """Factory: register a user, return (auth headers, user dict).

    Learn: Most project tests need two or three distinct users; this
    keeps each test to one line per user.
    """

    async def _register(email: str, name: str = "Dev", password: str = "password_123"):
        r = await client.post(
            "/api/register",
            json={"email": email, "password": password, "name": name},
        )
        assert r.status_code == 200, r.text
        data = r.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register
