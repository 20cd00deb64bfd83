import sys
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Ensure project root is on sys.path so `api.*`, `core.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


from config.settings import Settings
from main import create_app, startup, shutdown


@pytest_asyncio.fixture()
async def app():
    """Fresh app per test, backed by its own in-memory SQLite database."""
    test_settings = Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        DB_CREATE_TABLES=True,
        LOG_LEVEL="WARNING",
    )
    application = create_app(test_settings)
    # ASGITransport does not run the lifespan, so drive it by hand
    await startup(application)
    yield application
    await shutdown(application)


@pytest_asyncio.fixture()
async def client(app):
    """Async test client calling the app in-memory, no real HTTP server."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture()
async def ada(client):
    """A persisted user; yields its id."""
    resp = await client.post("/users", json={"name": "Ada", "email": "ada@x.io"})
    assert resp.status_code == 201
    return resp.json()["data"]["insertId"]
