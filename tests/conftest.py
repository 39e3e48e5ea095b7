"""Pytest configuration and fixtures for API tests."""
import os
import tempfile

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="talent-uploads-")
os.environ["MAX_VIDEO_UPLOAD_MB"] = "1"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient

from talent.models import reset_db
from talent.models.base import async_session_factory
from talent.storage import SQLStorage
from web.api.main import app

PASSWORD = "secret123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def _fresh_db():
    """Recreate tables before each test (ASGI lifespan doesn't run with httpx)."""
    await reset_db()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def storage():
    async with async_session_factory() as session:
        yield SQLStorage(session)


@pytest.fixture
def register(client):
    """Register a user and return (user_json, auth headers).

    The session cookie is cleared afterwards so each request picks its user via headers.
    """
    counter = {"n": 0}

    async def _register(role: str = "player", first_name: str = "Test", last_name: str = "User", email=None):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@scoutnet.io"
        r = await client.post(
            "/api/auth/register",
            json={
                "email": email,
                "password": PASSWORD,
                "confirmPassword": PASSWORD,
                "firstName": first_name,
                "lastName": last_name,
                "role": role,
            },
        )
        assert r.status_code == 201, f"Register failed: {r.text}"
        client.cookies.clear()
        data = r.json()
        return data["user"], {"Authorization": f"Bearer {data['accessToken']}"}

    return _register


@pytest.fixture
async def player(register):
    return await register("player", "Marcus", "Silva")


@pytest.fixture
async def scout(register):
    return await register("scout", "Elena", "Rossi")


@pytest.fixture
async def academy(register):
    return await register("academy", "Northbridge", "Academy")
