import os
import tempfile

# Settings are read at import time: point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["IDP_JWT_KEY"] = "test-secret"
os.environ["IDP_JWT_ALGORITHM"] = "HS256"
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="skillswap-storage-")
os.environ.pop("IDP_SECRET_KEY", None)
os.environ.pop("IDP_ISSUER", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.core.database import Base, get_db
from app.core.identity import IdentityProviderClient, get_identity_client

TEST_JWT_KEY = "test-secret"


def make_token(sub, email=None, name=None, role=None, **claims):
    """HS256 session token shaped like the identity provider's"""
    payload = {"sub": sub, **claims}
    if email is not None:
        payload["email"] = email
    if name is not None:
        payload["name"] = name
    if role is not None:
        payload["public_metadata"] = {"role": role}
    return jwt.encode(payload, TEST_JWT_KEY, algorithm="HS256")


def auth_headers(sub, **kwargs):
    return {"Authorization": f"Bearer {make_token(sub, **kwargs)}"}


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    # A file per test: every session sees the same data
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    # Provider lookups disabled: token claims only
    app.dependency_overrides[get_identity_client] = lambda: IdentityProviderClient("http://idp.test", None)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_member(client):
    """
    Sign a member in (POST /profiles/sync) and return (profile json, headers)
    """
    async def _make(sub, name, email=None, role=None):
        headers = auth_headers(sub, email=email or f"{sub}@skillswap.io", name=name, role=role)
        response = await client.post("/profiles/sync", headers=headers)
        assert response.status_code == 200
        return response.json(), headers

    return _make
