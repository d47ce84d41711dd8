"""
Shared test fixtures for projecthub.

Uses an in-memory SQLite database (aiosqlite) with per-test table
create/drop, a fake password hasher so tests skip bcrypt's cost, and the
real JWT signer.
"""

import os
from datetime import timedelta
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-tests")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from projecthub.config import settings  # noqa: E402
from projecthub.core.security import InvalidTokenError, JoseTokenSigner  # noqa: E402
from projecthub.db.base import Base  # noqa: E402
from projecthub.main import app  # noqa: E402
import projecthub.models  # noqa: E402, F401

TEST_DB_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Capability fakes
# ---------------------------------------------------------------------------


class FakePasswordHasher:
    """Deterministic, instant stand-in for bcrypt."""

    async def hash(self, password: str) -> str:
        return f"fake${password[::-1]}"

    async def verify(self, password: str, hashed_password: str) -> bool:
        return hashed_password == f"fake${password[::-1]}"


class FakeTokenSigner:
    """Tokens look like ``fake.<sub>.<username>``; no expiry."""

    def sign(self, claims: dict[str, Any]) -> str:
        return f"fake.{claims['sub']}.{claims['username']}"

    def verify(self, token: str) -> dict[str, Any]:
        parts = token.split(".", 2)
        if len(parts) != 3 or parts[0] != "fake":
            raise InvalidTokenError("not a fake token")
        return {"sub": parts[1], "username": parts[2]}


@pytest.fixture
def fake_hasher():
    return FakePasswordHasher()


@pytest.fixture
def fake_signer():
    return FakeTokenSigner()


@pytest.fixture
def token_signer():
    return JoseTokenSigner(settings.secret_key, expires_delta=timedelta(hours=24))


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database shared by every connection of one test."""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Test client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session, fake_hasher, token_signer):
    from projecthub.db.session import get_db

    async def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    previous_hasher = getattr(app.state, "password_hasher", None)
    previous_signer = getattr(app.state, "token_signer", None)
    app.state.password_hasher = fake_hasher
    app.state.token_signer = token_signer

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.state.password_hasher = previous_hasher
    app.state.token_signer = previous_signer


# ---------------------------------------------------------------------------
# Seed data helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def register_user(test_client):
    """Register through the API. Returns (user json, auth headers)."""

    async def _register(
        username: str | None = None,
        email: str | None = None,
        password: str = "pw",
    ) -> tuple[dict, dict]:
        username = username or f"user-{uuid4().hex[:6]}"
        resp = await test_client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register


@pytest_asyncio.fixture(scope="function")
async def alice(register_user):
    return await register_user("alice", "alice@x.com", "pw")


@pytest_asyncio.fixture(scope="function")
async def bob(register_user):
    return await register_user("bob", "bob@x.com", "pw")


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def user_factory(db_session):
    from projecthub.models.users import User

    async def _create(
        username: str | None = None,
        email: str | None = None,
        password: str = "password123",
    ) -> User:
        username = username or f"user-{uuid4().hex[:6]}"
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            hashed_password=f"fake${password[::-1]}",
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _create


@pytest_asyncio.fixture(scope="function")
async def project_factory(db_session):
    from projecthub.models.projects import Project

    async def _create(
        owner,
        name: str = "Test Project",
        technology: str = "Python",
        status: str = "planning",
        collaborators: list | None = None,
    ) -> Project:
        project = Project(
            name=name,
            description="",
            technology=technology,
            status=status,
            owner_id=owner.id,
            collaborators=list(collaborators or []),
        )
        db_session.add(project)
        await db_session.flush()
        return project

    return _create
