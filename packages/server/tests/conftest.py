"""Shared fixtures: in-memory database, HTTP client and registered organisations."""

import os

os.environ.setdefault("HRMS_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("HRMS_SECRET_KEY", "test-secret-key-for-hrms-tests-only")
os.environ.setdefault("HRMS_LOG_FORMAT", "text")

from collections.abc import AsyncGenerator  # noqa: E402
import uuid  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import hrms_api.models  # noqa: E402,F401
from hrms_api.core.auth import Identity  # noqa: E402
from hrms_api.core.database import get_session  # noqa: E402
from hrms_api.main import app  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "secret123"


@pytest.fixture
async def engine():
    """One in-memory database per test, with foreign keys enforced."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_org(
    client: AsyncClient,
    org_name: str,
    email: str,
    admin_name: str = "Admin",
    password: str = PASSWORD,
) -> dict:
    """Register through the API and return the response plus ready-made headers."""
    resp = await client.post(
        "/api/auth/register",
        json={"orgName": org_name, "adminName": admin_name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = {"Authorization": f"Bearer {data['token']}"}
    data["identity"] = Identity(
        user_id=uuid.UUID(data["user"]["id"]),
        organisation_id=uuid.UUID(data["user"]["organisationId"]),
        email=data["user"]["email"],
    )
    return data


@pytest.fixture
async def acme(client) -> dict:
    return await register_org(client, "Acme", "admin@acme.com", admin_name="Ada Admin")


@pytest.fixture
async def globex(client) -> dict:
    return await register_org(client, "Globex", "admin@globex.com", admin_name="Hank Scorpio")


async def create_employee(client: AsyncClient, org: dict, **fields) -> dict:
    body = {"first_name": "Jane", "last_name": "Doe", "email": "jane@acme.com"}
    body.update(fields)
    resp = await client.post("/api/employees", json=body, headers=org["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_team(client: AsyncClient, org: dict, **fields) -> dict:
    body = {"name": "Platform"}
    body.update(fields)
    resp = await client.post("/api/teams", json=body, headers=org["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()
