"""Shared test fixtures — async DB, client, collaborator doubles, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Settings are read once at import; pin the test values before anything loads them
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("IDGEN_ENABLED", "false")
os.environ.setdefault("BOUNDARY_VALIDATION_ENABLED", "false")

import uuid
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hrms.clients.idgen import IdGenClient
from hrms.common.audit import now_millis
from hrms.database import Base, get_db
from hrms.dependencies import get_boundary_client, get_idgen_client
from hrms.employees.models import Employee
from hrms.jurisdictions.models import Jurisdiction
from hrms.main import create_app

import hrms.common.audit  # noqa: F401  (registers hrms_audit_trail)

TENANT = "pb.amritsar"
OTHER_TENANT = "pb.jalandhar"
TENANT_HEADERS = {"X-Tenant-ID": TENANT, "X-Client-ID": "tester"}


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine.sync_engine, "connect")
def _enable_foreign_keys(dbapi_conn, connection_record):
    """SQLite only enforces ON DELETE CASCADE with this pragma on."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Fresh app with the DB overridden and both collaborators switched off."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_idgen_client] = lambda: IdGenClient(enabled=False)
    application.dependency_overrides[get_boundary_client] = lambda: None
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    code: Optional[str] = "EMP-PB-AMRITSAR-001",
    tenant_id: str = TENANT,
    employee_type: str = "PERMANENT",
    status: str = "ACTIVE",
    department: str = "D1",
    designation: str = "DESG1",
    phone: Optional[str] = None,
    is_active: bool = True,
    created_time: Optional[int] = None,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        code=code,
        user_id=None,
        individual_id=None,
        employee_type=employee_type,
        status=status,
        department=department,
        designation=designation,
        date_of_appointment=None,
        phone=phone,
        email=None,
        is_active=is_active,
        tenant_id=tenant_id,
        created_by="seed",
        last_modified_by=None,
        created_time=created_time if created_time is not None else now_millis(),
        last_modified_time=None,
    )


def _make_jurisdiction(
    employee_id: uuid.UUID,
    *,
    boundary_relation: Optional[list[str]] = None,
    tenant_id: str = TENANT,
    is_active: bool = True,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        employee_id=employee_id,
        boundary_relation=boundary_relation or ["PB"],
        is_active=is_active,
        tenant_id=tenant_id,
        created_by="seed",
        last_modified_by=None,
        created_time=now_millis(),
        last_modified_time=None,
    )


async def _seed_employee(db: AsyncSession, **overrides) -> Employee:
    employee = Employee(**_make_employee(**overrides), jurisdictions=[])
    db.add(employee)
    await db.commit()
    return employee


async def _seed_jurisdiction(
    db: AsyncSession,
    employee_id: uuid.UUID,
    **overrides,
) -> Jurisdiction:
    jurisdiction = Jurisdiction(**_make_jurisdiction(employee_id, **overrides))
    db.add(jurisdiction)
    await db.commit()
    return jurisdiction


def employee_payload(**overrides) -> dict:
    """Minimal valid create payload in wire (camelCase) form."""
    payload = {
        "employeeType": "PERMANENT",
        "department": "D1",
        "designation": "DESG1",
    }
    payload.update(overrides)
    return payload
