"""Pytest fixtures for attendance payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from attendance_payroll.models import Base, Employee, TimeLog
from attendance_payroll.payments import StubGateway
from attendance_payroll.services import PayrollService

# Use in-memory SQLite for tests (with async support); StaticPool keeps one
# shared connection so every session sees the same database.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

UTC = timezone.utc


@pytest_asyncio.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def employee(session: AsyncSession) -> Employee:
    """Employee paid 100 per hour."""
    employee = Employee(
        name="Maria Santos",
        email="maria@example.com",
        hourly_rate=Decimal("100"),
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def payroll_service(session: AsyncSession, gateway: StubGateway) -> PayrollService:
    return PayrollService(session, gateway, tz=UTC, app_url="http://localhost:3000")


@pytest.fixture
def add_log(session: AsyncSession) -> Callable[..., Any]:
    """Factory for completed time logs: add_log(employee, start, hours)."""

    async def _add_log(
        employee: Employee,
        start: datetime,
        hours: float | None,
        **fields: Any,
    ) -> TimeLog:
        log = TimeLog(
            employee_id=employee.employee_id,
            employee_name=employee.display_name,
            time_in=start,
            time_out=start + timedelta(hours=hours) if hours is not None else None,
            **fields,
        )
        session.add(log)
        await session.flush()
        return log

    return _add_log
