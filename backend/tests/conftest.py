"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own outer transaction that rolls back after the test.
- Service code that opens SAVEPOINTs nests inside that transaction.
- The database defaults to in-memory SQLite; set ``TEST_DATABASE_URL`` to run
  against PostgreSQL instead.
"""

import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.auth.jwt import create_access_token
from app.database import Base, build_engine, get_db
from app.main import app
from app.models.booking import Booking
from app.models.staff import StaffMember

_test_db_url = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


# ---------------------------------------------------------------------------
# Engine: fresh schema per test
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create the schema on a fresh engine and drop it afterwards."""
    engine = build_engine(_test_db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(
            bind=connection,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: authenticated staff
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_staff(db_session: AsyncSession) -> StaffMember:
    """Create and return an active staff member directly in the DB."""
    unique = uuid.uuid4().hex[:8]
    staff = StaffMember(email=f"staff-{unique}@luggagedesk.com", name="Test Staff", is_active=True)
    db_session.add(staff)
    await db_session.flush()
    return staff


@pytest_asyncio.fixture
async def auth_headers(test_staff: StaffMember) -> dict[str, str]:
    """Return Authorization headers for the test staff member."""
    token = create_access_token({"sub": test_staff.email})
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Convenience fixtures: bookings
# ---------------------------------------------------------------------------


def random_ref() -> str:
    return uuid.uuid4().hex[:8].upper()


@pytest_asyncio.fixture
async def make_booking(db_session: AsyncSession) -> Callable[..., Awaitable[Booking]]:
    """Return a factory that inserts an active booking with sensible defaults.

    Any column can be overridden, e.g. ``await make_booking(status="checked_in")``.
    The booking is refreshed so its attributes match what the store holds.
    """

    async def _make(booking_ref: str | None = None, **overrides) -> Booking:
        now = datetime.now(timezone.utc)
        data = {
            "booking_ref": booking_ref or random_ref(),
            "stripe_session_id": f"cs_test_{uuid.uuid4().hex[:12]}",
            "status": "paid",
            "customer_name": "Test Customer",
            "customer_email": "customer@example.com",
            "customer_phone": "+390612345678",
            "drop_off_at": now,
            "pick_up_at": now + timedelta(hours=8),
            "billable_days": 1,
            "bags_small": 1,
            "total_paid": Decimal("5.00"),
            "currency": "eur",
        }
        data.update(overrides)
        booking = Booking(**data)
        db_session.add(booking)
        await db_session.flush()
        await db_session.refresh(booking)
        return booking

    return _make
