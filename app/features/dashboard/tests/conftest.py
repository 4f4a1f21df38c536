"""Test fixtures for dashboard module.

Note: db_session is duplicated from tests/conftest.py because feature tests
under app/ do not see fixtures defined outside their parent path.
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.bookings.models import BookingStatus
from app.features.dashboard.labels import GREGORIAN_LABELER, PeriodLabeler
from app.features.dashboard.records import BookingRecord

RecordFactory = Callable[..., BookingRecord]


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for booking records with sensible defaults."""

    def _make(
        occurred_at: datetime,
        participant_count: int = 1,
        status: BookingStatus = BookingStatus.BOOKED,
        unit_price: Decimal | str | int = "100",
        package_id: int | None = 1,
    ) -> BookingRecord:
        return BookingRecord(
            occurred_at=occurred_at,
            participant_count=participant_count,
            status=status,
            unit_price=Decimal(str(unit_price)),
            package_id=package_id,
        )

    return _make


@pytest.fixture
def english_labeler() -> PeriodLabeler:
    """Gregorian/English labeler for readable assertions."""
    return GREGORIAN_LABELER


@pytest.fixture
def jan_feb_records(make_record: RecordFactory) -> list[BookingRecord]:
    """Three BOOKED records: Jan 3 (x2) and Feb 1, 2024, price 100, 1 participant."""
    return [
        make_record(datetime(2024, 1, 3, 9, 0)),
        make_record(datetime(2024, 1, 3, 15, 30)),
        make_record(datetime(2024, 2, 1, 10, 0)),
    ]


@pytest.fixture
def mixed_status_records(make_record: RecordFactory) -> list[BookingRecord]:
    """Records covering every booking status in March 2024."""
    return [
        make_record(datetime(2024, 3, 1, 10), status=BookingStatus.BOOKED, participant_count=2),
        make_record(datetime(2024, 3, 2, 10), status=BookingStatus.BOOKED, unit_price="250.50"),
        make_record(datetime(2024, 3, 3, 10), status=BookingStatus.PENDING),
        make_record(datetime(2024, 3, 4, 10), status=BookingStatus.REFUND_PENDING),
        make_record(datetime(2024, 3, 5, 10), status=BookingStatus.REFUNDED),
        make_record(datetime(2024, 3, 6, 10), status=BookingStatus.REJECTED),
        make_record(datetime(2024, 3, 7, 10), status=BookingStatus.REFUND_REJECTED),
    ]


@pytest.fixture
async def db_session():
    """Create async database session for integration tests.

    Creates the booking tables, yields a session, and drops them afterwards.
    Requires PostgreSQL to be running (docker-compose up -d).
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
