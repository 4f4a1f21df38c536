"""Read-only storage queries feeding the dashboard engine.

Every query is scoped to the caller:
- superadmin: all bookings
- admin: bookings of packages in communities the account administers
- member: bookings of packages the account created
- tourist: bookings the account made

Window bounds are local wall-clock datetimes; they are localized to the
dashboard timezone for the query, and returned timestamps are converted back
to naive local time.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy import Select, and_, case, distinct, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.features.bookings.models import (
    CANCELLED_STATUSES,
    BookingHistory,
    BookingStatus,
    Community,
    Location,
    Package,
)
from app.features.dashboard.buckets import DateWindow
from app.features.dashboard.records import BookingRecord
from app.features.dashboard.schemas import DashboardRole, ProvinceStat
from app.shared.schemas import PaginationParams

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardScope:
    """Whose bookings a dashboard may see."""

    role: DashboardRole
    account_id: int


class BookingRepository:
    """Storage reads for one request.

    Attributes:
        db: Database session.
        tz: Timezone that local window bounds and timestamps refer to.
    """

    def __init__(self, db: AsyncSession, tz: ZoneInfo) -> None:
        self.db = db
        self.tz = tz

    # -------------------------------------------------------------------------
    # Time conversion
    # -------------------------------------------------------------------------

    def _to_aware(self, value: datetime) -> datetime:
        return value.replace(tzinfo=self.tz)

    def _to_local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value
        return value.astimezone(self.tz).replace(tzinfo=None)

    def _window_clause(self, window: DateWindow) -> Any:
        return BookingHistory.booking_at.between(
            self._to_aware(window.start),
            self._to_aware(window.end),
        )

    # -------------------------------------------------------------------------
    # Scoping
    # -------------------------------------------------------------------------

    @staticmethod
    def _apply_scope(stmt: Select[Any], scope: DashboardScope) -> Select[Any]:
        """Restrict a query that already joins BookingHistory and Package."""
        if scope.role == DashboardRole.ADMIN:
            return stmt.join(Community, Package.community_id == Community.id).where(
                Community.admin_id == scope.account_id
            )
        if scope.role == DashboardRole.MEMBER:
            return stmt.where(Package.created_by_id == scope.account_id)
        if scope.role == DashboardRole.TOURIST:
            return stmt.where(BookingHistory.tourist_id == scope.account_id)
        return stmt

    # -------------------------------------------------------------------------
    # Booking records
    # -------------------------------------------------------------------------

    async def fetch_booking_records(
        self,
        scope: DashboardScope,
        windows: Sequence[DateWindow] | None,
        statuses: Sequence[BookingStatus] | None = None,
    ) -> list[BookingRecord]:
        """Fetch bookings in any of the windows, oldest first.

        Args:
            scope: Caller scope.
            windows: Date windows to match; None means no date filter, an
                empty sequence means nothing matches (no query is issued).
            statuses: Restrict to these statuses (all statuses when None).

        Returns:
            Booking records with local ``occurred_at``.
        """
        if windows is not None and not windows:
            return []

        stmt = select(
            BookingHistory.booking_at,
            BookingHistory.total_participant,
            BookingHistory.status,
            BookingHistory.package_id,
            Package.price,
        ).join(Package, BookingHistory.package_id == Package.id)
        stmt = self._apply_scope(stmt, scope)

        if windows is not None:
            stmt = stmt.where(or_(*(self._window_clause(w) for w in windows)))
        if statuses is not None:
            stmt = stmt.where(BookingHistory.status.in_(list(statuses)) if statuses else false())

        stmt = stmt.order_by(BookingHistory.booking_at, BookingHistory.id)

        result = await self.db.execute(stmt)
        records = [
            BookingRecord(
                occurred_at=self._to_local(row.booking_at),
                participant_count=int(row.total_participant),
                status=BookingStatus(row.status),
                unit_price=row.price,
                package_id=row.package_id,
            )
            for row in result.all()
        ]

        logger.debug(
            "dashboard.records_fetched",
            role=scope.role.value,
            window_count=None if windows is None else len(windows),
            statuses=None if statuses is None else [s.value for s in statuses],
            record_count=len(records),
        )
        return records

    async def fetch_package_names(self, package_ids: Sequence[int]) -> dict[int, str]:
        """Resolve display names for package ids (deleted packages included)."""
        if not package_ids:
            return {}
        stmt = select(Package.id, Package.name).where(Package.id.in_(list(package_ids)))
        result = await self.db.execute(stmt)
        return {row.id: row.name for row in result.all()}

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    async def count_packages(self, scope: DashboardScope) -> int:
        """Count non-deleted packages visible to the scope.

        Tourists do not own packages; callers derive their count from bookings.
        """
        stmt = select(func.count(Package.id)).where(Package.is_deleted.is_(False))
        if scope.role == DashboardRole.ADMIN:
            stmt = stmt.join(Community, Package.community_id == Community.id).where(
                Community.admin_id == scope.account_id
            )
        elif scope.role == DashboardRole.MEMBER:
            stmt = stmt.where(Package.created_by_id == scope.account_id)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def count_communities(self) -> int:
        """Count non-deleted communities."""
        stmt = select(func.count(Community.id)).where(Community.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def fetch_province_stats(
        self,
        window: DateWindow,
        pagination: PaginationParams,
        province: str | None = None,
        region: str | None = None,
        search: str | None = None,
    ) -> tuple[list[ProvinceStat], int]:
        """Per-province community, package and booking counts.

        Bookings are counted inside ``window``; communities and packages are
        counted when not soft-deleted.

        Args:
            window: Booking date window.
            pagination: Page of provinces to return.
            province: Exact province filter.
            region: Exact region filter.
            search: Case-insensitive substring of the community name.

        Returns:
            Page of stats ordered by province name, and the total province count.
        """
        success = func.count(
            case((BookingHistory.status == BookingStatus.BOOKED, BookingHistory.id))
        )
        cancelled = func.count(
            case((BookingHistory.status.in_(list(CANCELLED_STATUSES)), BookingHistory.id))
        )

        stmt = (
            select(
                Location.province.label("province"),
                func.count(distinct(Community.id)).label("community_count"),
                func.count(distinct(Package.id)).label("package_count"),
                func.count(BookingHistory.id).label("booking_count"),
                success.label("success_booking_count"),
                cancelled.label("cancelled_booking_count"),
            )
            .select_from(Community)
            .join(Location, Community.location_id == Location.id)
            .outerjoin(
                Package,
                and_(Package.community_id == Community.id, Package.is_deleted.is_(False)),
            )
            .outerjoin(
                BookingHistory,
                and_(BookingHistory.package_id == Package.id, self._window_clause(window)),
            )
            .where(Community.is_deleted.is_(False))
            .group_by(Location.province)
        )

        if province:
            stmt = stmt.where(Location.province == province)
        if region:
            stmt = stmt.where(Location.region == region)
        if search:
            stmt = stmt.where(Community.name.ilike(f"%{search}%"))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = int((await self.db.execute(count_stmt)).scalar_one())

        stmt = (
            stmt.order_by(Location.province)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self.db.execute(stmt)
        stats = [ProvinceStat.model_validate(row) for row in result.all()]

        return stats, total
