"""Service layer assembling dashboard responses.

Each request fetches records once per distinct set of windows, then the
pure reducers (series, summary, ranking) run over the same record lists.
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import BadRequestError
from app.core.logging import get_logger
from app.features.bookings.models import BookingStatus
from app.features.dashboard.aggregates import attach_names, rank_top_keys, summarize_bookings
from app.features.dashboard.buckets import DateWindow, check_bucket_cap
from app.features.dashboard.labels import PeriodLabeler, get_labeler
from app.features.dashboard.periods import (
    ResolvedRange,
    covering_window,
    parse_date,
    resolve_period_ranges,
)
from app.features.dashboard.records import BookingRecord, count_extractor, revenue_extractor
from app.features.dashboard.repository import BookingRepository, DashboardScope
from app.features.dashboard.schemas import (
    DashboardGraphs,
    DashboardResponse,
    DashboardRole,
    DashboardSummary,
    Granularity,
    PeriodQuery,
    SuperAdminDashboardResponse,
    SuperAdminSummary,
    TopPackageItem,
)
from app.features.dashboard.series import build_granularity_series, build_period_series
from app.shared.schemas import PaginationParams
from app.shared.utils import paginate_response

logger = get_logger(__name__)

_BOOKED_ONLY = (BookingStatus.BOOKED,)


class _RecordCache:
    """Per-request memo so sections sharing the same windows query once."""

    def __init__(self, repository: BookingRepository, scope: DashboardScope) -> None:
        self.repository = repository
        self.scope = scope
        self._cache: dict[tuple[object, ...], list[BookingRecord]] = {}

    async def get(
        self,
        windows: Sequence[DateWindow] | None,
        statuses: Sequence[BookingStatus] | None,
    ) -> list[BookingRecord]:
        key = (
            None if windows is None else tuple(windows),
            None if statuses is None else tuple(statuses),
        )
        if key not in self._cache:
            self._cache[key] = await self.repository.fetch_booking_records(
                self.scope, windows, statuses
            )
        return self._cache[key]


class DashboardService:
    """Service computing role dashboards.

    Repositories are created per call from the request's session; the service
    itself holds only settings.
    """

    def __init__(self) -> None:
        """Initialize dashboard service."""
        self.settings = get_settings()

    @property
    def labeler(self) -> PeriodLabeler:
        return get_labeler(self.settings.dashboard_label_locale)

    def _repository(self, db: AsyncSession) -> BookingRepository:
        return BookingRepository(db, self.settings.timezone)

    def _resolve(self, query: PeriodQuery) -> list[ResolvedRange]:
        return resolve_period_ranges(query.period_type, query.dates, self.labeler)

    # =========================================================================
    # Super admin
    # =========================================================================

    async def get_super_admin_dashboard(
        self,
        db: AsyncSession,
        date_start: str,
        date_end: str,
        group_by: Granularity = Granularity.DAY,
        page: int = 1,
        page_size: int = 10,
        province: str | None = None,
        region: str | None = None,
        search: str | None = None,
    ) -> SuperAdminDashboardResponse:
        """Platform-wide dashboard over an explicit date window.

        Args:
            db: Database session.
            date_start: First day (YYYY-MM-DD), inclusive.
            date_end: Last day (YYYY-MM-DD), inclusive through 23:59:59.999.
            group_by: Graph bucket size.
            page: Province stats page (1-indexed).
            page_size: Provinces per page.
            province: Exact province filter for stats.
            region: Exact region filter for stats.
            search: Community name substring filter for stats.

        Returns:
            Summary, booking graph and paginated province stats.

        Raises:
            InvalidDateFormatError: If a date is not YYYY-MM-DD.
            BadRequestError: If date_end is before date_start.
            DateRangeTooLargeError: If the graph would exceed the bucket cap.
        """
        start = parse_date(date_start, field="date_start")
        end = parse_date(date_end, field="date_end")
        if end < start:
            raise BadRequestError(
                "date_end must be on or after date_start",
                details={"date_start": str(start), "date_end": str(end)},
            )
        if page_size > self.settings.dashboard_max_page_size:
            raise BadRequestError(
                f"page_size must be at most {self.settings.dashboard_max_page_size}",
                details={"page_size": page_size},
            )
        window = DateWindow.from_dates(start, end)
        check_bucket_cap(window, group_by, self.settings.dashboard_max_buckets)
        repository = self._repository(db)
        scope = DashboardScope(role=DashboardRole.SUPER_ADMIN, account_id=0)

        records = await repository.fetch_booking_records(scope, [window])
        booked = [r for r in records if r.status == BookingStatus.BOOKED]
        graph = build_granularity_series(
            booked,
            window,
            group_by,
            count_extractor,
            max_buckets=self.settings.dashboard_max_buckets,
        )
        summary = summarize_bookings(records, window)

        total_packages = await repository.count_packages(scope)
        total_communities = await repository.count_communities()

        pagination = PaginationParams(page=page, page_size=page_size)
        stats, total_provinces = await repository.fetch_province_stats(
            window,
            pagination,
            province=province,
            region=region,
            search=search,
        )

        logger.info(
            "dashboard.super_admin_computed",
            date_start=str(start),
            date_end=str(end),
            group_by=group_by.value,
            bucket_count=len(graph.labels),
            success_booking_count=summary.success_count,
            province_count=total_provinces,
        )

        return SuperAdminDashboardResponse(
            summary=SuperAdminSummary(
                total_packages=total_packages,
                total_communities=total_communities,
                success_booking_count=summary.success_count,
                cancelled_booking_count=summary.cancelled_count,
            ),
            graph=graph,
            group_by=group_by,
            stats=paginate_response(stats, total_provinces, pagination),
        )

    # =========================================================================
    # Role dashboards
    # =========================================================================

    async def _build_dashboard(
        self,
        db: AsyncSession,
        scope: DashboardScope,
        booking: PeriodQuery,
        revenue: PeriodQuery,
        package: PeriodQuery | None,
        top_limit: int,
    ) -> DashboardResponse:
        booking_ranges = self._resolve(booking)
        revenue_ranges = self._resolve(revenue)
        package_ranges = self._resolve(package) if package is not None else []

        repository = self._repository(db)
        cache = _RecordCache(repository, scope)

        booking_records = await cache.get([r.window for r in booking_ranges], _BOOKED_ONLY)
        revenue_records = await cache.get([r.window for r in revenue_ranges], _BOOKED_ONLY)

        graph = DashboardGraphs(
            booking_count_graph=build_period_series(
                booking_records,
                booking_ranges,
                booking.period_type,
                count_extractor,
                self.labeler,
            ),
            revenue_graph=build_period_series(
                revenue_records,
                revenue_ranges,
                revenue.period_type,
                revenue_extractor,
                self.labeler,
            ),
        )

        # Summary spans the booking period; without anchors it covers all time
        summary_window = covering_window(booking_ranges)
        summary_records = await cache.get(
            None if summary_window is None else [summary_window], None
        )
        summary = summarize_bookings(summary_records, summary_window)

        if scope.role == DashboardRole.TOURIST:
            total_packages = summary.package_count
        else:
            total_packages = await repository.count_packages(scope)

        top_packages: list[TopPackageItem] | None = None
        if package is not None:
            package_records = await cache.get([r.window for r in package_ranges], _BOOKED_ONLY)
            ranked = rank_top_keys(package_records, lambda r: r.package_id, top_limit)
            names = await repository.fetch_package_names([package_id for package_id, _ in ranked])
            top_packages = attach_names(ranked, names)

        logger.info(
            "dashboard.role_dashboard_computed",
            role=scope.role.value,
            booking_period=booking.period_type.value,
            booking_range_count=len(booking_ranges),
            revenue_period=revenue.period_type.value,
            revenue_range_count=len(revenue_ranges),
            package_range_count=len(package_ranges),
            success_booking_count=summary.success_count,
            top_package_count=None if top_packages is None else len(top_packages),
        )

        return DashboardResponse(
            summary=DashboardSummary(
                total_packages=total_packages,
                total_revenue=summary.total_revenue,
                success_booking_count=summary.success_count,
                cancelled_booking_count=summary.cancelled_count,
            ),
            graph=graph,
            top_packages=top_packages,
        )

    async def get_admin_dashboard(
        self,
        db: AsyncSession,
        account_id: int,
        booking: PeriodQuery,
        revenue: PeriodQuery,
        package: PeriodQuery,
    ) -> DashboardResponse:
        """Dashboard for a community admin.

        Args:
            db: Database session.
            account_id: Admin account id.
            booking: Period for the booking count graph and summary.
            revenue: Period for the revenue graph.
            package: Period for the top packages ranking.

        Returns:
            Summary, graphs and top packages for the admin's communities.
        """
        return await self._build_dashboard(
            db,
            DashboardScope(role=DashboardRole.ADMIN, account_id=account_id),
            booking,
            revenue,
            package,
            top_limit=self.settings.dashboard_admin_top_packages,
        )

    async def get_member_dashboard(
        self,
        db: AsyncSession,
        account_id: int,
        booking: PeriodQuery,
        revenue: PeriodQuery,
        package: PeriodQuery,
    ) -> DashboardResponse:
        """Dashboard for a member, covering the packages the member created."""
        return await self._build_dashboard(
            db,
            DashboardScope(role=DashboardRole.MEMBER, account_id=account_id),
            booking,
            revenue,
            package,
            top_limit=self.settings.dashboard_member_top_packages,
        )

    async def get_tourist_dashboard(
        self,
        db: AsyncSession,
        account_id: int,
        booking: PeriodQuery,
    ) -> DashboardResponse:
        """Dashboard for a tourist's own bookings.

        Both graphs use the booking period; the revenue graph is the amount spent.
        """
        return await self._build_dashboard(
            db,
            DashboardScope(role=DashboardRole.TOURIST, account_id=account_id),
            booking,
            booking,
            None,
            top_limit=0,
        )
