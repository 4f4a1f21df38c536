"""API routes for role dashboards.

Caller identity comes from gateway headers (X-Account-ID, X-Account-Role).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.features.dashboard.deps import CurrentAccount, require_role
from app.features.dashboard.schemas import (
    DashboardResponse,
    DashboardRole,
    Granularity,
    PeriodQuery,
    PeriodType,
    SuperAdminDashboardResponse,
)
from app.features.dashboard.service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

_PERIOD_DESCRIPTION = (
    "weekly: 7 days from each anchor; monthly: the anchor's month; yearly: the anchor's year."
)
_DATES_DESCRIPTION = (
    "Anchor dates (YYYY-MM-DD). Repeat the parameter for comparisons. "
    "One monthly anchor is broken into weeks, one yearly anchor into months, "
    "several monthly/yearly anchors give one point each."
)


# =============================================================================
# Super Admin
# =============================================================================


@router.get(
    "/super-admin",
    response_model=SuperAdminDashboardResponse,
    summary="Platform-wide dashboard",
    description="""
Booking totals, a booking graph and per-province statistics over a date window.

**Date Range**:
- `date_start` and `date_end` are inclusive, format YYYY-MM-DD
- `group_by` sets the graph bucket: hour, day, week (Sunday start), month, year
- Windows needing more than 10,000 buckets are rejected (DATE_RANGE_TOO_LARGE)

**Example**: `GET /dashboard/super-admin?date_start=2024-01-01&date_end=2024-01-31&group_by=week`
""",
)
async def get_super_admin_dashboard(
    date_start: str = Query(..., description="Start of window (inclusive). Format: YYYY-MM-DD."),
    date_end: str = Query(..., description="End of window (inclusive). Format: YYYY-MM-DD."),
    group_by: Granularity = Query(Granularity.DAY, description="Graph bucket size."),
    page: int = Query(1, ge=1, description="Province stats page (1-indexed)."),
    page_size: int = Query(10, ge=1, description="Provinces per page."),
    province: str | None = Query(None, description="Exact province name."),
    region: str | None = Query(None, description="Exact region name."),
    search: str | None = Query(None, description="Community name contains (case-insensitive)."),
    _account: CurrentAccount = Depends(require_role(DashboardRole.SUPER_ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> SuperAdminDashboardResponse:
    """Compute the super-admin dashboard."""
    service = DashboardService()
    return await service.get_super_admin_dashboard(
        db=db,
        date_start=date_start,
        date_end=date_end,
        group_by=group_by,
        page=page,
        page_size=page_size,
        province=province,
        region=region,
        search=search,
    )


# =============================================================================
# Admin / Member
# =============================================================================


@router.get(
    "/admin",
    response_model=DashboardResponse,
    summary="Community admin dashboard",
    description="""
Booking count graph, revenue graph and top 20 packages for the communities
the caller administers. Each section has its own period type and anchors.

**Example**: `GET /dashboard/admin?booking_period_type=monthly&booking_dates=2024-03-01&booking_dates=2024-04-01`
""",
)
async def get_admin_dashboard(
    booking_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    booking_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    revenue_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    revenue_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    package_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    package_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    account: CurrentAccount = Depends(require_role(DashboardRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Compute the community admin dashboard."""
    service = DashboardService()
    return await service.get_admin_dashboard(
        db=db,
        account_id=account.id,
        booking=PeriodQuery(period_type=booking_period_type, dates=booking_dates),
        revenue=PeriodQuery(period_type=revenue_period_type, dates=revenue_dates),
        package=PeriodQuery(period_type=package_period_type, dates=package_dates),
    )


@router.get(
    "/member",
    response_model=DashboardResponse,
    summary="Member dashboard",
    description="""
Booking count graph, revenue graph and top 5 packages for the packages the
caller created. Parameters match `GET /dashboard/admin`.
""",
)
async def get_member_dashboard(
    booking_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    booking_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    revenue_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    revenue_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    package_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    package_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    account: CurrentAccount = Depends(require_role(DashboardRole.MEMBER)),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Compute the member dashboard."""
    service = DashboardService()
    return await service.get_member_dashboard(
        db=db,
        account_id=account.id,
        booking=PeriodQuery(period_type=booking_period_type, dates=booking_dates),
        revenue=PeriodQuery(period_type=revenue_period_type, dates=revenue_dates),
        package=PeriodQuery(period_type=package_period_type, dates=package_dates),
    )


# =============================================================================
# Tourist
# =============================================================================


@router.get(
    "/tourist",
    response_model=DashboardResponse,
    summary="Tourist dashboard",
    description="""
The caller's own bookings: booking count and amount spent over one period.
""",
)
async def get_tourist_dashboard(
    booking_period_type: PeriodType = Query(PeriodType.MONTHLY, description=_PERIOD_DESCRIPTION),
    booking_dates: list[str] = Query([], description=_DATES_DESCRIPTION),
    account: CurrentAccount = Depends(require_role(DashboardRole.TOURIST)),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Compute the tourist dashboard."""
    service = DashboardService()
    return await service.get_tourist_dashboard(
        db=db,
        account_id=account.id,
        booking=PeriodQuery(period_type=booking_period_type, dates=booking_dates),
    )
