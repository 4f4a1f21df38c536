"""Pydantic schemas for dashboard endpoints.

Graph series are index-aligned ``labels``/``data`` pairs ready for charting.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator

from app.shared.schemas import PaginatedResponse

# Revenue stays exact in Python and is emitted as a JSON number, like graph data
RevenueAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# =============================================================================
# Enums
# =============================================================================


class Granularity(str, Enum):
    """Bucket size for date-window graphs."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class PeriodType(str, Enum):
    """How a period anchor date expands into a concrete range.

    - weekly: 7 days starting at the anchor
    - monthly: the anchor's calendar month
    - yearly: the anchor's calendar year
    """

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class DashboardRole(str, Enum):
    """Caller roles, each seeing a different slice of bookings."""

    SUPER_ADMIN = "superadmin"
    ADMIN = "admin"
    MEMBER = "member"
    TOURIST = "tourist"


# =============================================================================
# Request Schemas
# =============================================================================


class PeriodQuery(BaseModel):
    """A period type plus the anchor dates to expand.

    Anchors are kept as raw strings; they are parsed when resolved so that a
    malformed value surfaces as INVALID_DATE_FORMAT rather than a 422.
    """

    period_type: PeriodType = Field(
        PeriodType.MONTHLY,
        description="Expansion rule for every anchor in `dates`.",
    )
    dates: list[str] = Field(
        default_factory=list,
        description="Anchor dates (YYYY-MM-DD), resolved in the given order. "
        "An empty list yields empty series.",
    )


# =============================================================================
# Response Schemas
# =============================================================================


class GraphSeries(BaseModel):
    """Chart-ready series with index-aligned labels and values."""

    labels: list[str] = Field(
        default_factory=list,
        description="Bucket labels in chronological (or caller) order.",
    )
    data: list[float] = Field(
        default_factory=list,
        description="Aggregated value per label.",
    )

    @model_validator(mode="after")
    def check_aligned(self) -> "GraphSeries":
        """Ensure labels and data have the same length."""
        if len(self.labels) != len(self.data):
            msg = f"labels ({len(self.labels)}) and data ({len(self.data)}) must align"
            raise ValueError(msg)
        return self


class DashboardGraphs(BaseModel):
    """Booking count and revenue series for role dashboards."""

    booking_count_graph: GraphSeries = Field(
        ...,
        description="Number of BOOKED bookings per bucket.",
    )
    revenue_graph: GraphSeries = Field(
        ...,
        description="Sum of price * participants over BOOKED bookings per bucket.",
    )


class DashboardSummary(BaseModel):
    """Scalar totals shown above the graphs."""

    model_config = ConfigDict(from_attributes=True)

    total_packages: int = Field(..., ge=0, description="Packages visible to the caller.")
    total_revenue: RevenueAmount | None = Field(
        None,
        description="Revenue over BOOKED bookings in the summary window.",
    )
    success_booking_count: int = Field(..., ge=0, description="Bookings with status BOOKED.")
    cancelled_booking_count: int = Field(
        ...,
        ge=0,
        description="Bookings with status REFUNDED or REFUND_REJECTED.",
    )


class TopPackageItem(BaseModel):
    """A package ranked by booking count."""

    rank: int = Field(..., ge=1, description="1 = most booked.")
    package_id: int = Field(..., description="Package primary key.")
    name: str | None = Field(None, description="Package name, null if no longer present.")
    booking_count: int = Field(..., ge=0, description="BOOKED bookings in the package period.")


class DashboardResponse(BaseModel):
    """Dashboard for admin, member and tourist roles."""

    summary: DashboardSummary
    graph: DashboardGraphs
    top_packages: list[TopPackageItem] | None = Field(
        None,
        description="Most booked packages. Omitted for tourists.",
    )


class SuperAdminSummary(BaseModel):
    """Platform-wide totals for the super-admin dashboard."""

    total_packages: int = Field(..., ge=0)
    total_communities: int = Field(..., ge=0)
    success_booking_count: int = Field(..., ge=0)
    cancelled_booking_count: int = Field(..., ge=0)


class ProvinceStat(BaseModel):
    """Community, package and booking counts for one province."""

    model_config = ConfigDict(from_attributes=True)

    province: str
    community_count: int = Field(..., ge=0)
    package_count: int = Field(..., ge=0)
    booking_count: int = Field(..., ge=0)
    success_booking_count: int = Field(..., ge=0)
    cancelled_booking_count: int = Field(..., ge=0)


class SuperAdminDashboardResponse(BaseModel):
    """Super-admin dashboard over an explicit date window."""

    summary: SuperAdminSummary
    graph: GraphSeries = Field(
        ...,
        description="BOOKED bookings per bucket of the requested granularity.",
    )
    group_by: Granularity
    stats: PaginatedResponse[ProvinceStat]
