"""Dashboard module: time-series aggregation over bookings.

Converts date windows and period anchors into bucketed graph series,
period comparisons, summaries and top package rankings per caller role.
"""

from app.features.dashboard.routes import router
from app.features.dashboard.schemas import (
    DashboardResponse,
    Granularity,
    GraphSeries,
    PeriodType,
    SuperAdminDashboardResponse,
)
from app.features.dashboard.service import DashboardService

__all__ = [
    "DashboardResponse",
    "DashboardService",
    "Granularity",
    "GraphSeries",
    "PeriodType",
    "SuperAdminDashboardResponse",
    "router",
]
