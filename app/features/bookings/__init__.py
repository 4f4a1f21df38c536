"""Booking platform tables consumed read-only by the dashboard.

- Location, Community, Package, BookingHistory
"""

from app.features.bookings.models import (
    CANCELLED_STATUSES,
    BookingHistory,
    BookingStatus,
    Community,
    Location,
    Package,
)

__all__ = [
    "CANCELLED_STATUSES",
    "BookingHistory",
    "BookingStatus",
    "Community",
    "Location",
    "Package",
]
