"""In-memory booking rows the aggregation engine reduces.

Rows are produced by the repository with ``occurred_at`` already converted to
naive local wall-clock time, so every bucketing rule operates on local dates.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.features.bookings.models import BookingStatus


@dataclass(frozen=True, slots=True)
class BookingRecord:
    """A booking as seen by the dashboard.

    Attributes:
        occurred_at: Local time the booking was made.
        participant_count: Number of participants.
        status: Booking status.
        unit_price: Package price per participant.
        package_id: Booked package, used for top-N ranking.
    """

    occurred_at: datetime
    participant_count: int
    status: BookingStatus
    unit_price: Decimal
    package_id: int | None = None

    @property
    def revenue(self) -> Decimal:
        """Revenue contribution; zero unless the booking is BOOKED."""
        if self.status != BookingStatus.BOOKED:
            return Decimal("0")
        return self.unit_price * self.participant_count


ValueExtractor = Callable[[BookingRecord], int | Decimal]


def count_extractor(_record: BookingRecord) -> int:
    """Count each record once."""
    return 1


def revenue_extractor(record: BookingRecord) -> Decimal:
    """Revenue of a record (``unit_price * participant_count`` when BOOKED)."""
    return record.revenue
