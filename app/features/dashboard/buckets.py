"""Bucket keys and gap-free bucket enumeration for date-window graphs.

Weeks start on Sunday. The same convention is used when enumerating buckets
and when classifying a record, so a record always lands in an enumerated key.

All datetimes here are naive local wall-clock values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

from app.core.exceptions import DateRangeTooLargeError
from app.core.logging import get_logger
from app.features.dashboard.schemas import Granularity

logger = get_logger(__name__)

MAX_BUCKETS = 10_000

# Inclusive end of a calendar day (millisecond precision, like stored timestamps)
END_OF_DAY = time(23, 59, 59, 999_000)

_STEPS: dict[Granularity, timedelta | relativedelta] = {
    Granularity.HOUR: timedelta(hours=1),
    Granularity.DAY: timedelta(days=1),
    Granularity.WEEK: timedelta(days=7),
    Granularity.MONTH: relativedelta(months=1),
    Granularity.YEAR: relativedelta(years=1),
}


@dataclass(frozen=True)
class DateWindow:
    """Inclusive ``[start, end]`` window of local datetimes."""

    start: datetime
    end: datetime

    @classmethod
    def from_dates(cls, start: date, end: date) -> DateWindow:
        """Window from the first instant of ``start`` to the end of ``end``."""
        return cls(
            start=datetime.combine(start, time.min),
            end=datetime.combine(end, END_OF_DAY),
        )

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant falls inside the window (inclusive)."""
        return self.start <= instant <= self.end


def start_of_week(value: date) -> date:
    """Sunday on or before ``value``."""
    # date.weekday(): Monday=0 .. Sunday=6
    return value - timedelta(days=(value.weekday() + 1) % 7)


def truncate_to_granularity(instant: datetime, granularity: Granularity) -> datetime:
    """Floor an instant to the start of its bucket."""
    if granularity == Granularity.HOUR:
        return instant.replace(minute=0, second=0, microsecond=0)
    midnight = datetime.combine(instant.date(), time.min)
    if granularity == Granularity.DAY:
        return midnight
    if granularity == Granularity.WEEK:
        return datetime.combine(start_of_week(instant.date()), time.min)
    if granularity == Granularity.MONTH:
        return midnight.replace(day=1)
    return midnight.replace(month=1, day=1)


def format_bucket_key(instant: datetime, granularity: Granularity) -> str:
    """Render the bucket key an instant belongs to.

    Args:
        instant: Local datetime.
        granularity: Bucket size.

    Returns:
        ``YYYY-MM-DD HH:00`` (hour), ``YYYY-MM-DD`` (day, and week where the
        date is the Sunday starting the week), ``YYYY-MM`` (month) or
        ``YYYY`` (year).
    """
    if granularity == Granularity.HOUR:
        return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d} {instant.hour:02d}:00"
    if granularity == Granularity.DAY:
        return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"
    if granularity == Granularity.WEEK:
        week = start_of_week(instant.date())
        return f"{week.year:04d}-{week.month:02d}-{week.day:02d}"
    if granularity == Granularity.MONTH:
        return f"{instant.year:04d}-{instant.month:02d}"
    return f"{instant.year:04d}"


def bucket_index(origin: datetime, instant: datetime, granularity: Granularity) -> int:
    """Position of ``instant``'s bucket relative to the bucket starting at ``origin``.

    ``origin`` must already be truncated to ``granularity``. Negative results
    mean the instant precedes the origin bucket.
    """
    if granularity == Granularity.HOUR:
        return (truncate_to_granularity(instant, granularity) - origin) // timedelta(hours=1)
    if granularity == Granularity.DAY:
        return (instant.date() - origin.date()).days
    if granularity == Granularity.WEEK:
        return (start_of_week(instant.date()) - origin.date()).days // 7
    if granularity == Granularity.MONTH:
        return (instant.year - origin.year) * 12 + instant.month - origin.month
    return instant.year - origin.year


def count_buckets(window: DateWindow, granularity: Granularity) -> int:
    """Number of buckets needed to cover a window, without enumerating them."""
    if window.end < window.start:
        return 0
    origin = truncate_to_granularity(window.start, granularity)
    return bucket_index(origin, window.end, granularity) + 1


def check_bucket_cap(
    window: DateWindow,
    granularity: Granularity,
    max_buckets: int = MAX_BUCKETS,
) -> int:
    """Number of buckets a window needs, failing fast past ``max_buckets``.

    Raises:
        DateRangeTooLargeError: If the window needs more than ``max_buckets`` keys.
    """
    total = count_buckets(window, granularity)
    if total > max_buckets:
        logger.warning(
            "dashboard.date_range_too_large",
            start=window.start.isoformat(),
            end=window.end.isoformat(),
            granularity=granularity.value,
            bucket_count=total,
            max_buckets=max_buckets,
        )
        raise DateRangeTooLargeError(max_buckets=max_buckets, granularity=granularity.value)
    return total


def enumerate_bucket_keys(
    window: DateWindow,
    granularity: Granularity,
    max_buckets: int = MAX_BUCKETS,
) -> list[str]:
    """Ordered, gap-free bucket keys covering a window.

    Args:
        window: Inclusive local date window.
        granularity: Bucket size.
        max_buckets: Largest number of buckets allowed.

    Returns:
        Keys in chronological order, no duplicates. Empty when the window
        ends before it starts.

    Raises:
        DateRangeTooLargeError: If the window needs more than ``max_buckets`` keys.
    """
    total = check_bucket_cap(window, granularity, max_buckets)
    origin = truncate_to_granularity(window.start, granularity)
    step = _STEPS[granularity]
    # Month/year steps are applied from the origin so day-of-month never drifts
    return [format_bucket_key(origin + step * i, granularity) for i in range(total)]
