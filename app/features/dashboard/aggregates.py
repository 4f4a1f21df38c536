"""Scalar summaries and top-N rankings over booking records."""

from collections import Counter
from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar

from app.features.bookings.models import CANCELLED_STATUSES, BookingStatus
from app.features.dashboard.buckets import DateWindow
from app.features.dashboard.records import BookingRecord
from app.features.dashboard.schemas import TopPackageItem

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class BookingSummary:
    """Totals over one window.

    Attributes:
        success_count: Bookings with status BOOKED.
        cancelled_count: Bookings with status REFUNDED or REFUND_REJECTED.
        total_revenue: Sum of ``unit_price * participant_count`` over BOOKED bookings.
        package_count: Distinct packages among the counted records.
    """

    success_count: int
    cancelled_count: int
    total_revenue: Decimal
    package_count: int


def summarize_bookings(
    records: Sequence[BookingRecord],
    window: DateWindow | None = None,
) -> BookingSummary:
    """Reduce records to success/cancelled counts and revenue.

    Args:
        records: Records of any status.
        window: Only count records inside this window (all records when None).

    Returns:
        Booking summary.
    """
    success = 0
    cancelled = 0
    revenue = Decimal("0")
    packages: set[int] = set()

    for record in records:
        if window is not None and not window.contains(record.occurred_at):
            continue
        if record.package_id is not None:
            packages.add(record.package_id)
        if record.status == BookingStatus.BOOKED:
            success += 1
            revenue += record.revenue
        elif record.status in CANCELLED_STATUSES:
            cancelled += 1

    return BookingSummary(
        success_count=success,
        cancelled_count=cancelled,
        total_revenue=revenue,
        package_count=len(packages),
    )


def rank_top_keys(
    records: Sequence[BookingRecord],
    key: Callable[[BookingRecord], K | None],
    limit: int,
) -> list[tuple[K, int]]:
    """Group records by ``key`` and return the ``limit`` largest groups.

    Ties keep the order in which each key was first seen in ``records``.
    Records whose key is None are skipped.

    Args:
        records: Records to group.
        key: Grouping dimension, e.g. package id.
        limit: Maximum number of groups returned.

    Returns:
        ``(key, count)`` pairs, largest count first.
    """
    if limit <= 0:
        return []
    counts: Counter[K] = Counter()
    for record in records:
        value = key(record)
        if value is not None:
            counts[value] += 1
    # most_common sorts stably, so equal counts stay in first-seen order
    return counts.most_common(limit)


def attach_names(
    ranked: Sequence[tuple[int, int]],
    names: Mapping[int, str],
) -> list[TopPackageItem]:
    """Join ranked package ids with their display names."""
    return [
        TopPackageItem(
            rank=rank,
            package_id=package_id,
            name=names.get(package_id),
            booking_count=count,
        )
        for rank, (package_id, count) in enumerate(ranked, 1)
    ]
