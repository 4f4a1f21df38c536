"""Reduce booking records into chart series.

Period graphs pick one of four breakdowns from the period type and the
number of resolved ranges:

    monthly, 1 range   -> SINGLE_MONTH      7-day sub-windows of the month
    yearly,  1 range   -> SINGLE_YEAR       12 calendar-month buckets
    weekly,  any count -> WEEKLY_BREAKDOWN  7 daily buckets per range, concatenated
    monthly/yearly, 0 or 2+ ranges -> COMPARISON  one point per range

Every builder accumulates into a pre-sized list whose positions are computed
arithmetically, so bucket order is fixed before any record is read.
"""

from collections.abc import Sequence
from datetime import timedelta
from decimal import Decimal
from enum import Enum

from app.features.dashboard.buckets import (
    MAX_BUCKETS,
    DateWindow,
    bucket_index,
    enumerate_bucket_keys,
    truncate_to_granularity,
)
from app.features.dashboard.labels import THAI_LABELER, PeriodLabeler
from app.features.dashboard.periods import ResolvedRange
from app.features.dashboard.records import BookingRecord, ValueExtractor
from app.features.dashboard.schemas import Granularity, GraphSeries, PeriodType

DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12


class PeriodDispatchMode(str, Enum):
    """Breakdown applied to a set of resolved period ranges."""

    SINGLE_MONTH = "single_month"
    SINGLE_YEAR = "single_year"
    WEEKLY_BREAKDOWN = "weekly_breakdown"
    COMPARISON = "comparison"


def resolve_dispatch_mode(period_type: PeriodType, range_count: int) -> PeriodDispatchMode:
    """Choose the breakdown for a period type and number of ranges."""
    if period_type == PeriodType.WEEKLY:
        return PeriodDispatchMode.WEEKLY_BREAKDOWN
    if range_count == 1:
        if period_type == PeriodType.MONTHLY:
            return PeriodDispatchMode.SINGLE_MONTH
        return PeriodDispatchMode.SINGLE_YEAR
    return PeriodDispatchMode.COMPARISON


def _to_series(labels: list[str], totals: Sequence[int | Decimal]) -> GraphSeries:
    return GraphSeries(labels=labels, data=[float(total) for total in totals])


def build_single_month_series(
    records: Sequence[BookingRecord],
    period: ResolvedRange,
    extractor: ValueExtractor,
    labeler: PeriodLabeler = THAI_LABELER,
) -> GraphSeries:
    """Break one month into 7-day sub-windows starting at the month's first day.

    The last sub-window is clipped to the month end, so a 30-day month gives
    five windows, the last covering two days.
    """
    first = period.start.date()
    last = period.end.date()
    window_count = (last - first).days // DAYS_PER_WEEK + 1

    labels: list[str] = []
    for i in range(window_count):
        window_start = first + timedelta(days=i * DAYS_PER_WEEK)
        window_end = min(window_start + timedelta(days=DAYS_PER_WEEK - 1), last)
        labels.append(labeler.span(window_start, window_end))

    totals: list[int | Decimal] = [0] * window_count
    for record in records:
        if not period.contains(record.occurred_at):
            continue
        index = (record.occurred_at.date() - first).days // DAYS_PER_WEEK
        totals[index] += extractor(record)

    return _to_series(labels, totals)


def build_single_year_series(
    records: Sequence[BookingRecord],
    period: ResolvedRange,
    extractor: ValueExtractor,
    labeler: PeriodLabeler = THAI_LABELER,
) -> GraphSeries:
    """Twelve calendar-month buckets labeled with full month names."""
    labels = [labeler.month_name(month) for month in range(1, MONTHS_PER_YEAR + 1)]
    totals: list[int | Decimal] = [0] * MONTHS_PER_YEAR
    for record in records:
        if period.contains(record.occurred_at):
            totals[record.occurred_at.month - 1] += extractor(record)
    return _to_series(labels, totals)


def build_weekly_series(
    records: Sequence[BookingRecord],
    periods: Sequence[ResolvedRange],
    extractor: ValueExtractor,
    labeler: PeriodLabeler = THAI_LABELER,
) -> GraphSeries:
    """Seven daily buckets per range, ranges concatenated in input order.

    Ranges are not merged: two ranges give fourteen points even if they overlap.
    """
    labels: list[str] = []
    totals: list[int | Decimal] = [0] * (len(periods) * DAYS_PER_WEEK)

    for position, period in enumerate(periods):
        offset = position * DAYS_PER_WEEK
        first = period.start.date()
        labels.extend(
            labeler.day_month(first + timedelta(days=day)) for day in range(DAYS_PER_WEEK)
        )
        for record in records:
            day = (record.occurred_at - period.start) // timedelta(days=1)
            if 0 <= day < DAYS_PER_WEEK:
                totals[offset + day] += extractor(record)

    return _to_series(labels, totals)


def build_comparison_series(
    records: Sequence[BookingRecord],
    periods: Sequence[ResolvedRange],
    extractor: ValueExtractor,
) -> GraphSeries:
    """One point per range, labeled with the range label."""
    labels = [period.label for period in periods]
    totals: list[int | Decimal] = []
    for period in periods:
        total: int | Decimal = 0
        for record in records:
            if period.contains(record.occurred_at):
                total += extractor(record)
        totals.append(total)
    return _to_series(labels, totals)


def build_period_series(
    records: Sequence[BookingRecord],
    periods: Sequence[ResolvedRange],
    period_type: PeriodType,
    extractor: ValueExtractor,
    labeler: PeriodLabeler = THAI_LABELER,
) -> GraphSeries:
    """Build the graph series for a set of resolved period ranges.

    Args:
        records: Records already fetched for the ranges (status filtered).
        periods: Resolved ranges, in caller order.
        period_type: Period type the ranges were resolved with.
        extractor: Value of one record (count or revenue).
        labeler: Label formatting rules.

    Returns:
        Series with index-aligned labels and data. Empty for no ranges.
    """
    mode = resolve_dispatch_mode(period_type, len(periods))
    if mode == PeriodDispatchMode.SINGLE_MONTH:
        return build_single_month_series(records, periods[0], extractor, labeler)
    if mode == PeriodDispatchMode.SINGLE_YEAR:
        return build_single_year_series(records, periods[0], extractor, labeler)
    if mode == PeriodDispatchMode.WEEKLY_BREAKDOWN:
        return build_weekly_series(records, periods, extractor, labeler)
    return build_comparison_series(records, periods, extractor)


def build_granularity_series(
    records: Sequence[BookingRecord],
    window: DateWindow,
    granularity: Granularity,
    extractor: ValueExtractor,
    max_buckets: int = MAX_BUCKETS,
) -> GraphSeries:
    """Bucket records over a date window at a fixed granularity.

    Labels are the enumerated bucket keys; buckets without records are 0.

    Raises:
        DateRangeTooLargeError: If the window needs more than ``max_buckets`` buckets.
    """
    keys = enumerate_bucket_keys(window, granularity, max_buckets=max_buckets)
    origin = truncate_to_granularity(window.start, granularity)
    totals: list[int | Decimal] = [0] * len(keys)
    for record in records:
        if not window.contains(record.occurred_at):
            continue
        index = bucket_index(origin, record.occurred_at, granularity)
        if 0 <= index < len(totals):
            totals[index] += extractor(record)
    return _to_series(keys, totals)
