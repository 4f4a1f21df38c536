"""Expand period anchors into concrete date ranges.

Rules:
- weekly: 7 contiguous days starting at the anchor (no snapping to Sunday)
- monthly: first to last calendar day of the anchor's month
- yearly: January 1 to December 31 of the anchor's year

Anchors are resolved independently and in input order. Duplicate anchors
produce duplicate ranges.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from app.core.exceptions import InvalidDateFormatError
from app.features.dashboard.buckets import DateWindow
from app.features.dashboard.labels import THAI_LABELER, PeriodLabeler, format_period_label
from app.features.dashboard.schemas import PeriodType

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ResolvedRange:
    """A labeled inclusive window derived from one anchor."""

    start: datetime
    end: datetime
    label: str

    @property
    def window(self) -> DateWindow:
        return DateWindow(start=self.start, end=self.end)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


def parse_date(value: str | date, field: str | None = None) -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Args:
        value: Date string, or a date passed through unchanged.
        field: Name of the request field, for the error message.

    Returns:
        Parsed date.

    Raises:
        InvalidDateFormatError: If the value is not a valid calendar date
            in ``YYYY-MM-DD`` form.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise InvalidDateFormatError(value, field=field)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        # Well-formed but impossible, e.g. 2024-02-30
        raise InvalidDateFormatError(value, field=field) from e


def period_bounds(period_type: PeriodType, anchor: date) -> tuple[date, date]:
    """First and last calendar day of the period an anchor expands to."""
    if period_type == PeriodType.WEEKLY:
        return anchor, anchor + timedelta(days=6)
    if period_type == PeriodType.MONTHLY:
        last_day = calendar.monthrange(anchor.year, anchor.month)[1]
        return anchor.replace(day=1), anchor.replace(day=last_day)
    return date(anchor.year, 1, 1), date(anchor.year, 12, 31)


def resolve_period_range(
    period_type: PeriodType,
    anchor: str | date,
    labeler: PeriodLabeler = THAI_LABELER,
) -> ResolvedRange:
    """Resolve one anchor into a labeled range.

    Args:
        period_type: Expansion rule.
        anchor: Anchor date or ``YYYY-MM-DD`` string.
        labeler: Label formatting rules.

    Returns:
        Range from 00:00:00.000 on the first day to 23:59:59.999 on the last.

    Raises:
        InvalidDateFormatError: If the anchor is not a date, or its range
            ends past the last representable day.
    """
    parsed = parse_date(anchor, field="dates")
    try:
        first, last = period_bounds(period_type, parsed)
    except OverflowError as e:
        # Weekly ranges from the last days of year 9999 run off the calendar
        raise InvalidDateFormatError(anchor, field="dates") from e
    window = DateWindow.from_dates(first, last)
    return ResolvedRange(
        start=window.start,
        end=window.end,
        label=format_period_label(period_type, first, last, labeler),
    )


def resolve_period_ranges(
    period_type: PeriodType,
    anchors: Sequence[str | date],
    labeler: PeriodLabeler = THAI_LABELER,
) -> list[ResolvedRange]:
    """Resolve every anchor, preserving input order and duplicates.

    An empty anchor list yields an empty list.
    """
    return [resolve_period_range(period_type, anchor, labeler) for anchor in anchors]


def covering_window(ranges: Sequence[ResolvedRange]) -> DateWindow | None:
    """Smallest window containing every range, or None for no ranges."""
    if not ranges:
        return None
    return DateWindow(
        start=min(r.start for r in ranges),
        end=max(r.end for r in ranges),
    )
