"""Tests for period anchor resolution."""

from datetime import date, datetime

import pytest

from app.core.exceptions import InvalidDateFormatError
from app.features.dashboard.labels import GREGORIAN_LABELER, THAI_LABELER
from app.features.dashboard.periods import (
    ResolvedRange,
    covering_window,
    parse_date,
    period_bounds,
    resolve_period_range,
    resolve_period_ranges,
)
from app.features.dashboard.schemas import PeriodType


class TestParseDate:
    """Tests for parse_date."""

    def test_parses_iso_date(self) -> None:
        """Test a valid YYYY-MM-DD string."""
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_passes_dates_through(self) -> None:
        """Test date and datetime inputs."""
        assert parse_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert parse_date(datetime(2024, 1, 5, 13, 0)) == date(2024, 1, 5)

    @pytest.mark.parametrize(
        "value",
        [
            "2024-13-01",
            "2024-02-30",
            "2023-02-29",
            "20240101",
            "2024/01/01",
            "01-02-2024",
            "",
            "abc",
        ],
    )
    def test_rejects_invalid_values(self, value: str) -> None:
        """Test malformed and impossible dates raise INVALID_DATE_FORMAT."""
        with pytest.raises(InvalidDateFormatError) as exc_info:
            parse_date(value, field="dates")

        assert exc_info.value.code == "INVALID_DATE_FORMAT"
        assert exc_info.value.status_code == 400
        assert exc_info.value.field == "dates"

    def test_error_message_names_field_and_value(self) -> None:
        """Test the message is actionable."""
        with pytest.raises(InvalidDateFormatError, match="date_start must be a date in format"):
            parse_date("2024-1-1", field="date_start")


class TestPeriodBounds:
    """Tests for period_bounds."""

    def test_weekly_is_seven_days_from_anchor(self) -> None:
        """Test weekly ranges start at the anchor without snapping to a week start."""
        # 2024-01-03 is a Wednesday
        assert period_bounds(PeriodType.WEEKLY, date(2024, 1, 3)) == (
            date(2024, 1, 3),
            date(2024, 1, 9),
        )

    def test_weekly_crosses_month_end(self) -> None:
        """Test weekly ranges may span two months."""
        assert period_bounds(PeriodType.WEEKLY, date(2024, 1, 29)) == (
            date(2024, 1, 29),
            date(2024, 2, 4),
        )

    @pytest.mark.parametrize(
        ("anchor", "last_day"),
        [
            (date(2024, 2, 15), date(2024, 2, 29)),
            (date(2023, 2, 1), date(2023, 2, 28)),
            (date(2024, 4, 30), date(2024, 4, 30)),
            (date(2024, 12, 31), date(2024, 12, 31)),
        ],
    )
    def test_monthly_covers_calendar_month(self, anchor: date, last_day: date) -> None:
        """Test monthly ranges run from day 1 to the true last day."""
        first, last = period_bounds(PeriodType.MONTHLY, anchor)
        assert first == anchor.replace(day=1)
        assert last == last_day

    def test_yearly_covers_calendar_year(self) -> None:
        """Test yearly ranges cover January 1 to December 31."""
        assert period_bounds(PeriodType.YEARLY, date(2024, 6, 30)) == (
            date(2024, 1, 1),
            date(2024, 12, 31),
        )


class TestResolvePeriodRange:
    """Tests for resolve_period_range."""

    def test_range_spans_whole_days(self) -> None:
        """Test ranges start at 00:00 and end at 23:59:59.999."""
        resolved = resolve_period_range(PeriodType.MONTHLY, "2024-02-10", GREGORIAN_LABELER)

        assert resolved.start == datetime(2024, 2, 1, 0, 0, 0)
        assert resolved.end == datetime(2024, 2, 29, 23, 59, 59, 999_000)

    def test_weekly_label(self) -> None:
        """Test weekly label shows both ends with the year."""
        resolved = resolve_period_range(PeriodType.WEEKLY, "2024-01-03", GREGORIAN_LABELER)
        assert resolved.label == "3/1/2024 - 9/1/2024"

    def test_monthly_label(self) -> None:
        """Test monthly label is the month name and year."""
        resolved = resolve_period_range(PeriodType.MONTHLY, "2024-02-10", GREGORIAN_LABELER)
        assert resolved.label == "February 2024"

    def test_yearly_label(self) -> None:
        """Test yearly label is the year."""
        resolved = resolve_period_range(PeriodType.YEARLY, "2024-06-30", GREGORIAN_LABELER)
        assert resolved.label == "2024"

    def test_thai_labels_use_buddhist_era(self) -> None:
        """Test default labels are Thai with year + 543."""
        assert resolve_period_range(PeriodType.YEARLY, "2024-06-30").label == "2567"
        assert resolve_period_range(PeriodType.MONTHLY, "2024-02-10").label == "กุมภาพันธ์ 2567"
        assert (
            resolve_period_range(PeriodType.WEEKLY, "2024-12-29", THAI_LABELER).label
            == "29/12/2567 - 4/1/2568"
        )

    def test_invalid_anchor_raises(self) -> None:
        """Test a bad anchor names the dates field."""
        with pytest.raises(InvalidDateFormatError) as exc_info:
            resolve_period_range(PeriodType.MONTHLY, "2024-13-01")
        assert exc_info.value.field == "dates"

    def test_weekly_anchor_past_calendar_end_raises(self) -> None:
        """Test a weekly range running past 9999-12-31 is a 400, not an overflow."""
        with pytest.raises(InvalidDateFormatError) as exc_info:
            resolve_period_ranges(PeriodType.WEEKLY, ["9999-12-30"])

        assert exc_info.value.status_code == 400
        assert exc_info.value.field == "dates"

    @pytest.mark.parametrize("period_type", [PeriodType.MONTHLY, PeriodType.YEARLY])
    def test_last_calendar_day_resolves_for_month_and_year(self, period_type: PeriodType) -> None:
        """Test monthly and yearly ranges still reach 9999-12-31."""
        resolved = resolve_period_range(period_type, "9999-12-30", GREGORIAN_LABELER)
        assert resolved.end == datetime(9999, 12, 31, 23, 59, 59, 999_000)

    def test_contains_is_inclusive(self) -> None:
        """Test both ends of the range are inside it."""
        resolved = resolve_period_range(PeriodType.WEEKLY, "2024-01-01", GREGORIAN_LABELER)

        assert resolved.contains(datetime(2024, 1, 1, 0, 0))
        assert resolved.contains(datetime(2024, 1, 7, 23, 59, 59, 999_000))
        assert not resolved.contains(datetime(2024, 1, 8, 0, 0))
        assert not resolved.contains(datetime(2023, 12, 31, 23, 59, 59))


class TestResolvePeriodRanges:
    """Tests for resolve_period_ranges."""

    def test_empty_anchor_list(self) -> None:
        """Test no anchors gives no ranges."""
        assert resolve_period_ranges(PeriodType.MONTHLY, []) == []

    def test_preserves_input_order(self) -> None:
        """Test ranges follow the caller's order, not chronological order."""
        ranges = resolve_period_ranges(
            PeriodType.MONTHLY,
            ["2024-03-01", "2024-01-15", "2024-02-01"],
            GREGORIAN_LABELER,
        )
        assert [r.label for r in ranges] == ["March 2024", "January 2024", "February 2024"]

    def test_preserves_duplicates(self) -> None:
        """Test duplicate anchors give duplicate ranges."""
        ranges = resolve_period_ranges(
            PeriodType.YEARLY,
            ["2024-01-01", "2024-05-05"],
            GREGORIAN_LABELER,
        )
        assert len(ranges) == 2
        assert ranges[0] == ranges[1]

    def test_one_bad_anchor_fails_whole_request(self) -> None:
        """Test an invalid anchor anywhere in the list raises."""
        with pytest.raises(InvalidDateFormatError):
            resolve_period_ranges(PeriodType.WEEKLY, ["2024-01-01", "2024-02-30"])


class TestCoveringWindow:
    """Tests for covering_window."""

    def test_none_for_no_ranges(self) -> None:
        """Test an empty list has no covering window."""
        assert covering_window([]) is None

    def test_spans_earliest_start_to_latest_end(self) -> None:
        """Test the window covers every range regardless of order."""
        ranges = [
            ResolvedRange(datetime(2024, 3, 1), datetime(2024, 3, 31, 23, 59), "b"),
            ResolvedRange(datetime(2024, 1, 1), datetime(2024, 1, 31, 23, 59), "a"),
        ]
        window = covering_window(ranges)

        assert window is not None
        assert window.start == datetime(2024, 1, 1)
        assert window.end == datetime(2024, 3, 31, 23, 59)
