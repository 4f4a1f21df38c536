"""Tests for period labels."""

from datetime import date

import pytest

from app.features.dashboard.labels import (
    GREGORIAN_LABELER,
    THAI_LABELER,
    THAI_MONTH_NAMES,
    format_period_label,
    get_labeler,
)
from app.features.dashboard.schemas import PeriodType


class TestPeriodLabeler:
    """Tests for PeriodLabeler formatting."""

    def test_thai_year_is_buddhist_era(self) -> None:
        """Test Thai years are offset by 543."""
        assert THAI_LABELER.year(date(2024, 1, 1)) == "2567"
        assert GREGORIAN_LABELER.year(date(2024, 1, 1)) == "2024"

    def test_month_names(self) -> None:
        """Test month names are indexed from January."""
        assert THAI_LABELER.month_name(1) == "มกราคม"
        assert THAI_LABELER.month_name(12) == "ธันวาคม"
        assert GREGORIAN_LABELER.month_name(3) == "March"
        assert len(THAI_MONTH_NAMES) == 12

    def test_day_month_is_not_zero_padded(self) -> None:
        """Test D/M format."""
        assert GREGORIAN_LABELER.day_month(date(2024, 3, 5)) == "5/3"

    def test_span_takes_year_from_start(self) -> None:
        """Test sub-window label format."""
        assert GREGORIAN_LABELER.span(date(2024, 4, 29), date(2024, 4, 30)) == "29/4-30/4 2024"
        assert THAI_LABELER.span(date(2024, 4, 1), date(2024, 4, 7)) == "1/4-7/4 2567"


class TestGetLabeler:
    """Tests for get_labeler."""

    def test_known_locales(self) -> None:
        """Test configured locales resolve."""
        assert get_labeler("th") is THAI_LABELER
        assert get_labeler("en") is GREGORIAN_LABELER

    def test_unknown_locale_raises(self) -> None:
        """Test an unsupported locale is rejected."""
        with pytest.raises(ValueError, match="Unsupported label locale"):
            get_labeler("fr")


class TestFormatPeriodLabel:
    """Tests for format_period_label."""

    def test_each_period_type(self) -> None:
        """Test label shape per period type."""
        start, end = date(2024, 7, 1), date(2024, 7, 7)

        assert format_period_label(PeriodType.WEEKLY, start, end, GREGORIAN_LABELER) == (
            "1/7/2024 - 7/7/2024"
        )
        assert format_period_label(PeriodType.MONTHLY, start, end, GREGORIAN_LABELER) == "July 2024"
        assert format_period_label(PeriodType.YEARLY, start, end, GREGORIAN_LABELER) == "2024"
        assert format_period_label(PeriodType.MONTHLY, start, end) == "กรกฎาคม 2567"
