"""Human-readable labels for periods and breakdown buckets.

Label wording is presentation policy. Aggregation code receives a
``PeriodLabeler`` and never formats dates itself, so tests can swap in
Gregorian/English labels without touching bucketing.
"""

from dataclasses import dataclass
from datetime import date

from app.features.dashboard.schemas import PeriodType

THAI_MONTH_NAMES: tuple[str, ...] = (
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
)

ENGLISH_MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Buddhist era = Gregorian year + 543
BUDDHIST_ERA_OFFSET = 543


@dataclass(frozen=True)
class PeriodLabeler:
    """Formats dates for chart labels.

    Attributes:
        month_names: Twelve full month names, January first.
        era_offset: Added to Gregorian years when printing them.
    """

    month_names: tuple[str, ...]
    era_offset: int = 0

    def year(self, value: date) -> str:
        return str(value.year + self.era_offset)

    def month_name(self, month: int) -> str:
        return self.month_names[month - 1]

    def month(self, value: date) -> str:
        """``<month name> <year>``."""
        return f"{self.month_name(value.month)} {self.year(value)}"

    def day_month(self, value: date) -> str:
        """``D/M`` without zero padding."""
        return f"{value.day}/{value.month}"

    def day_month_year(self, value: date) -> str:
        return f"{value.day}/{value.month}/{self.year(value)}"

    def span(self, start: date, end: date) -> str:
        """``D/M-D/M YYYY`` for a sub-window, year taken from ``start``."""
        return f"{self.day_month(start)}-{self.day_month(end)} {self.year(start)}"


THAI_LABELER = PeriodLabeler(month_names=THAI_MONTH_NAMES, era_offset=BUDDHIST_ERA_OFFSET)
GREGORIAN_LABELER = PeriodLabeler(month_names=ENGLISH_MONTH_NAMES)

_LABELERS = {
    "th": THAI_LABELER,
    "en": GREGORIAN_LABELER,
}


def get_labeler(locale: str) -> PeriodLabeler:
    """Labeler for a configured locale (``th`` or ``en``)."""
    try:
        return _LABELERS[locale]
    except KeyError as e:
        raise ValueError(f"Unsupported label locale '{locale}'") from e


def format_period_label(
    period_type: PeriodType,
    start: date,
    end: date,
    labeler: PeriodLabeler = THAI_LABELER,
) -> str:
    """Label for a resolved period range.

    Args:
        period_type: How the range was derived.
        start: First day of the range.
        end: Last day of the range.
        labeler: Locale formatting rules.

    Returns:
        ``D/M/YYYY - D/M/YYYY`` (weekly), ``<month> YYYY`` (monthly) or
        ``YYYY`` (yearly).
    """
    if period_type == PeriodType.WEEKLY:
        return f"{labeler.day_month_year(start)} - {labeler.day_month_year(end)}"
    if period_type == PeriodType.MONTHLY:
        return labeler.month(start)
    return labeler.year(start)
