import calendar
import datetime
import re
from typing import NamedTuple, Optional

from django.core.exceptions import ValidationError

"""
    Reporting periods are plain labels, not rows.
    Quarters follow the Indian fiscal year (April to March):
        Q1_2025 = Apr-Jun 2025 ... Q4_2025 = Jan-Mar 2026
"""

_YEAR = re.compile(r"^(\d{4})$")
_MONTH = re.compile(r"^(\d{4})-(\d{2})$")
_QUARTER = re.compile(r"^Q([1-4])_(\d{4})$", re.IGNORECASE)
_FISCAL_YEAR = re.compile(r"^FY(\d{4})-(\d{2})$", re.IGNORECASE)

# first month of each fiscal quarter, and whether it falls in the next calendar year
_QUARTER_START = {1: (4, 0), 2: (7, 0), 3: (10, 0), 4: (1, 1)}


class PeriodBounds(NamedTuple):
    label: str
    start: datetime.date
    end: datetime.date


def _month_end(year, month):
    return datetime.date(year, month, calendar.monthrange(year, month)[1])


def resolve_period(label) -> Optional[PeriodBounds]:
    """Turn a period label into inclusive date bounds.

    Returns None for an empty label or 'all' (no date filter).
    Raises ValidationError for anything it cannot read.
    """
    if label is None:
        return None
    label = str(label).strip()
    if not label or label.lower() == "all":
        return None

    match = _YEAR.match(label)
    if match:
        year = int(match.group(1))
        return PeriodBounds(label, datetime.date(year, 1, 1), datetime.date(year, 12, 31))

    match = _MONTH.match(label)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month in period '{label}'")
        return PeriodBounds(label, datetime.date(year, month, 1), _month_end(year, month))

    match = _QUARTER.match(label)
    if match:
        quarter, fiscal_year = int(match.group(1)), int(match.group(2))
        start_month, year_offset = _QUARTER_START[quarter]
        year = fiscal_year + year_offset
        return PeriodBounds(
            label.upper(),
            datetime.date(year, start_month, 1),
            _month_end(year, start_month + 2),
        )

    match = _FISCAL_YEAR.match(label)
    if match:
        start_year = int(match.group(1))
        if (start_year + 1) % 100 != int(match.group(2)):
            raise ValidationError(f"Fiscal year '{label}' must span consecutive years")
        return PeriodBounds(
            label.upper(),
            datetime.date(start_year, 4, 1),
            datetime.date(start_year + 1, 3, 31),
        )

    raise ValidationError(
        f"Unrecognised period '{label}'. Use YYYY, YYYY-MM, Qn_YYYY or FYYYYY-YY."
    )
