"""
planning/months.py

Month key helpers.

Months are stored as the first calendar day of the month and addressed in
memory by ``"YYYY-MM"`` keys. Both forms must round-trip losslessly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from planning.errors import PlanningFilterError

MIN_YEAR = 2000
MAX_YEAR = 2100

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")

# Indonesian short month names used for grid column labels.
_MONTH_LABELS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "Mei",
    "Jun",
    "Jul",
    "Agu",
    "Sep",
    "Okt",
    "Nov",
    "Des",
)


@dataclass(frozen=True)
class MonthColumn:
    """One grid column: month key, display label and first-day date."""

    key: str
    label: str
    month: date


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def month_key(value: date) -> str:
    """Return the ``"YYYY-MM"`` key for any date inside the month."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(key: str) -> date:
    """
    Parse a ``"YYYY-MM"`` key into the first day of that month.

    Raises PlanningFilterError for malformed keys or out-of-range months.
    """

    match = _MONTH_KEY_RE.match(key.strip()) if isinstance(key, str) else None
    if match is None:
        raise PlanningFilterError(f"Invalid month key {key!r}; expected 'YYYY-MM'.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise PlanningFilterError(f"Invalid month key {key!r}; month must be 01-12.")
    return date(year, month, 1)


def month_label(value: date) -> str:
    return f"{_MONTH_LABELS[value.month - 1]} {value.year}"


def validate_month_range(year: int, start_month: int, end_month: int) -> None:
    """
    Validate a contiguous, inclusive month range inside one year.

    Raises
    ------
    PlanningFilterError
        When the year is unsupported, a month is outside 1..12, or
        ``start_month > end_month``.
    """

    if not MIN_YEAR <= year <= MAX_YEAR:
        raise PlanningFilterError(
            f"Year {year} is outside the supported range {MIN_YEAR}-{MAX_YEAR}."
        )
    for name, value in (("start_month", start_month), ("end_month", end_month)):
        if not 1 <= value <= 12:
            raise PlanningFilterError(f"{name}={value} must be between 1 and 12.")
    if start_month > end_month:
        raise PlanningFilterError(
            f"start_month={start_month} must not be after end_month={end_month}."
        )


def month_columns(year: int, start_month: int, end_month: int) -> list[MonthColumn]:
    """Build the ordered grid columns for ``start_month..end_month`` of ``year``."""
    validate_month_range(year, start_month, end_month)
    columns: list[MonthColumn] = []
    for month in range(start_month, end_month + 1):
        first_day = date(year, month, 1)
        columns.append(
            MonthColumn(key=month_key(first_day), label=month_label(first_day), month=first_day)
        )
    return columns
