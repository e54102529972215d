"""
planning/filter.py

Active grid window: region, category and month range.

Changing the region or the month range invalidates fetched records.
Changing only the category narrows which products are pivoted and never
needs a re-fetch.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from planning.errors import PlanningFilterError
from planning.months import MonthColumn, month_columns, validate_month_range
from planning.types import ProductCategory

_FETCH_FIELDS = ("region_id", "year", "start_month", "end_month")
_FILTER_FIELDS = frozenset(_FETCH_FIELDS + ("category",))


@dataclass(frozen=True)
class PlanningFilter:
    """
    The (region, category, year, start-month, end-month) tuple driving the grid.

    Construction validates the month range; an invalid range raises
    PlanningFilterError.
    """

    year: int
    region_id: uuid.UUID | None = None
    category: str | None = None
    start_month: int = 1
    end_month: int = 12

    def __post_init__(self) -> None:
        validate_month_range(self.year, self.start_month, self.end_month)
        if self.category is not None and self.category not in ProductCategory.ALL:
            raise PlanningFilterError(
                f"Unknown category {self.category!r}. "
                f"Allowed values: {sorted(ProductCategory.ALL)}."
            )

    @property
    def start_date(self) -> date:
        return date(self.year, self.start_month, 1)

    @property
    def end_date(self) -> date:
        return date(self.year, self.end_month, 1)

    def columns(self) -> list[MonthColumn]:
        return month_columns(self.year, self.start_month, self.end_month)

    def updated(self, **changes: Any) -> PlanningFilter:
        """Return a validated copy with ``changes`` applied."""
        unknown = set(changes) - _FILTER_FIELDS
        if unknown:
            raise PlanningFilterError(f"Unknown filter field(s): {sorted(unknown)}")
        return replace(self, **changes)

    def requires_refetch(self, other: PlanningFilter) -> bool:
        """True when switching from ``self`` to ``other`` invalidates fetched records."""
        return any(getattr(self, name) != getattr(other, name) for name in _FETCH_FIELDS)
