"""
tests/test_months.py

Month key helpers and the PlanningFilter window.
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from planning.errors import PlanningFilterError
from planning.filter import PlanningFilter
from planning.months import (
    first_of_month,
    month_columns,
    month_key,
    month_label,
    parse_month_key,
    validate_month_range,
)


# ---------------------------------------------------------------------------
# Month keys
# ---------------------------------------------------------------------------


class TestMonthKeys:
    def test_key_is_zero_padded(self) -> None:
        assert month_key(date(2026, 2, 17)) == "2026-02"

    def test_parse_returns_first_day(self) -> None:
        assert parse_month_key("2026-11") == date(2026, 11, 1)

    @pytest.mark.parametrize("month", range(1, 13))
    def test_key_and_date_round_trip(self, month: int) -> None:
        first_day = date(2026, month, 1)
        assert parse_month_key(month_key(first_day)) == first_day

    @pytest.mark.parametrize("bad", ["2026-13", "2026-00", "2026-1", "26-01", "2026/01", ""])
    def test_malformed_key_rejected(self, bad: str) -> None:
        with pytest.raises(PlanningFilterError):
            parse_month_key(bad)

    def test_first_of_month(self) -> None:
        assert first_of_month(date(2026, 3, 31)) == date(2026, 3, 1)

    def test_indonesian_labels(self) -> None:
        assert month_label(date(2026, 5, 1)) == "Mei 2026"
        assert month_label(date(2026, 8, 1)) == "Agu 2026"
        assert month_label(date(2026, 12, 1)) == "Des 2026"


# ---------------------------------------------------------------------------
# Month range
# ---------------------------------------------------------------------------


class TestMonthRange:
    def test_columns_are_contiguous_and_ordered(self) -> None:
        columns = month_columns(2026, 1, 3)
        assert [c.key for c in columns] == ["2026-01", "2026-02", "2026-03"]
        assert [c.month for c in columns] == [date(2026, m, 1) for m in (1, 2, 3)]

    def test_single_month_range(self) -> None:
        assert len(month_columns(2026, 6, 6)) == 1

    def test_full_year(self) -> None:
        assert len(month_columns(2026, 1, 12)) == 12

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(PlanningFilterError, match="must not be after"):
            validate_month_range(2026, 5, 2)

    @pytest.mark.parametrize("start,end", [(0, 3), (1, 13), (-1, 2)])
    def test_month_outside_calendar_rejected(self, start: int, end: int) -> None:
        with pytest.raises(PlanningFilterError):
            validate_month_range(2026, start, end)

    @pytest.mark.parametrize("year", [1999, 2101])
    def test_unsupported_year_rejected(self, year: int) -> None:
        with pytest.raises(PlanningFilterError):
            validate_month_range(year, 1, 12)


# ---------------------------------------------------------------------------
# PlanningFilter
# ---------------------------------------------------------------------------


class TestPlanningFilter:
    def test_defaults_cover_full_year(self) -> None:
        planning_filter = PlanningFilter(year=2026)
        assert planning_filter.start_date == date(2026, 1, 1)
        assert planning_filter.end_date == date(2026, 12, 1)
        assert planning_filter.region_id is None
        assert planning_filter.category is None

    def test_invalid_range_raises_on_construction(self) -> None:
        with pytest.raises(PlanningFilterError):
            PlanningFilter(year=2026, start_month=4, end_month=3)

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(PlanningFilterError, match="Unknown category"):
            PlanningFilter(year=2026, category="TRUCK")

    def test_updated_validates(self) -> None:
        planning_filter = PlanningFilter(year=2026)
        with pytest.raises(PlanningFilterError):
            planning_filter.updated(end_month=0)

    def test_updated_rejects_unknown_fields(self) -> None:
        with pytest.raises(PlanningFilterError, match="Unknown filter field"):
            PlanningFilter(year=2026).updated(warehouse="A")

    def test_category_change_does_not_require_refetch(self) -> None:
        base = PlanningFilter(year=2026, region_id=uuid.uuid4())
        assert not base.requires_refetch(base.updated(category="MCB"))

    @pytest.mark.parametrize(
        "changes",
        [{"region_id": uuid.uuid4()}, {"year": 2027}, {"start_month": 2}, {"end_month": 6}],
    )
    def test_window_changes_require_refetch(self, changes: dict) -> None:
        base = PlanningFilter(year=2026, region_id=uuid.uuid4())
        assert base.requires_refetch(base.updated(**changes))

    def test_is_frozen(self) -> None:
        planning_filter = PlanningFilter(year=2026)
        with pytest.raises((AttributeError, TypeError)):
            planning_filter.year = 2027  # type: ignore[misc]
