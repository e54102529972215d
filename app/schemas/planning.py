"""
app/schemas/planning.py

Request/response schemas for catalog and planning grid endpoints.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from planning.editor import EditableField
from planning.months import MonthColumn
from planning.session import PlanningSession
from planning.types import MonthCell, PivotRow


class ProductResponse(BaseModel):
    id: uuid.UUID
    code: str
    name: str | None
    type_spec: str
    category: str
    units_per_pallet: int
    units_per_box: int

    model_config = {"from_attributes": True}


class RegionResponse(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    is_active: bool

    model_config = {"from_attributes": True}


class MonthColumnResponse(BaseModel):
    key: str
    label: str
    month: date

    model_config = {"from_attributes": True}


class MonthCellResponse(BaseModel):
    """
    One month of planning values for one product.

    ``record_id`` is null when nothing has been saved for this cell yet.
    """

    record_id: uuid.UUID | None
    month: date
    label: str
    target_qty: int
    estimated_sale_qty: int
    realized_sale_qty: int
    opening_stock: int
    closing_stock: int
    order_qty: int
    turnover_ratio: Decimal
    achievement_pct: Decimal
    modified: bool

    model_config = {"from_attributes": True}


class PivotRowResponse(BaseModel):
    product_id: uuid.UUID
    code: str
    name: str | None
    type_spec: str
    category: str
    units_per_pallet: int
    units_per_box: int
    region_id: uuid.UUID
    region_code: str
    months: dict[str, MonthCellResponse]


class PlanningGridResponse(BaseModel):
    region_id: uuid.UUID
    region_code: str
    category: str | None
    year: int
    start_month: int
    end_month: int
    columns: list[MonthColumnResponse]
    rows: list[PivotRowResponse]


class CellEditRequest(BaseModel):
    product_id: uuid.UUID
    month_key: str = Field(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    field: EditableField
    # Raw input; parse_edit_value is the only place it is interpreted.
    value: Any = None


class GridCommitRequest(BaseModel):
    region_id: uuid.UUID
    category: str | None = None
    year: int
    start_month: int = Field(default=1, ge=1, le=12)
    end_month: int = Field(default=12, ge=1, le=12)
    edits: list[CellEditRequest] = Field(..., min_length=1)

    @field_validator("category")
    @classmethod
    def normalise_category(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip().upper()


class GridCommitResponse(BaseModel):
    written: int = Field(..., ge=0)
    created: int = Field(..., ge=0)
    updated: int = Field(..., ge=0)
    grid: PlanningGridResponse


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _cell_response(cell: MonthCell) -> MonthCellResponse:
    return MonthCellResponse(
        record_id=cell.record_id,
        month=cell.month,
        label=cell.label,
        target_qty=cell.target_qty,
        estimated_sale_qty=cell.estimated_sale_qty,
        realized_sale_qty=cell.realized_sale_qty,
        opening_stock=cell.opening_stock,
        closing_stock=cell.closing_stock,
        order_qty=cell.order_qty,
        turnover_ratio=cell.turnover_ratio,
        achievement_pct=cell.achievement_pct,
        modified=cell.modified,
    )


def _row_response(row: PivotRow) -> PivotRowResponse:
    return PivotRowResponse(
        product_id=row.product_id,
        code=row.code,
        name=row.name,
        type_spec=row.type_spec,
        category=row.category,
        units_per_pallet=row.units_per_pallet,
        units_per_box=row.units_per_box,
        region_id=row.region_id,
        region_code=row.region_code,
        months={key: _cell_response(cell) for key, cell in row.months.items()},
    )


def _column_response(column: MonthColumn) -> MonthColumnResponse:
    return MonthColumnResponse(key=column.key, label=column.label, month=column.month)


def build_grid_response(session: PlanningSession) -> PlanningGridResponse:
    """Serialise the session's current window and rows."""
    planning_filter = session.filter
    return PlanningGridResponse(
        region_id=planning_filter.region_id,
        region_code=session.region_code,
        category=planning_filter.category,
        year=planning_filter.year,
        start_month=planning_filter.start_month,
        end_month=planning_filter.end_month,
        columns=[_column_response(column) for column in session.month_columns],
        rows=[_row_response(row) for row in session.rows],
    )
