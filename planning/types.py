"""
planning/types.py

Typed records shared by the planning grid core.

Reference data (Product, Region) and persisted facts (PlanningRecord) are
frozen; grid cells (MonthCell, PivotRow) are mutable because edits are
applied to them in place.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal


class ProductCategory:
    AMB = "AMB"  # car batteries
    MCB = "MCB"  # motorcycle batteries

    ALL: frozenset[str] = frozenset({AMB, MCB})


RATIO_QUANTUM = Decimal("0.01")


def quantize_ratio(value: Decimal | int | float | str) -> Decimal:
    """Normalise a turnover ratio to two decimal places."""
    return Decimal(str(value)).quantize(RATIO_QUANTUM, rounding=ROUND_HALF_UP)


def compute_closing_stock(opening_stock: int, order_qty: int, estimated_sale_qty: int) -> int:
    """
    Closing stock formula.

    The result may be negative; a negative value signals a shortfall and is
    never rejected.
    """
    return opening_stock + order_qty - estimated_sale_qty


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Product:
    id: uuid.UUID
    code: str
    name: str | None
    type_spec: str
    category: str
    units_per_pallet: int = 0
    units_per_box: int = 0


@dataclass(frozen=True)
class Region:
    id: uuid.UUID
    code: str
    name: str
    is_active: bool = True


# ---------------------------------------------------------------------------
# Persisted fact
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlanningRecord:
    """
    One persisted planning fact, identified by ``(product_id, region_id, month)``.

    ``month`` is always the first day of a calendar month.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    region_id: uuid.UUID
    month: date
    target_qty: int = 0
    estimated_sale_qty: int = 0
    realized_sale_qty: int = 0
    opening_stock: int = 0
    closing_stock: int = 0
    order_qty: int = 0
    turnover_ratio: Decimal = Decimal("0.00")
    region_code: str | None = None

    @property
    def natural_key(self) -> tuple[uuid.UUID, uuid.UUID, date]:
        return (self.product_id, self.region_id, self.month)


@dataclass(frozen=True)
class WriteRecord:
    """
    Normalised record submitted to the batch upsert.

    ``record_id`` is set when the cell originated from an existing record
    (update intent) and ``None`` for a cell that has never been persisted
    (create intent). The store keys on the natural key either way.
    """

    product_id: uuid.UUID
    region_id: uuid.UUID
    month: date
    target_qty: int
    estimated_sale_qty: int
    realized_sale_qty: int
    opening_stock: int
    closing_stock: int
    order_qty: int
    turnover_ratio: Decimal
    record_id: uuid.UUID | None = None

    @property
    def natural_key(self) -> tuple[uuid.UUID, uuid.UUID, date]:
        return (self.product_id, self.region_id, self.month)


@dataclass(frozen=True)
class UpsertSummary:
    """Counts reported by a store after a successful batch upsert."""

    written: int
    created: int = 0
    updated: int = 0


# ---------------------------------------------------------------------------
# Grid cells
# ---------------------------------------------------------------------------


@dataclass
class MonthCell:
    """
    One month's planning values inside a PivotRow.

    ``record_id`` is ``None`` when no PlanningRecord exists yet for the key.
    """

    month: date
    label: str
    record_id: uuid.UUID | None = None
    target_qty: int = 0
    estimated_sale_qty: int = 0
    realized_sale_qty: int = 0
    opening_stock: int = 0
    closing_stock: int = 0
    order_qty: int = 0
    turnover_ratio: Decimal = Decimal("0.00")
    modified: bool = False

    @property
    def achievement_pct(self) -> Decimal:
        """Estimated sale as a percentage of target; zero when there is no target."""
        if self.target_qty <= 0:
            return Decimal("0.00")
        return quantize_ratio(Decimal(self.estimated_sale_qty) * 100 / Decimal(self.target_qty))

    def recompute_closing_stock(self) -> None:
        self.closing_stock = compute_closing_stock(
            self.opening_stock, self.order_qty, self.estimated_sale_qty
        )

    @classmethod
    def empty(cls, month: date, label: str) -> MonthCell:
        return cls(month=month, label=label)

    @classmethod
    def from_record(cls, record: PlanningRecord, label: str) -> MonthCell:
        return cls(
            month=record.month,
            label=label,
            record_id=record.id,
            target_qty=record.target_qty,
            estimated_sale_qty=record.estimated_sale_qty,
            realized_sale_qty=record.realized_sale_qty,
            opening_stock=record.opening_stock,
            closing_stock=record.closing_stock,
            order_qty=record.order_qty,
            turnover_ratio=record.turnover_ratio,
            modified=False,
        )


@dataclass
class PivotRow:
    """One product's planning values across the requested month range."""

    product_id: uuid.UUID
    code: str
    name: str | None
    type_spec: str
    category: str
    units_per_pallet: int
    units_per_box: int
    region_id: uuid.UUID
    region_code: str = ""
    months: dict[str, MonthCell] = field(default_factory=dict)
