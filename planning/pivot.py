"""
planning/pivot.py

Pivot transformer: vertical planning records -> dense grid rows.

The database stores one row per (product, region, month). The grid needs
one row per product with one cell per month, including months that have
never been planned. ``build_pivot`` produces that shape.

Contract
--------
- One PivotRow per product matching ``category`` (all products when
  ``category`` is None), ordered by (category, code).
- Every row holds exactly one MonthCell per requested month. Months with no
  record get a zero-valued cell with ``record_id=None``.
- Records for products outside the candidate set, for another region, or
  for a month outside the range are dropped without error.
- Pure: inputs are never mutated and identical inputs yield equal output.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from planning.months import MonthColumn, month_key
from planning.types import MonthCell, PivotRow, PlanningRecord, Product

logger = logging.getLogger(__name__)


def select_products(products: Sequence[Product], category: str | None) -> list[Product]:
    """Return products matching ``category``, ordered by (category, code)."""
    candidates = [p for p in products if category is None or p.category == category]
    return sorted(candidates, key=lambda p: (p.category, p.code))


def _empty_row(
    product: Product,
    region_id: uuid.UUID,
    region_code: str,
    columns: Sequence[MonthColumn],
) -> PivotRow:
    return PivotRow(
        product_id=product.id,
        code=product.code,
        name=product.name,
        type_spec=product.type_spec,
        category=product.category,
        units_per_pallet=product.units_per_pallet,
        units_per_box=product.units_per_box,
        region_id=region_id,
        region_code=region_code,
        months={column.key: MonthCell.empty(column.month, column.label) for column in columns},
    )


def build_pivot(
    products: Sequence[Product],
    records: Sequence[PlanningRecord],
    *,
    region_id: uuid.UUID,
    columns: Sequence[MonthColumn],
    category: str | None = None,
    region_code: str = "",
) -> list[PivotRow]:
    """
    Transform flat planning records into grid rows.

    Parameters
    ----------
    products:
        Full product catalog. Filtered by ``category`` here.
    records:
        Planning records already fetched for ``region_id`` and the month range.
    region_id:
        The selected region. Records for any other region are ignored.
    columns:
        Contiguous, ordered month columns (see ``planning.months.month_columns``).
    category:
        Optional product category filter.
    region_code:
        Display code of the region, copied onto every row.

    Returns
    -------
    list[PivotRow]
        Freshly built rows; nothing is shared with previous calls.
    """

    labels = {column.key: column.label for column in columns}
    rows: dict[uuid.UUID, PivotRow] = {}
    for product in select_products(products, category):
        rows[product.id] = _empty_row(product, region_id, region_code, columns)

    dropped = 0
    for record in records:
        row = rows.get(record.product_id)
        key = month_key(record.month)
        if row is None or record.region_id != region_id or key not in row.months:
            dropped += 1
            continue
        if record.region_code:
            row.region_code = record.region_code
        row.months[key] = MonthCell.from_record(record, labels[key])

    if dropped:
        logger.debug("Pivot dropped %d record(s) with no matching row or month", dropped)

    return list(rows.values())


def index_rows(rows: Sequence[PivotRow]) -> dict[uuid.UUID, PivotRow]:
    """Index rows by product id for O(1) cell addressing."""
    return {row.product_id: row for row in rows}
