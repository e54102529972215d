"""
db/repositories/sales_plan_repository.py

Persistence layer for SalesPlan rows.

The caller controls commit/rollback; this repository never commits on its own.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from db.models.product import MasterProduct
from db.models.region import MasterRegion
from db.models.sales_plan import NATURAL_KEY_COLUMNS, SalesPlan

_DEFAULT_BATCH_SIZE = 500

# Dialect-specific INSERT constructs that support ON CONFLICT DO UPDATE.
_INSERT_BY_DIALECT: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Columns overwritten when a natural-key conflict turns the insert into an update.
_UPDATABLE_COLUMNS: tuple[str, ...] = (
    "target_jual",
    "estimasi_jual",
    "realisasi_sales",
    "stok_awal",
    "stok_akhir",
    "order_qty",
    "ito",
)

NaturalKey = tuple[uuid.UUID, uuid.UUID, date]


@dataclass(frozen=True)
class SalesPlanUpsertRow:
    """
    One normalised write keyed on ``(product_id, region_id, month)``.

    ``record_id`` is only used as the primary key when the row is inserted;
    on conflict the existing primary key is kept.
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
    turnover_ratio: Any
    record_id: uuid.UUID | None = None

    @property
    def natural_key(self) -> NaturalKey:
        return (self.product_id, self.region_id, self.month)


@dataclass(frozen=True)
class SalesPlanUpsertResult:
    written: int
    created: int
    updated: int


class SalesPlanRepository:
    """
    Repository for reading and upserting SalesPlan rows.

    Upsert semantics: writing a row whose ``(product_id, region_id,
    bulan_tahun)`` already exists overwrites its quantity fields and
    refreshes ``updated_at`` instead of raising a duplicate-key error.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_details(
        self,
        *,
        region_id: uuid.UUID,
        start_month: date,
        end_month: date,
        category: str | None = None,
    ) -> list[tuple[SalesPlan, str]]:
        """
        Return ``(SalesPlan, region_code)`` pairs for one region and month window.

        Both bounds are inclusive. Rows whose product or region no longer
        exists are excluded by the inner joins. Ordered by product
        category, product code, then month.
        """
        stmt: Select[tuple[SalesPlan, str]] = (
            select(SalesPlan, MasterRegion.code)
            .join(MasterProduct, SalesPlan.product_id == MasterProduct.id)
            .join(MasterRegion, SalesPlan.region_id == MasterRegion.id)
            .where(
                SalesPlan.region_id == region_id,
                SalesPlan.month >= start_month,
                SalesPlan.month <= end_month,
            )
            .order_by(MasterProduct.category, MasterProduct.code, SalesPlan.month)
        )
        if category is not None:
            stmt = stmt.where(MasterProduct.category == category)

        return [(plan, region_code) for plan, region_code in self._session.execute(stmt).all()]

    def get_by_natural_key(
        self,
        *,
        product_id: uuid.UUID,
        region_id: uuid.UUID,
        month: date,
    ) -> SalesPlan | None:
        stmt = select(SalesPlan).where(
            SalesPlan.product_id == product_id,
            SalesPlan.region_id == region_id,
            SalesPlan.month == month,
        )
        return self._session.scalars(stmt).first()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def upsert_many(
        self,
        rows: Sequence[SalesPlanUpsertRow],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> SalesPlanUpsertResult:
        """
        Insert or update ``rows`` keyed on the natural key.

        Rows sharing a natural key within the same call are de-duplicated
        before hitting the database; the last occurrence wins.

        Parameters
        ----------
        rows:
            Normalised writes.
        batch_size:
            Maximum rows per INSERT statement. All chunks run inside the
            caller's transaction, so the batch still commits or rolls back
            as a whole.

        Returns
        -------
        SalesPlanUpsertResult
            ``created`` counts keys that did not exist before the call,
            ``updated`` counts keys that did.
        """
        if not rows:
            return SalesPlanUpsertResult(written=0, created=0, updated=0)

        deduped = _deduplicate(rows)
        existing = self._existing_keys(deduped)
        insert = self._insert_construct()
        table = SalesPlan.__table__
        size = max(1, batch_size)

        for start in range(0, len(deduped), size):
            chunk = deduped[start : start + size]
            stmt = insert(table).values([_to_values(row) for row in chunk])
            stmt = stmt.on_conflict_do_update(
                index_elements=list(NATURAL_KEY_COLUMNS),
                set_={
                    **{column: stmt.excluded[column] for column in _UPDATABLE_COLUMNS},
                    "updated_at": func.now(),
                },
            )
            self._session.execute(stmt)

        updated = sum(1 for row in deduped if row.natural_key in existing)
        return SalesPlanUpsertResult(
            written=len(deduped),
            created=len(deduped) - updated,
            updated=updated,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert_construct(self) -> Callable[..., Any]:
        dialect = self._session.get_bind().dialect.name
        try:
            return _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise NotImplementedError(
                f"Upsert is not supported for dialect {dialect!r}; "
                f"supported: {sorted(_INSERT_BY_DIALECT)}."
            ) from None

    def _existing_keys(self, rows: Sequence[SalesPlanUpsertRow]) -> set[NaturalKey]:
        product_ids = {row.product_id for row in rows}
        region_ids = {row.region_id for row in rows}
        months = {row.month for row in rows}
        stmt = select(SalesPlan.product_id, SalesPlan.region_id, SalesPlan.month).where(
            SalesPlan.product_id.in_(list(product_ids)),
            SalesPlan.region_id.in_(list(region_ids)),
            SalesPlan.month.in_(sorted(months)),
        )
        wanted = {row.natural_key for row in rows}
        return {
            (product_id, region_id, month)
            for product_id, region_id, month in self._session.execute(stmt).all()
            if (product_id, region_id, month) in wanted
        }


# ---------------------------------------------------------------------------
# Module-level helpers (no business logic)
# ---------------------------------------------------------------------------


def _to_values(row: SalesPlanUpsertRow) -> dict[str, Any]:
    return {
        "id": row.record_id or uuid.uuid4(),
        "product_id": row.product_id,
        "region_id": row.region_id,
        "bulan_tahun": row.month,
        "target_jual": row.target_qty,
        "estimasi_jual": row.estimated_sale_qty,
        "realisasi_sales": row.realized_sale_qty,
        "stok_awal": row.opening_stock,
        "stok_akhir": row.closing_stock,
        "order_qty": row.order_qty,
        "ito": row.turnover_ratio,
    }


def _deduplicate(rows: Sequence[SalesPlanUpsertRow]) -> list[SalesPlanUpsertRow]:
    """Last-write-wins deduplication keyed on (product_id, region_id, month)."""
    seen: dict[NaturalKey, SalesPlanUpsertRow] = {}
    for row in rows:
        seen[row.natural_key] = row
    return list(seen.values())
