"""
planning/storage.py

SQLAlchemy-backed implementation of the planning store contracts.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.product import MasterProduct
from db.models.region import MasterRegion
from db.models.sales_plan import SalesPlan
from db.repositories.catalog_repository import CatalogRepository
from db.repositories.sales_plan_repository import SalesPlanRepository, SalesPlanUpsertRow
from planning.base import CatalogSource, PlanningRecordStore
from planning.errors import PlanningStoreError
from planning.types import (
    PlanningRecord,
    Product,
    Region,
    UpsertSummary,
    WriteRecord,
    quantize_ratio,
)

logger = logging.getLogger(__name__)


class SQLAlchemyPlanningStore(CatalogSource, PlanningRecordStore):
    """
    Serve catalog reads and planning record reads/writes from one DB session.

    Every upsert batch runs in a single transaction: it is committed when all
    rows are written and rolled back otherwise.
    """

    def __init__(self, *, session: Session, batch_size: int = 500) -> None:
        self._session = session
        self._batch_size = max(1, batch_size)
        self._catalog = CatalogRepository(session)
        self._plans = SalesPlanRepository(session)

    def list_products(self) -> list[Product]:
        try:
            return [_to_product(row) for row in self._catalog.list_products()]
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PlanningStoreError(f"Product fetch failed: {exc}") from exc

    def list_regions(self) -> list[Region]:
        try:
            return [_to_region(row) for row in self._catalog.list_regions()]
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PlanningStoreError(f"Region fetch failed: {exc}") from exc

    def list_planning_records(
        self,
        region_id: uuid.UUID,
        start_date: date,
        end_date: date,
        category: str | None = None,
    ) -> list[PlanningRecord]:
        try:
            rows = self._plans.list_details(
                region_id=region_id,
                start_month=start_date,
                end_month=end_date,
                category=category,
            )
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PlanningStoreError(f"Sales plan fetch failed: {exc}") from exc
        return [_to_record(plan, region_code) for plan, region_code in rows]

    def upsert_planning_records(self, records: Sequence[WriteRecord]) -> UpsertSummary:
        if not records:
            return UpsertSummary(written=0)

        rows = [_to_upsert_row(record) for record in records]
        try:
            result = self._plans.upsert_many(rows, batch_size=self._batch_size)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.warning("Sales plan upsert rolled back rows=%d: %s", len(rows), exc)
            raise PlanningStoreError(f"Sales plan upsert failed: {exc}") from exc

        # Refreshed reads must see the upserted values, not identity-map copies.
        self._session.expire_all()
        return UpsertSummary(written=result.written, created=result.created, updated=result.updated)


# ---------------------------------------------------------------------------
# ORM -> core mappers
# ---------------------------------------------------------------------------


def _to_product(row: MasterProduct) -> Product:
    return Product(
        id=row.id,
        code=row.code,
        name=row.name,
        type_spec=row.type_spec,
        category=row.category,
        units_per_pallet=row.units_per_pallet or 0,
        units_per_box=row.units_per_box or 0,
    )


def _to_region(row: MasterRegion) -> Region:
    return Region(id=row.id, code=row.code, name=row.name, is_active=bool(row.is_active))


def _to_record(plan: SalesPlan, region_code: str | None) -> PlanningRecord:
    return PlanningRecord(
        id=plan.id,
        product_id=plan.product_id,
        region_id=plan.region_id,
        month=plan.month,
        target_qty=plan.target_qty or 0,
        estimated_sale_qty=plan.estimated_sale_qty or 0,
        realized_sale_qty=plan.realized_sale_qty or 0,
        opening_stock=plan.opening_stock or 0,
        closing_stock=plan.closing_stock or 0,
        order_qty=plan.order_qty or 0,
        turnover_ratio=quantize_ratio(plan.turnover_ratio or Decimal("0")),
        region_code=region_code,
    )


def _to_upsert_row(record: WriteRecord) -> SalesPlanUpsertRow:
    return SalesPlanUpsertRow(
        product_id=record.product_id,
        region_id=record.region_id,
        month=record.month,
        target_qty=record.target_qty,
        estimated_sale_qty=record.estimated_sale_qty,
        realized_sale_qty=record.realized_sale_qty,
        opening_stock=record.opening_stock,
        closing_stock=record.closing_stock,
        order_qty=record.order_qty,
        turnover_ratio=record.turnover_ratio,
        record_id=record.record_id,
    )
