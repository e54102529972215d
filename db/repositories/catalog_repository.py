"""
db/repositories/catalog_repository.py

Read helpers for the master product and region catalog.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.product import MasterProduct
from db.models.region import MasterRegion


class CatalogRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_products(self, *, category: str | None = None) -> list[MasterProduct]:
        stmt: Select[tuple[MasterProduct]] = select(MasterProduct)
        if category:
            stmt = stmt.where(MasterProduct.category == category)
        stmt = stmt.order_by(MasterProduct.category, MasterProduct.code)
        return list(self._session.scalars(stmt).all())

    def list_regions(self, *, active_only: bool = False) -> list[MasterRegion]:
        stmt: Select[tuple[MasterRegion]] = select(MasterRegion)
        if active_only:
            stmt = stmt.where(MasterRegion.is_active.is_(True))
        stmt = stmt.order_by(MasterRegion.code)
        return list(self._session.scalars(stmt).all())

    def get_region(self, region_id: uuid.UUID) -> MasterRegion | None:
        return self._session.get(MasterRegion, region_id)
