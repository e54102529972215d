"""
planning/base.py

Abstract store interfaces consumed by the planning session.
Implementations must raise PlanningStoreError on any read or write failure.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from planning.types import PlanningRecord, Product, Region, UpsertSummary, WriteRecord


class CatalogSource(ABC):
    """Read-only access to products and regions."""

    @abstractmethod
    def list_products(self) -> list[Product]:
        raise NotImplementedError("Subclasses must implement list_products()")

    @abstractmethod
    def list_regions(self) -> list[Region]:
        raise NotImplementedError("Subclasses must implement list_regions()")


class PlanningRecordStore(ABC):
    """Source of truth for planning records."""

    @abstractmethod
    def list_planning_records(
        self,
        region_id: uuid.UUID,
        start_date: date,
        end_date: date,
        category: str | None = None,
    ) -> list[PlanningRecord]:
        """Return records for ``region_id`` whose month lies in ``[start_date, end_date]``.

        Args:
            region_id: Region to scope the read to.
            start_date: First month of the window (inclusive).
            end_date: Last month of the window (inclusive).
            category: Optional product category filter applied upstream.
        """
        raise NotImplementedError("Subclasses must implement list_planning_records()")

    @abstractmethod
    def upsert_planning_records(self, records: Sequence[WriteRecord]) -> UpsertSummary:
        """Insert or update ``records`` keyed on (product_id, region_id, month).

        The batch is applied all-or-nothing. A second write to an existing
        key updates it in place.
        """
        raise NotImplementedError("Subclasses must implement upsert_planning_records()")
