"""
Repository layer exports.
"""

from db.repositories.catalog_repository import CatalogRepository
from db.repositories.sales_plan_repository import (
    SalesPlanRepository,
    SalesPlanUpsertResult,
    SalesPlanUpsertRow,
)

__all__ = [
    "CatalogRepository",
    "SalesPlanRepository",
    "SalesPlanUpsertResult",
    "SalesPlanUpsertRow",
]
