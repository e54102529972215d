"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.product import MasterProduct
from db.models.region import MasterRegion
from db.models.sales_plan import SalesPlan

__all__ = [
    "MasterProduct",
    "MasterRegion",
    "SalesPlan",
]
