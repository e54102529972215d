"""
app/api/routers package marker.
"""

from app.api.routers.catalog_router import router as catalog_router
from app.api.routers.planning_router import router as planning_router

__all__ = [
    "catalog_router",
    "planning_router",
]
