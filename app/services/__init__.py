"""
app/services package marker.
"""

from app.services.planning_service import (
    CellEdit,
    PlanningGridService,
    get_planning_grid_service,
)

__all__ = [
    "CellEdit",
    "PlanningGridService",
    "get_planning_grid_service",
]
