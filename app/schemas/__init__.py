"""
app/schemas package marker.
"""

from app.schemas.planning import (
    CellEditRequest,
    GridCommitRequest,
    GridCommitResponse,
    MonthCellResponse,
    PivotRowResponse,
    PlanningGridResponse,
    ProductResponse,
    RegionResponse,
)

__all__ = [
    "CellEditRequest",
    "GridCommitRequest",
    "GridCommitResponse",
    "MonthCellResponse",
    "PivotRowResponse",
    "PlanningGridResponse",
    "ProductResponse",
    "RegionResponse",
]
