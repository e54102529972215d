"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, Query, status

from app.services.planning_service import PlanningGridService, get_planning_grid_service
from planning.errors import PlanningFilterError
from planning.filter import PlanningFilter
from planning.types import ProductCategory


def get_category(category: str | None = Query(default=None)) -> str | None:
    """
    Normalise an optional category query parameter.
    """

    if category is None or not category.strip():
        return None
    normalized = category.strip().upper()
    if normalized not in ProductCategory.ALL:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown category {category!r}. Allowed values: {sorted(ProductCategory.ALL)}.",
        )
    return normalized


def get_planning_filter(
    region_id: uuid.UUID = Query(...),
    category: str | None = Depends(get_category),
    year: int | None = Query(default=None),
    start_month: int | None = Query(default=None),
    end_month: int | None = Query(default=None),
    service: PlanningGridService = Depends(get_planning_grid_service),
) -> PlanningFilter:
    """
    Build the grid window from query parameters, defaulting omitted parts.
    """

    try:
        return service.build_filter(
            region_id=region_id,
            category=category,
            year=year,
            start_month=start_month,
            end_month=end_month,
        )
    except PlanningFilterError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
