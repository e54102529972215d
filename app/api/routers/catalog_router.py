"""
app/api/routers/catalog_router.py

Read-only master data endpoints: products and sales regions.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies import get_category
from app.schemas.planning import ProductResponse, RegionResponse
from db.repositories.catalog_repository import CatalogRepository
from db.session import get_db

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/products", response_model=list[ProductResponse])
def list_products(
    category: str | None = Depends(get_category),
    db: Session = Depends(get_db),
) -> list[ProductResponse]:
    """
    List products ordered by category then code.
    """
    try:
        products = CatalogRepository(db).list_products(category=category)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to load products.",
        ) from exc
    return [ProductResponse.model_validate(product) for product in products]


@router.get("/regions", response_model=list[RegionResponse])
def list_regions(
    active_only: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> list[RegionResponse]:
    """
    List sales regions ordered by code.
    """
    try:
        regions = CatalogRepository(db).list_regions(active_only=active_only)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to load regions.",
        ) from exc
    return [RegionResponse.model_validate(region) for region in regions]
