"""
app/api/routers/planning_router.py

Sales planning grid endpoints.

    GET  /planning/grid          pivoted grid for one region and month window
    POST /planning/grid/commit   apply cell edits and save them as one batch

Error mapping
-------------
    PlanningFilterError / InvalidEditError  -> 422
    RegionNotFoundError / CellNotFoundError -> 404
    FetchError / CommitError                -> 503
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_planning_filter
from app.schemas.planning import (
    GridCommitRequest,
    GridCommitResponse,
    PlanningGridResponse,
    build_grid_response,
)
from app.services.planning_service import (
    CellEdit,
    PlanningGridService,
    get_planning_grid_service,
)
from db.session import get_db
from planning.errors import (
    CellNotFoundError,
    CommitError,
    FetchError,
    InvalidEditError,
    PlanningError,
    PlanningFilterError,
    RegionNotFoundError,
)
from planning.filter import PlanningFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/planning", tags=["planning"])


def _to_http_error(exc: PlanningError) -> HTTPException:
    if isinstance(exc, (PlanningFilterError, InvalidEditError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, (RegionNotFoundError, CellNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, FetchError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to load planning data.",
        )
    if isinstance(exc, CommitError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to save planning changes.",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/grid", response_model=PlanningGridResponse)
def get_grid(
    planning_filter: PlanningFilter = Depends(get_planning_filter),
    db: Session = Depends(get_db),
    service: PlanningGridService = Depends(get_planning_grid_service),
) -> PlanningGridResponse:
    """
    Return month columns and one row per product for the requested window.

    Products without saved plans still get a row with zeroed cells.
    """
    try:
        session = service.open_session(db=db, planning_filter=planning_filter)
    except PlanningError as exc:
        raise _to_http_error(exc) from exc
    return build_grid_response(session)


@router.post(
    "/grid/commit",
    response_model=GridCommitResponse,
    status_code=status.HTTP_200_OK,
)
def commit_grid(
    body: GridCommitRequest,
    db: Session = Depends(get_db),
    service: PlanningGridService = Depends(get_planning_grid_service),
) -> GridCommitResponse:
    """
    Apply every edit to the grid, then upsert the touched cells in one batch.

    A single invalid edit rejects the whole request and nothing is written.
    """
    try:
        planning_filter = service.build_filter(
            region_id=body.region_id,
            category=body.category,
            year=body.year,
            start_month=body.start_month,
            end_month=body.end_month,
        )
        edits = [
            CellEdit(
                product_id=edit.product_id,
                month_key=edit.month_key,
                field=edit.field,
                value=edit.value,
            )
            for edit in body.edits
        ]
        summary, session = service.commit_edits(
            db=db,
            planning_filter=planning_filter,
            edits=edits,
        )
    except PlanningError as exc:
        logger.info("Planning commit rejected region_id=%s: %s", body.region_id, exc)
        raise _to_http_error(exc) from exc

    return GridCommitResponse(
        written=summary.written,
        created=summary.created,
        updated=summary.updated,
        grid=build_grid_response(session),
    )
