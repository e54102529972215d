"""
app/services/planning_service.py

Request-scoped orchestration of the planning grid.

Each HTTP request opens its own PlanningSession over the request's DB
session, so no grid state is shared between requests:

    GET    load catalog + records -> pivot
    COMMIT load -> apply every edit -> one batch upsert -> refreshed pivot

Failure contract
----------------
- Invalid filter or edit  -> PlanningFilterError / InvalidEditError (nothing written)
- Unknown region          -> RegionNotFoundError (nothing written)
- Unknown cell            -> CellNotFoundError (nothing written)
- Store read failure      -> FetchError
- Store write failure     -> CommitError (transaction rolled back)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from app.config import PlanningSettings, get_planning_settings
from app.logging_utils import log_activity
from planning.editor import EditableField
from planning.errors import RegionNotFoundError
from planning.filter import PlanningFilter
from planning.session import PlanningSession
from planning.storage import SQLAlchemyPlanningStore
from planning.types import UpsertSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellEdit:
    product_id: uuid.UUID
    month_key: str
    field: EditableField | str
    value: Any


class PlanningGridService:
    """
    Builds planning sessions against the SQL store and records activity.
    """

    def __init__(self, *, settings: PlanningSettings) -> None:
        self._settings = settings

    def build_filter(
        self,
        *,
        region_id: uuid.UUID | None,
        category: str | None = None,
        year: int | None = None,
        start_month: int | None = None,
        end_month: int | None = None,
    ) -> PlanningFilter:
        """Fill omitted window parts from settings and validate the result."""
        return PlanningFilter(
            region_id=region_id,
            category=category,
            year=year if year is not None else self._settings.default_year,
            start_month=start_month if start_month is not None else self._settings.default_start_month,
            end_month=end_month if end_month is not None else self._settings.default_end_month,
        )

    def open_session(self, *, db: Session, planning_filter: PlanningFilter) -> PlanningSession:
        store = SQLAlchemyPlanningStore(session=db, batch_size=self._settings.upsert_batch_size)
        session = PlanningSession(catalog=store, store=store, planning_filter=planning_filter)
        session.load()
        if planning_filter.region_id is not None and not session.region_code:
            raise RegionNotFoundError(f"Unknown region_id={planning_filter.region_id}.")
        logger.debug(
            "Planning grid opened region=%s rows=%d window=%s..%s",
            session.region_code,
            len(session.rows),
            planning_filter.start_date,
            planning_filter.end_date,
        )
        return session

    def commit_edits(
        self,
        *,
        db: Session,
        planning_filter: PlanningFilter,
        edits: Sequence[CellEdit],
    ) -> tuple[UpsertSummary, PlanningSession]:
        """
        Apply ``edits`` to a freshly loaded grid and persist them as one batch.

        Every edit is validated before anything is written; a single bad
        edit aborts the whole request.
        """

        session = self.open_session(db=db, planning_filter=planning_filter)
        for edit in edits:
            session.apply_edit(edit.product_id, edit.month_key, edit.field, edit.value)

        pending = session.pending_edit_count
        summary = session.commit()

        log_activity(
            module="sales_plans",
            action="update",
            description=(
                f"Saved {summary.written} planning cell(s) for region "
                f"{session.region_code or planning_filter.region_id} "
                f"({planning_filter.start_date:%Y-%m}..{planning_filter.end_date:%Y-%m})"
            ),
            entity_id=planning_filter.region_id,
            entity_name=session.region_code or None,
            edits=len(edits),
            cells=pending,
            written=summary.written,
            created=summary.created,
            updated=summary.updated,
        )
        return summary, session


@lru_cache(maxsize=1)
def get_planning_grid_service() -> PlanningGridService:
    """
    Build and cache the planning service with env-driven settings.
    """
    return PlanningGridService(settings=get_planning_settings())
