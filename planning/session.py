"""
planning/session.py

PlanningSession: one interactive editing window over one region and month
range.

Responsibilities
----------------
    fetch      catalog + planning records from the injected stores
    transform  records -> PivotRows (planning.pivot.build_pivot)
    edit       apply_edit -> recompute -> EditTracker
    commit     EditTracker -> one batch upsert -> clear -> re-fetch
    discard    EditTracker cleared, rows rebuilt from last-fetched records

There is no global state: every session owns its rows, tracker and
records, so several sessions may coexist. All state is guarded by a single
re-entrant lock. Commits are serialized; a second commit requested while
one is in flight fails fast with SessionBusyError.

Failure contract
----------------
- Fetch failure   -> FetchError; previously displayed rows are kept.
- Commit failure  -> CommitError; pending edits are kept for a retry.
- Bad edit input  -> InvalidEditError / CellNotFoundError; nothing changes.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from planning.base import CatalogSource, PlanningRecordStore
from planning.editor import EditableField, EditTracker, apply_edit
from planning.errors import (
    CellNotFoundError,
    CommitError,
    FetchError,
    PlanningFilterError,
    PlanningStoreError,
    SessionBusyError,
    UnsavedChangesError,
)
from planning.filter import PlanningFilter
from planning.months import MonthColumn
from planning.pivot import build_pivot, index_rows
from planning.types import (
    MonthCell,
    PivotRow,
    PlanningRecord,
    Product,
    ProductCategory,
    Region,
    UpsertSummary,
    WriteRecord,
)

logger = logging.getLogger(__name__)


class SessionEventKind:
    PIVOT_REFRESHED = "pivot_refreshed"
    CELL_UPDATED = "cell_updated"
    CHANGES_COMMITTED = "changes_committed"
    CHANGES_DISCARDED = "changes_discarded"
    ERROR = "error"


@dataclass(frozen=True)
class SessionEvent:
    """Notification delivered to session listeners."""

    kind: str
    product_id: uuid.UUID | None = None
    month_key: str | None = None
    detail: str | None = None


SessionListener = Callable[[SessionEvent], None]


class PlanningSession:
    """
    Explicit, constructible owner of one planning grid.

    Usage::

        session = PlanningSession(catalog=store, store=store,
                                  planning_filter=PlanningFilter(year=2026, region_id=r1))
        session.load()
        session.apply_edit(p1, "2026-02", "opening_stock", 40)
        session.commit()
    """

    def __init__(
        self,
        *,
        catalog: CatalogSource,
        store: PlanningRecordStore,
        planning_filter: PlanningFilter | None = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._filter = planning_filter or PlanningFilter(year=date.today().year)
        self._columns: list[MonthColumn] = self._filter.columns()

        self._products: list[Product] = []
        self._regions: list[Region] = []
        self._records: list[PlanningRecord] = []
        self._rows: list[PivotRow] = []
        self._row_index: dict[uuid.UUID, PivotRow] = {}
        self._tracker = EditTracker()

        self._lock = threading.RLock()
        self._commit_gate = threading.Lock()
        self._listeners: list[SessionListener] = []
        self.last_error: str | None = None

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Session listener failed for event kind=%s", event.kind)

    def _fail(self, operation: str, exc: Exception) -> None:
        self.last_error = f"{operation}: {exc}"
        logger.warning("Planning %s failed: %s", operation, exc)
        self._emit(SessionEvent(kind=SessionEventKind.ERROR, detail=self.last_error))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def filter(self) -> PlanningFilter:
        return self._filter

    @property
    def month_columns(self) -> list[MonthColumn]:
        return list(self._columns)

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def regions(self) -> list[Region]:
        return list(self._regions)

    @property
    def active_regions(self) -> list[Region]:
        return [region for region in self._regions if region.is_active]

    @property
    def products_by_category(self) -> dict[str, list[Product]]:
        grouped: dict[str, list[Product]] = {category: [] for category in sorted(ProductCategory.ALL)}
        for product in self._products:
            grouped.setdefault(product.category, []).append(product)
        return grouped

    @property
    def records(self) -> list[PlanningRecord]:
        return list(self._records)

    @property
    def rows(self) -> list[PivotRow]:
        """Current grid rows. Mutate cells only through ``apply_edit``."""
        return list(self._rows)

    @property
    def region_code(self) -> str:
        region_id = self._filter.region_id
        for region in self._regions:
            if region.id == region_id:
                return region.code
        return ""

    @property
    def has_unsaved_changes(self) -> bool:
        return not self._tracker.is_empty

    @property
    def pending_edit_count(self) -> int:
        return len(self._tracker)

    @property
    def is_committing(self) -> bool:
        return self._commit_gate.locked()

    def pending_edits(self) -> list[tuple[tuple[uuid.UUID, str], MonthCell]]:
        with self._lock:
            return self._tracker.entries()

    def cell(self, product_id: uuid.UUID, month_key: str) -> MonthCell:
        """Return a copy of one grid cell."""
        with self._lock:
            return replace(self._locate(product_id, month_key))

    # ------------------------------------------------------------------
    # Fetch + transform
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Fetch the catalog, then the planning records for the active window."""
        self.load_catalog()
        self.refresh()

    def load_catalog(self) -> None:
        try:
            products = list(self._catalog.list_products())
            regions = sorted(self._catalog.list_regions(), key=lambda r: r.code)
        except PlanningStoreError as exc:
            self._fail("catalog fetch", exc)
            raise FetchError(f"Failed to fetch master data: {exc}") from exc

        with self._lock:
            self._products = products
            self._regions = regions
            logger.info("Catalog loaded products=%d regions=%d", len(products), len(regions))
            if self._filter.region_id is not None:
                self._rebuild(overlay_pending=True)

    def refresh(self) -> None:
        """
        Re-fetch planning records for the active window and rebuild rows.

        Pending edits are re-applied on top of the fresh rows. With no region
        selected the grid is cleared.
        """

        with self._lock:
            self._records = self._fetch(self._filter)
            self._rebuild(overlay_pending=True)

    def _fetch(self, planning_filter: PlanningFilter) -> list[PlanningRecord]:
        if planning_filter.region_id is None:
            return []
        try:
            records = list(
                self._store.list_planning_records(
                    planning_filter.region_id,
                    planning_filter.start_date,
                    planning_filter.end_date,
                )
            )
        except PlanningStoreError as exc:
            self._fail("planning fetch", exc)
            raise FetchError(f"Failed to fetch sales plans: {exc}") from exc

        self.last_error = None
        logger.debug(
            "Fetched %d planning record(s) region_id=%s window=%s..%s",
            len(records),
            planning_filter.region_id,
            planning_filter.start_date,
            planning_filter.end_date,
        )
        return records

    def set_filter(self, **changes: Any) -> PlanningFilter:
        """
        Change the active window.

        Region, year or month-range changes re-fetch records and are refused
        while edits are pending. A category-only change re-pivots the
        already fetched records.
        """

        with self._lock:
            new_filter = self._filter.updated(**changes)
            if new_filter == self._filter:
                return new_filter

            refetch = self._filter.requires_refetch(new_filter)
            if refetch and not self._tracker.is_empty:
                raise UnsavedChangesError(
                    f"{len(self._tracker)} unsaved edit(s) would be lost; "
                    "commit or discard them before changing region or month range."
                )

            # Fetch before switching so a failed fetch leaves the old window intact.
            if refetch:
                self._records = self._fetch(new_filter)
            self._filter = new_filter
            self._columns = new_filter.columns()
            self._rebuild(overlay_pending=True)
            return new_filter

    def _rebuild(self, *, overlay_pending: bool) -> None:
        region_id = self._filter.region_id
        if region_id is None:
            self._set_rows([])
            return

        rows = build_pivot(
            self._products,
            self._records,
            region_id=region_id,
            columns=self._columns,
            category=self._filter.category,
            region_code=self.region_code,
        )
        if overlay_pending and not self._tracker.is_empty:
            index = index_rows(rows)
            for (product_id, key), snapshot in self._tracker.entries():
                row = index.get(product_id)
                if row is not None and key in row.months:
                    row.months[key] = snapshot
        self._set_rows(rows)

    def _set_rows(self, rows: list[PivotRow]) -> None:
        self._rows = rows
        self._row_index = index_rows(rows)
        self._emit(SessionEvent(kind=SessionEventKind.PIVOT_REFRESHED, detail=f"rows={len(rows)}"))

    # ------------------------------------------------------------------
    # Edit
    # ------------------------------------------------------------------

    def _locate(self, product_id: uuid.UUID, month_key: str) -> MonthCell:
        row = self._row_index.get(product_id)
        cell = row.months.get(month_key) if row is not None else None
        if cell is None:
            raise CellNotFoundError(
                f"No grid cell for product_id={product_id} month={month_key!r}."
            )
        return cell

    def apply_edit(
        self,
        product_id: uuid.UUID,
        month_key: str,
        field: EditableField | str,
        value: Any,
    ) -> MonthCell:
        """
        Edit one cell, recompute closing stock when required, and track it.

        Returns a snapshot of the edited cell.
        """

        with self._lock:
            cell = self._locate(product_id, month_key)
            snapshot = apply_edit(cell, field, value)
            self._tracker.record(product_id, month_key, snapshot)

        self._emit(
            SessionEvent(
                kind=SessionEventKind.CELL_UPDATED,
                product_id=product_id,
                month_key=month_key,
                detail=str(field.value if isinstance(field, EditableField) else field),
            )
        )
        return snapshot

    # ------------------------------------------------------------------
    # Reconcile
    # ------------------------------------------------------------------

    def build_write_records(self) -> list[WriteRecord]:
        """Convert the tracker contents into upsert payloads for the active region."""
        with self._lock:
            region_id = self._filter.region_id
            if region_id is None and not self._tracker.is_empty:
                raise PlanningFilterError("Cannot build write records without a selected region.")
            return [
                _to_write_record(product_id, region_id, cell)
                for (product_id, _), cell in self._tracker.entries()
            ]

    def commit(self) -> UpsertSummary:
        """
        Persist all pending edits as one batch upsert.

        On success the tracker is cleared and records are re-fetched so the
        grid reflects stored state. On failure nothing is cleared.
        """

        if not self._commit_gate.acquire(blocking=False):
            raise SessionBusyError("A commit is already in progress for this session.")
        try:
            with self._lock:
                if self._tracker.is_empty:
                    return UpsertSummary(written=0)

                payload = self.build_write_records()
                try:
                    summary = self._store.upsert_planning_records(payload)
                except PlanningStoreError as exc:
                    self._fail("commit", exc)
                    raise CommitError(f"Failed to save changes: {exc}") from exc

                self._tracker.clear()
                self.last_error = None
                logger.info(
                    "Committed %d planning record(s) region_id=%s created=%d updated=%d",
                    summary.written,
                    self._filter.region_id,
                    summary.created,
                    summary.updated,
                )
                try:
                    self.refresh()
                finally:
                    self._emit(
                        SessionEvent(
                            kind=SessionEventKind.CHANGES_COMMITTED,
                            detail=f"written={summary.written}",
                        )
                    )
                return summary
        finally:
            self._commit_gate.release()

    def discard(self) -> int:
        """
        Drop all pending edits and rebuild rows from the last-fetched records.

        No re-fetch is performed. Returns the number of discarded edits.
        """

        with self._lock:
            discarded = len(self._tracker)
            self._tracker.clear()
            self._rebuild(overlay_pending=False)

        logger.info("Discarded %d pending edit(s)", discarded)
        self._emit(
            SessionEvent(kind=SessionEventKind.CHANGES_DISCARDED, detail=f"discarded={discarded}")
        )
        return discarded


def _to_write_record(product_id: uuid.UUID, region_id: Any, cell: MonthCell) -> WriteRecord:
    return WriteRecord(
        product_id=product_id,
        region_id=region_id,
        month=cell.month,
        target_qty=cell.target_qty,
        estimated_sale_qty=cell.estimated_sale_qty,
        realized_sale_qty=cell.realized_sale_qty,
        opening_stock=cell.opening_stock,
        closing_stock=cell.closing_stock,
        order_qty=cell.order_qty,
        turnover_ratio=cell.turnover_ratio,
        record_id=cell.record_id,
    )
