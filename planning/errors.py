"""
planning/errors.py

Exception hierarchy for the planning grid core.
"""

from __future__ import annotations


class PlanningError(Exception):
    """Base exception for planning grid failures."""


class PlanningFilterError(PlanningError, ValueError):
    """Raised when a region/category/month-range filter is invalid."""


class InvalidEditError(PlanningError, ValueError):
    """Raised when a cell edit value is rejected at the input boundary."""


class CellNotFoundError(PlanningError, KeyError):
    """Raised when an edit targets a (product, month) cell that is not in the grid."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable.
        return str(self.args[0]) if self.args else ""


class UnsavedChangesError(PlanningError):
    """Raised when an operation would orphan pending edits."""


class SessionBusyError(PlanningError):
    """Raised when a commit is requested while another commit is in flight."""


class PlanningStoreError(PlanningError):
    """Raised by store implementations when a read or write fails."""


class FetchError(PlanningError):
    """
    Raised when catalog or planning records cannot be fetched.

    The session keeps whatever rows it displayed before the failed fetch.
    """


class CommitError(PlanningError):
    """
    Raised when the batch upsert is rejected by the store.

    Pending edits are preserved; the identical commit may be retried.
    """


class RegionNotFoundError(PlanningError, LookupError):
    """Raised when the selected region is not in the region catalog."""
