"""
planning/editor.py

Cell editor, recompute rule and edit tracker.

Editable fields form a closed enumeration. Each member maps to exactly one
setter in ``_FIELD_SETTERS``; the closing-stock recompute fires only for
members of ``RECOMPUTE_TRIGGERS``:

    closing_stock = opening_stock + order_qty - estimated_sale_qty

Input boundary
--------------
``parse_edit_value`` is the only place raw user input is interpreted:

- ``None`` or a blank string  -> 0 (spreadsheet parse-or-zero fallback)
- quantity fields             -> whole number >= 0, otherwise rejected
- turnover ratio              -> any finite decimal, rounded to 2 places
- anything else               -> InvalidEditError
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union

from planning.errors import InvalidEditError
from planning.types import MonthCell, quantize_ratio

EditValue = Union[int, Decimal]

# DECIMAL(5,2) column bound for the turnover ratio.
_MAX_RATIO = Decimal("999.99")


class EditableField(str, Enum):
    OPENING_STOCK = "opening_stock"
    ORDER_QTY = "order_qty"
    ESTIMATED_SALE_QTY = "estimated_sale_qty"
    TARGET_QTY = "target_qty"
    REALIZED_SALE_QTY = "realized_sale_qty"
    TURNOVER_RATIO = "turnover_ratio"


RECOMPUTE_TRIGGERS: frozenset[EditableField] = frozenset(
    {
        EditableField.OPENING_STOCK,
        EditableField.ORDER_QTY,
        EditableField.ESTIMATED_SALE_QTY,
    }
)


# ---------------------------------------------------------------------------
# Field dispatch
# ---------------------------------------------------------------------------


def _set_opening_stock(cell: MonthCell, value: EditValue) -> None:
    cell.opening_stock = int(value)


def _set_order_qty(cell: MonthCell, value: EditValue) -> None:
    cell.order_qty = int(value)


def _set_estimated_sale_qty(cell: MonthCell, value: EditValue) -> None:
    cell.estimated_sale_qty = int(value)


def _set_target_qty(cell: MonthCell, value: EditValue) -> None:
    cell.target_qty = int(value)


def _set_realized_sale_qty(cell: MonthCell, value: EditValue) -> None:
    cell.realized_sale_qty = int(value)


def _set_turnover_ratio(cell: MonthCell, value: EditValue) -> None:
    cell.turnover_ratio = quantize_ratio(value)


_FIELD_SETTERS: dict[EditableField, Callable[[MonthCell, EditValue], None]] = {
    EditableField.OPENING_STOCK: _set_opening_stock,
    EditableField.ORDER_QTY: _set_order_qty,
    EditableField.ESTIMATED_SALE_QTY: _set_estimated_sale_qty,
    EditableField.TARGET_QTY: _set_target_qty,
    EditableField.REALIZED_SALE_QTY: _set_realized_sale_qty,
    EditableField.TURNOVER_RATIO: _set_turnover_ratio,
}

_missing = set(EditableField) - set(_FIELD_SETTERS)
if _missing:
    raise RuntimeError(f"No setter registered for editable field(s): {sorted(_missing)}")


def coerce_field(field: EditableField | str) -> EditableField:
    """Resolve a field name to its EditableField member."""
    if isinstance(field, EditableField):
        return field
    try:
        return EditableField(str(field).strip())
    except ValueError:
        allowed = ", ".join(member.value for member in EditableField)
        raise InvalidEditError(
            f"Field {field!r} is not editable. Allowed fields: {allowed}."
        ) from None


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------


def _to_decimal(field: EditableField, raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidEditError(f"{field.value}: boolean values are not numeric.")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            raise InvalidEditError(f"{field.value}: {raw!r} is not a number.") from None
    else:
        raise InvalidEditError(f"{field.value}: unsupported value type {type(raw).__name__}.")

    if not value.is_finite():
        raise InvalidEditError(f"{field.value}: {raw!r} is not a finite number.")
    return value


def parse_edit_value(field: EditableField | str, raw: Any) -> EditValue:
    """
    Validate and normalise a raw edit value for ``field``.

    Returns an ``int`` for quantity fields and a two-place ``Decimal`` for
    the turnover ratio. Raises InvalidEditError for anything that is not a
    valid value for the field.
    """

    member = coerce_field(field)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Decimal("0.00") if member is EditableField.TURNOVER_RATIO else 0

    value = _to_decimal(member, raw)

    if member is EditableField.TURNOVER_RATIO:
        ratio = quantize_ratio(value)
        if ratio < 0:
            raise InvalidEditError(f"{member.value}: {raw!r} must not be negative.")
        if ratio > _MAX_RATIO:
            raise InvalidEditError(
                f"{member.value}: {raw!r} exceeds the maximum of {_MAX_RATIO}."
            )
        return ratio

    if value != value.to_integral_value():
        raise InvalidEditError(f"{member.value}: {raw!r} must be a whole number.")
    if value < 0:
        raise InvalidEditError(f"{member.value}: {raw!r} must not be negative.")
    return int(value)


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


def apply_edit(cell: MonthCell, field: EditableField | str, value: Any) -> MonthCell:
    """
    Apply one edit to ``cell`` in place and return a snapshot copy.

    The cell is always marked modified, even when the value is unchanged,
    and closing stock is recomputed whenever ``field`` is a recompute
    trigger.
    """

    member = coerce_field(field)
    normalised = parse_edit_value(member, value)
    _FIELD_SETTERS[member](cell, normalised)
    cell.modified = True
    if member in RECOMPUTE_TRIGGERS:
        cell.recompute_closing_stock()
    return replace(cell)


CellKey = tuple[uuid.UUID, str]


class EditTracker:
    """
    In-memory overlay of locally modified cells.

    Entries are keyed by ``(product_id, month_key)`` and hold a snapshot of
    the cell at its last edit. A later edit of the same cell replaces the
    earlier snapshot.
    """

    def __init__(self) -> None:
        self._entries: dict[CellKey, MonthCell] = {}

    def record(self, product_id: uuid.UUID, month_key: str, snapshot: MonthCell) -> None:
        self._entries[(product_id, month_key)] = replace(snapshot)

    def get(self, product_id: uuid.UUID, month_key: str) -> MonthCell | None:
        entry = self._entries.get((product_id, month_key))
        return replace(entry) if entry is not None else None

    def entries(self) -> list[tuple[CellKey, MonthCell]]:
        """Copies of all tracked entries in first-edit order."""
        return [(key, replace(cell)) for key, cell in self._entries.items()]

    def keys(self) -> list[CellKey]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CellKey]:
        return iter(list(self._entries))
