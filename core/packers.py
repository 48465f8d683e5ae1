"""
Packers: assign (row, column) anchors to a layout's widgets on the
two-column grid. Every packer returns a new HomeLayout and leaves its
input untouched.
"""

import logging
from enum import Enum
from typing import List

from core.models import GRID_COLUMNS, HomeLayout, HomeWidget
from core.sizing import resolve_size

logger = logging.getLogger(__name__)


class PackerKind(str, Enum):
    SEQUENTIAL = "sequential"
    FLEXIBLE = "flexible"
    SMART = "smart"


def _place(widget: HomeWidget, row: int, column: int) -> HomeWidget:
    return widget.model_copy(update={"row": row, "column": column})


# ── Sequential ───────────────────────────────────────

def arrange_sequential(layout: HomeLayout) -> HomeLayout:
    """
    Single pass in list order with a (row, col) cursor.

    A spanning widget flushes a half-filled row and advances the cursor by
    its row span. Single-column widgets always advance by one row per pair,
    whatever their own row span, so medium/tall widgets mixed with small
    ones can overlap or leave gaps. Existing layouts rely on this.
    """
    arranged: List[HomeWidget] = []
    row, col = 0, 0

    for w in layout.widgets:
        w = w.with_normalized_column()
        if w.column_span > 1:
            if col != 0:
                row += 1
                col = 0
            arranged.append(_place(w, row, 0))
            row += w.row_span
            col = 0
        else:
            arranged.append(_place(w, row, col))
            col += 1
            if col >= GRID_COLUMNS:
                col = 0
                row += 1

    logger.debug(f"[{layout.home_name}] sequential: {len(arranged)} widgets, {row + (1 if col else 0)} rows")
    return layout.with_widgets(arranged)


# ── Flexible ─────────────────────────────────────────

def arrange_flexible(layout: HomeLayout) -> HomeLayout:
    """Resolve ``auto`` sizes, then place like the sequential packer."""
    arranged: List[HomeWidget] = []
    row, col = 0, 0

    for w in layout.widgets:
        w = resolve_size(w).with_normalized_column()
        if w.column_span > 1:
            # Full-row item: flush, take both columns, skip its rows.
            if col != 0:
                row += 1
                col = 0
            arranged.append(_place(w, row, 0))
            row += w.row_span
            col = 0
        else:
            arranged.append(_place(w, row, col))
            col += 1
            if col >= GRID_COLUMNS:
                col = 0
                row += 1

    logger.debug(f"[{layout.home_name}] flexible: {len(arranged)} widgets")
    return layout.with_widgets(arranged)


# ── Smart ────────────────────────────────────────────

def _smart_sort_key(indexed):
    index, w = indexed
    # spanning widgets first, then taller first, then input order
    return (0 if w.column_span > 1 else 1, -w.row_span, index)


class _SmartCursor:
    """Row cursor for the smart packer; collects placed widgets in order."""

    def __init__(self):
        self.row = 0
        self.placed: List[HomeWidget] = []

    def place_alone(self, w: HomeWidget):
        self.placed.append(_place(w, self.row, 0))
        self.row += w.row_span

    def place_pair(self, left: HomeWidget, right: HomeWidget):
        self.placed.append(_place(left, self.row, 0))
        self.placed.append(_place(right, self.row, 1))
        self.row += max(left.row_span, right.row_span)

    def drain(self, buffer: List[HomeWidget]):
        """Place buffered single-column widgets two per row, odd one alone."""
        for i in range(0, len(buffer) - 1, 2):
            self.place_pair(buffer[i], buffer[i + 1])
        if len(buffer) % 2 == 1:
            self.place_alone(buffer[-1])
        buffer.clear()


def arrange_smart(layout: HomeLayout) -> HomeLayout:
    """
    Priority-sorted greedy packing.

    Spanning widgets are placed first and taller widgets before shorter
    ones; single-column widgets are buffered and placed side by side, each
    pair advancing the cursor by the taller of the two. Cells never overlap.
    """
    resolved = [resolve_size(w).with_normalized_column() for w in layout.widgets]
    ordered = [w for _, w in sorted(enumerate(resolved), key=_smart_sort_key)]

    cursor = _SmartCursor()
    buffer: List[HomeWidget] = []

    for w in ordered:
        if w.column_span > 1:
            cursor.drain(buffer)
            cursor.place_alone(w)
        else:
            buffer.append(w)
            if len(buffer) == GRID_COLUMNS:
                cursor.drain(buffer)

    cursor.drain(buffer)

    logger.debug(f"[{layout.home_name}] smart: {len(cursor.placed)} widgets, {cursor.row} rows")
    return layout.with_widgets(cursor.placed)


_PACKERS = {
    PackerKind.SEQUENTIAL: arrange_sequential,
    PackerKind.FLEXIBLE: arrange_flexible,
    PackerKind.SMART: arrange_smart,
}


def arrange(layout: HomeLayout, packer: PackerKind = PackerKind.SEQUENTIAL) -> HomeLayout:
    return _PACKERS[PackerKind(packer)](layout)
