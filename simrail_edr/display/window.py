"""Scrolling window over long selection lists."""

from rich.table import Table
from rich.text import Text

MARKER_ROWS = 2


def visible_window(count: int, index: int, max_rows: int) -> tuple[int, int]:
    """
    Pick the slice of a list to show so the cursor row stays visible.
    Returns (start, end) with end exclusive.

    When the list has to scroll, MARKER_ROWS of max_rows are left free for the
    "more above" and "more below" rows.
    """
    if max_rows <= 0 or count <= max_rows:
        return 0, count

    rows = max(1, max_rows - MARKER_ROWS)
    start = max(0, index - rows // 2)
    end = min(count, start + rows)
    start = max(0, end - rows)
    return start, end


def add_hidden_row(table: Table, hidden: int, where: str) -> None:
    """Add a dim "N more" indicator row for entries scrolled out of view."""
    if hidden <= 0:
        return
    table.add_row(
        Text("⋮", style="dim"),
        Text(f"[{hidden} more {where}]", style="dim italic"),
    )
