"""Plain-text rendering of a calendar page, used by the command line."""

from __future__ import annotations

from typing import List

from ..view import DayCell, TableCalendar

CELL_WIDTH = 5


def _cell_text(cell: DayCell) -> str:
    text = cell.text
    if cell.is_selected:
        text = f"[{text}]"
    elif cell.is_outside_month:
        text = f"({text})"
    if cell.is_today:
        text = f"{text}*"
    if cell.markers:
        text = f"{text}{'.' * cell.markers}"
    return text.center(CELL_WIDTH)


def render_text(calendar: TableCalendar) -> str:
    """Return the current page as a text grid.

    The selected day is bracketed, padding days of a month grid are in
    parentheses, today carries a ``*`` and every event adds a trailing dot.
    """

    lines: List[str] = []
    header = calendar.header()
    width = CELL_WIDTH * 7
    if header.visible:
        title = header.title
        if header.toggle_text:
            title = f"{title}  [{header.toggle_text}]"
        lines.append(f"<{title.center(width - 2)}>")
    lines.append("".join(label.text.center(CELL_WIDTH) for label in calendar.days_of_week()))
    for week in calendar.rows():
        lines.append("".join(_cell_text(cell) for cell in week).rstrip())
    return "\n".join(lines)


__all__ = ["render_text"]
