"""Layout constants and helpers for the calendar grid image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..logic import DAYS_IN_WEEK


@dataclass(frozen=True)
class GridLayout:
    """Collection of reusable layout constants for the table layout."""

    canvas_width: int = 800
    canvas_height: int = 480
    header_height: int = 64
    weekday_row_height: int = 36
    padding_x: int = 16
    padding_bottom: int = 12
    chevron_width: int = 40
    toggle_padding_x: int = 12
    toggle_padding_y: int = 6
    toggle_corner_radius: int = 10
    cell_margin: int = 4
    marker_radius: int = 4
    marker_gap: int = 3
    marker_offset: int = 8

    @property
    def grid_left(self) -> int:
        return self.padding_x

    @property
    def grid_right(self) -> int:
        return self.canvas_width - self.padding_x

    @property
    def column_width(self) -> float:
        return (self.grid_right - self.grid_left) / DAYS_IN_WEEK

    def grid_top(self, *, header_visible: bool = True) -> int:
        top = self.weekday_row_height
        if header_visible:
            top += self.header_height
        return top

    @property
    def grid_bottom(self) -> int:
        return self.canvas_height - self.padding_bottom

    def row_height(self, rows: int, *, header_visible: bool = True) -> float:
        """Return the height of one week row when ``rows`` rows share the grid."""

        available = self.grid_bottom - self.grid_top(header_visible=header_visible)
        return available / max(rows, 1)

    def cell_box(
        self, row: int, column: int, rows: int, *, header_visible: bool = True
    ) -> tuple[float, float, float, float]:
        """Return the ``(left, top, right, bottom)`` box of a day cell."""

        height = self.row_height(rows, header_visible=header_visible)
        left = self.grid_left + column * self.column_width
        top = self.grid_top(header_visible=header_visible) + row * height
        return (left, top, left + self.column_width, top + height)


DEFAULT_LAYOUT: Final[GridLayout] = GridLayout()

__all__ = ["DEFAULT_LAYOUT", "GridLayout"]
