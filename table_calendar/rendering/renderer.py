"""Renderer for composing the calendar grid image."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..view import DayCell, HeaderModel, TableCalendar, WeekdayLabel
from .layout import DEFAULT_LAYOUT, GridLayout


def _font_length(font: ImageFont.ImageFont, text: str) -> float:
    try:
        return font.getlength(text)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - fallback for older Pillow
        dummy_img = Image.new("L", (1, 1), color=255)
        draw = ImageDraw.Draw(dummy_img)
        return float(draw.textlength(text, font=font))


def _font_height(font: ImageFont.ImageFont) -> int:
    return int(getattr(font, "size", 10))


def _load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default()


def _default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    candidates: List[Path] = []
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    for name in names:
        for directory in search_dirs:
            candidate = directory / name
            candidates.append(candidate)
    return candidates


@dataclass
class RendererConfig:
    """Configuration values and font management for the renderer."""

    layout: GridLayout = DEFAULT_LAYOUT
    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    preview_output_dir: Path | None = None
    background_color: int = 255
    foreground_color: int = 0
    weekend_color: int = 80
    outside_month_color: int = 170
    marker_color: int = 0
    title_font_size: int = 30
    toggle_font_size: int = 18
    weekday_font_size: int = 18
    day_font_size: int = 22

    def __post_init__(self) -> None:
        if self.preview_output_dir is not None:
            self.preview_output_dir = Path(self.preview_output_dir)
            self.preview_output_dir.mkdir(parents=True, exist_ok=True)

    def _font_candidates(self, bold: bool) -> List[Path]:
        provided = self.font_bold_path if bold else self.font_regular_path
        candidates: List[Path] = []
        if provided is not None:
            candidates.append(Path(provided))
        candidates.extend(_default_font_candidates(bold))
        return candidates

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        return _load_font(self._font_candidates(bold), size)


class CalendarRenderer:
    """Draw a :class:`TableCalendar` page as a grayscale image."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render(
        self,
        calendar: TableCalendar,
        *,
        preview_name: str | None = None,
    ) -> Image.Image:
        """Render the page ``calendar`` currently shows.

        Args:
            calendar: Component whose header, weekday labels and day cells are drawn.
            preview_name: Optional name for the preview PNG when preview mode
                is enabled.
        Returns:
            A Pillow image of the calendar page.
        """

        cfg = self.config
        layout = cfg.layout
        image = Image.new(
            "L",
            (layout.canvas_width, layout.canvas_height),
            color=cfg.background_color,
        )
        draw = ImageDraw.Draw(image)

        header = calendar.header()
        if header.visible:
            self._draw_header(draw, header)
        self._draw_days_of_week(draw, calendar.days_of_week(), header_visible=header.visible)
        self._draw_rows(draw, calendar.rows(), header_visible=header.visible)

        if cfg.preview_output_dir is not None:
            name = preview_name or calendar.logic.page_id.start.isoformat()
            output_path = cfg.preview_output_dir / f"{name}.png"
            image.save(output_path)

        return image

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def _draw_header(self, draw: ImageDraw.ImageDraw, header: HeaderModel) -> None:
        cfg = self.config
        layout = cfg.layout
        title_font = cfg.font(cfg.title_font_size, bold=True)
        center_y = layout.header_height / 2

        chevron_y = center_y - _font_height(title_font) / 2
        draw.text((layout.grid_left, chevron_y), "<", font=title_font, fill=cfg.foreground_color)
        right_chevron_x = layout.grid_right - _font_length(title_font, ">")
        draw.text((right_chevron_x, chevron_y), ">", font=title_font, fill=cfg.foreground_color)

        title_right = layout.grid_right - layout.chevron_width
        if header.toggle_text:
            title_right = self._draw_toggle(draw, header.toggle_text, right_edge=title_right)

        title_left = layout.grid_left + layout.chevron_width
        title_width = _font_length(title_font, header.title)
        title_x = title_left + max((title_right - title_left - title_width) / 2, 0)
        draw.text((title_x, chevron_y), header.title, font=title_font, fill=cfg.foreground_color)

    def _draw_toggle(self, draw: ImageDraw.ImageDraw, text: str, *, right_edge: float) -> float:
        """Draw the format toggle ending at ``right_edge``; return its left edge."""

        cfg = self.config
        layout = cfg.layout
        font = cfg.font(cfg.toggle_font_size)
        width = _font_length(font, text) + layout.toggle_padding_x * 2
        height = _font_height(font) + layout.toggle_padding_y * 2
        top = layout.header_height / 2 - height / 2
        left = right_edge - width
        draw.rounded_rectangle(
            (left, top, right_edge, top + height),
            radius=layout.toggle_corner_radius,
            outline=cfg.foreground_color,
            width=2,
            fill=None,
        )
        draw.text(
            (left + layout.toggle_padding_x, top + layout.toggle_padding_y),
            text,
            font=font,
            fill=cfg.foreground_color,
        )
        return left - layout.cell_margin

    def _draw_days_of_week(
        self,
        draw: ImageDraw.ImageDraw,
        labels: List[WeekdayLabel],
        *,
        header_visible: bool,
    ) -> None:
        cfg = self.config
        layout = cfg.layout
        font = cfg.font(cfg.weekday_font_size)
        top = layout.grid_top(header_visible=header_visible) - layout.weekday_row_height
        text_y = top + (layout.weekday_row_height - _font_height(font)) / 2

        for column, label in enumerate(labels):
            left = layout.grid_left + column * layout.column_width
            text_x = left + (layout.column_width - _font_length(font, label.text)) / 2
            color = cfg.weekend_color if label.is_weekend else cfg.foreground_color
            draw.text((text_x, text_y), label.text, font=font, fill=color)

    def _draw_rows(
        self,
        draw: ImageDraw.ImageDraw,
        rows: List[List[DayCell]],
        *,
        header_visible: bool,
    ) -> None:
        for row_index, week in enumerate(rows):
            for column, cell in enumerate(week):
                box = self.config.layout.cell_box(
                    row_index, column, len(rows), header_visible=header_visible
                )
                self._draw_cell(draw, cell, box)

    def _draw_cell(
        self,
        draw: ImageDraw.ImageDraw,
        cell: DayCell,
        box: tuple[float, float, float, float],
    ) -> None:
        cfg = self.config
        layout = cfg.layout
        font = cfg.font(cfg.day_font_size, bold=cell.is_selected)
        left, top, right, bottom = box
        center_x = (left + right) / 2
        center_y = (top + bottom) / 2
        radius = max(min(right - left, bottom - top) / 2 - layout.cell_margin, 1)
        circle = (center_x - radius, center_y - radius, center_x + radius, center_y + radius)

        text_color = cfg.foreground_color
        if cell.is_outside_month:
            text_color = cfg.outside_month_color
        elif cell.is_weekend:
            text_color = cfg.weekend_color

        if cell.is_selected:
            draw.ellipse(circle, fill=cfg.foreground_color)
            text_color = cfg.background_color
        elif cell.is_today:
            draw.ellipse(circle, outline=cfg.foreground_color, width=2)

        text_x = center_x - _font_length(font, cell.text) / 2
        text_y = center_y - _font_height(font) / 2
        draw.text((text_x, text_y), cell.text, font=font, fill=text_color)

        if cell.markers:
            self._draw_markers(draw, cell, center_x, bottom - layout.marker_offset)

    def _draw_markers(
        self,
        draw: ImageDraw.ImageDraw,
        cell: DayCell,
        center_x: float,
        center_y: float,
    ) -> None:
        cfg = self.config
        layout = cfg.layout
        color = cfg.background_color if cell.is_selected else cfg.marker_color
        diameter = layout.marker_radius * 2
        total = cell.markers * diameter + (cell.markers - 1) * layout.marker_gap
        x = center_x - total / 2
        for _ in range(cell.markers):
            draw.ellipse(
                (x, center_y - layout.marker_radius, x + diameter, center_y + layout.marker_radius),
                fill=color,
            )
            x += diameter + layout.marker_gap


__all__ = ["CalendarRenderer", "RendererConfig"]
