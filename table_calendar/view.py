"""Framework-agnostic calendar component built on :class:`CalendarLogic`.

The renderers in :mod:`table_calendar.rendering` read everything they draw from
:class:`TableCalendar`; user input flows back through its action methods.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .formats import ALL_FORMATS, CalendarFormat
from .locale import DEFAULT_LOCALE, CalendarLocale
from .logic import (
    CalendarLogic,
    as_date,
    chunk_weeks,
    header_label,
    is_extra_day,
    visible_window,
)

LOGGER = logging.getLogger(__name__)

MAX_MARKERS = 4
SWIPE_PREVIOUS = "right"
SWIPE_NEXT = "left"

DaySelectedCallback = Callable[[date], None]
FormatChangedCallback = Callable[[CalendarFormat], None]


@dataclass(frozen=True)
class DayCell:
    """Everything a renderer needs to draw a single day."""

    day: date
    text: str
    is_selected: bool
    is_today: bool
    is_weekend: bool
    is_outside_month: bool
    markers: int = 0


@dataclass(frozen=True)
class WeekdayLabel:
    text: str
    is_weekend: bool


@dataclass(frozen=True)
class HeaderModel:
    title: str
    toggle_text: Optional[str]
    visible: bool = True


class TableCalendar:
    """Calendar component state plus the rendering layer's conventions."""

    def __init__(
        self,
        *,
        initial_date: Optional[date | datetime] = None,
        initial_format: CalendarFormat = CalendarFormat.MONTH,
        available_formats: Sequence[CalendarFormat] = ALL_FORMATS,
        forced_format: Optional[CalendarFormat] = None,
        events: Optional[Mapping[date | datetime, Sequence[Any]]] = None,
        header_visible: bool = True,
        format_button_visible: bool = True,
        on_day_selected: Optional[DaySelectedCallback] = None,
        on_format_changed: Optional[FormatChangedCallback] = None,
        today_provider: Callable[[], date] = date.today,
        locale: CalendarLocale = DEFAULT_LOCALE,
    ) -> None:
        """Create the component.

        Args:
            initial_date: Initially selected and focused date. Defaults to today.
            initial_format: Format displayed first.
            available_formats: Formats the toggle button cycles through.
            forced_format: Format that overrides the internal one for display.
                The internal format is left untouched and the toggle is disabled.
            events: Objects keyed by day; only their count is used, as markers.
            header_visible: Whether the header row is shown.
            format_button_visible: Whether the toggle button may be shown.
            on_day_selected: Called with the day after every selection.
            on_format_changed: Called with the new format after every toggle.
            today_provider: Callable returning the current date.
            locale: Name tables for labels.
        """

        self.logic = CalendarLogic(
            initial_format,
            available_formats,
            initial_date,
            today_provider=today_provider,
            locale=locale,
        )
        self.forced_format = forced_format
        self.header_visible = header_visible
        self.format_button_visible = format_button_visible
        self.on_day_selected = on_day_selected
        self.on_format_changed = on_format_changed
        self._events: Dict[date, List[Any]] = {}
        self.set_events(events or {})

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def effective_format(self) -> CalendarFormat:
        if self.forced_format is not None:
            return self.forced_format
        return self.logic.calendar_format

    @property
    def format_button_enabled(self) -> bool:
        return (
            self.format_button_visible
            and len(self.logic.available_formats) > 1
            and self.forced_format is None
        )

    def set_events(self, events: Mapping[date | datetime, Sequence[Any]]) -> None:
        """Replace the event marker data, merging keys that share a calendar date."""

        normalized: Dict[date, List[Any]] = {}
        for key, items in events.items():
            normalized.setdefault(as_date(key), []).extend(items)
        self._events = normalized

    def events_for(self, day: date | datetime) -> List[Any]:
        return list(self._events.get(as_date(day), ()))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def previous(self) -> date:
        return self.logic.select_previous()

    def next(self) -> date:
        return self.logic.select_next()

    def select(self, day: date | datetime) -> date:
        selected = self.logic.select_date(day)
        if self.on_day_selected is not None:
            self.on_day_selected(selected)
        return selected

    def toggle_format(self) -> CalendarFormat:
        if not self.format_button_enabled:
            LOGGER.debug("Format toggle ignored; the toggle control is disabled")
            return self.logic.calendar_format
        new_format = self.logic.toggle_calendar_format()
        if self.on_format_changed is not None:
            self.on_format_changed(new_format)
        return new_format

    def swipe(self, direction: str) -> date:
        """Translate a horizontal swipe into page navigation."""

        if direction == SWIPE_PREVIOUS:
            return self.previous()
        if direction == SWIPE_NEXT:
            return self.next()
        raise ValueError(f"Unsupported swipe direction: {direction!r}")

    # ------------------------------------------------------------------
    # Layout inputs
    # ------------------------------------------------------------------
    def header(self) -> HeaderModel:
        toggle_text = self.logic.header_toggle_text if self.format_button_enabled else None
        return HeaderModel(
            title=self._header_title(),
            toggle_text=toggle_text,
            visible=self.header_visible,
        )

    def days_of_week(self) -> List[WeekdayLabel]:
        labels = self.logic.days_of_week
        last = len(labels) - 1
        return [
            WeekdayLabel(text=text, is_weekend=index in (0, last))
            for index, text in enumerate(labels)
        ]

    def visible_days(self) -> List[date]:
        return visible_window(self.effective_format, self.logic.focused_date)

    def rows(self) -> List[List[DayCell]]:
        return [[self.cell(day) for day in week] for week in chunk_weeks(self.visible_days())]

    def cell(self, day: date | datetime) -> DayCell:
        day = as_date(day)
        logic = self.logic
        return DayCell(
            day=day,
            text=str(day.day),
            is_selected=logic.is_selected(day),
            is_today=logic.is_today(day),
            is_weekend=logic.is_weekend(day),
            is_outside_month=is_extra_day(self.effective_format, logic.focused_date, day),
            markers=min(len(self._events.get(day, ())), MAX_MARKERS),
        )

    def _header_title(self) -> str:
        if self.forced_format is None:
            return self.logic.header_text
        return header_label(self.forced_format, self.logic.focused_date, self.logic.locale)


__all__ = [
    "DayCell",
    "HeaderModel",
    "MAX_MARKERS",
    "SWIPE_NEXT",
    "SWIPE_PREVIOUS",
    "TableCalendar",
    "WeekdayLabel",
]
