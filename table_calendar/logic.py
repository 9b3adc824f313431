"""Temporal logic behind the calendar grid.

Owns the current format, the focused page and the selection, and computes
which dates each format shows. Nothing in here knows how a day is drawn.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence

from .formats import ALL_FORMATS, CalendarFormat
from .locale import DEFAULT_LOCALE, CalendarLocale

LOGGER = logging.getLogger(__name__)

DAYS_IN_WEEK = 7


class CalendarContractError(ValueError):
    """Raised when the calendar is constructed with an inconsistent format setup."""


@dataclass(frozen=True)
class PageId:
    """Identity of the window currently on screen.

    Two ids compare equal exactly when the same format shows the same window,
    which makes the value usable as a key for page transitions.
    """

    calendar_format: CalendarFormat
    start: date


@dataclass(frozen=True)
class CalendarSnapshot:
    """Immutable view of the calendar state handed to subscribers."""

    calendar_format: CalendarFormat
    focused_date: date
    selected_date: date
    page_id: PageId


Listener = Callable[[CalendarSnapshot], None]


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day from ``value`` when it is a :class:`datetime`."""

    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_week(day: date) -> date:
    """Return the Monday on or before ``day``."""

    return day - timedelta(days=day.weekday())


def shift_months(day: date, months: int, *, day_of_month: Optional[int] = None) -> date:
    """Move ``day`` by ``months`` calendar months, clamping the day of month.

    ``day_of_month`` overrides the requested day (defaults to ``day.day``), so a
    caller can keep asking for the 31st while passing through shorter months.
    """

    index = day.year * 12 + (day.month - 1) + months
    year, month_index = divmod(index, 12)
    month = month_index + 1
    wanted = day_of_month if day_of_month is not None else day.day
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(wanted, last_day))


def _days_from(first: date, count: int) -> List[date]:
    # Windows touching date.max are cut short instead of overflowing.
    count = min(count, (date.max - first).days + 1)
    return [first + timedelta(days=offset) for offset in range(count)]


def week_window(anchor: date) -> List[date]:
    """Return Monday..Sunday of the week containing ``anchor``."""

    return _days_from(start_of_week(anchor), DAYS_IN_WEEK)


def two_weeks_window(anchor: date) -> List[date]:
    """Return the week containing ``anchor`` followed by the next week."""

    return _days_from(start_of_week(anchor), DAYS_IN_WEEK * 2)


def month_window(anchor: date) -> List[date]:
    """Return the full-week grid covering the month of ``anchor``.

    The grid starts on the Monday on or before the 1st and ends on the Sunday on
    or after the last day, so it always holds 4, 5 or 6 whole weeks. The one
    exception is December 9999, whose grid stops at ``date.max``.
    """

    first = anchor.replace(day=1)
    last = anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])
    grid_start = start_of_week(first)
    weeks = (start_of_week(last) - grid_start).days // DAYS_IN_WEEK + 1
    return _days_from(grid_start, weeks * DAYS_IN_WEEK)


def visible_window(calendar_format: CalendarFormat, anchor: date) -> List[date]:
    """Return the window ``calendar_format`` shows around ``anchor``."""

    if calendar_format is CalendarFormat.WEEK:
        return week_window(anchor)
    if calendar_format is CalendarFormat.TWO_WEEKS:
        return two_weeks_window(anchor)
    return month_window(anchor)


def is_extra_day(calendar_format: CalendarFormat, anchor: date, day: date) -> bool:
    """True for month-grid days that only pad out the first or last week."""

    if calendar_format is not CalendarFormat.MONTH:
        return False
    day = as_date(day)
    return (day.year, day.month) != (anchor.year, anchor.month)


def header_label(
    calendar_format: CalendarFormat, anchor: date, locale: CalendarLocale = DEFAULT_LOCALE
) -> str:
    """Return the header title for the window ``calendar_format`` shows around ``anchor``.

    Months read "August 2024"; week windows read "Aug 12 – Aug 18", with the
    year added to both ends when the window spans New Year.
    """

    if calendar_format is CalendarFormat.MONTH:
        return locale.month_label(anchor)
    days = visible_window(calendar_format, anchor)
    first, last = days[0], days[-1]
    crosses_year = first.year != last.year
    return (
        f"{locale.short_date(first, with_year=crosses_year)}"
        f" – {locale.short_date(last, with_year=crosses_year)}"
    )


def page_id_for(calendar_format: CalendarFormat, anchor: date) -> PageId:
    if calendar_format is CalendarFormat.MONTH:
        return PageId(calendar_format, anchor.replace(day=1))
    return PageId(calendar_format, start_of_week(anchor))


def _validate_formats(
    initial_format: CalendarFormat, available_formats: Sequence[CalendarFormat]
) -> tuple[CalendarFormat, ...]:
    formats = tuple(available_formats)
    if not formats:
        raise CalendarContractError("At least one calendar format must be available.")
    if len(formats) > len(ALL_FORMATS):
        raise CalendarContractError(
            f"{len(formats)} formats given but only {len(ALL_FORMATS)} exist."
        )
    if len(set(formats)) != len(formats):
        raise CalendarContractError("Available calendar formats must not contain duplicates.")
    if initial_format not in formats:
        raise CalendarContractError(
            f"Initial format {initial_format.value!r} is not one of the available formats."
        )
    return formats


class CalendarLogic:
    """Format, page and selection state of a calendar component."""

    def __init__(
        self,
        initial_format: CalendarFormat,
        available_formats: Sequence[CalendarFormat] = ALL_FORMATS,
        initial_date: Optional[date | datetime] = None,
        *,
        today_provider: Callable[[], date] = date.today,
        locale: CalendarLocale = DEFAULT_LOCALE,
    ) -> None:
        """Initialize the calendar state.

        Args:
            initial_format: Format displayed first.
            available_formats: Formats the toggle cycles through, in order.
            initial_date: Date to focus and select initially. Defaults to today.
            today_provider: Callable returning the current date.
            locale: Name tables used for header and weekday labels.

        Raises:
            CalendarContractError: If ``initial_format`` is not available, or the
                available formats are empty, duplicated or too many.
        """

        self.available_formats = _validate_formats(initial_format, available_formats)
        self.locale = locale
        self._today_provider = today_provider
        self.today = as_date(today_provider())

        start = as_date(initial_date) if initial_date is not None else self.today
        self._calendar_format = initial_format
        self._focused_date = start
        self._selected_date = start
        self._month_day = start.day
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def calendar_format(self) -> CalendarFormat:
        return self._calendar_format

    @property
    def focused_date(self) -> date:
        return self._focused_date

    @property
    def selected_date(self) -> date:
        return self._selected_date

    @property
    def page_id(self) -> PageId:
        return page_id_for(self._calendar_format, self._focused_date)

    def snapshot(self) -> CalendarSnapshot:
        return CalendarSnapshot(
            calendar_format=self._calendar_format,
            focused_date=self._focused_date,
            selected_date=self._selected_date,
            page_id=self.page_id,
        )

    def refresh_today(self) -> date:
        """Re-read the current date from the today provider."""

        self.today = as_date(self._today_provider())
        return self.today

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------
    @property
    def visible_week(self) -> List[date]:
        return week_window(self._focused_date)

    @property
    def visible_two_weeks(self) -> List[date]:
        return two_weeks_window(self._focused_date)

    @property
    def visible_month(self) -> List[date]:
        return month_window(self._focused_date)

    @property
    def visible_days(self) -> List[date]:
        return visible_window(self._calendar_format, self._focused_date)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def is_selected(self, day: date | datetime) -> bool:
        return as_date(day) == self._selected_date

    def is_today(self, day: date | datetime) -> bool:
        return as_date(day) == self.today

    def is_weekend(self, day: date | datetime) -> bool:
        return as_date(day).weekday() >= 5

    def is_extra_day(self, day: date | datetime) -> bool:
        return is_extra_day(self._calendar_format, self._focused_date, as_date(day))

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    @property
    def header_text(self) -> str:
        return header_label(self._calendar_format, self._focused_date, self.locale)

    @property
    def header_toggle_text(self) -> str:
        return self.locale.format_label(self._next_format())

    @property
    def days_of_week(self) -> List[str]:
        return list(self.locale.weekday_names)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def select_previous(self) -> date:
        """Move the focused page back by one unit of the current format."""

        return self._move_page(-1)

    def select_next(self) -> date:
        """Move the focused page forward by one unit of the current format."""

        return self._move_page(1)

    def select_date(self, day: date | datetime) -> date:
        """Select ``day`` without moving the focused page.

        Re-selecting the current day changes nothing and notifies no one.
        """

        day = as_date(day)
        if day == self._selected_date:
            return day
        self._selected_date = day
        LOGGER.debug("Selected date set to %s", self._selected_date.isoformat())
        self._notify()
        return self._selected_date

    def toggle_calendar_format(self) -> CalendarFormat:
        """Advance to the next available format, wrapping after the last one.

        With fewer than two available formats this is a no-op and no listener
        is notified.
        """

        if len(self.available_formats) < 2:
            return self._calendar_format
        self._calendar_format = self._next_format()
        LOGGER.debug("Calendar format changed to %s", self._calendar_format.value)
        self._notify()
        return self._calendar_format

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change.

        Returns a callable that removes the listener again.
        """

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _next_format(self) -> CalendarFormat:
        index = self.available_formats.index(self._calendar_format)
        return self.available_formats[(index + 1) % len(self.available_formats)]

    def _move_page(self, step: int) -> date:
        if self._calendar_format is CalendarFormat.MONTH:
            # The remembered day survives clamping, e.g. Jan 31 -> Feb 29 -> Jan 31.
            self._focused_date = shift_months(
                self._focused_date, step, day_of_month=self._month_day
            )
        else:
            weeks = 2 if self._calendar_format is CalendarFormat.TWO_WEEKS else 1
            self._focused_date += timedelta(weeks=weeks * step)
            self._month_day = self._focused_date.day
        LOGGER.debug("Focused date moved to %s", self._focused_date.isoformat())
        self._notify()
        return self._focused_date

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


def chunk_weeks(days: Iterable[date]) -> List[List[date]]:
    """Split a window into consecutive rows of seven days."""

    rows: List[List[date]] = []
    row: List[date] = []
    for day in days:
        row.append(day)
        if len(row) == DAYS_IN_WEEK:
            rows.append(row)
            row = []
    if row:
        rows.append(row)
    return rows


__all__ = [
    "CalendarContractError",
    "CalendarLogic",
    "CalendarSnapshot",
    "DAYS_IN_WEEK",
    "Listener",
    "PageId",
    "as_date",
    "chunk_weeks",
    "header_label",
    "is_extra_day",
    "month_window",
    "page_id_for",
    "shift_months",
    "start_of_week",
    "two_weeks_window",
    "visible_window",
    "week_window",
]
