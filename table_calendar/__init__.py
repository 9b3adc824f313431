"""Top-level package for the table calendar component."""

from __future__ import annotations

from .formats import ALL_FORMATS, CalendarFormat
from .locale import DEFAULT_LOCALE, CalendarLocale
from .logic import CalendarContractError, CalendarLogic, CalendarSnapshot, PageId
from .view import DayCell, HeaderModel, TableCalendar, WeekdayLabel

__all__ = [
    "__version__",
    "ALL_FORMATS",
    "CalendarContractError",
    "CalendarFormat",
    "CalendarLocale",
    "CalendarLogic",
    "CalendarSnapshot",
    "DEFAULT_LOCALE",
    "DayCell",
    "HeaderModel",
    "PageId",
    "TableCalendar",
    "WeekdayLabel",
]

__version__ = "0.1.0"
