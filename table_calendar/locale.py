"""Caller-supplied name tables used for header and weekday labels."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Final, Mapping

from .formats import CalendarFormat


@dataclass(frozen=True)
class CalendarLocale:
    """Month, weekday and format names used to build presentation strings.

    Weekday names are ordered Monday first. Nothing here is derived from the
    process locale; callers wanting another language supply their own table.
    """

    month_names: tuple[str, ...]
    short_month_names: tuple[str, ...]
    weekday_names: tuple[str, ...]
    format_labels: Mapping[CalendarFormat, str]

    def __post_init__(self) -> None:
        if len(self.month_names) != 12 or len(self.short_month_names) != 12:
            raise ValueError("A locale needs exactly 12 month names and 12 short month names.")
        if len(self.weekday_names) != 7:
            raise ValueError("A locale needs exactly 7 weekday names, Monday first.")
        missing = [fmt.value for fmt in CalendarFormat if fmt not in self.format_labels]
        if missing:
            raise ValueError(f"Missing format labels for: {', '.join(missing)}")

    def month_label(self, day: date) -> str:
        return f"{self.month_names[day.month - 1]} {day.year}"

    def short_date(self, day: date, *, with_year: bool = False) -> str:
        label = f"{self.short_month_names[day.month - 1]} {day.day}"
        if with_year:
            label = f"{label}, {day.year}"
        return label

    def format_label(self, calendar_format: CalendarFormat) -> str:
        return self.format_labels[calendar_format]


DEFAULT_LOCALE: Final[CalendarLocale] = CalendarLocale(
    month_names=(
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    short_month_names=(
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "May",
        "Jun",
        "Jul",
        "Aug",
        "Sep",
        "Oct",
        "Nov",
        "Dec",
    ),
    weekday_names=("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    format_labels={
        CalendarFormat.MONTH: "Month",
        CalendarFormat.TWO_WEEKS: "2 weeks",
        CalendarFormat.WEEK: "Week",
    },
)

__all__ = ["CalendarLocale", "DEFAULT_LOCALE"]
