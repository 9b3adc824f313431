"""Display granularities supported by the calendar grid."""

from __future__ import annotations

from enum import Enum
from typing import Final


class CalendarFormat(Enum):
    """Format to display the calendar with."""

    MONTH = "month"
    TWO_WEEKS = "two_weeks"
    WEEK = "week"


ALL_FORMATS: Final[tuple[CalendarFormat, ...]] = (
    CalendarFormat.MONTH,
    CalendarFormat.TWO_WEEKS,
    CalendarFormat.WEEK,
)

__all__ = ["ALL_FORMATS", "CalendarFormat"]
