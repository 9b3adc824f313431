"""Calendar integrations that feed event markers into the grid."""

from .google_client import (
    CALENDAR_READONLY_SCOPE,
    CalendarApiError,
    CalendarEvent,
    GoogleCalendarClient,
    events_by_day,
)

__all__ = [
    "CALENDAR_READONLY_SCOPE",
    "CalendarEvent",
    "GoogleCalendarClient",
    "CalendarApiError",
    "events_by_day",
]
