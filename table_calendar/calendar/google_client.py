"""Google Calendar client supplying per-day event markers for the grid."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, time as time_, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence

from google.auth.credentials import Credentials
from google.auth.exceptions import TransportError
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"


@dataclass(frozen=True)
class CalendarEvent:
    """Normalized representation of a Google Calendar event."""

    title: str
    start: datetime
    end: datetime
    location: Optional[str] = None
    is_all_day: bool = False

    def days(self) -> List[date]:
        """Return every calendar day the event touches.

        End times are exclusive, so an all-day event ending on the 16th at
        midnight only covers the 15th.
        """

        first = self.start.date()
        last_moment = self.end - timedelta(microseconds=1) if self.end > self.start else self.start
        last = last_moment.date()
        return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


class CalendarApiError(RuntimeError):
    """Raised when the Google Calendar API repeatedly fails."""


class GoogleCalendarClient:
    """Client wrapper around the Google Calendar API."""

    def __init__(
        self,
        credentials: Optional[Credentials],
        calendar_ids: Sequence[str],
        timezone: str | ZoneInfo,
        *,
        service: Optional[Resource] = None,
        max_retries: int = 3,
        retry_initial_delay: float = 1.0,
        retry_backoff: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Google API credentials used to authenticate requests. Ignored when
                ``service`` is provided.
            calendar_ids: Google Calendar identifiers to fetch events from.
            timezone: IANA timezone name or ``ZoneInfo`` instance in which calendar days
                are interpreted.
            service: Pre-built Google API service (primarily for testing).
            max_retries: Maximum number of retries for API calls.
            retry_initial_delay: Base delay before the first retry (seconds).
            retry_backoff: Multiplier applied to the delay after each retry.
            sleep: Sleep function used between retries (primarily for testing).
        """
        if not calendar_ids:
            raise ValueError("At least one calendar ID must be provided.")

        self.calendar_ids: List[str] = list(calendar_ids)
        self.timezone = timezone if isinstance(timezone, ZoneInfo) else ZoneInfo(str(timezone))
        self.max_retries = max_retries
        self.retry_initial_delay = retry_initial_delay
        self.retry_backoff = retry_backoff
        self._sleep = sleep

        if service is not None:
            self._service = service
        else:
            if credentials is None:
                raise ValueError("Credentials must be provided when service is not injected.")
            self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def fetch_events(
        self,
        start: date,
        end: date,
        *,
        calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[CalendarEvent]:
        """Return normalized events between ``start`` and ``end`` (exclusive)."""
        if end <= start:
            raise ValueError("The end date must come after the start date.")

        active_calendar_ids = list(calendar_ids) if calendar_ids else self.calendar_ids
        window_start = datetime.combine(start, time_.min, tzinfo=self.timezone)
        window_end = datetime.combine(end, time_.min, tzinfo=self.timezone)

        events: List[CalendarEvent] = []
        for calendar_id in active_calendar_ids:
            events.extend(self._fetch_events_for_calendar(calendar_id, window_start, window_end))

        events.sort(key=lambda event: (event.start, event.end, event.title))
        logger.debug(
            "Fetched %d event(s) between %s and %s", len(events), start.isoformat(), end.isoformat()
        )
        return events

    def fetch_window(self, days: Sequence[date]) -> Dict[date, List[CalendarEvent]]:
        """Fetch events for a visible window and group them by day."""
        if not days:
            return {}
        first, last = min(days), max(days)
        events = self.fetch_events(first, last + timedelta(days=1))
        grouped = events_by_day(events)
        return {day: grouped[day] for day in days if day in grouped}

    # ------------------------------------------------------------------
    def _fetch_events_for_calendar(
        self,
        calendar_id: str,
        start: datetime,
        end: datetime,
    ) -> List[CalendarEvent]:
        def execute_request() -> Mapping[str, object]:
            request = (
                self._service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=start.isoformat(),
                    timeMax=end.isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                    timeZone=self._timezone_name,
                )
            )
            return request.execute()

        response = self._execute_with_backoff(execute_request)
        items = response.get("items", []) if isinstance(response, MutableMapping) else []
        normalized: List[CalendarEvent] = []
        for item in items:
            try:
                normalized.append(self._normalize_event(item))
            except CalendarApiError as exc:
                logger.warning("Skipping malformed event from calendar %s: %s", calendar_id, exc)
        return normalized

    def _normalize_event(self, event: Mapping[str, object]) -> CalendarEvent:
        title = str(event.get("summary") or "Untitled Event")
        start_value = event.get("start")
        start_info = self._extract_time_info(start_value)
        end_info = self._extract_time_info(event.get("end"))
        location = event.get("location")
        is_all_day = isinstance(start_value, Mapping) and "date" in start_value and "dateTime" not in start_value

        return CalendarEvent(
            title=title,
            start=start_info,
            end=end_info,
            location=str(location) if location is not None else None,
            is_all_day=is_all_day,
        )

    def _extract_time_info(self, value: object) -> datetime:
        if not isinstance(value, Mapping):
            raise CalendarApiError("Event time data is missing or malformed.")

        if "dateTime" in value:
            dt = self._parse_datetime(str(value["dateTime"]))
        elif "date" in value:
            try:
                dt_date = date.fromisoformat(str(value["date"]))
            except ValueError as exc:
                raise CalendarApiError(f"Unable to parse date value: {value['date']}") from exc
            dt = datetime.combine(dt_date, time_.min, tzinfo=self.timezone)
        else:
            raise CalendarApiError("Event time data lacks 'dateTime' or 'date'.")

        return self._ensure_timezone(dt)

    def _parse_datetime(self, value: str) -> datetime:
        cleaned = value.rstrip("Z") + ("+00:00" if value.endswith("Z") else "")
        try:
            parsed = datetime.fromisoformat(cleaned)
        except ValueError as exc:  # pragma: no cover - depends on malformed API response
            raise CalendarApiError(f"Unable to parse datetime value: {value}") from exc
        return parsed

    def _ensure_timezone(self, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self.timezone)
        return dt.astimezone(self.timezone)

    @property
    def _timezone_name(self) -> str:
        return getattr(self.timezone, "key", str(self.timezone))

    def _execute_with_backoff(self, func: Callable[[], Mapping[str, object]]) -> Mapping[str, object]:
        attempt = 0
        delay = self.retry_initial_delay
        while True:
            try:
                return func()
            except (HttpError, TransportError, TimeoutError) as exc:
                attempt += 1
                if attempt > self.max_retries:
                    raise CalendarApiError("Google Calendar API request failed after retries.") from exc
                logger.warning(
                    "Google Calendar API request failed (attempt %d/%d): %s", attempt, self.max_retries, exc
                )
                self._sleep(delay)
                delay *= self.retry_backoff


def events_by_day(events: Iterable[CalendarEvent]) -> Dict[date, List[CalendarEvent]]:
    """Group events under every calendar day they cover."""
    grouped: Dict[date, List[CalendarEvent]] = {}
    for event in events:
        for day in event.days():
            grouped.setdefault(day, []).append(event)
    return grouped


__all__ = [
    "CALENDAR_READONLY_SCOPE",
    "CalendarApiError",
    "CalendarEvent",
    "GoogleCalendarClient",
    "events_by_day",
]
