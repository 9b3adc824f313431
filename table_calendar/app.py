"""Command line entry point for rendering a calendar page."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from google.auth.exceptions import GoogleAuthError

from .calendar import CALENDAR_READONLY_SCOPE, CalendarApiError, GoogleCalendarClient
from .config import (
    CalendarSettings,
    ConfigError,
    load_env_file,
    parse_date,
    parse_format,
    parse_formats,
    parse_timezone,
)
from .formats import CalendarFormat
from .logic import CalendarContractError
from .rendering import CalendarRenderer, render_text
from .view import TableCalendar

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a month, two-week or week calendar page")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before the settings are read.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    state_group = parser.add_argument_group("Calendar options")
    state_group.add_argument("--date", type=str, default=None, help="Initial date (YYYY-MM-DD).")
    state_group.add_argument(
        "--format",
        dest="calendar_format",
        type=str,
        default=None,
        help="Initial format: month, two-weeks or week.",
    )
    state_group.add_argument(
        "--available-formats",
        type=str,
        default=None,
        help="Comma separated formats the toggle cycles through, in order.",
    )
    state_group.add_argument(
        "--forced-format",
        type=str,
        default=None,
        help="Render this format regardless of the toggle state.",
    )

    nav_group = parser.add_argument_group("Navigation")
    nav_group.add_argument("--next", type=int, default=0, help="Pages to move forward.")
    nav_group.add_argument("--previous", type=int, default=0, help="Pages to move back.")
    nav_group.add_argument("--toggle", type=int, default=0, help="Times to press the format toggle.")
    nav_group.add_argument("--select", type=str, default=None, help="Date to select (YYYY-MM-DD).")

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the rendered page to this PNG file.",
    )
    output_group.add_argument(
        "--text",
        action="store_true",
        help="Print a text grid (the default when --output is not given).",
    )

    events_group = parser.add_argument_group("Event markers")
    events_group.add_argument(
        "--calendar-id",
        action="append",
        default=None,
        help="Google Calendar ID to draw event markers from. May be repeated.",
    )
    events_group.add_argument(
        "--timezone",
        type=str,
        default=None,
        help="IANA timezone used to assign events to days.",
    )

    return parser


@dataclass
class AppSettings:
    calendar: CalendarSettings
    next_pages: int
    previous_pages: int
    toggles: int
    select: date | None
    output: Path | None
    text: bool


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    """Merge environment settings with command line overrides.

    Raises:
        ConfigError: If any value cannot be parsed.
    """

    load_env_file(args.env_file)
    calendar = CalendarSettings.from_env()

    overrides: Dict[str, Any] = {}
    if args.date:
        overrides["initial_date"] = parse_date(args.date)
    if args.calendar_format:
        overrides["initial_format"] = parse_format(args.calendar_format)
    if args.available_formats:
        overrides["available_formats"] = parse_formats(args.available_formats)
    if args.forced_format:
        overrides["forced_format"] = parse_format(args.forced_format)
    if args.calendar_id:
        overrides["calendar_ids"] = tuple(args.calendar_id)
    if args.timezone:
        overrides["timezone"] = parse_timezone(args.timezone)
    if overrides:
        calendar = replace(calendar, **overrides)

    for name in ("next", "previous", "toggle"):
        if getattr(args, name) < 0:
            raise ConfigError(f"--{name} must not be negative")

    return AppSettings(
        calendar=calendar,
        next_pages=args.next,
        previous_pages=args.previous,
        toggles=args.toggle,
        select=parse_date(args.select) if args.select else None,
        output=args.output,
        text=args.text or args.output is None,
    )


def default_client_factory(calendar_ids: Sequence[str], timezone: str) -> GoogleCalendarClient:
    import google.auth

    credentials, _ = google.auth.default(scopes=[CALENDAR_READONLY_SCOPE])
    return GoogleCalendarClient(credentials, calendar_ids, timezone)


class AppRuntime:
    """Builds the calendar, replays navigation and renders the result."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        client_factory: Callable[[Sequence[str], str], GoogleCalendarClient] = default_client_factory,
        renderer_factory: Callable[[], CalendarRenderer] = CalendarRenderer,
        today_provider: Callable[[], date] = date.today,
        printer: Callable[[str], None] = print,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.client_factory = client_factory
        self.renderer_factory = renderer_factory
        self.today_provider = today_provider
        self.printer = printer
        self.logger = logger or LOGGER
        self.changes: List[str] = []

    def build_calendar(self) -> TableCalendar:
        cal = self.settings.calendar
        return TableCalendar(
            initial_date=cal.initial_date,
            initial_format=cal.initial_format,
            available_formats=cal.available_formats,
            forced_format=cal.forced_format,
            on_day_selected=self._on_day_selected,
            on_format_changed=self._on_format_changed,
            today_provider=self.today_provider,
        )

    def _on_day_selected(self, day: date) -> None:
        self.logger.info("Day selected: %s", day.isoformat())
        self.changes.append(f"selected {day.isoformat()}")

    def _on_format_changed(self, calendar_format: CalendarFormat) -> None:
        self.logger.info("Format changed to %s", calendar_format.value)
        self.changes.append(f"format {calendar_format.value}")

    def apply_navigation(self, calendar: TableCalendar) -> None:
        settings = self.settings
        for _ in range(settings.toggles):
            calendar.toggle_format()
        for _ in range(settings.next_pages):
            calendar.next()
        for _ in range(settings.previous_pages):
            calendar.previous()
        if settings.select is not None:
            calendar.select(settings.select)

    def load_markers(self, calendar: TableCalendar) -> None:
        cal = self.settings.calendar
        if not cal.calendar_ids:
            return
        try:
            client = self.client_factory(cal.calendar_ids, cal.timezone)
            markers = client.fetch_window(calendar.visible_days())
        except (CalendarApiError, GoogleAuthError):
            self.logger.exception("Failed to fetch events; rendering without markers")
            return
        calendar.set_events(markers)
        self.logger.info("Loaded events for %d day(s)", len(markers))

    def run(self) -> TableCalendar:
        calendar = self.build_calendar()
        self.apply_navigation(calendar)
        self.load_markers(calendar)
        self.logger.info(
            "Rendering %s page %s",
            calendar.effective_format.value,
            calendar.logic.page_id.start.isoformat(),
        )

        if self.settings.output is not None:
            output = self.settings.output
            output.parent.mkdir(parents=True, exist_ok=True)
            image = self.renderer_factory().render(calendar)
            image.save(output)
            self.logger.info("Wrote calendar page to %s", output)
        if self.settings.text:
            self.printer(render_text(calendar))
        return calendar


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    client_factory: Callable[[Sequence[str], str], GoogleCalendarClient] = default_client_factory,
    today_provider: Callable[[], date] = date.today,
    printer: Callable[[str], None] = print,
) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = resolve_settings(args)
        runtime = AppRuntime(
            settings=settings,
            client_factory=client_factory,
            today_provider=today_provider,
            printer=printer,
        )
        runtime.run()
    except (ConfigError, CalendarContractError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
