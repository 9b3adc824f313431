"""Helpers for loading calendar settings from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .formats import ALL_FORMATS, CalendarFormat

__all__ = [
    "CalendarSettings",
    "ConfigError",
    "load_env_file",
    "parse_date",
    "parse_format",
    "parse_formats",
    "parse_timezone",
]

_FORMAT_ALIASES = {
    "month": CalendarFormat.MONTH,
    "two_weeks": CalendarFormat.TWO_WEEKS,
    "two-weeks": CalendarFormat.TWO_WEEKS,
    "twoweeks": CalendarFormat.TWO_WEEKS,
    "2weeks": CalendarFormat.TWO_WEEKS,
    "week": CalendarFormat.WEEK,
}


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.exists() or not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value


def parse_format(value: str) -> CalendarFormat:
    """Parse a format name such as ``month``, ``two-weeks`` or ``week``."""

    key = value.strip().lower()
    try:
        return _FORMAT_ALIASES[key]
    except KeyError:
        choices = ", ".join(fmt.value for fmt in ALL_FORMATS)
        raise ConfigError(f"Unknown calendar format {value!r}. Expected one of: {choices}.") from None


def parse_formats(value: str) -> tuple[CalendarFormat, ...]:
    """Parse a comma separated, ordered list of format names."""

    names = [part for part in (piece.strip() for piece in value.split(",")) if part]
    if not names:
        raise ConfigError("At least one calendar format must be listed.")
    return tuple(parse_format(name) for name in names)


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date."""

    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid date {value!r}. Expected YYYY-MM-DD.") from exc


def parse_timezone(value: str) -> str:
    """Validate an IANA timezone name such as ``Europe/Warsaw``."""

    name = value.strip()
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone {value!r}.") from exc
    return name


def _split_ids(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class CalendarSettings:
    """Construction-time options for the calendar component."""

    initial_date: Optional[date] = None
    initial_format: CalendarFormat = CalendarFormat.MONTH
    available_formats: tuple[CalendarFormat, ...] = ALL_FORMATS
    forced_format: Optional[CalendarFormat] = None
    calendar_ids: tuple[str, ...] = field(default_factory=tuple)
    timezone: str = "UTC"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CalendarSettings":
        """Build settings from ``TABLE_CALENDAR_*`` and ``GOOGLE_CALENDAR_IDS`` variables."""

        env = os.environ if environ is None else environ
        defaults = cls()

        raw_date = env.get("TABLE_CALENDAR_DATE")
        raw_format = env.get("TABLE_CALENDAR_FORMAT")
        raw_available = env.get("TABLE_CALENDAR_AVAILABLE_FORMATS")
        raw_forced = env.get("TABLE_CALENDAR_FORCED_FORMAT")

        return cls(
            initial_date=parse_date(raw_date) if raw_date else defaults.initial_date,
            initial_format=parse_format(raw_format) if raw_format else defaults.initial_format,
            available_formats=(
                parse_formats(raw_available) if raw_available else defaults.available_formats
            ),
            forced_format=parse_format(raw_forced) if raw_forced else None,
            calendar_ids=_split_ids(env.get("GOOGLE_CALENDAR_IDS", "")),
            timezone=parse_timezone(env.get("TABLE_CALENDAR_TIMEZONE") or defaults.timezone),
        )
