from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import pytest

from table_calendar.config import (
    CalendarSettings,
    ConfigError,
    load_env_file,
    parse_date,
    parse_format,
    parse_formats,
    parse_timezone,
)
from table_calendar.formats import ALL_FORMATS, CalendarFormat


def test_load_env_file_sets_missing_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("FOO=bar\n# comment\nBAZ = 123\n", encoding="utf-8")

    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.setenv("BAZ", "keep")

    load_env_file(env_file)

    assert os.environ["FOO"] == "bar"
    assert os.environ["BAZ"] == "keep"


def test_load_env_file_is_noop_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    missing = tmp_path / "missing.env"
    monkeypatch.delenv("FOO", raising=False)

    load_env_file(missing)

    assert "FOO" not in os.environ


def test_invalid_line_raises(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("INVALID", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid line"):
        load_env_file(env_file)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("month", CalendarFormat.MONTH),
        (" Week ", CalendarFormat.WEEK),
        ("two-weeks", CalendarFormat.TWO_WEEKS),
        ("two_weeks", CalendarFormat.TWO_WEEKS),
        ("2weeks", CalendarFormat.TWO_WEEKS),
    ],
)
def test_parse_format(value: str, expected: CalendarFormat) -> None:
    assert parse_format(value) is expected


def test_parse_format_rejects_unknown_name() -> None:
    with pytest.raises(ConfigError, match="Unknown calendar format"):
        parse_format("year")


def test_parse_formats_keeps_order() -> None:
    assert parse_formats("week, month") == (CalendarFormat.WEEK, CalendarFormat.MONTH)

    with pytest.raises(ConfigError):
        parse_formats(" , ")


def test_parse_date_and_timezone() -> None:
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_timezone("Europe/Warsaw") == "Europe/Warsaw"

    with pytest.raises(ConfigError, match="Invalid date"):
        parse_date("2023-02-29")
    with pytest.raises(ConfigError, match="Unknown timezone"):
        parse_timezone("Mars/Olympus_Mons")


def test_settings_from_env() -> None:
    settings = CalendarSettings.from_env(
        {
            "TABLE_CALENDAR_DATE": "2024-08-14",
            "TABLE_CALENDAR_FORMAT": "week",
            "TABLE_CALENDAR_AVAILABLE_FORMATS": "week,month",
            "TABLE_CALENDAR_FORCED_FORMAT": "month",
            "GOOGLE_CALENDAR_IDS": "primary, team@example.com,",
            "TABLE_CALENDAR_TIMEZONE": "America/New_York",
        }
    )

    assert settings == CalendarSettings(
        initial_date=date(2024, 8, 14),
        initial_format=CalendarFormat.WEEK,
        available_formats=(CalendarFormat.WEEK, CalendarFormat.MONTH),
        forced_format=CalendarFormat.MONTH,
        calendar_ids=("primary", "team@example.com"),
        timezone="America/New_York",
    )


def test_settings_defaults_from_empty_env() -> None:
    settings = CalendarSettings.from_env({})

    assert settings.initial_date is None
    assert settings.initial_format is CalendarFormat.MONTH
    assert settings.available_formats == ALL_FORMATS
    assert settings.forced_format is None
    assert settings.calendar_ids == ()
    assert settings.timezone == "UTC"
