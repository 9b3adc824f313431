from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Sequence

import pytest
from google.auth.exceptions import RefreshError
from PIL import Image

from table_calendar import app
from table_calendar.calendar import CalendarApiError

ENV_KEYS = (
    "TABLE_CALENDAR_DATE",
    "TABLE_CALENDAR_FORMAT",
    "TABLE_CALENDAR_AVAILABLE_FORMATS",
    "TABLE_CALENDAR_FORCED_FORMAT",
    "TABLE_CALENDAR_TIMEZONE",
    "GOOGLE_CALENDAR_IDS",
)


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    environ = {key: value for key, value in os.environ.items() if key not in ENV_KEYS}
    monkeypatch.setattr(os, "environ", environ)


class FakeClient:
    def __init__(self, markers=None, error: Exception | None = None) -> None:
        self.markers = markers or {}
        self.error = error
        self.windows: list[list[date]] = []

    def fetch_window(self, days: Sequence[date]):
        self.windows.append(list(days))
        if self.error is not None:
            raise self.error
        return self.markers


def run(argv: list[str], **kwargs) -> list[str]:
    output: list[str] = []
    app.main(argv, today_provider=lambda: date(2024, 8, 14), printer=output.append, **kwargs)
    return output


def test_prints_text_grid_by_default() -> None:
    output = run(["--date", "2024-08-14", "--format", "week"])

    assert len(output) == 1
    assert "Aug 12 – Aug 18" in output[0]
    assert "[14]*" in output[0]


def test_navigation_and_selection_are_replayed() -> None:
    output = run(["--date", "2024-01-31", "--next", "1", "--select", "2024-02-29"])

    assert "February 2024" in output[0]
    assert "[29]" in output[0]


def test_toggle_uses_available_formats() -> None:
    output = run(["--date", "2024-08-14", "--available-formats", "month,week", "--toggle", "1"])

    assert "Aug 12 – Aug 18" in output[0]
    assert "[Month]" in output[0]


def test_environment_settings_are_used(tmp_path: Path) -> None:
    env_file = tmp_path / "calendar.env"
    env_file.write_text("TABLE_CALENDAR_DATE=2025-01-02\nTABLE_CALENDAR_FORMAT=week\n", encoding="utf-8")

    output = run(["--env-file", str(env_file)])

    assert "Dec 30, 2024 – Jan 5, 2025" in output[0]


def test_output_writes_png(tmp_path: Path) -> None:
    target = tmp_path / "out" / "page.png"

    output = run(["--date", "2024-02-15", "--output", str(target)])

    assert output == []
    with Image.open(target) as image:
        assert image.size == (800, 480)


def test_markers_are_loaded_for_visible_window() -> None:
    fake = FakeClient(markers={date(2024, 8, 15): [object()]})
    calls: list[tuple[tuple[str, ...], str]] = []

    def client_factory(calendar_ids, timezone):
        calls.append((tuple(calendar_ids), timezone))
        return fake

    output = run(
        ["--date", "2024-08-14", "--format", "week", "--calendar-id", "primary", "--timezone", "Europe/Warsaw"],
        client_factory=client_factory,
    )

    assert calls == [(("primary",), "Europe/Warsaw")]
    assert fake.windows[0][0] == date(2024, 8, 12)
    assert "15." in output[0]


def test_marker_failures_do_not_stop_rendering() -> None:
    fake = FakeClient(markers={date(2024, 8, 15): ["ignored"]}, error=CalendarApiError("boom"))

    output = run(
        ["--date", "2024-08-14", "--calendar-id", "primary"],
        client_factory=lambda ids, tz: fake,
    )

    assert "August 2024" in output[0]
    assert "." not in output[0]


def test_revoked_credentials_do_not_stop_rendering() -> None:
    error = RefreshError("invalid_grant: Token has been expired or revoked.")
    fake = FakeClient(markers={date(2024, 8, 15): ["ignored"]}, error=error)

    output = run(
        ["--date", "2024-08-14", "--calendar-id", "primary"],
        client_factory=lambda ids, tz: fake,
    )

    assert len(fake.windows) == 1
    assert "August 2024" in output[0]
    assert "." not in output[0]


def test_callbacks_record_user_changes() -> None:
    settings = app.resolve_settings(
        app.build_parser().parse_args(
            ["--date", "2024-08-14", "--toggle", "2", "--select", "2024-08-20"]
        )
    )
    runtime = app.AppRuntime(settings=settings, printer=lambda _: None)

    calendar = runtime.run()

    assert runtime.changes == ["format two_weeks", "format week", "selected 2024-08-20"]
    assert calendar.logic.selected_date == date(2024, 8, 20)


@pytest.mark.parametrize(
    "argv",
    [
        ["--format", "year"],
        ["--format", "week", "--available-formats", "month"],
        ["--next", "-1"],
        ["--timezone", "Nowhere/Land"],
    ],
)
def test_invalid_settings_exit_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run(argv)

    assert excinfo.value.code == 2
