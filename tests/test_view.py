from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pytest

from table_calendar.formats import CalendarFormat
from table_calendar.view import MAX_MARKERS, TableCalendar

MONTH = CalendarFormat.MONTH
TWO_WEEKS = CalendarFormat.TWO_WEEKS
WEEK = CalendarFormat.WEEK
TODAY = date(2024, 8, 14)


def make_calendar(**kwargs: Any) -> TableCalendar:
    kwargs.setdefault("initial_date", date(2024, 8, 14))
    kwargs.setdefault("today_provider", lambda: TODAY)
    return TableCalendar(**kwargs)


def test_select_notifies_once_with_day() -> None:
    selected: list[date] = []
    calendar = make_calendar(on_day_selected=selected.append)

    calendar.select(datetime(2024, 9, 1, 12, 30))

    assert selected == [date(2024, 9, 1)]
    assert calendar.logic.selected_date == date(2024, 9, 1)
    assert calendar.logic.focused_date == date(2024, 8, 14)


def test_toggle_notifies_once_with_new_format() -> None:
    changes: list[CalendarFormat] = []
    calendar = make_calendar(available_formats=[MONTH, WEEK], on_format_changed=changes.append)

    assert calendar.toggle_format() is WEEK
    assert changes == [WEEK]


def test_forced_format_overrides_display_without_touching_logic() -> None:
    changes: list[CalendarFormat] = []
    calendar = make_calendar(forced_format=WEEK, on_format_changed=changes.append)

    assert calendar.effective_format is WEEK
    assert calendar.logic.calendar_format is MONTH
    assert calendar.format_button_enabled is False
    assert len(calendar.visible_days()) == 7
    assert calendar.header().title == "Aug 12 – Aug 18"
    assert calendar.header().toggle_text is None

    assert calendar.toggle_format() is MONTH
    assert changes == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"available_formats": [MONTH]},
        {"format_button_visible": False},
        {"forced_format": MONTH},
    ],
)
def test_format_button_disabled(kwargs: dict[str, Any]) -> None:
    calendar = make_calendar(**kwargs)

    assert calendar.format_button_enabled is False
    assert calendar.header().toggle_text is None


def test_header_model() -> None:
    calendar = make_calendar(header_visible=False)
    header = calendar.header()

    assert header.title == "August 2024"
    assert header.toggle_text == "2 weeks"
    assert header.visible is False


def test_days_of_week_flags_first_and_last() -> None:
    labels = make_calendar().days_of_week()

    assert [label.text for label in labels] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [label.is_weekend for label in labels] == [True, False, False, False, False, False, True]


def test_month_rows_are_weeks_of_cells() -> None:
    calendar = make_calendar()
    rows = calendar.rows()

    assert len(rows) == 5
    assert all(len(week) == 7 for week in rows)
    first = rows[0][0]
    assert first.day == date(2024, 7, 29)
    assert first.is_outside_month is True
    assert first.text == "29"

    cells = {cell.day: cell for week in rows for cell in week}
    assert cells[date(2024, 8, 14)].is_selected
    assert cells[date(2024, 8, 14)].is_today
    assert cells[date(2024, 8, 17)].is_weekend
    assert not cells[date(2024, 8, 31)].is_outside_month
    assert cells[date(2024, 9, 1)].is_outside_month


def test_two_weeks_rows() -> None:
    calendar = make_calendar(initial_format=TWO_WEEKS)
    rows = calendar.rows()

    assert len(rows) == 2
    assert rows[1][0].day == date(2024, 8, 19)
    assert not any(cell.is_outside_month for week in rows for cell in week)


def test_markers_are_counted_and_capped() -> None:
    events = {
        datetime(2024, 8, 14, 9, 0): ["standup"],
        date(2024, 8, 14): ["lunch"],
        date(2024, 8, 20): ["a", "b", "c", "d", "e", "f"],
    }
    calendar = make_calendar(events=events)
    cells = {cell.day: cell for week in calendar.rows() for cell in week}

    assert cells[date(2024, 8, 14)].markers == 2
    assert cells[date(2024, 8, 20)].markers == MAX_MARKERS
    assert cells[date(2024, 8, 21)].markers == 0
    assert calendar.events_for(datetime(2024, 8, 14, 18, 0)) == ["standup", "lunch"]


def test_cell_accepts_datetime() -> None:
    calendar = make_calendar(events={date(2024, 8, 14): ["standup"]})

    cell = calendar.cell(datetime(2024, 8, 14, 9, 0))

    assert cell.day == date(2024, 8, 14)
    assert cell.markers == 1
    assert cell.is_selected and cell.is_today


@pytest.mark.parametrize(
    "direction, expected",
    [("right", date(2024, 7, 14)), ("left", date(2024, 9, 14))],
)
def test_swipe_maps_direction_to_navigation(direction: str, expected: date) -> None:
    calendar = make_calendar()

    assert calendar.swipe(direction) == expected


def test_swipe_rejects_unknown_direction() -> None:
    with pytest.raises(ValueError, match="Unsupported swipe direction"):
        make_calendar().swipe("up")


def test_forced_format_pages_by_internal_format() -> None:
    calendar = make_calendar(initial_format=WEEK, forced_format=MONTH)

    calendar.next()

    assert calendar.logic.focused_date == date(2024, 8, 21)
    assert calendar.header().title == "August 2024"
