#!/usr/bin/env python3
"""Generate sample calendar previews (PNG) for every format."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
import random
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from table_calendar import ALL_FORMATS, TableCalendar
from table_calendar.logic import month_window
from table_calendar.rendering import CalendarRenderer, RendererConfig


PREVIEWS_DIR = Path(__file__).resolve().parents[1] / "previews"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=PREVIEWS_DIR,
        help="Directory for the preview files (defaults to previews/).",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=date(2024, 2, 15),
        help="Date to focus and select (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=7,
        help="Seed for the random sample event markers.",
    )
    return parser.parse_args()


def sample_events(anchor: date, seed: int) -> dict[date, list[str]]:
    rng = random.Random(seed)
    days = month_window(anchor)
    return {day: [f"event {n}" for n in range(rng.randint(1, 6))] for day in rng.sample(days, 8)}


def main() -> None:
    args = parse_args()
    renderer = CalendarRenderer(RendererConfig(preview_output_dir=args.output_dir))
    events = sample_events(args.date, args.seed)

    for calendar_format in ALL_FORMATS:
        calendar = TableCalendar(
            initial_date=args.date,
            initial_format=calendar_format,
            events=events,
        )
        renderer.render(calendar, preview_name=f"sample_{calendar_format.value}")
        print(f"Wrote preview to {args.output_dir / f'sample_{calendar_format.value}.png'}")


if __name__ == "__main__":
    main()
