"""Print the agenda and retention report for a JSON dashboard snapshot."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_engine.adapters import csv_adapter, json_adapter
from study_engine.agenda import AgendaMerger
from study_engine.dates import local_now
from study_engine.log import configure_logging
from study_engine.retention import memory_leaks, retention_report
from study_engine.tasks import filter_view


def _load_store(path: Path, timetable: Path | None):
    if path.suffix.lower() != ".json":
        raise ValueError("Unsupported input format, expected .json")
    store = json_adapter.parse(str(path))
    if timetable is not None:
        blocks = csv_adapter.parse(str(timetable))
        store = replace(store, schedule=store.schedule + tuple(blocks))
    return store


def build_report(store, day: date, now: datetime) -> dict:
    merger = AgendaMerger(store)
    return {
        "date": day.isoformat(),
        "agenda": [
            {"time": item.time, "kind": item.kind, "title": item.title, "subtitle": item.subtitle}
            for item in merger.detailed(day, now)
        ],
        "badges": [entry.color_tag for entry in merger.compact(day)],
        "retention": [
            {
                "module": row.module.title,
                "status": row.module.status.value,
                "retention": row.retention,
                "days_since": row.days_since,
                "band": row.band.value,
            }
            for row in retention_report(store.modules, now)
        ],
        "memory_leaks": [row.module.title for row in memory_leaks(store.modules, now)],
        "todos_today": [todo.text for todo in filter_view(store.todos, "today", now.date())],
        "inbox": [todo.text for todo in filter_view(store.todos, "inbox", now.date())],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the study-engine agenda for one day")
    parser.add_argument("--data", required=True, help="Path to JSON snapshot file")
    parser.add_argument("--timetable", help="Optional timetable CSV merged into the schedule")
    parser.add_argument("--date", help="Day to show (YYYY-MM-DD), defaults to today")
    parser.add_argument("--now", help="Reference time (ISO datetime), defaults to the current time")
    parser.add_argument("--log-level", default=None, help="loguru level, e.g. DEBUG")
    args = parser.parse_args()

    configure_logging(args.log_level)

    now = local_now(args.now)
    day = date.fromisoformat(args.date) if args.date else now.date()
    store = _load_store(Path(args.data), Path(args.timetable) if args.timetable else None)

    report = build_report(store, day, now)
    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "agenda_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved agenda report to {out_path}")


if __name__ == "__main__":
    main()
