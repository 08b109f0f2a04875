"""CSV adapter for timetable exports."""

from __future__ import annotations

import csv

from loguru import logger

from study_engine.dates import normalize_time, parse_recurrence
from study_engine.schema import ScheduleBlock, ScheduleKind

_REQUIRED_FIELDS = ("id", "title", "day", "start_time", "end_time")
_VALID_KINDS = {kind.value: kind for kind in ScheduleKind}


def _parse_row(row: dict, row_number: int) -> ScheduleBlock:
    missing = [field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip()]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    kind_raw = (row.get("kind") or "Lecture").strip()
    if kind_raw not in _VALID_KINDS:
        raise ValueError(f"Row {row_number}: invalid kind '{kind_raw}'")

    try:
        start_time = normalize_time(row["start_time"])
        end_time = normalize_time(row["end_time"])
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: {exc}") from exc

    recurrence = parse_recurrence(row["day"])
    if recurrence is None:
        logger.debug(f"Row {row_number}: unusable day {row['day']!r}, block will not be scheduled")

    location = (row.get("location") or "").strip() or None

    return ScheduleBlock(
        id=row["id"].strip(),
        title=row["title"].strip(),
        kind=_VALID_KINDS[kind_raw],
        recurrence=recurrence,
        start_time=start_time,
        end_time=end_time,
        location=location,
    )


def parse(file_path: str) -> list[ScheduleBlock]:
    """Parse a timetable CSV into schedule blocks."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        blocks: list[ScheduleBlock] = []
        for row_number, row in enumerate(reader, start=2):
            blocks.append(_parse_row(row, row_number))
        return blocks
