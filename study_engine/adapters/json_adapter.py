"""JSON adapter for dashboard snapshots."""

from __future__ import annotations

import json
import math
from typing import Any, Callable

from loguru import logger

from study_engine.dates import normalize_time, parse_datetime, parse_recurrence
from study_engine.lifecycle import coerce_status
from study_engine.schema import (
    Assignment,
    EventStore,
    Exam,
    ScheduleBlock,
    ScheduleKind,
    SyllabusModule,
    Todo,
)

_VALID_KINDS = {kind.value: kind for kind in ScheduleKind}


def _require(item: dict, fields: tuple[str, ...], where: str) -> None:
    missing = [field for field in fields if item.get(field) in (None, "")]
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")


def _optional_str(value: Any) -> str | None:
    return str(value).strip() if value not in (None, "") else None


def _parse_block(item: dict, where: str) -> ScheduleBlock:
    _require(item, ("id", "title", "day", "startTime", "endTime"), where)

    kind_raw = str(item.get("type") or item.get("kind") or "Lecture").strip()
    if kind_raw not in _VALID_KINDS:
        raise ValueError(f"{where}: invalid kind '{kind_raw}'")

    try:
        start_time = normalize_time(item["startTime"])
        end_time = normalize_time(item["endTime"])
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from exc

    recurrence = parse_recurrence(item["day"])
    if recurrence is None:
        logger.debug(f"{where}: unusable day {item['day']!r}, block will not be scheduled")

    return ScheduleBlock(
        id=str(item["id"]),
        title=str(item["title"]).strip(),
        kind=_VALID_KINDS[kind_raw],
        recurrence=recurrence,
        start_time=start_time,
        end_time=end_time,
        location=_optional_str(item.get("location")),
    )


def _parse_assignment(item: dict, where: str) -> Assignment:
    _require(item, ("id", "title", "dueDate"), where)

    due_time = None
    if item.get("dueTime"):
        try:
            due_time = normalize_time(item["dueTime"])
        except ValueError as exc:
            raise ValueError(f"{where}: {exc}") from exc

    return Assignment(
        id=str(item["id"]),
        title=str(item["title"]).strip(),
        due_date=str(item["dueDate"]).strip(),
        due_time=due_time,
        course=_optional_str(item.get("course")),
        priority=_optional_str(item.get("priority")),
        status=_optional_str(item.get("status")),
    )


def _parse_exam(item: dict, where: str) -> Exam:
    _require(item, ("id", "title", "date"), where)
    return Exam(
        id=str(item["id"]),
        title=str(item["title"]).strip(),
        date=str(item["date"]).strip(),
        subject_id=_optional_str(item.get("subjectId")),
        notes=_optional_str(item.get("syllabus") or item.get("notes")),
    )


def _parse_todo(item: dict, where: str) -> Todo:
    _require(item, ("id", "text"), where)

    priority_raw = item.get("priority", 4)
    try:
        priority = int(priority_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid priority '{priority_raw}'") from exc
    if not 1 <= priority <= 4:
        raise ValueError(f"{where}: invalid priority '{priority_raw}'")

    completed = item.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"{where}: invalid completed flag '{completed}'")

    return Todo(
        id=str(item["id"]),
        text=str(item["text"]).strip(),
        due_date=_optional_str(item.get("dueDate")),
        completed=completed,
        priority=priority,
    )


def _parse_module(item: dict, where: str) -> SyllabusModule:
    _require(item, ("id", "title"), where)

    last_raw = item.get("lastStudiedAt")
    last_studied_at = parse_datetime(last_raw)
    if last_raw and last_studied_at is None:
        logger.warning(f"{where}: malformed lastStudiedAt {last_raw!r}, treating as never studied")

    strength_raw = item.get("strength")
    try:
        strength = float(strength_raw) if strength_raw not in (None, "") else 1.0
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid strength '{strength_raw}'") from exc
    if not math.isfinite(strength):
        raise ValueError(f"{where}: invalid strength '{strength_raw}'")

    topics = item.get("topics") or ()
    if isinstance(topics, str):
        topics = topics.split(",")

    return SyllabusModule(
        id=str(item["id"]),
        title=str(item["title"]).strip(),
        topics=tuple(str(topic).strip() for topic in topics if str(topic).strip()),
        status=coerce_status(item.get("status")),
        last_studied_at=last_studied_at,
        strength=strength,
    )


_SECTIONS: dict[str, Callable[[dict, str], Any]] = {
    "schedule": _parse_block,
    "assignments": _parse_assignment,
    "exams": _parse_exam,
    "todos": _parse_todo,
    "modules": _parse_module,
}


def parse_payload(payload: Any) -> EventStore:
    """Build an ``EventStore`` from an already-decoded JSON object."""

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object of collections")

    collections: dict[str, tuple] = {}
    for section, parse_item in _SECTIONS.items():
        items = payload.get(section) or []
        if not isinstance(items, list):
            raise ValueError(f"'{section}' must be a list of objects")
        parsed = []
        for index, item in enumerate(items, start=1):
            where = f"{section} item {index}"
            if not isinstance(item, dict):
                raise ValueError(f"{where}: expected an object")
            parsed.append(parse_item(item, where))
        collections[section] = tuple(parsed)

    return EventStore(**collections)


def parse(file_path: str) -> EventStore:
    """Parse a JSON snapshot file into an ``EventStore``."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    return parse_payload(payload)
