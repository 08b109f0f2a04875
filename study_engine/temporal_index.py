"""Date-bucketed index of dated schedule blocks, assignments and exams."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger

from study_engine.dates import ExactDate, parse_date
from study_engine.schema import Assignment, Exam, IndexEntry, ScheduleBlock

COLOR_TAGS = {
    "Lecture": "blue",
    "Lab": "purple",
    "Study": "green",
    "Personal": "orange",
    "Assignment": "amber",
    "Exam": "red",
}


def block_entry(block: ScheduleBlock) -> IndexEntry:
    kind = block.kind.value
    return IndexEntry(kind=kind, title=block.title, color_tag=COLOR_TAGS.get(kind, "gray"))


@dataclass(frozen=True)
class TemporalIndex:
    """Read-only ``ISO date -> entries`` map. Rebuild it instead of mutating it."""

    buckets: Mapping[str, tuple[IndexEntry, ...]]

    def lookup(self, day: date) -> tuple[IndexEntry, ...]:
        return self.buckets.get(day.isoformat(), ())

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.buckets.values())


def build_index(
    schedule: Iterable[ScheduleBlock],
    assignments: Iterable[Assignment],
    exams: Iterable[Exam],
) -> TemporalIndex:
    """Bucket every item with a usable date; weekday-recurring blocks are left out."""

    buckets: dict[str, list[IndexEntry]] = defaultdict(list)
    skipped = 0

    for block in schedule:
        if isinstance(block.recurrence, ExactDate):
            buckets[block.recurrence.on.isoformat()].append(block_entry(block))

    for assignment in assignments:
        due = parse_date(assignment.due_date)
        if due is None:
            skipped += 1
            continue
        buckets[due.isoformat()].append(IndexEntry("Assignment", assignment.title, COLOR_TAGS["Assignment"]))

    for exam in exams:
        on = parse_date(exam.date)
        if on is None:
            skipped += 1
            continue
        buckets[on.isoformat()].append(IndexEntry("Exam", exam.title, COLOR_TAGS["Exam"]))

    if skipped:
        logger.debug(f"Temporal index skipped {skipped} items with malformed dates")

    return TemporalIndex(MappingProxyType({key: tuple(entries) for key, entries in buckets.items()}))
