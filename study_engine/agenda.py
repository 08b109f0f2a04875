"""Per-day agenda assembly for the month grid and the day panel.

The merger combines four independently owned collections:

- schedule blocks, matched by exact date or by weekday name
- assignments, bucketed by the date portion of their due date
- exams, bucketed by the date portion of their date
- todos, shown only on today's panel and only while open

Items whose dates cannot be parsed are left out of the day instead of raising;
the calendar is a display aid, not a ledger.
"""

from __future__ import annotations

from datetime import date, datetime

from study_engine.dates import ExactDate, Weekly, parse_date, time_of_day, weekday_name
from study_engine.schema import AgendaItem, EventStore, IndexEntry, ScheduleBlock
from study_engine.temporal_index import TemporalIndex, block_entry, build_index

ASSIGNMENT_DEFAULT_TIME = "23:59"
EXAM_DEFAULT_TIME = "00:00"
TODO_TIME = "23:59"


def _block_matches(block: ScheduleBlock, day: date) -> bool:
    recurrence = block.recurrence
    if isinstance(recurrence, ExactDate):
        return recurrence.on == day
    if isinstance(recurrence, Weekly):
        return recurrence.weekday == weekday_name(day)
    return False


class AgendaMerger:
    """Agenda queries over one snapshot; a data change means a new merger."""

    def __init__(self, store: EventStore) -> None:
        self._store = store
        self._index = build_index(store.schedule, store.assignments, store.exams)
        self._weekly = tuple(block for block in store.schedule if isinstance(block.recurrence, Weekly))

    @property
    def index(self) -> TemporalIndex:
        return self._index

    def compact(self, day: date) -> list[IndexEntry]:
        """Badge entries for a month-grid cell; order is not meaningful."""

        entries = list(self._index.lookup(day))
        name = weekday_name(day)
        entries.extend(block_entry(block) for block in self._weekly if block.recurrence.weekday == name)
        return entries

    def detailed(self, day: date, now: datetime) -> list[AgendaItem]:
        """Everything happening on ``day``, ordered by display time."""

        items: list[AgendaItem] = []

        for block in self._store.schedule:
            if _block_matches(block, day):
                items.append(
                    AgendaItem(
                        id=f"ev-{block.id}",
                        kind=block.kind.value,
                        title=block.title,
                        time=block.start_time,
                        subtitle=block.location,
                        source=block,
                    )
                )

        for assignment in self._store.assignments:
            if parse_date(assignment.due_date) == day:
                items.append(
                    AgendaItem(
                        id=f"as-{assignment.id}",
                        kind="Assignment",
                        title=assignment.title,
                        time=assignment.due_time or ASSIGNMENT_DEFAULT_TIME,
                        subtitle=assignment.course,
                        source=assignment,
                    )
                )

        for exam in self._store.exams:
            if parse_date(exam.date) == day:
                items.append(
                    AgendaItem(
                        id=f"ex-{exam.id}",
                        kind="Exam",
                        title=exam.title,
                        time=time_of_day(exam.date) or EXAM_DEFAULT_TIME,
                        subtitle=exam.subject_id,
                        source=exam,
                    )
                )

        if day == now.date():
            for todo in self._store.todos:
                if not todo.completed and parse_date(todo.due_date) == day:
                    items.append(
                        AgendaItem(
                            id=f"td-{todo.id}",
                            kind="Todo",
                            title=todo.text,
                            time=TODO_TIME,
                            subtitle="Task",
                            source=todo,
                        )
                    )

        # sorted() is stable: equal times keep schedule/assignment/exam/todo order
        return sorted(items, key=lambda item: item.time)

    def is_busy(self, day: date, now: datetime) -> bool:
        if self.compact(day):
            return True
        if day != now.date():
            return False
        return any(not todo.completed and parse_date(todo.due_date) == day for todo in self._store.todos)

    def is_exam_day(self, day: date) -> bool:
        return any(entry.kind == "Exam" for entry in self._index.lookup(day))


def compact_agenda(store: EventStore, day: date) -> list[IndexEntry]:
    return AgendaMerger(store).compact(day)


def detailed_agenda(store: EventStore, day: date, now: datetime) -> list[AgendaItem]:
    return AgendaMerger(store).detailed(day, now)
