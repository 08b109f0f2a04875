"""Todo list views and overdue rescheduling."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, Optional

from loguru import logger

from study_engine.config import get_settings
from study_engine.dates import parse_date
from study_engine.schema import Todo

VIEWS = ("inbox", "today", "upcoming", "completed", "all")
STRATEGIES = ("tomorrow", "spread", "ruthless")


def _is_overdue(todo: Todo, today: date) -> bool:
    due = parse_date(todo.due_date)
    return not todo.completed and due is not None and due < today


def _sort_key(todo: Todo) -> tuple:
    due = parse_date(todo.due_date)
    return (todo.completed, todo.priority, due is None, due or date.max)


def filter_view(todos: Iterable[Todo], view: str, today: date, upcoming_days: Optional[int] = None) -> list[Todo]:
    """Todos for one list view, open first, then by priority and due date."""

    if view not in VIEWS:
        raise ValueError(f"Unknown view '{view}', expected one of {VIEWS}")
    if upcoming_days is None:
        upcoming_days = get_settings().upcoming_days
    horizon = today + timedelta(days=upcoming_days)

    def keep(todo: Todo) -> bool:
        due = parse_date(todo.due_date)
        if view == "inbox":
            return not todo.due_date
        if view == "today":
            return due == today or _is_overdue(todo, today)
        if view == "upcoming":
            return due is not None and today <= due <= horizon
        if view == "completed":
            return todo.completed
        return True

    return sorted((todo for todo in todos if keep(todo)), key=_sort_key)


def reschedule_overdue(todos: Iterable[Todo], strategy: str, today: date) -> tuple[tuple[Todo, ...], int]:
    """Move open overdue todos forward; returns the new collection and how many moved."""

    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}', expected one of {STRATEGIES}")

    updated: list[Todo] = []
    moved = 0
    for todo in todos:
        if not _is_overdue(todo, today):
            updated.append(todo)
            continue

        if strategy == "tomorrow":
            new_due = today + timedelta(days=1)
        elif strategy == "spread":
            new_due = today + timedelta(days=1 + moved % 3)
        elif todo.priority <= 2:
            new_due = today
        else:
            new_due = today + timedelta(days=7)

        updated.append(replace(todo, due_date=new_due.isoformat()))
        moved += 1

    logger.info(f"Rescheduled {moved} overdue todos with strategy '{strategy}'")
    return tuple(updated), moved
