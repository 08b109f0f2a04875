"""Pure collection transforms and the optimistic commit around them.

Every transform takes a tuple and returns a new tuple, so undoing a failed
save is just handing back the snapshot captured before the transform.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Generic, Iterable, Optional, TypeVar

from loguru import logger

from study_engine.lifecycle import advance
from study_engine.schema import SyllabusModule, Todo

T = TypeVar("T")


def add_item(items: Iterable[T], item: T) -> tuple[T, ...]:
    """Prepend ``item`` (newest first, as the dashboard lists them)."""
    return (item, *items)


def replace_item(items: Iterable[T], item: T) -> tuple[T, ...]:
    return tuple(item if existing.id == item.id else existing for existing in items)


def remove_item(items: Iterable[T], item_id: str) -> tuple[T, ...]:
    return tuple(existing for existing in items if existing.id != item_id)


def update_item(items: Iterable[T], item_id: str, update: Callable[[T], T]) -> tuple[T, ...]:
    return tuple(update(existing) if existing.id == item_id else existing for existing in items)


def toggle_todo(todos: Iterable[Todo], todo_id: str) -> tuple[Todo, ...]:
    return update_item(todos, todo_id, lambda todo: replace(todo, completed=not todo.completed))


def advance_module(modules: Iterable[SyllabusModule], module_id: str, now: datetime) -> tuple[SyllabusModule, ...]:
    return update_item(modules, module_id, lambda module: advance(module, now))


@dataclass(frozen=True)
class CommitResult(Generic[T]):
    """State the host should show after a save attempt."""

    items: tuple[T, ...]
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def commit_optimistic(
    items: Iterable[T],
    transform: Callable[[tuple[T, ...]], tuple[T, ...]],
    persist: Callable[[tuple[T, ...]], object],
) -> CommitResult[T]:
    """Apply ``transform`` and save; on a failed save hand back the original snapshot."""

    snapshot = tuple(items)
    updated = transform(snapshot)
    try:
        persist(updated)
    except Exception as exc:  # noqa: BLE001
        logger.warning(f"Persistence failed, restoring {len(snapshot)} items: {exc}")
        return CommitResult(items=snapshot, error=exc)
    return CommitResult(items=updated)
