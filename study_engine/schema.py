"""Core data schema for the study dashboard collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from study_engine.dates import Recurrence


class ScheduleKind(str, Enum):
    LECTURE = "Lecture"
    LAB = "Lab"
    STUDY = "Study"
    PERSONAL = "Personal"


class ModuleStatus(str, Enum):
    """Study progress of a syllabus module. Only ``lifecycle.advance`` moves it."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    REVISED = "Revised"


@dataclass(frozen=True)
class ScheduleBlock:
    """Class or personal slot; recurrence is None when the wire ``day`` was unusable."""

    id: str
    title: str
    kind: ScheduleKind
    recurrence: Optional[Recurrence]
    start_time: str
    end_time: str
    location: Optional[str] = None


@dataclass(frozen=True)
class Assignment:
    id: str
    title: str
    due_date: str
    due_time: Optional[str] = None
    course: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class Exam:
    id: str
    title: str
    date: str
    subject_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Todo:
    id: str
    text: str
    due_date: Optional[str] = None
    completed: bool = False
    priority: int = 4


@dataclass(frozen=True)
class SyllabusModule:
    id: str
    title: str
    topics: tuple[str, ...] = ()
    status: ModuleStatus = ModuleStatus.PENDING
    last_studied_at: Optional[datetime] = None
    strength: float = 1.0


@dataclass(frozen=True)
class EventStore:
    """Snapshot of every collection the engine reads."""

    schedule: tuple[ScheduleBlock, ...] = ()
    assignments: tuple[Assignment, ...] = ()
    exams: tuple[Exam, ...] = ()
    todos: tuple[Todo, ...] = ()
    modules: tuple[SyllabusModule, ...] = ()


@dataclass(frozen=True)
class IndexEntry:
    """Badge-level display record used by the month view."""

    kind: str
    title: str
    color_tag: str


@dataclass(frozen=True)
class AgendaItem:
    """One row of the detailed day panel."""

    id: str
    kind: str
    title: str
    time: str
    subtitle: Optional[str] = None
    source: Any = field(default=None, compare=False, repr=False)
