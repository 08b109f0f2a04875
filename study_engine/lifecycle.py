"""Study-progress cycle for syllabus modules."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable

from loguru import logger

from study_engine.schema import ModuleStatus, SyllabusModule

_NEXT_STATUS = {
    ModuleStatus.PENDING: ModuleStatus.IN_PROGRESS,
    ModuleStatus.IN_PROGRESS: ModuleStatus.COMPLETED,
    ModuleStatus.COMPLETED: ModuleStatus.REVISED,
    ModuleStatus.REVISED: ModuleStatus.PENDING,
}

# entering these states marks a moment of effective study
_STUDY_STATES = {ModuleStatus.COMPLETED, ModuleStatus.REVISED}

_LEGACY_SPELLINGS = {"in progress": ModuleStatus.IN_PROGRESS}


def coerce_status(value: Any) -> ModuleStatus:
    """Map a stored status onto the enum; anything unrecognised becomes Pending."""

    if isinstance(value, ModuleStatus):
        return value
    text = str(value).strip() if value is not None else ""
    for status in ModuleStatus:
        if status.value.lower() == text.lower():
            return status
    legacy = _LEGACY_SPELLINGS.get(text.lower())
    if legacy is not None:
        return legacy
    logger.debug(f"Unknown module status {value!r}, treating as Pending")
    return ModuleStatus.PENDING


def next_status(status: Any) -> ModuleStatus:
    return _NEXT_STATUS[coerce_status(status)]


def advance(module: SyllabusModule, now: datetime) -> SyllabusModule:
    """Return ``module`` moved one step along the cycle.

    Completed and Revised stamp ``last_studied_at``; going back to Pending keeps
    the previous stamp so the history is not lost.
    """

    status = next_status(module.status)
    if status in _STUDY_STATES:
        return replace(module, status=status, last_studied_at=now)
    return replace(module, status=status)


def transition_payload(module: SyllabusModule) -> dict:
    """Fields the host persists after an ``advance``."""

    payload: dict[str, Any] = {"status": module.status.value}
    if module.last_studied_at is not None:
        payload["lastStudiedAt"] = module.last_studied_at.isoformat()
    return payload


def is_studied(module: SyllabusModule) -> bool:
    return coerce_status(module.status) in _STUDY_STATES


def syllabus_progress(modules: Iterable[SyllabusModule]) -> int:
    """Percentage of modules that are Completed or Revised."""

    modules = list(modules)
    if not modules:
        return 0
    done = sum(1 for module in modules if is_studied(module))
    return int(math.floor(done / len(modules) * 100 + 0.5))
