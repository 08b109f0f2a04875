"""Ebbinghaus-style retention scoring for studied syllabus modules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional

import numpy as np

from study_engine.config import get_settings
from study_engine.dates import align
from study_engine.lifecycle import is_studied
from study_engine.schema import SyllabusModule

SECONDS_PER_DAY = 86_400.0

HEALTHY_FLOOR = 80
FADING_FLOOR = 50


class RetentionBand(str, Enum):
    HEALTHY = "healthy"
    FADING = "fading"
    AT_RISK = "at-risk"


@dataclass(frozen=True)
class RetentionRow:
    module: SyllabusModule
    retention: int
    days_since: float
    band: RetentionBand


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _strength(strength: Optional[float]) -> float:
    if not strength or not math.isfinite(strength) or strength <= 0:
        return get_settings().default_strength
    return float(strength)


def elapsed_days(last_studied_at: datetime, now: datetime) -> float:
    """Fractional days between the two moments; absolute to absorb clock skew."""

    delta = now - align(last_studied_at, now)
    return abs(delta.total_seconds()) / SECONDS_PER_DAY


def retention(last_studied_at: Optional[datetime], strength: Optional[float] = 1.0, now: Optional[datetime] = None) -> int:
    """Estimated recall in ``[0, 100]``: ``round(100 * exp(-days / strength))``.

    Never studied scores 0. The function is total over statuses; callers decide
    whether to show the value (see ``display_retention``).
    """

    if last_studied_at is None:
        return 0
    now = now or datetime.now(timezone.utc)
    days = elapsed_days(last_studied_at, now)
    return _round_half_up(100.0 * math.exp(-days / _strength(strength)))


def classify(score: int) -> RetentionBand:
    if score >= HEALTHY_FLOOR:
        return RetentionBand.HEALTHY
    if score >= FADING_FLOOR:
        return RetentionBand.FADING
    return RetentionBand.AT_RISK


def module_retention(module: SyllabusModule, now: datetime) -> int:
    return retention(module.last_studied_at, module.strength, now)


def display_retention(module: SyllabusModule, now: datetime) -> Optional[int]:
    """Retention for the tracker row; None unless the module is Completed or Revised."""

    if not is_studied(module):
        return None
    return module_retention(module, now)


def retention_report(modules: Iterable[SyllabusModule], now: datetime) -> list[RetentionRow]:
    """Studied modules with their scores, lowest retention (most urgent) first."""

    rows = []
    for module in modules:
        if not is_studied(module):
            continue
        score = module_retention(module, now)
        days = elapsed_days(module.last_studied_at, now) if module.last_studied_at else 0.0
        rows.append(RetentionRow(module=module, retention=score, days_since=round(days, 1), band=classify(score)))
    return sorted(rows, key=lambda row: row.retention)


def memory_leaks(
    modules: Iterable[SyllabusModule],
    now: datetime,
    threshold: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[RetentionRow]:
    """The most-faded studied modules that dropped under ``threshold``."""

    settings = get_settings()
    threshold = settings.memory_leak_threshold if threshold is None else threshold
    limit = settings.memory_leak_limit if limit is None else limit
    return [row for row in retention_report(modules, now) if row.retention < threshold][:limit]


def next_review_at(module: SyllabusModule, threshold: int = FADING_FLOOR) -> Optional[datetime]:
    """When retention falls below ``threshold``; None for modules never studied."""

    if module.last_studied_at is None:
        return None
    if not 0 < threshold <= 100:
        raise ValueError(f"threshold must be in (0, 100], got {threshold}")
    days = _strength(module.strength) * math.log(100.0 / threshold)
    return module.last_studied_at + timedelta(days=days)


def retention_curve(strength: Optional[float], days) -> np.ndarray:
    """Vectorised scores for an array of elapsed days, for plotting decay."""

    elapsed = np.abs(np.asarray(days, dtype=float))
    scores = 100.0 * np.exp(-elapsed / _strength(strength))
    return np.floor(scores + 0.5).astype(int)
