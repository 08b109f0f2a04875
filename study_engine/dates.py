"""Date helpers shared by the agenda and retention code."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


@dataclass(frozen=True)
class ExactDate:
    """Block occurs once, on this date."""

    on: date


@dataclass(frozen=True)
class Weekly:
    """Block recurs every week on this weekday name."""

    weekday: str


Recurrence = Union[ExactDate, Weekly]


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def parse_recurrence(day: str | None) -> Optional[Recurrence]:
    """Turn a wire ``day`` value into a recurrence, or None if it is neither form."""

    if not day:
        return None
    value = str(day).strip()
    if _ISO_DATE_RE.match(value):
        try:
            return ExactDate(date.fromisoformat(value))
        except ValueError:
            return None
    for name in WEEKDAYS:
        if name.lower() == value.lower():
            return Weekly(name)
    return None


def parse_datetime(value: str | None) -> Optional[datetime]:
    """Parse an ISO date or datetime string; None when malformed."""

    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_date(value: str | None) -> Optional[date]:
    """Date portion of an ISO date/datetime string; time-of-day is discarded."""

    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def time_of_day(value: str | None) -> Optional[str]:
    """``HH:MM`` of an ISO datetime string, None for date-only or malformed values."""

    if not value or len(str(value).strip()) <= 10:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return parsed.strftime("%H:%M")


def normalize_time(value: str) -> str:
    """Zero-pad a 24h ``H:MM`` time so lexicographic order is chronological."""

    match = _TIME_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"malformed time '{value}'")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"malformed time '{value}'")
    return f"{hours:02d}:{minutes:02d}"


def align(moment: datetime, reference: datetime) -> datetime:
    """Make ``moment`` comparable with ``reference``; naive values are read as UTC."""

    if (moment.tzinfo is None) == (reference.tzinfo is None):
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def local_now(value: str | None = None) -> datetime:
    """Current time, or an ISO ``value``, as an aware datetime in the local zone.

    Naive input is read as local wall-clock time, matching what a user types.
    """

    moment = datetime.fromisoformat(value.replace("Z", "+00:00")) if value else datetime.now()
    return moment.astimezone()
