"""Natural-language quick add for todos.

Rules run in a fixed order and each one strips what it matched, so a word is
never consumed twice:

1. due date defaults to today
2. ``inbox`` / ``no date`` clears the due date
3. ``p1``..``p4`` sets the priority (default 4)
4. ``today`` is dropped, otherwise ``tomorrow`` sets the due date to today + 1
5. whatever is left is the task text

Rule 4 runs after rule 2 unconditionally, so "inbox tomorrow" ends up due
tomorrow. Existing clients rely on that ordering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

DEFAULT_PRIORITY = 4

_INBOX_RE = re.compile(r"\b(?:inbox|no\s+date)\b", re.IGNORECASE)
_PRIORITY_RE = re.compile(r"\bp([1-4])\b", re.IGNORECASE)
_TODAY_RE = re.compile(r"\btoday\b", re.IGNORECASE)
_TOMORROW_RE = re.compile(r"\btomorrow\b", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class QuickAddResult:
    text: str
    due_date: Optional[date]
    priority: int = DEFAULT_PRIORITY

    def as_payload(self) -> dict:
        return {
            "text": self.text,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority,
        }


def _strip(pattern: re.Pattern, text: str) -> tuple[Optional[re.Match], str]:
    match = pattern.search(text)
    if match is None:
        return None, text
    return match, text[: match.start()] + " " + text[match.end() :]


def parse_quick_add(text: str, today: date) -> QuickAddResult:
    """Extract text, due date and priority from one line of input."""

    due: Optional[date] = today

    match, text = _strip(_INBOX_RE, text)
    if match:
        due = None

    priority = DEFAULT_PRIORITY
    match, text = _strip(_PRIORITY_RE, text)
    if match:
        priority = int(match.group(1))

    match, text = _strip(_TODAY_RE, text)
    if not match:
        match, text = _strip(_TOMORROW_RE, text)
        if match:
            due = today + timedelta(days=1)

    return QuickAddResult(text=_SPACES_RE.sub(" ", text).strip(), due_date=due, priority=priority)
