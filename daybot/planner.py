"""Deterministic day plan.

``format_plan`` is the single fallback used by the server (no model key or a
failed model call) and by the client (server unreachable). It is a pure
function of its arguments.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from .models import PlanContext, Task

BUCKETS = ("Morning", "Afternoon", "Evening")

DEFAULT_BUCKET_TIME = "13:00"
MISSING_TIME_LABEL = "--:--"
_MISSING_TIME_SORT = "99:99"

NO_TASKS_LINE = "- No tasks yet. Add 3 priorities and one easy win."
FOCUS_TIP = "Focus tip: Block 25-50m deep-work sprints, mute notifications, and batch shallow work."
CLOSING_LINE = "Remember to schedule breaks and hydrate."

_FOCUS_RE = re.compile(r"focus|overwhelm|busy|stress", re.IGNORECASE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?\n]")
_DIGITS_RE = re.compile(r"[0-9]+")


def _hour(time: Optional[str]) -> int:
    default = int(DEFAULT_BUCKET_TIME.split(":")[0])
    if not time:
        return default
    head = time.split(":", 1)[0].strip()
    # Numeric parse; anything non-numeric buckets like a missing time
    if not _DIGITS_RE.fullmatch(head):
        return default
    return int(head)


def bucket_for(time: Optional[str]) -> str:
    hour = _hour(time)
    if hour < 12:
        return "Morning"
    if hour < 17:
        return "Afternoon"
    return "Evening"


def _task_line(t: Task) -> str:
    dur = f" ({t.duration_min}m)" if t.duration_min else ""
    return f"  - {t.time or MISSING_TIME_LABEL}  {t.title}{dur}"


def _bucket_blocks(pending: Sequence[Task]) -> List[str]:
    buckets: Dict[str, List[Task]] = {name: [] for name in BUCKETS}
    for t in pending:
        buckets[bucket_for(t.time)].append(t)
    blocks: List[str] = []
    for name in BUCKETS:
        items = sorted(buckets[name], key=lambda t: t.time or _MISSING_TIME_SORT)
        if not items:
            continue
        blocks.append(f"{name}:\n" + "\n".join(_task_line(t) for t in items))
    return blocks


def takeaway(journal: str) -> Optional[str]:
    """First sentence of the journal, or None when there is nothing to say."""
    if not journal or not journal.strip():
        return None
    for part in _SENTENCE_SPLIT_RE.split(journal):
        part = part.strip()
        if part:
            return part
    return None


def wants_focus_tip(prompt: str) -> bool:
    return bool(_FOCUS_RE.search(prompt or ""))


def format_plan(prompt: str, context: PlanContext) -> str:
    blocks: List[str] = [f"Plan for {context.date}"]

    pending = [t for t in context.tasks if not t.done]
    if pending:
        blocks.extend(_bucket_blocks(pending))
    else:
        blocks.append(NO_TASKS_LINE)

    todo_habits = [h.name for h in context.habits if not h.done]
    if todo_habits:
        blocks.append("Habits to hit: " + ", ".join(todo_habits))

    note = takeaway(context.journal)
    if note:
        blocks.append(f"Journal takeaway: {note}")

    if wants_focus_tip(prompt):
        blocks.append(FOCUS_TIP)

    blocks.append(CLOSING_LINE)
    return "\n\n".join(blocks)
