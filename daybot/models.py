from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import date as _date
from typing import Any, Dict, Optional, Tuple

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    time: Optional[str] = None  # HH:MM
    duration_min: Optional[int] = None
    done: bool = False
    category: Optional[str] = None


@dataclass(frozen=True)
class Habit:
    id: str
    name: str
    done: bool = False


@dataclass(frozen=True)
class PlanContext:
    """Immutable snapshot of one day, assembled by the caller at request time."""
    date: str
    tasks: Tuple[Task, ...] = ()
    habits: Tuple[Habit, ...] = ()
    journal: str = ""


def new_id(prefix: str = "id") -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{prefix}_{suffix}"


def today_key(now: Optional[_date] = None) -> str:
    return (now or _date.today()).isoformat()


def default_habits() -> Tuple[Habit, ...]:
    return (
        Habit(id="habit_water", name="Hydration"),
        Habit(id="habit_move", name="Exercise"),
        Habit(id="habit_read", name="Reading"),
    )


def empty_context(day: Optional[str] = None, *, seed_habits: bool = False) -> PlanContext:
    habits = default_habits() if seed_habits else ()
    return PlanContext(date=day or today_key(), habits=habits)


# ---------------------------------------------------------------------------
# Loose JSON -> typed values
# ---------------------------------------------------------------------------

def _clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def _clean_duration(value: Any) -> Optional[int]:
    # bool is an int subclass; a checkbox value is never a duration
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int) and value > 0:
        return value
    return None


def _clean_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def task_from_dict(d: Dict[str, Any]) -> Task:
    duration = d.get("durationMin", d.get("duration_min"))
    return Task(
        id=_clean_str(d.get("id")) or new_id("task"),
        title=_clean_str(d.get("title")) or "Untitled",
        time=_clean_str(d.get("time")),
        duration_min=_clean_duration(duration),
        done=_clean_flag(d.get("done")),
        category=_clean_str(d.get("category")),
    )


def habit_from_dict(d: Dict[str, Any]) -> Habit:
    return Habit(
        id=_clean_str(d.get("id")) or new_id("habit"),
        name=_clean_str(d.get("name")) or "Habit",
        done=_clean_flag(d.get("done")),
    )


def context_from_dict(d: Optional[Dict[str, Any]], today: Optional[str] = None) -> PlanContext:
    """Build a PlanContext from a request body or stored document.

    Anything malformed is replaced by a default instead of failing: a missing
    date becomes ``today``, non-list collections become empty and non-dict
    entries are dropped. Duplicate ids keep the first occurrence.
    """
    d = d if isinstance(d, dict) else {}
    raw_tasks = d.get("tasks")
    raw_habits = d.get("habits")
    tasks = [task_from_dict(t) for t in (raw_tasks if isinstance(raw_tasks, list) else []) if isinstance(t, dict)]
    habits = [habit_from_dict(h) for h in (raw_habits if isinstance(raw_habits, list) else []) if isinstance(h, dict)]
    journal = d.get("journal")
    return PlanContext(
        date=_clean_str(d.get("date")) or today or today_key(),
        tasks=_unique(tasks),
        habits=_unique(habits),
        journal=journal if isinstance(journal, str) else "",
    )


def _unique(items):
    seen = set()
    out = []
    for it in items:
        if it.id in seen:
            continue
        seen.add(it.id)
        out.append(it)
    return tuple(out)


def task_to_dict(t: Task) -> Dict[str, Any]:
    out: Dict[str, Any] = {"id": t.id, "title": t.title, "done": t.done}
    if t.time is not None:
        out["time"] = t.time
    if t.duration_min is not None:
        out["durationMin"] = t.duration_min
    if t.category is not None:
        out["category"] = t.category
    return out


def context_to_dict(ctx: PlanContext) -> Dict[str, Any]:
    return {
        "date": ctx.date,
        "tasks": [task_to_dict(t) for t in ctx.tasks],
        "habits": [{"id": h.id, "name": h.name, "done": h.done} for h in ctx.habits],
        "journal": ctx.journal,
    }
