"""User-facing edits of a day: add/toggle/delete tasks, toggle habits, journal.

Every function takes a PlanContext and returns a new one; nothing is mutated.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from .models import PlanContext, Task, new_id

TASK_CATEGORIES = ("Deep Work", "Meeting", "Errand", "Admin", "Personal")


def _fresh_task_id(ctx: PlanContext) -> str:
    taken = {t.id for t in ctx.tasks}
    while True:
        candidate = new_id("task")
        if candidate not in taken:
            return candidate


def add_task(
    ctx: PlanContext,
    title: str,
    time: Optional[str] = None,
    duration_min: Optional[int] = None,
    category: Optional[str] = None,
) -> Tuple[PlanContext, Task]:
    task = Task(
        id=_fresh_task_id(ctx),
        title=(title or "").strip() or "Untitled",
        time=time or None,
        duration_min=duration_min if duration_min and duration_min > 0 else None,
        done=False,
        category=category or None,
    )
    return replace(ctx, tasks=ctx.tasks + (task,)), task


def toggle_task(ctx: PlanContext, task_id: str) -> PlanContext:
    tasks = tuple(replace(t, done=not t.done) if t.id == task_id else t for t in ctx.tasks)
    return replace(ctx, tasks=tasks)


def delete_task(ctx: PlanContext, task_id: str) -> PlanContext:
    return replace(ctx, tasks=tuple(t for t in ctx.tasks if t.id != task_id))


def toggle_habit(ctx: PlanContext, habit_id: str) -> PlanContext:
    habits = tuple(replace(h, done=not h.done) if h.id == habit_id else h for h in ctx.habits)
    return replace(ctx, habits=habits)


def set_journal(ctx: PlanContext, text: str) -> PlanContext:
    return replace(ctx, journal=text or "")


def pending_count(ctx: PlanContext) -> int:
    return sum(1 for t in ctx.tasks if not t.done)
