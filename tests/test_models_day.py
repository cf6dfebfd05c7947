import re
from datetime import date

from daybot import day
from daybot.models import (
    Habit,
    PlanContext,
    Task,
    context_from_dict,
    context_to_dict,
    default_habits,
    new_id,
    today_key,
)


def test_new_id_shape():
    assert re.fullmatch(r"task_[0-9a-z]{7}", new_id("task"))


def test_today_key_is_iso():
    assert today_key(date(2024, 1, 2)) == "2024-01-02"


def test_default_habits_seed():
    habits = default_habits()
    assert [h.id for h in habits] == ["habit_water", "habit_move", "habit_read"]
    assert [h.name for h in habits] == ["Hydration", "Exercise", "Reading"]
    assert not any(h.done for h in habits)


def test_context_from_dict_sanitises_loose_input():
    ctx = context_from_dict({
        "date": "2024-05-01",
        "tasks": [
            {"id": "a", "title": "Write", "time": "09:00", "durationMin": 30, "category": "Deep Work"},
            {"id": "b", "title": "  ", "time": 900, "durationMin": -5},
            {"id": "c", "title": "Call", "time": "", "duration_min": "15", "done": True},
            {"id": "a", "title": "Duplicate id"},
            "not a task",
        ],
        "habits": [{"id": "h", "name": "Reading", "done": False}, 42],
        "journal": "notes",
    })
    assert ctx.date == "2024-05-01"
    assert ctx.tasks == (
        Task(id="a", title="Write", time="09:00", duration_min=30, category="Deep Work"),
        Task(id="b", title="Untitled"),
        Task(id="c", title="Call", duration_min=15, done=True),
    )
    assert ctx.habits == (Habit(id="h", name="Reading"),)
    assert ctx.journal == "notes"


def test_context_from_dict_defaults():
    ctx = context_from_dict(None, today="2024-02-02")
    assert ctx == PlanContext(date="2024-02-02")
    ctx = context_from_dict({"tasks": "nope", "habits": None, "journal": 5}, today="2024-02-02")
    assert ctx.tasks == () and ctx.habits == () and ctx.journal == ""


def test_boolean_duration_is_dropped():
    ctx = context_from_dict({"date": "2024-01-01", "tasks": [{"id": "a", "title": "x", "durationMin": True}]})
    assert ctx.tasks[0].duration_min is None


def test_context_to_dict_uses_wire_names():
    ctx = PlanContext(date="2024-05-01", tasks=(Task(id="a", title="Write", time="09:00", duration_min=30),))
    out = context_to_dict(ctx)
    assert out["tasks"] == [{"id": "a", "title": "Write", "done": False, "time": "09:00", "durationMin": 30}]
    assert context_from_dict(out) == ctx


def test_add_task_appends_fresh_pending_task():
    ctx = PlanContext(date="2024-05-01", tasks=(Task(id="t0", title="Existing"),))
    new_ctx, task = day.add_task(ctx, "  Write report ", time="09:00", duration_min=45, category="Deep Work")
    assert ctx.tasks == (Task(id="t0", title="Existing"),)
    assert new_ctx.tasks[-1] == task
    assert task.title == "Write report"
    assert task.done is False
    assert task.id != "t0" and task.id.startswith("task_")


def test_add_task_blank_title_and_bad_duration():
    _, task = day.add_task(PlanContext(date="2024-05-01"), "   ", duration_min=0)
    assert task.title == "Untitled"
    assert task.duration_min is None
    assert task.time is None


def test_toggle_and_delete_task():
    ctx = PlanContext(date="2024-05-01", tasks=(Task(id="a", title="A"), Task(id="b", title="B")))
    toggled = day.toggle_task(ctx, "a")
    assert toggled.tasks[0].done is True
    assert day.toggle_task(toggled, "a").tasks[0].done is False
    assert day.pending_count(toggled) == 1
    assert day.toggle_task(ctx, "missing") == ctx
    assert [t.id for t in day.delete_task(ctx, "a").tasks] == ["b"]


def test_toggle_habit_and_set_journal():
    ctx = PlanContext(date="2024-05-01", habits=default_habits())
    ctx = day.toggle_habit(ctx, "habit_move")
    assert [h.done for h in ctx.habits] == [False, True, False]
    ctx = day.set_journal(ctx, "New text")
    assert ctx.journal == "New text"
    assert day.set_journal(ctx, "").journal == ""
