from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from typing import Any, List, Optional

from . import config, day, textgen
from .client import AssistantClient
from .models import PlanContext, context_to_dict, task_to_dict
from .planner import format_plan
from .store import DayStore

DEFAULT_PROMPT = "Plan my day with my tasks, habits, and notes."

# Quick-action prompts offered next to the free-text box
PRESET_PROMPTS = {
    "plan": DEFAULT_PROMPT,
    "summarize": "Summarize my notes and next steps.",
    "balance": "Create a balanced schedule with breaks.",
    "journal": "Turn my journal into next steps.",
}

_HHMM_RE = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")


def _hhmm(value: str) -> str:
    value = value.strip()
    if not _HHMM_RE.fullmatch(value):
        raise argparse.ArgumentTypeError(f"expected HH:MM (00:00-23:59), got '{value}'")
    return value


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number of minutes, got '{value}'") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"duration must be positive, got {n}")
    return n


def _json_print(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _store(args: argparse.Namespace) -> DayStore:
    return DayStore(args.file or config.state_path())


def _load(args: argparse.Namespace) -> PlanContext:
    return _store(args).load(args.date)


def _find_or_exit(items, item_id: str, kind: str) -> None:
    if not any(it.id == item_id for it in items):
        print(f"{kind} not found: {item_id}", file=sys.stderr)
        sys.exit(1)


def cmd_plan(args: argparse.Namespace) -> None:
    ctx = _load(args)
    prompt = args.prompt or PRESET_PROMPTS[args.preset]
    if args.llm:
        result = textgen.generate_reply(prompt, ctx)
        print(result.reply)
    else:
        print(format_plan(prompt, ctx))


def cmd_ask(args: argparse.Namespace) -> None:
    ctx = _load(args)
    with AssistantClient(args.server, timeout=args.timeout) as client:
        print(client.ask(args.prompt, ctx))


def cmd_task_add(args: argparse.Namespace) -> None:
    store = _store(args)
    ctx, task = day.add_task(
        store.load(args.date),
        args.title,
        time=args.time,
        duration_min=args.duration,
        category=args.category,
    )
    store.save(ctx)
    _json_print(task_to_dict(task))


def cmd_task_done(args: argparse.Namespace) -> None:
    store = _store(args)
    ctx = store.load(args.date)
    _find_or_exit(ctx.tasks, args.task_id, "Task")
    store.save(day.toggle_task(ctx, args.task_id))
    print(f"Toggled task '{args.task_id}'.")


def cmd_task_rm(args: argparse.Namespace) -> None:
    store = _store(args)
    ctx = store.load(args.date)
    _find_or_exit(ctx.tasks, args.task_id, "Task")
    store.save(day.delete_task(ctx, args.task_id))
    print(f"Deleted task '{args.task_id}'.")


def cmd_task_list(args: argparse.Namespace) -> None:
    ctx = _load(args)
    print(f"{ctx.date}: {day.pending_count(ctx)} pending")
    if not ctx.tasks:
        print("No tasks yet. Add something meaningful.")
    for t in ctx.tasks:
        mark = "x" if t.done else " "
        extra = "".join([f" - {t.duration_min}m" if t.duration_min else "", f" - {t.category}" if t.category else ""])
        print(f"[{mark}] {t.id}  {t.time or '--:--'}  {t.title}{extra}")


def cmd_habit_done(args: argparse.Namespace) -> None:
    store = _store(args)
    ctx = store.load(args.date)
    _find_or_exit(ctx.habits, args.habit_id, "Habit")
    store.save(day.toggle_habit(ctx, args.habit_id))
    print(f"Toggled habit '{args.habit_id}'.")


def cmd_habit_list(args: argparse.Namespace) -> None:
    for h in _load(args).habits:
        print(f"[{'x' if h.done else ' '}] {h.id}  {h.name}")


def cmd_journal_set(args: argparse.Namespace) -> None:
    store = _store(args)
    ctx = day.set_journal(store.load(args.date), args.text)
    store.save(ctx)
    print(f"Journal saved for {ctx.date}.")


def cmd_journal_show(args: argparse.Namespace) -> None:
    print(_load(args).journal)


def cmd_show(args: argparse.Namespace) -> None:
    _json_print(context_to_dict(_load(args)))


def cmd_serve(args: argparse.Namespace) -> None:
    from . import api

    api.main()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daybot", description="Daily AI Bot: tasks, habits, journal and day plans")
    parser.add_argument("--file", default=None, help="Day file (default: DAYBOT_STATE_PATH)")
    parser.add_argument("--date", default=None, help="Day to work on, YYYY-MM-DD (default: today)")
    sub = parser.add_subparsers(dest="cmd")

    plan_cmd = sub.add_parser("plan", help="Print a plan for the day")
    plan_cmd.add_argument("prompt", nargs="?", default=None, help="Optional request, e.g. 'help me focus'")
    plan_cmd.add_argument("--llm", action="store_true", help="Ask the model first (requires OPENAI_API_KEY)")
    plan_cmd.add_argument("--preset", choices=sorted(PRESET_PROMPTS), default="plan", help="Canned request used when no prompt is given")
    plan_cmd.set_defaults(func=cmd_plan)

    ask_cmd = sub.add_parser("ask", help="Ask the assistant server; falls back to a local plan")
    ask_cmd.add_argument("prompt", help="Free-text request")
    ask_cmd.add_argument("--server", default=None, help="Server URL (default: DAYBOT_SERVER_URL)")
    ask_cmd.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    ask_cmd.set_defaults(func=cmd_ask)

    task_cmd = sub.add_parser("task", help="Task utilities")
    task_sub = task_cmd.add_subparsers(dest="task_cmd", required=True)
    task_add = task_sub.add_parser("add", help="Add a task")
    task_add.add_argument("title", help="Task title")
    task_add.add_argument("--time", type=_hhmm, default=None, help="Time of day, HH:MM")
    task_add.add_argument("--duration", type=_positive_int, default=None, help="Duration in minutes")
    task_add.add_argument("--category", default=None, choices=day.TASK_CATEGORIES, help="Task category")
    task_add.set_defaults(func=cmd_task_add)
    task_done = task_sub.add_parser("done", help="Toggle a task's completion")
    task_done.add_argument("task_id", help="Task identifier")
    task_done.set_defaults(func=cmd_task_done)
    task_rm = task_sub.add_parser("rm", help="Delete a task")
    task_rm.add_argument("task_id", help="Task identifier")
    task_rm.set_defaults(func=cmd_task_rm)
    task_list = task_sub.add_parser("list", help="List tasks")
    task_list.set_defaults(func=cmd_task_list)

    habit_cmd = sub.add_parser("habit", help="Habit utilities")
    habit_sub = habit_cmd.add_subparsers(dest="habit_cmd", required=True)
    habit_done = habit_sub.add_parser("done", help="Toggle a habit")
    habit_done.add_argument("habit_id", help="Habit identifier, e.g. habit_water")
    habit_done.set_defaults(func=cmd_habit_done)
    habit_list = habit_sub.add_parser("list", help="List habits")
    habit_list.set_defaults(func=cmd_habit_list)

    journal_cmd = sub.add_parser("journal", help="Journal utilities")
    journal_sub = journal_cmd.add_subparsers(dest="journal_cmd", required=True)
    journal_set = journal_sub.add_parser("set", help="Replace the day's journal")
    journal_set.add_argument("text", help="Journal text")
    journal_set.set_defaults(func=cmd_journal_set)
    journal_show = journal_sub.add_parser("show", help="Print the day's journal")
    journal_show.set_defaults(func=cmd_journal_show)

    show_cmd = sub.add_parser("show", help="Dump the day as JSON")
    show_cmd.set_defaults(func=cmd_show)

    serve_cmd = sub.add_parser("serve", help="Run the HTTP API")
    serve_cmd.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        parser.exit(2)
    args.func(args)


if __name__ == "__main__":
    main()
