# src/event_planner/cli/commands.py

from __future__ import annotations

import logging
import math
import shlex
from collections.abc import Callable, Sequence
from datetime import date, datetime, timezone
from typing import TypeVar

from .. import metrics
from ..core.result import OpResult
from ..core.state import AppState
from ..core.timeutil import local_day, normalize_date_input
from ..events import event_api
from ..tasks import task_api
from ..tasks.task_models import Priority, Task, make_subtask
from ..tasks.task_order import sort_tasks
from ..tasks.templates import TEMPLATES
from ..vendors import vendor_api

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

T = TypeVar("T")

SHORT_ID = 8


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like '/command args "quoted arg"'.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _short(item_id: str) -> str:
    return item_id[:SHORT_ID]


def _find(items: Sequence[T], token: str, what: str) -> T | str:
    """Match by exact id, else by unique id prefix. Returns the item or an error message."""
    token = (token or "").strip()
    if not token:
        return f"Missing {what} id."
    for item in items:
        if getattr(item, "id") == token:
            return item
    matches = [item for item in items if str(getattr(item, "id")).startswith(token)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        return f"Unknown {what}: {token}"
    return f"Ambiguous {what} id: {token} ({len(matches)} matches)"


def _options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Split ['a', 'b', 'due=2026-11-01'] into positionals and key=value options."""
    pos: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        if "=" in a and not a.startswith("="):
            k, v = a.split("=", 1)
            opts[k.strip().lower()] = v.strip()
        else:
            pos.append(a)
    return pos, opts


def _number(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _money(x: float) -> str:
    return f"{x:,.2f}"


def _reply(res: OpResult, ok_text: str) -> str:
    return ok_text if res.ok else f"Rejected: {res.reason}"


def _fmt_day(raw: str | None) -> str:
    d = local_day(raw)
    return d.isoformat() if d else "-"


def _task_line(state: AppState, t: Task, now: datetime) -> str:
    mark = "x" if t.completed else " "
    due = f" due {_fmt_day(t.due_date)}" if t.due_date else ""
    if metrics.is_overdue(t, now):
        due += " (OVERDUE)"
    vendor = vendor_api.vendor_name(state, t.assigned_to)
    who = f" @{vendor}" if vendor else ""
    subs = f" [{t.completed_subtasks}/{len(t.sub_tasks)}]" if t.sub_tasks else ""
    return f"[{mark}] {_short(t.id)} {t.title} ({t.priority.value}, {t.progress}%){subs}{due}{who}"


def _active_event_or_error(state: AppState):
    event = state.events.active
    if event is None:
        return None, "No active event. Create one with /event add."
    return event, None


# ---- general ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    event = state.events.active
    storage = "OFF"
    if state.persistence is not None:
        storage = f"ON (key={state.persistence.key})"
        if state.persistence.last_error is not None:
            storage += f", last write failed: {state.persistence.last_error}"
    return (
        "Status:\n"
        f"  Active event: {event.name if event else '-'}\n"
        f"  Events: {len(state.events.events)}  Tasks: {state.tasks.count_tasks()}  "
        f"Vendors: {len(state.vendors.vendors)}\n"
        f"  Task storage: {storage}"
    )


# ---- events ----


def cmd_events(state: AppState, args: list[str]) -> str:
    lines = ["Events:"]
    for e in state.events.events:
        active = "*" if e.id == state.events.active_id else " "
        n = len(state.tasks.list_for_event(e.id))
        lines.append(f" {active} {_short(e.id)} {e.name} on {_fmt_day(e.date)} at {e.location or '-'} ({n} task(s))")
    return "\n".join(lines)


def cmd_event(state: AppState, args: list[str]) -> str:
    """
    /event add "<name>" <date> ["<location>"] ["<description>"]
    /event use <id>
    /event rm <id>
    """
    usage = 'Usage: /event add "<name>" <YYYY-MM-DD> ["<location>"] ["<description>"] | /event use <id> | /event rm <id>'
    if not args:
        return usage

    sub = args[0].lower()

    if sub == "add":
        if len(args) < 3:
            return usage
        when = normalize_date_input(args[2])
        if when is None:
            return f"Invalid date: {args[2]}"
        res = state.events.add_event(
            name=args[1],
            date=when,
            location=args[3] if len(args) > 3 else "",
            description=args[4] if len(args) > 4 else None,
        )
        return _reply(res, f"Event created and selected: {args[1]} ({_short(res.value or '')}).")

    if sub in ("use", "rm") and len(args) >= 2:
        found = _find(state.events.events, args[1], "event")
        if isinstance(found, str):
            return found
        if sub == "use":
            return _reply(state.events.set_active(found.id), f"Active event: {found.name}.")
        res = event_api.delete_event(state, found.id)
        return _reply(res, f"Event deleted: {found.name} (and all associated tasks).")

    return usage


# ---- tasks ----


def cmd_tasks(state: AppState, args: list[str]) -> str:
    event, err = _active_event_or_error(state)
    if err:
        return err
    tasks = sort_tasks(state.tasks.list_for_event(event.id))
    if args and args[0].lower() == "open":
        tasks = [t for t in tasks if not t.completed]
    if not tasks:
        return f"No tasks for {event.name} yet. Add one with /task add or /template."
    now = datetime.now(timezone.utc)
    return "\n".join([f"Tasks for {event.name}:"] + [_task_line(state, t, now) for t in tasks])


def _task_add(state: AppState, rest: list[str]) -> str:
    pos, opts = _options(rest)
    if not pos:
        return 'Usage: /task add "<title>" [priority=high|medium|low] [due=YYYY-MM-DD] [budget=N] [desc="..."] [repeat=weekly]'

    due = None
    if "due" in opts:
        due = normalize_date_input(opts["due"])
        if due is None:
            return f"Invalid due date: {opts['due']}"

    budget = None
    if "budget" in opts:
        budget = _number(opts["budget"])
        if budget is None:
            return f"Invalid budget: {opts['budget']}"

    repeat = opts.get("repeat")
    res = task_api.create_task(
        state,
        title=" ".join(pos),
        priority=Priority.parse(opts.get("priority")),
        description=opts.get("desc"),
        due_date=due,
        budget=budget,
        is_recurring=True if repeat else None,
        recurring_pattern=repeat,
    )
    return _reply(res, f"Task added ({_short(res.value or '')}).")


def _task_show(state: AppState, t: Task) -> str:
    now = datetime.now(timezone.utc)
    lines = [_task_line(state, t, now)]
    if t.description:
        lines.append(f"  {t.description}")
    if t.budget is not None:
        lines.append(f"  Budget: {_money(t.budget)}")
    if t.is_recurring:
        lines.append(f"  Repeats: {t.recurring_pattern or 'yes'}")
    for s in t.sub_tasks:
        lines.append(f"  - [{'x' if s.completed else ' '}] {_short(s.id)} {s.title}")
    for c in t.comments:
        who = "vendor" if c.is_vendor else "you"
        lines.append(f"  > ({who}, {_fmt_day(c.timestamp)}) {c.text}")
    for f in t.files:
        lines.append(f"  file: {f.name} ({f.size} bytes, {f.type or '?'})")
    return "\n".join(lines)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add "<title>" [priority=..] [due=..] [budget=..] [desc=..] [repeat=..]
    /task show|done|rm <id>
    /task progress <id> <0-100>
    /task file <id> <name> <size> [type] [url]
    """
    usage = "Usage: /task add|show|done|rm|progress|file ... (see /help)"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add":
        return _task_add(state, args[1:])

    if len(args) < 2:
        return usage
    found = _find(state.tasks.tasks, args[1], "task")
    if isinstance(found, str):
        return found

    if sub == "show":
        return _task_show(state, found)

    if sub == "done":
        res = state.tasks.toggle_completion(found.id)
        updated = state.tasks.get(found.id)
        status = "completed" if updated and updated.completed else "reopened"
        text = f"Task {status}: {found.title}."
        if res.ok and updated and updated.completed and updated.assigned_to:
            text += f" Notify {vendor_api.vendor_name(state, updated.assigned_to)}."
        return _reply(res, text)

    if sub == "rm":
        return _reply(state.tasks.delete_task(found.id), f"Task deleted: {found.title}.")

    if sub == "progress":
        value = _number(args[2]) if len(args) > 2 else None
        if value is None:
            return "Usage: /task progress <id> <0-100>"
        return _reply(state.tasks.set_progress(found.id, value), "Progress updated.")

    if sub == "file":
        size = _number(args[3]) if len(args) > 3 else None
        if size is None:
            return "Usage: /task file <id> <name> <size> [type] [url]"
        res = state.tasks.attach_file(
            found.id,
            name=args[2],
            size=int(size),
            type=args[4] if len(args) > 4 else "",
            url=args[5] if len(args) > 5 else "",
        )
        return _reply(res, f"File attached: {args[2]}.")

    return usage


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub add <task> "<title>" [due=YYYY-MM-DD]
    /sub toggle <task> <subtask>
    """
    usage = 'Usage: /sub add <task> "<title>" | /sub toggle <task> <subtask>'
    if len(args) < 3:
        return usage
    found = _find(state.tasks.tasks, args[1], "task")
    if isinstance(found, str):
        return found

    sub = args[0].lower()
    if sub == "add":
        pos, opts = _options(args[2:])
        due = normalize_date_input(opts["due"]) if "due" in opts else None
        res = state.tasks.add_subtask(found.id, make_subtask(" ".join(pos), due_date=due))
    elif sub == "toggle":
        st = _find(found.sub_tasks, args[2], "sub-task")
        if isinstance(st, str):
            return st
        res = state.tasks.toggle_subtask(found.id, st.id)
    else:
        return usage

    updated = state.tasks.get(found.id)
    return _reply(res, f"Progress: {updated.progress if updated else 0}%.")


def cmd_comment(state: AppState, args: list[str]) -> str:
    """/comment <task> [--vendor] <text...>"""
    if len(args) < 2:
        return "Usage: /comment <task> [--vendor] <text>"
    found = _find(state.tasks.tasks, args[0], "task")
    if isinstance(found, str):
        return found
    rest = args[1:]
    is_vendor = bool(rest) and rest[0] == "--vendor"
    if is_vendor:
        rest = rest[1:]
    return _reply(state.tasks.add_comment(found.id, " ".join(rest), is_vendor), "Comment added.")


# ---- vendors ----


def cmd_vendors(state: AppState, args: list[str]) -> str:
    if not state.vendors.vendors:
        return "No vendors yet. Add one with /vendor add."
    lines = ["Vendors:"]
    for v in state.vendors.vendors:
        perf = state.vendors.get_performance(v.id)
        lines.append(
            f"  {_short(v.id)} {v.name} ({v.service}) {'*' * v.rating} "
            f"tasks={perf.total_tasks} done={perf.completion_rate}% on-time={perf.on_time_rate}% "
            f"spend={_money(state.vendors.vendor_spend(v.id))}"
        )
    return "\n".join(lines)


def cmd_vendor(state: AppState, args: list[str]) -> str:
    """
    /vendor add "<name>" "<service>" [email=..] [phone=..] [location=..] [rating=1-5]
    /vendor rm <id>
    /vendor tasks <id>
    """
    usage = 'Usage: /vendor add "<name>" "<service>" [email=..] [phone=..] [location=..] [rating=1-5] | /vendor rm|tasks <id>'
    if not args:
        return usage
    sub = args[0].lower()

    if sub == "add":
        pos, opts = _options(args[1:])
        if len(pos) < 2:
            return usage
        rating = _number(opts.get("rating")) if "rating" in opts else None
        if "rating" in opts and rating is None:
            return f"Invalid rating: {opts['rating']}"
        res = state.vendors.add_vendor(
            name=pos[0],
            service=pos[1],
            email=opts.get("email", ""),
            phone=opts.get("phone", ""),
            location=opts.get("location", ""),
            rating=int(rating) if rating is not None else None,
        )
        return _reply(res, f"Vendor added: {pos[0]} ({_short(res.value or '')}).")

    if sub in ("rm", "tasks") and len(args) >= 2:
        found = _find(state.vendors.vendors, args[1], "vendor")
        if isinstance(found, str):
            return found
        if sub == "rm":
            return _reply(state.vendors.delete_vendor(found.id), f"Vendor deleted: {found.name}.")
        tasks = sort_tasks(state.vendors.get_tasks_for_vendor(found.id))
        if not tasks:
            return f"No tasks assigned to {found.name}."
        now = datetime.now(timezone.utc)
        return "\n".join([f"Tasks for {found.name}:"] + [_task_line(state, t, now) for t in tasks])

    return usage


def cmd_assign(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        event = state.events.active
        open_tasks = state.vendors.unassigned_tasks(event.id if event else None)
        lines = ["Usage: /assign <task> <vendor>", "Unassigned open tasks:"]
        lines += [f"  {_short(t.id)} {t.title}" for t in open_tasks] or ["  (none)"]
        return "\n".join(lines)
    task = _find(state.tasks.tasks, args[0], "task")
    if isinstance(task, str):
        return task
    vendor = _find(state.vendors.vendors, args[1], "vendor")
    if isinstance(vendor, str):
        return vendor
    return _reply(vendor_api.assign_task(state, task.id, vendor.id), f"Task assigned to {vendor.name}.")


# ---- budget ----


def _budget_view(state: AppState) -> str:
    event, err = _active_event_or_error(state)
    if err:
        return err
    s = metrics.budget_summary(event.budget)
    lines = [
        f"Budget for {event.name}:",
        f"  Total: {_money(s.total)}  Spent: {_money(s.spent)} ({s.progress_percent}%)",
        f"  Remaining: {_money(s.remaining)} ({s.remaining_percent}%)",
    ]
    if s.remaining < 0:
        lines.append("  Over budget!")
    for c in event.budget.categories:
        lines.append(
            f"  {_short(c.id)} {c.name}: {_money(c.spent)} / {_money(c.allocated)} ({metrics.category_usage(c)}%)"
        )
    return "\n".join(lines)


def cmd_budget(state: AppState, args: list[str]) -> str:
    """
    /budget
    /budget set [total=N] [spent=N]
    /budget cat add "<name>" <allocated> [spent]
    /budget cat rm <category>
    /budget expense <category> <amount>
    """
    usage = 'Usage: /budget | /budget set total=N spent=N | /budget cat add "<name>" <allocated> [spent] | /budget cat rm <id> | /budget expense <category> <amount>'
    if not args:
        return _budget_view(state)

    event, err = _active_event_or_error(state)
    if err:
        return err
    sub = args[0].lower()

    if sub == "set":
        _, opts = _options(args[1:])
        total = _number(opts.get("total"))
        spent = _number(opts.get("spent"))
        if total is None and spent is None:
            return usage
        res = state.events.update_budget(event.id, total=total, spent=spent)
        return _reply(res, _budget_view(state))

    if sub == "cat" and len(args) >= 3:
        op = args[1].lower()
        if op == "add" and len(args) >= 4:
            allocated = _number(args[3])
            spent = _number(args[4]) if len(args) > 4 else 0.0
            if allocated is None or spent is None:
                return usage
            res = state.events.add_category(event.id, name=args[2], allocated=allocated, spent=spent)
            return _reply(res, f"Category added: {args[2]}.")
        if op == "rm":
            cat = _find(event.budget.categories, args[2], "category")
            if isinstance(cat, str):
                return cat
            return _reply(state.events.delete_category(event.id, cat.id), f"Category deleted: {cat.name}.")
        return usage

    if sub == "expense" and len(args) >= 3:
        cat = _find(event.budget.categories, args[1], "category")
        if isinstance(cat, str):
            return cat
        amount = _number(args[2])
        if amount is None:
            return usage
        return _reply(state.events.add_expense(event.id, cat.id, amount), f"Expense recorded on {cat.name}.")

    return usage


# ---- dashboard / calendar ----


def cmd_dash(state: AppState, args: list[str]) -> str:
    d = metrics.dashboard(state)
    if d.event_id is None:
        return "No active event."
    lines = [
        f"Overall: {d.completed_tasks}/{d.total_tasks} tasks ({d.completion_percent}%)",
    ]
    for p in d.by_priority:
        lines.append(f"  {p.priority.value:<6} {p.completed}/{p.total} ({p.percent}%)")
    if d.budget is not None:
        lines.append(
            f"Budget: spent {_money(d.budget.spent)} of {_money(d.budget.total)} "
            f"({d.budget.progress_percent}%), remaining {_money(d.budget.remaining)}"
        )
    overdue = metrics.overdue_tasks(state.tasks.list_for_event(d.event_id), datetime.now(timezone.utc))
    if overdue:
        lines.append(f"Overdue: {len(overdue)} task(s)")
    return "\n".join(lines)


def cmd_week(state: AppState, args: list[str]) -> str:
    event, err = _active_event_or_error(state)
    if err:
        return err
    rows = metrics.weekly_distribution(state.tasks.list_for_event(event.id))
    lines = ["This week:"]
    for r in rows:
        lines.append(f"  {r.day.strftime('%a %Y-%m-%d')}: {r.completed}/{r.total}")
    return "\n".join(lines)


def cmd_day(state: AppState, args: list[str]) -> str:
    event, err = _active_event_or_error(state)
    if err:
        return err
    day = date.today()
    if args:
        parsed = local_day(normalize_date_input(args[0]))
        if parsed is None:
            return f"Invalid date: {args[0]}"
        day = parsed
    tasks = metrics.tasks_due_on(state.tasks.list_for_event(event.id), day)
    if not tasks:
        return f"No tasks due on {day.isoformat()}."
    now = datetime.now(timezone.utc)
    return "\n".join([f"Due on {day.isoformat()}:"] + [_task_line(state, t, now) for t in sort_tasks(tasks)])


# ---- templates ----


def cmd_templates(state: AppState, args: list[str]) -> str:
    lines = ["Templates (apply with /template <key>):"]
    for key, tpl in TEMPLATES.items():
        lines.append(f"  {key}: {tpl.name} - {tpl.description} ({len(tpl.tasks)} tasks)")
    return "\n".join(lines)


def cmd_template(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /template <key>. See /templates."
    res = task_api.apply_template(state, args[0])
    return _reply(res, f"Template applied: {res.value} task(s) added.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show active event, counts and storage state.")
registry.register("events", cmd_events, help_text="List events (* marks the active one).")
registry.register(
    "event", cmd_event, help_text='Events: /event add "<name>" <date> ["<location>"] | /event use|rm <id>.'
)
registry.register("tasks", cmd_tasks, help_text="List tasks of the active event: /tasks [open].")
registry.register(
    "task",
    cmd_task,
    help_text='Tasks: /task add "<title>" [priority=..] [due=..] [budget=..] | /task show|done|rm <id> | '
    "/task progress <id> <n> | /task file <id> <name> <size>.",
)
registry.register("sub", cmd_sub, help_text='Sub-tasks: /sub add <task> "<title>" | /sub toggle <task> <sub>.')
registry.register("comment", cmd_comment, help_text="Comment on a task: /comment <task> [--vendor] <text>.")
registry.register("vendors", cmd_vendors, help_text="List vendors with performance.")
registry.register(
    "vendor", cmd_vendor, help_text='Vendors: /vendor add "<name>" "<service>" [rating=..] | /vendor rm|tasks <id>.'
)
registry.register("assign", cmd_assign, help_text="Assign a task to a vendor: /assign <task> <vendor>.")
registry.register(
    "budget",
    cmd_budget,
    help_text="Budget: /budget | /budget set .. | /budget cat add|rm .. | /budget expense <cat> <amount>.",
)
registry.register("dash", cmd_dash, help_text="Progress dashboard for the active event.", aliases=["dashboard"])
registry.register("week", cmd_week, help_text="Tasks due per day this week.")
registry.register("day", cmd_day, help_text="Tasks due on a day: /day [YYYY-MM-DD].")
registry.register("templates", cmd_templates, help_text="List task templates.")
registry.register("template", cmd_template, help_text="Apply a task template to the active event: /template <key>.")
