# src/event_planner/metrics.py

"""
Derived metrics.

Pure functions over store snapshots, recomputed on every read.
Percentages round half up; a zero denominator yields 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from .core.timeutil import local_day, parse_iso, percent, week_days
from .events.event_models import Budget, BudgetCategory
from .tasks.task_models import Priority, Task
from .vendors.vendor_models import VendorPerformance

if TYPE_CHECKING:
    from .core.state import AppState


@dataclass(frozen=True, slots=True)
class PriorityStats:
    priority: Priority
    total: int
    completed: int
    percent: int


@dataclass(frozen=True, slots=True)
class BudgetSummary:
    total: float
    spent: float
    remaining: float
    progress_percent: int
    remaining_percent: int


@dataclass(frozen=True, slots=True)
class DayStats:
    day: date
    total: int
    completed: int


@dataclass(frozen=True, slots=True)
class Dashboard:
    event_id: str | None
    total_tasks: int
    completed_tasks: int
    completion_percent: int
    by_priority: tuple[PriorityStats, ...]
    budget: BudgetSummary | None
    week: tuple[DayStats, ...]


# ---- tasks ----


def completion_percent(tasks: Sequence[Task]) -> int:
    return percent(sum(1 for t in tasks if t.completed), len(tasks))


def priority_breakdown(tasks: Sequence[Task]) -> tuple[PriorityStats, ...]:
    out: list[PriorityStats] = []
    for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW):
        bucket = [t for t in tasks if t.priority == p]
        done = sum(1 for t in bucket if t.completed)
        out.append(PriorityStats(priority=p, total=len(bucket), completed=done, percent=percent(done, len(bucket))))
    return tuple(out)


def tasks_due_on(tasks: Iterable[Task], day: date) -> list[Task]:
    return [t for t in tasks if t.due_date and local_day(t.due_date) == day]


def weekly_distribution(tasks: Sequence[Task], today: date | None = None) -> tuple[DayStats, ...]:
    """Tasks due on each day of the current week (Sunday..Saturday)."""
    if today is None:
        today = date.today()
    rows: list[DayStats] = []
    for day in week_days(today):
        due = tasks_due_on(tasks, day)
        rows.append(DayStats(day=day, total=len(due), completed=sum(1 for t in due if t.completed)))
    return tuple(rows)


# ---- budget ----


def budget_summary(budget: Budget) -> BudgetSummary:
    total = float(budget.total or 0)
    spent = float(budget.spent or 0)
    remaining = total - spent
    return BudgetSummary(
        total=total,
        spent=spent,
        remaining=remaining,
        progress_percent=percent(spent, total),
        remaining_percent=percent(remaining, total),
    )


def category_usage(category: BudgetCategory) -> int:
    return percent(category.spent, category.allocated)


# ---- vendors ----


def tasks_for_vendor(tasks: Iterable[Task], vendor_id: str) -> list[Task]:
    return [t for t in tasks if t.assigned_to == vendor_id]


def is_on_time(task: Task) -> bool:
    """
    Completed, has a due date, and was completed no later than the due date.

    A completed task without completedAt cannot be judged and counts as late.
    """
    if not task.completed or not task.due_date:
        return False
    due = parse_iso(task.due_date)
    done = parse_iso(task.completed_at)
    if due is None or done is None:
        return False
    return done <= due


def vendor_performance(tasks: Iterable[Task], vendor_id: str) -> VendorPerformance:
    assigned = tasks_for_vendor(tasks, vendor_id)
    total = len(assigned)
    return VendorPerformance(
        completion_rate=percent(sum(1 for t in assigned if t.completed), total),
        on_time_rate=percent(sum(1 for t in assigned if is_on_time(t)), total),
        total_tasks=total,
    )


def vendor_spend(tasks: Iterable[Task], vendor_id: str) -> float:
    return float(sum(t.budget or 0 for t in tasks_for_vendor(tasks, vendor_id)))


# ---- dashboard ----


def dashboard(state: AppState, *, today: date | None = None) -> Dashboard:
    """Everything the dashboard shows for the active event."""
    event = state.events.active
    event_id = event.id if event else None
    tasks = state.tasks.list_for_event(event_id)
    completed = sum(1 for t in tasks if t.completed)
    return Dashboard(
        event_id=event_id,
        total_tasks=len(tasks),
        completed_tasks=completed,
        completion_percent=percent(completed, len(tasks)),
        by_priority=priority_breakdown(tasks),
        budget=budget_summary(event.budget) if event else None,
        week=weekly_distribution(tasks, today),
    )


def is_overdue(task: Task, now: datetime) -> bool:
    """Open task whose due date is already behind `now` (aware datetime)."""
    due = parse_iso(task.due_date)
    return not task.completed and due is not None and due < now


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if is_overdue(t, now)]
