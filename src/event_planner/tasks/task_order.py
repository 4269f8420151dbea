# src/event_planner/tasks/task_order.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.timeutil import parse_iso
from .task_models import Task


def display_key(task: Task) -> tuple[bool, bool, float, int]:
    """
    Sort key for task lists:
    1) open tasks before completed ones
    2) tasks with a due date first, earliest first
    3) priority high < medium < low
    """
    due = parse_iso(task.due_date)
    return (
        task.completed,
        due is None,
        due.timestamp() if due is not None else 0.0,
        task.priority.rank,
    )


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=display_key)
