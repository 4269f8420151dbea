# src/event_planner/tasks/task_api.py

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.result import OpResult
from ..core.state import AppState
from .task_models import Priority, Task, make_task
from .templates import get_template, instantiate

logger = logging.getLogger(__name__)


def add_task(state: AppState, task: Task) -> OpResult:
    """
    Add a task to its event, or to the active event when it has none.

    Tasks must point at a live event.
    """
    event_id = task.event_id or state.events.active_id
    if event_id is None or state.events.get(event_id) is None:
        return OpResult.failure(f"Unknown event: {event_id}")
    return state.tasks.add_task(replace(task, event_id=event_id))


def create_task(
    state: AppState,
    *,
    title: str,
    priority: Priority | str = Priority.MEDIUM,
    description: str | None = None,
    due_date: str | None = None,
    budget: float | None = None,
    event_id: str | None = None,
    is_recurring: bool | None = None,
    recurring_pattern: str | None = None,
) -> OpResult:
    """Convenience helper: build a fresh task and add it (see add_task)."""
    task = make_task(
        title=title,
        priority=priority,
        description=description,
        due_date=due_date,
        budget=budget,
        event_id=event_id,
        is_recurring=is_recurring,
        recurring_pattern=recurring_pattern,
    )
    return add_task(state, task)


def apply_template(state: AppState, key: str) -> OpResult:
    """Add every task of a built-in template to the active event."""
    template = get_template(key)
    if template is None:
        return OpResult.failure(f"Unknown template: {key}")

    event_id = state.events.active_id
    if event_id is None:
        return OpResult.failure("No active event.")

    added = 0
    for task in instantiate(template, event_id=event_id):
        res = state.tasks.add_task(task)
        if res.ok:
            added += 1
        else:
            logger.warning("Template %s: task %r rejected: %s", template.key, task.title, res.reason)

    logger.info("Template %s applied to event=%s (%d task(s))", template.key, event_id, added)
    return OpResult.success(str(added))
