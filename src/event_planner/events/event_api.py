# src/event_planner/events/event_api.py

from __future__ import annotations

import logging

from ..core.result import OpResult
from ..core.state import AppState

logger = logging.getLogger(__name__)


def delete_event(state: AppState, event_id: str) -> OpResult:
    """
    Delete an event and every task that belongs to it.

    Two sequential steps (event store, then task store); if the first is
    rejected (unknown id, last event) no task is touched.
    """
    res = state.events.delete_event(event_id)
    if not res.ok:
        return res

    removed = state.tasks.delete_tasks_for_event(event_id)
    logger.info("Event %s deleted with %d task(s)", event_id, removed)
    return res
