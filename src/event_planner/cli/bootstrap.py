# src/event_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- rehydrates tasks from the storage slot (or seeds them),
- wires the stores into AppState and hooks persistence onto the task store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..events.event_store import EventStore
from ..storage.kv import JsonFileStorage
from ..storage.persistence import TaskPersistence
from ..storage.seed import seed_events, seed_tasks, seed_vendors
from ..tasks.task_store import TaskStore
from ..vendors.vendor_store import VendorStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and storage) injectable makes the app easier to test.
    If settings is None, falls back to get_settings(); if storage is None,
    a JsonFileStorage at settings.storage_path is used.

    Events and vendors always start from seed data; tasks come from storage.
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = JsonFileStorage(settings.storage_path)

    persistence = TaskPersistence(storage, key=settings.storage_key, seed=seed_tasks)

    tasks = TaskStore(persistence.load(), user_id=settings.user_id)
    events = EventStore(seed_events(), default_budget_total=settings.default_budget_total)
    vendors = VendorStore(tasks, seed_vendors())

    persistence.attach(tasks)

    return AppState(
        settings=settings,
        events=events,
        tasks=tasks,
        vendors=vendors,
        persistence=persistence,
    )
