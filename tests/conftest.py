# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from event_planner.core.state import AppState
from event_planner.events.event_models import Budget, Event
from event_planner.events.event_store import EventStore
from event_planner.tasks.task_store import TaskStore
from event_planner.vendors.vendor_store import VendorStore

from .fakes import InMemoryStorage

NOW = datetime(2026, 10, 21, 12, 0, tzinfo=timezone.utc)


def make_event(event_id: str, name: str = "", budget: Budget | None = None) -> Event:
    return Event(
        id=event_id,
        name=name or f"Event {event_id}",
        date="2026-12-01T00:00:00.000Z",
        location="Town Hall",
        created_at="2026-10-01T00:00:00.000Z",
        budget=budget or Budget(),
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="event-planner-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        storage_key="tasks",
        user_id="user-1",
        default_budget_total=10000.0,
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState with two empty events ("e1" active, "e2"), no tasks, no vendors.

    No persistence attached: store behavior only.
    """
    tasks = TaskStore(user_id=settings.user_id)
    return AppState(
        settings=settings,
        events=EventStore([make_event("e1", "Wedding"), make_event("e2", "Conference")]),
        tasks=tasks,
        vendors=VendorStore(tasks),
    )
