# src/event_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..events.event_store import EventStore
    from ..storage.persistence import TaskPersistence
    from ..tasks.task_store import TaskStore
    from ..vendors.vendor_store import VendorStore


@dataclass
class AppState:
    """
    Everything a command needs: settings plus the three stores.

    Built by cli.bootstrap.create_initial_state (or by tests with fakes).
    """

    # Settings object (config.Settings or a test SimpleNamespace).
    settings: object

    events: EventStore
    tasks: TaskStore
    vendors: VendorStore

    # None when running without durable storage.
    persistence: TaskPersistence | None = None
