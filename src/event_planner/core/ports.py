# src/event_planner/core/ports.py

"""
Ports (interfaces) used by the core.

Stores depend on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

Unsubscribe = Callable[[], None]


class KeyValueStorage(Protocol):
    """
    Durable string slots (the local-storage analogue).

    get() returns None when the slot is absent.
    set() may raise OSError; callers decide whether that is fatal.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class TaskRepo(Protocol):
    # Read API (vendor store, metrics)
    @property
    def tasks(self) -> tuple[Any, ...]: ...
    def get(self, task_id: str) -> Any | None: ...

    # Cleanup API (vendor deletion)
    def clear_vendor(self, vendor_id: str) -> int: ...
