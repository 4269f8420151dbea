# src/event_planner/core/snapshots.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from .ports import Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotPublisher(Generic[T]):
    """
    Fan-out of immutable snapshots to subscribers.

    Listeners run synchronously, in subscription order, inside the mutator call.
    A failing listener is logged and does not stop the others.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._listeners: list[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, snapshot: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("%s listener failed: %r", self._name, listener)
