# src/event_planner/storage/persistence.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..core.ports import KeyValueStorage, Unsubscribe
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .codec import CodecError, dumps_tasks, loads_tasks

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "tasks"


class TaskPersistence:
    """
    Mirrors the task collection into a single key-value slot.

    - load(): stored tasks, or the seed when the slot is absent/unparsable
    - save(): best-effort write, failures are logged and never retried
    - attach(): save on every TaskStore publish
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_TASKS_KEY,
        seed: Callable[[], Sequence[Task]] = tuple,
    ) -> None:
        self._storage = storage
        self._key = key
        self._seed = seed
        self.last_error: Exception | None = None

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Task]:
        try:
            raw = self._storage.get(self._key)
        except (OSError, ValueError):
            logger.exception("Failed to read task slot %r; using seed data", self._key)
            return list(self._seed())

        if raw is None:
            logger.info("No stored tasks under %r; using seed data", self._key)
            return list(self._seed())

        try:
            tasks = loads_tasks(raw)
        except CodecError:
            logger.exception("Stored tasks under %r are unparsable; using seed data", self._key)
            return list(self._seed())

        logger.info("Loaded %d task(s) from %r", len(tasks), self._key)
        return tasks

    def save(self, tasks: Sequence[Task]) -> bool:
        try:
            self._storage.set(self._key, dumps_tasks(tasks))
        except (OSError, TypeError, ValueError) as e:
            self.last_error = e
            logger.exception("Failed to persist %d task(s) under %r", len(tasks), self._key)
            return False
        self.last_error = None
        logger.debug("Persisted %d task(s) under %r", len(tasks), self._key)
        return True

    def attach(self, store: TaskStore) -> Unsubscribe:
        return store.subscribe(self.save)
