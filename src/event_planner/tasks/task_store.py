# src/event_planner/tasks/task_store.py

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import replace

from ..core.ports import Unsubscribe
from ..core.result import OpResult
from ..core.snapshots import SnapshotPublisher
from ..core.timeutil import new_id, now_iso, percent, round_half_up
from .task_models import Comment, FileUpload, SubTask, Task

logger = logging.getLogger(__name__)

TaskSnapshot = tuple[Task, ...]


def _clamp_progress(value: float) -> int:
    value = float(value)
    if not math.isfinite(value):
        return 0
    return max(0, min(100, round_half_up(value)))


def subtask_progress(task: Task) -> int:
    """Share of completed sub-tasks, 0..100. Caller must ensure sub_tasks is non-empty."""
    return percent(task.completed_subtasks, len(task.sub_tasks))


class TaskStore:
    """
    In-memory task store.

    Every successful mutation swaps in a new tuple of frozen Task records and
    publishes it to subscribers (the persistence adapter is one of them).

    Unknown ids and validation failures leave the snapshot untouched and
    return OpResult(ok=False, reason=...).
    """

    def __init__(self, tasks: Iterable[Task] = (), *, user_id: str = "user-1") -> None:
        self._tasks: TaskSnapshot = tuple(tasks)
        self._user_id = user_id
        self._publisher: SnapshotPublisher[TaskSnapshot] = SnapshotPublisher("TaskStore")
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- snapshot access ----

    @property
    def tasks(self) -> TaskSnapshot:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def list_for_event(self, event_id: str | None) -> list[Task]:
        return [t for t in self._tasks if t.event_id == event_id]

    def count_tasks(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: Callable[[TaskSnapshot], None]) -> Unsubscribe:
        return self._publisher.subscribe(listener)

    # ---- low-level helpers ----

    def _commit(self, tasks: TaskSnapshot) -> None:
        self._tasks = tasks
        self._publisher.publish(tasks)

    def _update_one(self, task_id: str, fn: Callable[[Task], Task | OpResult]) -> OpResult:
        """Apply fn to the task with task_id; fn may veto by returning an OpResult."""
        for idx, t in enumerate(self._tasks):
            if t.id != task_id:
                continue
            out = fn(t)
            if isinstance(out, OpResult):
                logger.debug("Task %s update rejected: %s", task_id, out.reason)
                return out
            self._commit(self._tasks[:idx] + (out,) + self._tasks[idx + 1 :])
            return OpResult.success(task_id)

        logger.debug("Task %s not found", task_id)
        return OpResult.failure(f"Unknown task: {task_id}")

    # ---- public API ----

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a whole collection (rehydration)."""
        self._commit(tuple(tasks))

    def add_task(self, task: Task) -> OpResult:
        title = (task.title or "").strip()
        if not title:
            return OpResult.failure("Task title is required.")

        if not task.id:
            task = replace(task, id=new_id())
        elif self.get(task.id) is not None:
            return OpResult.failure(f"Task id already exists: {task.id}")

        if not task.created_at:
            task = replace(task, created_at=now_iso())

        task = replace(task, title=title, progress=_clamp_progress(task.progress))
        self._commit(self._tasks + (task,))
        logger.debug("Task added id=%s event=%s priority=%s", task.id, task.event_id, task.priority.value)
        return OpResult.success(task.id)

    def update_task(self, task: Task) -> OpResult:
        if not (task.title or "").strip():
            return OpResult.failure("Task title is required.")
        return self._update_one(task.id, lambda _old: replace(task, progress=_clamp_progress(task.progress)))

    def delete_task(self, task_id: str) -> OpResult:
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            return OpResult.failure(f"Unknown task: {task_id}")
        self._commit(remaining)
        logger.debug("Task deleted id=%s", task_id)
        return OpResult.success(task_id)

    def delete_tasks_for_event(self, event_id: str) -> int:
        remaining = tuple(t for t in self._tasks if t.event_id != event_id)
        removed = len(self._tasks) - len(remaining)
        if removed:
            self._commit(remaining)
        logger.info("Deleted %s task(s) for event=%s", removed, event_id)
        return removed

    def toggle_completion(self, task_id: str) -> OpResult:
        """
        Flip `completed`.

        Completing stamps completedAt; reopening clears it.
        Without sub-tasks, completing also sets progress to 100
        (reopening leaves progress as is).
        """

        def _toggle(t: Task) -> Task:
            completed = not t.completed
            progress = t.progress
            if completed and not t.sub_tasks:
                progress = 100
            return replace(
                t,
                completed=completed,
                completed_at=now_iso() if completed else None,
                progress=progress,
            )

        return self._update_one(task_id, _toggle)

    def set_progress(self, task_id: str, value: float) -> OpResult:
        try:
            finite = math.isfinite(float(value))
        except (TypeError, ValueError):
            finite = False
        if not finite:
            return OpResult.failure("Progress must be a number.")
        return self._update_one(task_id, lambda t: replace(t, progress=_clamp_progress(value)))

    def add_subtask(self, task_id: str, subtask: SubTask) -> OpResult:
        title = (subtask.title or "").strip()
        if not title:
            return OpResult.failure("Sub-task title is required.")
        if not subtask.id:
            subtask = replace(subtask, id=new_id())
        subtask = replace(subtask, title=title)

        def _add(t: Task) -> Task | OpResult:
            if any(s.id == subtask.id for s in t.sub_tasks):
                return OpResult.failure(f"Sub-task id already exists: {subtask.id}")
            updated = replace(t, sub_tasks=t.sub_tasks + (subtask,))
            return replace(updated, progress=subtask_progress(updated))

        return self._update_one(task_id, _add)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> OpResult:
        def _toggle(t: Task) -> Task | OpResult:
            subs = list(t.sub_tasks)
            for i, s in enumerate(subs):
                if s.id == subtask_id:
                    subs[i] = replace(s, completed=not s.completed)
                    break
            else:
                return OpResult.failure(f"Unknown sub-task: {subtask_id}")
            updated = replace(t, sub_tasks=tuple(subs))
            return replace(updated, progress=subtask_progress(updated))

        return self._update_one(task_id, _toggle)

    def add_comment(self, task_id: str, text: str, is_vendor: bool = False) -> OpResult:
        text = (text or "").strip()
        if not text:
            return OpResult.failure("Comment text is required.")

        def _add(t: Task) -> Task:
            comment = Comment(
                id=new_id(),
                text=text,
                timestamp=now_iso(),
                is_vendor=is_vendor,
                author_id=t.assigned_to if is_vendor else self._user_id,
            )
            return replace(t, comments=t.comments + (comment,))

        return self._update_one(task_id, _add)

    def attach_file(self, task_id: str, *, name: str, size: int, type: str, url: str) -> OpResult:
        """Record metadata of an uploaded file (the upload itself happens elsewhere)."""
        if not (name or "").strip():
            return OpResult.failure("File name is required.")
        upload = FileUpload(
            id=new_id(),
            name=name.strip(),
            size=max(0, int(size)),
            type=type,
            uploaded_at=now_iso(),
            url=url,
        )
        return self._update_one(task_id, lambda t: replace(t, files=t.files + (upload,)))

    def assign_to_vendor(self, task_id: str, vendor_id: str) -> OpResult:
        if not vendor_id:
            return OpResult.failure("Vendor id is required.")
        return self._update_one(
            task_id,
            lambda t: replace(t, assigned_to=vendor_id, assigned_at=now_iso()),
        )

    def clear_vendor(self, vendor_id: str) -> int:
        """Drop the assignment on every task referencing vendor_id."""
        changed = 0
        out: list[Task] = []
        for t in self._tasks:
            if t.assigned_to == vendor_id:
                out.append(replace(t, assigned_to=None, assigned_at=None))
                changed += 1
            else:
                out.append(t)
        if changed:
            self._commit(tuple(out))
        logger.info("Cleared vendor=%s from %s task(s)", vendor_id, changed)
        return changed
