# src/event_planner/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ..core.timeutil import new_id, now_iso


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        # display order: high first
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True, slots=True)
class SubTask:
    id: str
    title: str
    completed: bool = False
    due_date: str | None = None


@dataclass(frozen=True, slots=True)
class Comment:
    id: str
    text: str
    timestamp: str
    is_vendor: bool | None = None
    author_id: str | None = None


@dataclass(frozen=True, slots=True)
class FileUpload:
    id: str
    name: str
    size: int
    type: str
    uploaded_at: str
    url: str


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    priority: Priority
    completed: bool
    progress: int
    created_at: str
    event_id: str | None

    description: str | None = None
    due_date: str | None = None
    is_recurring: bool | None = None
    recurring_pattern: str | None = None
    assigned_to: str | None = None
    assigned_at: str | None = None
    completed_at: str | None = None
    budget: float | None = None

    sub_tasks: tuple[SubTask, ...] = field(default_factory=tuple)
    comments: tuple[Comment, ...] = field(default_factory=tuple)
    files: tuple[FileUpload, ...] = field(default_factory=tuple)

    @property
    def completed_subtasks(self) -> int:
        return sum(1 for s in self.sub_tasks if s.completed)


def make_task(
    *,
    title: str,
    event_id: str | None = None,
    priority: Priority | str = Priority.MEDIUM,
    description: str | None = None,
    due_date: str | None = None,
    budget: float | None = None,
    is_recurring: bool | None = None,
    recurring_pattern: str | None = None,
    sub_tasks: tuple[SubTask, ...] = (),
) -> Task:
    """Build a fresh, incomplete task with a new id and createdAt."""
    if not isinstance(priority, Priority):
        priority = Priority.parse(priority)
    return Task(
        id=new_id(),
        title=title,
        priority=priority,
        completed=False,
        progress=0,
        created_at=now_iso(),
        event_id=event_id,
        description=description,
        due_date=due_date,
        budget=budget,
        is_recurring=is_recurring,
        recurring_pattern=recurring_pattern if is_recurring else None,
        sub_tasks=tuple(sub_tasks),
    )


def make_subtask(title: str, *, due_date: str | None = None) -> SubTask:
    return SubTask(id=new_id(), title=title, completed=False, due_date=due_date)
