# src/event_planner/storage/codec.py

"""
JSON codec for the persisted task collection.

Wire format keeps the camelCase field names of the browser app this data
shares a shape with. Optional fields that are unset are omitted (never null).
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from typing import Any

from ..tasks.task_models import Comment, FileUpload, Priority, SubTask, Task


class CodecError(ValueError):
    """Stored payload is not a valid task collection."""


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


def _req_str(raw: dict[str, Any], key: str) -> str:
    val = raw.get(key)
    if not isinstance(val, str):
        raise CodecError(f"field {key!r} must be a string")
    return val


def _opt_str(raw: dict[str, Any], key: str) -> str | None:
    val = raw.get(key)
    return val if isinstance(val, str) else None


def _opt_bool(raw: dict[str, Any], key: str) -> bool | None:
    val = raw.get(key)
    return val if isinstance(val, bool) else None


def _list(raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    val = raw.get(key)
    if val is None:
        return []
    if not isinstance(val, list):
        raise CodecError(f"field {key!r} must be a list")
    return [x for x in val if isinstance(x, dict)]


# ---- encode ----


def subtask_to_dict(s: SubTask) -> dict[str, Any]:
    out: dict[str, Any] = {"id": s.id, "title": s.title, "completed": s.completed}
    _put(out, "dueDate", s.due_date)
    return out


def comment_to_dict(c: Comment) -> dict[str, Any]:
    out: dict[str, Any] = {"id": c.id, "text": c.text, "timestamp": c.timestamp}
    _put(out, "isVendor", c.is_vendor)
    _put(out, "authorId", c.author_id)
    return out


def file_to_dict(f: FileUpload) -> dict[str, Any]:
    return {
        "id": f.id,
        "name": f.name,
        "size": f.size,
        "type": f.type,
        "uploadedAt": f.uploaded_at,
        "url": f.url,
    }


def task_to_dict(t: Task) -> dict[str, Any]:
    out: dict[str, Any] = {"id": t.id, "title": t.title}
    _put(out, "description", t.description)
    _put(out, "dueDate", t.due_date)
    out["priority"] = t.priority.value
    out["completed"] = t.completed
    out["progress"] = t.progress
    _put(out, "createdAt", t.created_at or None)
    _put(out, "isRecurring", t.is_recurring)
    _put(out, "recurringPattern", t.recurring_pattern)
    _put(out, "assignedTo", t.assigned_to)
    _put(out, "assignedAt", t.assigned_at)
    _put(out, "completedAt", t.completed_at)
    _put(out, "budget", t.budget)
    _put(out, "eventId", t.event_id)
    out["subTasks"] = [subtask_to_dict(s) for s in t.sub_tasks]
    out["comments"] = [comment_to_dict(c) for c in t.comments]
    out["files"] = [file_to_dict(f) for f in t.files]
    return out


# ---- decode ----


def subtask_from_dict(raw: dict[str, Any]) -> SubTask:
    return SubTask(
        id=_req_str(raw, "id"),
        title=_req_str(raw, "title"),
        completed=bool(raw.get("completed", False)),
        due_date=_opt_str(raw, "dueDate"),
    )


def comment_from_dict(raw: dict[str, Any]) -> Comment:
    return Comment(
        id=_req_str(raw, "id"),
        text=_req_str(raw, "text"),
        timestamp=_req_str(raw, "timestamp"),
        is_vendor=_opt_bool(raw, "isVendor"),
        author_id=_opt_str(raw, "authorId"),
    )


def file_from_dict(raw: dict[str, Any]) -> FileUpload:
    size = raw.get("size", 0)
    return FileUpload(
        id=_req_str(raw, "id"),
        name=_req_str(raw, "name"),
        size=size if isinstance(size, int) and not isinstance(size, bool) else 0,
        type=_opt_str(raw, "type") or "",
        uploaded_at=_opt_str(raw, "uploadedAt") or "",
        url=_opt_str(raw, "url") or "",
    )


def task_from_dict(raw: dict[str, Any]) -> Task:
    progress = raw.get("progress", 0)
    if not isinstance(progress, (int, float)) or isinstance(progress, bool) or not math.isfinite(progress):
        progress = 0
    budget = raw.get("budget")
    if not isinstance(budget, (int, float)) or isinstance(budget, bool) or not math.isfinite(budget):
        budget = None

    return Task(
        id=_req_str(raw, "id"),
        title=_req_str(raw, "title"),
        priority=Priority.parse(_opt_str(raw, "priority")),
        completed=bool(raw.get("completed", False)),
        progress=int(max(0, min(100, progress))),
        created_at=_opt_str(raw, "createdAt") or "",
        event_id=_opt_str(raw, "eventId"),
        description=_opt_str(raw, "description"),
        due_date=_opt_str(raw, "dueDate"),
        is_recurring=_opt_bool(raw, "isRecurring"),
        recurring_pattern=_opt_str(raw, "recurringPattern"),
        assigned_to=_opt_str(raw, "assignedTo"),
        assigned_at=_opt_str(raw, "assignedAt"),
        completed_at=_opt_str(raw, "completedAt"),
        budget=budget,
        sub_tasks=tuple(subtask_from_dict(x) for x in _list(raw, "subTasks")),
        comments=tuple(comment_from_dict(x) for x in _list(raw, "comments")),
        files=tuple(file_from_dict(x) for x in _list(raw, "files")),
    )


def dumps_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False)


def loads_tasks(payload: str) -> list[Task]:
    """Parse a stored task array. Raises CodecError on anything malformed."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise CodecError(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise CodecError("task collection must be a JSON array")
    out: list[Task] = []
    for item in data:
        if not isinstance(item, dict):
            raise CodecError("task entry must be a JSON object")
        out.append(task_from_dict(item))
    return out
