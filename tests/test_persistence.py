# tests/test_persistence.py

from __future__ import annotations

import json
import os
import stat

import pytest

from event_planner.cli.bootstrap import create_initial_state
from event_planner.storage.codec import CodecError, dumps_tasks, loads_tasks
from event_planner.storage.kv import JsonFileStorage
from event_planner.storage.persistence import TaskPersistence
from event_planner.storage.seed import SEED_EVENT_ID, seed_tasks
from event_planner.tasks.task_models import Comment, FileUpload, Priority, SubTask, Task, make_task
from event_planner.tasks.task_store import TaskStore

from .fakes import FailingStorage, InMemoryStorage


def _rich_task() -> Task:
    return Task(
        id="t1",
        title="Book band",
        priority=Priority.HIGH,
        completed=True,
        progress=100,
        created_at="2026-10-01T00:00:00.000Z",
        event_id="e1",
        description="Jazz trio",
        due_date="2026-11-01T00:00:00.000Z",
        is_recurring=True,
        recurring_pattern="weekly",
        assigned_to="v1",
        assigned_at="2026-10-02T00:00:00.000Z",
        completed_at="2026-10-20T00:00:00.000Z",
        budget=1200.5,
        sub_tasks=(SubTask(id="s1", title="Shortlist", completed=True, due_date="2026-10-10T00:00:00.000Z"),),
        comments=(Comment(id="c1", text="Signed", timestamp="2026-10-20T00:00:00.000Z", is_vendor=True, author_id="v1"),),
        files=(
            FileUpload(
                id="f1",
                name="contract.pdf",
                size=2048,
                type="application/pdf",
                uploaded_at="2026-10-20T00:00:00.000Z",
                url="blob:contract",
            ),
        ),
    )


def test_codec_preserves_every_field() -> None:
    tasks = [_rich_task(), make_task(title="Plain", event_id="e1")]
    assert loads_tasks(dumps_tasks(tasks)) == tasks


def test_codec_uses_camel_case_and_omits_unset_fields() -> None:
    plain = make_task(title="Plain", event_id="e1")
    [raw] = json.loads(dumps_tasks([plain]))

    assert raw["createdAt"] == plain.created_at
    assert raw["eventId"] == "e1"
    assert raw["subTasks"] == [] and raw["comments"] == [] and raw["files"] == []
    for key in ("description", "dueDate", "assignedTo", "completedAt", "budget", "recurringPattern"):
        assert key not in raw
    assert None not in raw.values()


@pytest.mark.parametrize("payload", ["not json", "{}", "[1, 2]", '[{"title": "no id"}]'])
def test_codec_rejects_malformed_payloads(payload: str) -> None:
    with pytest.raises(CodecError):
        loads_tasks(payload)


def test_load_falls_back_to_seed(storage: InMemoryStorage) -> None:
    persistence = TaskPersistence(storage, key="tasks", seed=seed_tasks)

    loaded = persistence.load()
    assert [t.id for t in loaded] == ["task-1", "task-2"]

    storage.slots["tasks"] = "{broken"
    assert [t.id for t in persistence.load()] == ["task-1", "task-2"]


def test_every_mutation_is_written(storage: InMemoryStorage) -> None:
    persistence = TaskPersistence(storage, key="tasks")
    store = TaskStore()
    persistence.attach(store)

    res = store.add_task(make_task(title="Order cake", event_id="e1"))
    store.toggle_completion(res.value)
    store.add_task(make_task(title="  ", event_id="e1"))  # rejected, nothing to write

    assert storage.writes == 2
    [saved] = persistence.load()
    assert saved.title == "Order cake"
    assert saved.completed


def test_failed_write_is_recorded_not_raised() -> None:
    persistence = TaskPersistence(FailingStorage(), key="tasks")
    store = TaskStore()
    persistence.attach(store)

    assert store.add_task(make_task(title="Order cake", event_id="e1")).ok
    assert store.count_tasks() == 1
    assert isinstance(persistence.last_error, OSError)
    assert persistence.save(store.tasks) is False


def test_json_file_storage_roundtrip(tmp_path) -> None:
    path = tmp_path / "nested" / "storage.json"
    kv = JsonFileStorage(path)

    assert kv.get("tasks") is None
    kv.set("tasks", "[]")
    kv.set("other", "x")
    assert JsonFileStorage(path).get("tasks") == "[]"

    kv.remove("other")
    assert json.loads(path.read_text("utf-8")) == {"tasks": "[]"}
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_json_file_storage_treats_garbage_as_empty(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("garbage", "utf-8")
    assert JsonFileStorage(path).get("tasks") is None


def test_non_utf8_storage_file_falls_back_to_seed(settings) -> None:
    settings.storage_path.write_bytes(b'{"tasks": "\xff\xfe garbage"}')

    assert JsonFileStorage(settings.storage_path).get("tasks") is None

    state = create_initial_state(settings=settings)
    assert [t.id for t in state.tasks.tasks] == ["task-1", "task-2"]


def test_load_survives_storage_decode_errors() -> None:
    class UndecodableStorage(InMemoryStorage):
        def get(self, key: str) -> str | None:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    persistence = TaskPersistence(UndecodableStorage(), key="tasks", seed=seed_tasks)
    assert [t.id for t in persistence.load()] == ["task-1", "task-2"]


def test_created_at_absent_in_input_stays_absent() -> None:
    payload = json.dumps([{"id": "t1", "title": "Legacy", "priority": "low", "progress": 200}])

    [task] = loads_tasks(payload)
    [raw] = json.loads(dumps_tasks([task]))

    assert task.progress == 100
    assert "createdAt" not in raw


def test_non_finite_numbers_in_stored_tasks_are_dropped() -> None:
    payload = '[{"id": "t1", "title": "Odd", "progress": NaN, "budget": Infinity}]'
    [task] = loads_tasks(payload)
    assert task.progress == 0
    assert task.budget is None


def test_tasks_survive_restart_but_events_reseed(settings) -> None:
    first = create_initial_state(settings=settings)
    assert [t.id for t in first.tasks.tasks] == ["task-1", "task-2"]
    assert first.events.active_id == SEED_EVENT_ID

    first.tasks.delete_task("task-1")
    first.tasks.add_task(make_task(title="Taste menu", event_id=SEED_EVENT_ID))
    first.events.add_event(name="Rehearsal", date="2026-12-01")

    second = create_initial_state(settings=settings)
    assert [t.title for t in second.tasks.tasks] == ["Hire photographer", "Taste menu"]
    assert [e.id for e in second.events.events] == [SEED_EVENT_ID]
    assert [v.id for v in second.vendors.vendors] == ["vendor-1", "vendor-2"]
