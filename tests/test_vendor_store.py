# tests/test_vendor_store.py

from __future__ import annotations

from event_planner.tasks.task_models import Priority, Task
from event_planner.tasks.task_store import TaskStore
from event_planner.vendors import vendor_api
from event_planner.vendors.vendor_store import VendorStore


def _task(task_id: str, **kw) -> Task:
    base = dict(
        id=task_id,
        title=task_id,
        priority=Priority.MEDIUM,
        completed=False,
        progress=0,
        created_at="2026-10-01T00:00:00.000Z",
        event_id="e1",
    )
    base.update(kw)
    return Task(**base)


def test_add_vendor_validation_and_defaults() -> None:
    store = VendorStore(TaskStore())

    assert not store.add_vendor(name="", service="Catering").ok
    assert not store.add_vendor(name="Elite", service=" ").ok
    assert not store.add_vendor(name="Elite", service="Catering", rating=6).ok
    assert not store.add_vendor(name="Elite", service="Catering", rating=0).ok

    res = store.add_vendor(name="Elite", service="Catering", email="a@b.c")
    assert res.ok
    vendor = store.get(res.value)
    assert vendor.rating == 5
    assert vendor.email == "a@b.c"
    assert vendor.created_at


def test_performance_for_vendor_without_tasks_is_zero() -> None:
    store = VendorStore(TaskStore())
    perf = store.get_performance("v1")
    assert (perf.completion_rate, perf.on_time_rate, perf.total_tasks) == (0, 0, 0)


def test_performance_rates() -> None:
    due = "2026-10-10T00:00:00.000Z"
    tasks = TaskStore(
        [
            _task("early", assigned_to="v1", completed=True, due_date=due, completed_at="2026-10-09T00:00:00.000Z"),
            _task("late", assigned_to="v1", completed=True, due_date=due, completed_at="2026-10-11T00:00:00.000Z"),
            _task("no-stamp", assigned_to="v1", completed=True, due_date=due),
            _task("open", assigned_to="v1", due_date=due),
            _task("other", assigned_to="v2", completed=True),
        ]
    )
    store = VendorStore(tasks)

    assert [t.id for t in store.get_tasks_for_vendor("v1")] == ["early", "late", "no-stamp", "open"]
    perf = store.get_performance("v1")
    assert perf.total_tasks == 4
    assert perf.completion_rate == 75
    assert perf.on_time_rate == 25


def test_vendor_spend_and_unassigned_tasks() -> None:
    tasks = TaskStore(
        [
            _task("a", assigned_to="v1", budget=1500.0),
            _task("b", assigned_to="v1", budget=500),
            _task("c"),
            _task("d", completed=True),
            _task("e", event_id="e2"),
        ]
    )
    store = VendorStore(tasks)

    assert store.vendor_spend("v1") == 2000.0
    assert [t.id for t in store.unassigned_tasks()] == ["c", "e"]
    assert [t.id for t in store.unassigned_tasks("e1")] == ["c"]


def test_delete_vendor_clears_assignments() -> None:
    tasks = TaskStore([_task("a"), _task("b")])
    store = VendorStore(tasks)
    vid = store.add_vendor(name="Bloom", service="Florist").value
    tasks.assign_to_vendor("a", vid)

    assert store.delete_vendor(vid).ok
    assert store.get(vid) is None
    assert tasks.get("a").assigned_to is None
    assert not store.delete_vendor(vid).ok


def test_assign_task_requires_existing_vendor(state) -> None:
    state.tasks.add_task(_task("t1"))
    vid = state.vendors.add_vendor(name="Bloom", service="Florist").value

    assert not vendor_api.assign_task(state, "t1", "ghost").ok
    assert state.tasks.get("t1").assigned_to is None

    assert vendor_api.assign_task(state, "t1", vid).ok
    assert vendor_api.vendor_name(state, state.tasks.get("t1").assigned_to) == "Bloom"
    assert vendor_api.vendor_name(state, "ghost") == vendor_api.UNKNOWN_VENDOR
    assert vendor_api.vendor_name(state, None) is None
