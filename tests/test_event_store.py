# tests/test_event_store.py

from __future__ import annotations

from event_planner import metrics
from event_planner.events import event_api
from event_planner.events.event_models import Budget, BudgetCategory
from event_planner.events.event_store import EventStore
from event_planner.tasks import task_api

from .conftest import make_event


def test_delete_last_event_is_rejected_and_state_unchanged() -> None:
    store = EventStore([make_event("only")])
    before = store.events

    res = store.delete_event("only")

    assert not res.ok
    assert "last event" in (res.reason or "")
    assert store.events is before
    assert store.active_id == "only"


def test_delete_event_cascades_tasks_and_activates_first_remaining(state) -> None:
    state.events.add_event(name="Gala", date="2026-12-24T00:00:00.000Z")
    assert len(state.events.events) == 3

    assert task_api.create_task(state, title="Venue", event_id="e2").ok
    assert task_api.create_task(state, title="Speakers", event_id="e2").ok
    assert task_api.create_task(state, title="Flowers", event_id="e1").ok

    res = event_api.delete_event(state, "e2")

    assert res.ok
    assert [e.id for e in state.events.events][0] == "e1"
    assert state.events.get("e2") is None
    assert state.events.active_id == "e1"
    assert [t.title for t in state.tasks.tasks] == ["Flowers"]


def test_rejected_event_delete_keeps_tasks(state) -> None:
    event_api.delete_event(state, "e2")
    task_api.create_task(state, title="Flowers", event_id="e1")

    res = event_api.delete_event(state, "e1")

    assert not res.ok
    assert state.tasks.count_tasks() == 1


def test_add_event_becomes_active_with_default_budget() -> None:
    store = EventStore([make_event("e1")], default_budget_total=10000)

    res = store.add_event(name="Conference", date="2027-03-01T09:00:00.000Z", location="Expo")

    assert res.ok
    assert store.active_id == res.value
    event = store.active
    assert event.name == "Conference"
    assert event.created_at
    assert event.budget == Budget(total=10000.0, spent=0.0, categories=())

    assert not store.add_event(name="  ", date="2027-03-01").ok


def test_set_active_unknown_event() -> None:
    store = EventStore([make_event("e1"), make_event("e2")])
    assert not store.set_active("zzz").ok
    assert store.set_active("e2").ok
    assert store.active_id == "e2"


def test_expense_recomputes_category_and_event_spent() -> None:
    budget = Budget(
        total=1000.0,
        spent=0.0,
        categories=(BudgetCategory(id="c1", name="Venue", allocated=1000.0, spent=400.0),),
    )
    store = EventStore([make_event("e1", budget=budget)])

    assert store.add_expense("e1", "c1", 200).ok

    b = store.get("e1").budget
    assert b.categories[0].spent == 600.0
    assert b.spent == 600.0
    assert b.total == 1000.0


def test_expense_validation() -> None:
    budget = Budget(categories=(BudgetCategory(id="c1", name="Venue", allocated=1000.0),))
    store = EventStore([make_event("e1", budget=budget)])

    assert not store.add_expense("e1", "c1", 0).ok
    assert not store.add_expense("e1", "nope", 10).ok
    assert not store.add_expense("missing", "c1", 10).ok
    assert store.get("e1").budget.categories[0].spent == 0.0


def test_categories_drive_totals() -> None:
    store = EventStore([make_event("e1")])

    assert not store.add_category("e1", name="", allocated=100).ok
    assert not store.add_category("e1", name="Music", allocated=0).ok

    res = store.add_category("e1", name="Venue", allocated=5000, spent=1000)
    assert res.ok
    store.add_category("e1", name="Catering", allocated=3000)

    b = store.get("e1").budget
    assert (b.total, b.spent) == (8000.0, 1000.0)

    assert store.delete_category("e1", res.value).ok
    b = store.get("e1").budget
    assert (b.total, b.spent) == (3000.0, 0.0)
    assert [c.name for c in b.categories] == ["Catering"]


def test_update_budget_manual_values_only_without_categories() -> None:
    store = EventStore([make_event("e1")])

    store.update_budget("e1", total=2500, spent=3000)
    b = store.get("e1").budget
    assert (b.total, b.spent) == (2500.0, 3000.0)

    store.update_budget("e1", categories=[BudgetCategory(id="c1", name="Venue", allocated=1200, spent=200)])
    store.update_budget("e1", total=99999)
    b = store.get("e1").budget
    assert (b.total, b.spent) == (1200.0, 200.0)

    assert not store.update_budget("nope", total=1).ok


def test_non_finite_budget_amounts_are_rejected() -> None:
    budget = Budget(categories=(BudgetCategory(id="c1", name="Venue", allocated=1000.0, spent=400.0),)).with_derived_totals()
    store = EventStore([make_event("e1", budget=budget)])
    before = store.events

    results = [
        store.add_expense("e1", "c1", float("nan")),
        store.add_expense("e1", "c1", float("inf")),
        store.add_category("e1", name="Music", allocated=float("nan")),
        store.add_category("e1", name="Music", allocated=500, spent=float("inf")),
        store.update_budget("e1", total=float("nan")),
        store.update_budget("e1", categories=[BudgetCategory(id="c2", name="X", allocated=float("-inf"))]),
    ]

    assert all(not r.ok for r in results)
    assert store.events is before
    assert metrics.budget_summary(store.get("e1").budget).progress_percent == 40
