# tests/test_metrics.py

from __future__ import annotations

from datetime import date, datetime, timezone

from event_planner import metrics
from event_planner.core.timeutil import percent, round_half_up, week_days
from event_planner.events.event_models import Budget, BudgetCategory
from event_planner.tasks.task_models import Priority, Task

from .conftest import NOW, make_event


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


def test_percent_rounds_half_up_and_handles_zero() -> None:
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0
    assert percent(float("nan"), 100) == 0
    assert percent(10, float("inf")) == 0
    assert percent(1e308, 1e-10) == 0
    assert round_half_up(2.5) == 3
    assert round_half_up(0.49) == 0


def test_completion_percent() -> None:
    tasks = [_task("a", completed=True)] + [_task(str(i)) for i in range(7)]
    assert metrics.completion_percent(tasks) == 13
    assert metrics.completion_percent([]) == 0


def test_priority_breakdown() -> None:
    tasks = [
        _task("h1", priority=Priority.HIGH, completed=True),
        _task("h2", priority=Priority.HIGH),
        _task("m1", priority=Priority.MEDIUM, completed=True),
    ]
    rows = {r.priority: r for r in metrics.priority_breakdown(tasks)}

    assert (rows[Priority.HIGH].total, rows[Priority.HIGH].completed, rows[Priority.HIGH].percent) == (2, 1, 50)
    assert rows[Priority.MEDIUM].percent == 100
    assert (rows[Priority.LOW].total, rows[Priority.LOW].percent) == (0, 0)


def test_budget_summary_allows_negative_remaining() -> None:
    s = metrics.budget_summary(Budget(total=1000.0, spent=1250.0))
    assert s.remaining == -250.0
    assert s.progress_percent == 125
    assert s.remaining_percent == -25

    empty = metrics.budget_summary(Budget(total=0.0, spent=0.0))
    assert (empty.progress_percent, empty.remaining_percent) == (0, 0)


def test_category_usage() -> None:
    assert metrics.category_usage(BudgetCategory(id="c", name="Venue", allocated=10000, spent=2500)) == 25
    assert metrics.category_usage(BudgetCategory(id="c", name="Misc", allocated=0, spent=10)) == 0


def test_week_starts_on_sunday() -> None:
    days = week_days(date(2026, 10, 21))
    assert days[0] == date(2026, 10, 18)
    assert days[-1] == date(2026, 10, 24)
    assert week_days(date(2026, 10, 18))[0] == date(2026, 10, 18)


def test_weekly_distribution() -> None:
    tasks = [
        _task("sun-done", due_date="2026-10-18T10:00:00", completed=True),
        _task("sun-open", due_date="2026-10-18T18:30:00"),
        _task("wed", due_date="2026-10-21T09:00:00"),
        _task("sat", due_date="2026-10-24T23:00:00"),
        _task("before", due_date="2026-10-17T12:00:00"),
        _task("after", due_date="2026-10-25T12:00:00"),
        _task("undated"),
    ]

    week = metrics.weekly_distribution(tasks, today=date(2026, 10, 21))

    assert [d.day for d in week][0] == date(2026, 10, 18)
    assert [(d.total, d.completed) for d in week] == [
        (2, 1),
        (0, 0),
        (0, 0),
        (1, 0),
        (0, 0),
        (0, 0),
        (1, 0),
    ]


def test_is_on_time_requires_completed_at() -> None:
    due = "2026-10-10T00:00:00.000Z"
    assert metrics.is_on_time(_task("a", completed=True, due_date=due, completed_at=due))
    assert not metrics.is_on_time(_task("b", completed=True, due_date=due))
    assert not metrics.is_on_time(_task("c", completed=True, completed_at=due))
    assert not metrics.is_on_time(_task("d", due_date=due, completed_at=due))


def test_overdue_tasks() -> None:
    tasks = [
        _task("past", due_date="2026-10-20T00:00:00.000Z"),
        _task("past-done", due_date="2026-10-20T00:00:00.000Z", completed=True),
        _task("future", due_date="2026-10-30T00:00:00.000Z"),
        _task("undated"),
    ]
    assert [t.id for t in metrics.overdue_tasks(tasks, NOW)] == ["past"]
    assert not metrics.is_overdue(tasks[0], datetime(2026, 10, 1, tzinfo=timezone.utc))


def test_dashboard_for_active_event(state) -> None:
    budget = Budget(total=5000.0, spent=1000.0)
    state.events.update_event(make_event("e1", "Wedding", budget=budget))
    state.tasks.add_task(_task("a", completed=True, priority=Priority.HIGH, due_date="2026-10-19T12:00:00"))
    state.tasks.add_task(_task("b", priority=Priority.LOW))
    state.tasks.add_task(_task("other", event_id="e2"))

    dash = metrics.dashboard(state, today=date(2026, 10, 21))

    assert dash.event_id == "e1"
    assert (dash.total_tasks, dash.completed_tasks, dash.completion_percent) == (2, 1, 50)
    assert dash.budget.remaining == 4000.0
    assert dash.budget.progress_percent == 20
    assert dash.week[1].day == date(2026, 10, 19)
    assert (dash.week[1].total, dash.week[1].completed) == (1, 1)
