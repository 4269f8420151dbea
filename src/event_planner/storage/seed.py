# src/event_planner/storage/seed.py

"""
Built-in seed dataset.

Used for events and vendors on every start (they are session-only) and for
tasks when nothing usable is stored yet.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ..core.timeutil import now_iso
from ..events.event_models import Budget, BudgetCategory, Event
from ..tasks.task_models import Comment, Priority, SubTask, Task
from ..vendors.vendor_models import Vendor

SEED_EVENT_ID = "event-1"


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def seed_events(now: datetime | None = None) -> list[Event]:
    now = _now(now)
    categories = (
        BudgetCategory(id="cat-1", name="Venue", allocated=10000.0, spent=2500.0),
        BudgetCategory(id="cat-2", name="Catering", allocated=8000.0, spent=2000.0),
        BudgetCategory(id="cat-3", name="Photography", allocated=3000.0, spent=500.0),
    )
    return [
        Event(
            id=SEED_EVENT_ID,
            name="Wedding Ceremony",
            date=now_iso(now + timedelta(days=60)),
            location="Grand Plaza Hotel",
            description="A beautiful wedding ceremony with 150 guests",
            created_at=now_iso(now),
            budget=Budget(categories=categories).with_derived_totals(),
        )
    ]


def seed_vendors(now: datetime | None = None) -> list[Vendor]:
    created = now_iso(_now(now))
    return [
        Vendor(
            id="vendor-1",
            name="Elite Catering",
            service="Catering",
            email="info@elitecatering.com",
            phone="(555) 123-4567",
            location="New York, NY",
            rating=5,
            created_at=created,
        ),
        Vendor(
            id="vendor-2",
            name="Bloom Floral Design",
            service="Florist",
            email="bloom@floraldesign.com",
            phone="(555) 987-6543",
            location="New York, NY",
            rating=4,
            created_at=created,
        ),
    ]


def seed_tasks(now: datetime | None = None) -> list[Task]:
    now = _now(now)
    created = now_iso(now)
    return [
        Task(
            id="task-1",
            title="Book venue",
            description="Finalize contract with Grand Plaza Hotel",
            priority=Priority.HIGH,
            completed=True,
            progress=100,
            created_at=created,
            completed_at=now_iso(now - timedelta(days=31)),
            event_id=SEED_EVENT_ID,
            due_date=now_iso(now - timedelta(days=30)),
            sub_tasks=(
                SubTask(id="subtask-1", title="Tour venue", completed=True),
                SubTask(id="subtask-2", title="Review contract", completed=True),
            ),
            comments=(Comment(id="comment-1", text="Deposit has been paid", timestamp=created),),
        ),
        Task(
            id="task-2",
            title="Hire photographer",
            description="Find and book a professional photographer",
            priority=Priority.MEDIUM,
            completed=False,
            progress=50,
            created_at=created,
            event_id=SEED_EVENT_ID,
            due_date=now_iso(now + timedelta(days=15)),
            assigned_to="vendor-2",
            assigned_at=created,
            sub_tasks=(
                SubTask(id="subtask-3", title="Research photographers", completed=True),
                SubTask(id="subtask-4", title="Schedule meetings", completed=False),
            ),
        ),
    ]
