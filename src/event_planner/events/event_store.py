# src/event_planner/events/event_store.py

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from ..core.ports import Unsubscribe
from ..core.result import OpResult
from ..core.snapshots import SnapshotPublisher
from ..core.timeutil import new_id, now_iso
from .event_models import DEFAULT_BUDGET_TOTAL, Budget, BudgetCategory, Event

logger = logging.getLogger(__name__)

EventSnapshot = tuple[Event, ...]

LAST_EVENT_REASON = (
    "Cannot delete the last event. You must have at least one event; "
    "create a new event before deleting this one."
)

_UNSET: Any = object()


def _is_finite(*values: Any) -> bool:
    try:
        return all(math.isfinite(float(v)) for v in values)
    except (TypeError, ValueError):
        return False


class EventStore:
    """
    Session-only event store (not persisted).

    Owns the event list, each event's budget and the active-event id.
    The collection is never empty once seeded: deleting the last event is rejected.
    """

    def __init__(
        self,
        events: Iterable[Event] = (),
        *,
        default_budget_total: float = DEFAULT_BUDGET_TOTAL,
    ) -> None:
        self._events: EventSnapshot = tuple(events)
        self._active_id: str | None = self._events[0].id if self._events else None
        self._default_budget_total = float(default_budget_total)
        self._publisher: SnapshotPublisher[EventSnapshot] = SnapshotPublisher("EventStore")
        logger.info("EventStore ready total=%s active=%s", len(self._events), self._active_id)

    # ---- snapshot access ----

    @property
    def events(self) -> EventSnapshot:
        return self._events

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active(self) -> Event | None:
        return self.get(self._active_id) if self._active_id else None

    def get(self, event_id: str | None) -> Event | None:
        for e in self._events:
            if e.id == event_id:
                return e
        return None

    def subscribe(self, listener: Callable[[EventSnapshot], None]) -> Unsubscribe:
        return self._publisher.subscribe(listener)

    # ---- low-level helpers ----

    def _commit(self, events: EventSnapshot) -> None:
        self._events = events
        self._publisher.publish(events)

    def _update_budget(self, event_id: str, fn: Callable[[Budget], Budget | OpResult]) -> OpResult:
        for idx, e in enumerate(self._events):
            if e.id != event_id:
                continue
            out = fn(e.budget)
            if isinstance(out, OpResult):
                logger.debug("Budget update rejected event=%s: %s", event_id, out.reason)
                return out
            updated = replace(e, budget=out.with_derived_totals())
            self._commit(self._events[:idx] + (updated,) + self._events[idx + 1 :])
            return OpResult.success(event_id)

        return OpResult.failure(f"Unknown event: {event_id}")

    # ---- events ----

    def add_event(
        self,
        *,
        name: str,
        date: str,
        location: str = "",
        description: str | None = None,
        budget: Budget | None = None,
    ) -> OpResult:
        """Create an event (fresh id + createdAt) and make it the active one."""
        name = (name or "").strip()
        if not name:
            return OpResult.failure("Event name is required.")

        event = Event(
            id=new_id(),
            name=name,
            date=date,
            location=(location or "").strip(),
            description=description,
            created_at=now_iso(),
            budget=(budget or Budget(total=self._default_budget_total)).with_derived_totals(),
        )
        self._active_id = event.id
        self._commit(self._events + (event,))
        logger.info("Event created id=%s name=%s", event.id, event.name)
        return OpResult.success(event.id)

    def update_event(self, event: Event) -> OpResult:
        for idx, e in enumerate(self._events):
            if e.id == event.id:
                self._commit(self._events[:idx] + (event,) + self._events[idx + 1 :])
                return OpResult.success(event.id)
        return OpResult.failure(f"Unknown event: {event.id}")

    def set_active(self, event_id: str) -> OpResult:
        if self.get(event_id) is None:
            return OpResult.failure(f"Unknown event: {event_id}")
        self._active_id = event_id
        self._publisher.publish(self._events)
        return OpResult.success(event_id)

    def delete_event(self, event_id: str) -> OpResult:
        """
        Remove an event (tasks are NOT touched here, see event_api.delete_event).

        Rejected when it is the only event left. On success the first remaining
        event becomes active.
        """
        if self.get(event_id) is None:
            return OpResult.failure(f"Unknown event: {event_id}")
        if len(self._events) <= 1:
            logger.info("Refusing to delete last event id=%s", event_id)
            return OpResult.failure(LAST_EVENT_REASON)

        remaining = tuple(e for e in self._events if e.id != event_id)
        self._active_id = remaining[0].id
        self._commit(remaining)
        logger.info("Event deleted id=%s active=%s", event_id, self._active_id)
        return OpResult.success(event_id)

    # ---- budget ----

    def update_budget(
        self,
        event_id: str,
        *,
        total: float | None = _UNSET,
        spent: float | None = _UNSET,
        categories: Iterable[BudgetCategory] | None = _UNSET,
    ) -> OpResult:
        """
        Shallow-merge the supplied fields into the event budget.

        When the resulting budget has categories, total/spent are re-derived
        from them, so manual values only stick on category-less budgets.
        """

        supplied = [v for v in (total, spent) if v is not _UNSET and v is not None]
        cats = [] if categories is _UNSET or categories is None else list(categories)
        if not _is_finite(*supplied, *(x for c in cats for x in (c.allocated, c.spent))):
            return OpResult.failure("Budget amounts must be finite numbers.")

        def _merge(b: Budget) -> Budget:
            return Budget(
                total=b.total if total is _UNSET or total is None else float(total),
                spent=b.spent if spent is _UNSET or spent is None else float(spent),
                categories=b.categories if categories is _UNSET or categories is None else tuple(cats),
            )

        return self._update_budget(event_id, _merge)

    def add_category(self, event_id: str, *, name: str, allocated: float, spent: float = 0.0) -> OpResult:
        name = (name or "").strip()
        if not name:
            return OpResult.failure("Category name is required.")
        if not _is_finite(allocated, spent or 0):
            return OpResult.failure("Category amounts must be finite numbers.")
        if not allocated or float(allocated) <= 0:
            return OpResult.failure("Category allocation must be greater than zero.")

        category = BudgetCategory(id=new_id(), name=name, allocated=float(allocated), spent=float(spent or 0))
        res = self._update_budget(event_id, lambda b: replace(b, categories=b.categories + (category,)))
        return OpResult.success(category.id) if res.ok else res

    def add_expense(self, event_id: str, category_id: str, amount: float) -> OpResult:
        if not category_id:
            return OpResult.failure("Category is required.")
        if not _is_finite(amount) or float(amount) <= 0:
            return OpResult.failure("Expense amount must be a finite number greater than zero.")

        def _add(b: Budget) -> Budget | OpResult:
            cats = list(b.categories)
            for i, c in enumerate(cats):
                if c.id == category_id:
                    cats[i] = replace(c, spent=c.spent + float(amount))
                    return replace(b, categories=tuple(cats))
            return OpResult.failure(f"Unknown budget category: {category_id}")

        return self._update_budget(event_id, _add)

    def delete_category(self, event_id: str, category_id: str) -> OpResult:
        def _delete(b: Budget) -> Budget | OpResult:
            cats = tuple(c for c in b.categories if c.id != category_id)
            if len(cats) == len(b.categories):
                return OpResult.failure(f"Unknown budget category: {category_id}")
            if not cats:
                # last category gone: nothing left to derive from
                return Budget(total=0.0, spent=0.0, categories=())
            return replace(b, categories=cats)

        return self._update_budget(event_id, _delete)
