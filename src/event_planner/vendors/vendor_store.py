# src/event_planner/vendors/vendor_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .. import metrics
from ..core.ports import TaskRepo, Unsubscribe
from ..core.result import OpResult
from ..core.snapshots import SnapshotPublisher
from ..core.timeutil import new_id, now_iso
from ..tasks.task_models import Task
from .vendor_models import MAX_RATING, MIN_RATING, Vendor, VendorPerformance

logger = logging.getLogger(__name__)

VendorSnapshot = tuple[Vendor, ...]


class VendorStore:
    """
    Session-only vendor store (not persisted).

    Tasks reference vendors through Task.assigned_to; the task side is read
    through the injected TaskRepo so lookups always see the current snapshot.
    """

    def __init__(self, task_repo: TaskRepo, vendors: Iterable[Vendor] = ()) -> None:
        self._task_repo = task_repo
        self._vendors: VendorSnapshot = tuple(vendors)
        self._publisher: SnapshotPublisher[VendorSnapshot] = SnapshotPublisher("VendorStore")
        logger.info("VendorStore ready total=%s", len(self._vendors))

    @property
    def vendors(self) -> VendorSnapshot:
        return self._vendors

    def get(self, vendor_id: str | None) -> Vendor | None:
        for v in self._vendors:
            if v.id == vendor_id:
                return v
        return None

    def subscribe(self, listener: Callable[[VendorSnapshot], None]) -> Unsubscribe:
        return self._publisher.subscribe(listener)

    def _commit(self, vendors: VendorSnapshot) -> None:
        self._vendors = vendors
        self._publisher.publish(vendors)

    def add_vendor(
        self,
        *,
        name: str,
        service: str,
        email: str = "",
        phone: str = "",
        location: str = "",
        rating: int | None = None,
    ) -> OpResult:
        name = (name or "").strip()
        service = (service or "").strip()
        if not name or not service:
            return OpResult.failure("Vendor name and service are required.")

        rating = MAX_RATING if rating is None else int(rating)
        if not MIN_RATING <= rating <= MAX_RATING:
            return OpResult.failure(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")

        vendor = Vendor(
            id=new_id(),
            name=name,
            service=service,
            email=(email or "").strip(),
            phone=(phone or "").strip(),
            location=(location or "").strip(),
            rating=rating,
            created_at=now_iso(),
        )
        self._commit(self._vendors + (vendor,))
        logger.info("Vendor added id=%s name=%s", vendor.id, vendor.name)
        return OpResult.success(vendor.id)

    def delete_vendor(self, vendor_id: str) -> OpResult:
        """Remove a vendor and drop its assignment from every task."""
        remaining = tuple(v for v in self._vendors if v.id != vendor_id)
        if len(remaining) == len(self._vendors):
            return OpResult.failure(f"Unknown vendor: {vendor_id}")
        self._commit(remaining)
        cleared = self._task_repo.clear_vendor(vendor_id)
        logger.info("Vendor deleted id=%s (unassigned %s task(s))", vendor_id, cleared)
        return OpResult.success(vendor_id)

    # ---- task lookups ----

    def get_tasks_for_vendor(self, vendor_id: str) -> list[Task]:
        return metrics.tasks_for_vendor(self._task_repo.tasks, vendor_id)

    def get_performance(self, vendor_id: str) -> VendorPerformance:
        return metrics.vendor_performance(self._task_repo.tasks, vendor_id)

    def vendor_spend(self, vendor_id: str) -> float:
        return metrics.vendor_spend(self._task_repo.tasks, vendor_id)

    def unassigned_tasks(self, event_id: str | None = None) -> list[Task]:
        """Open tasks nobody is assigned to (optionally within one event)."""
        return [
            t
            for t in self._task_repo.tasks
            if not t.assigned_to and not t.completed and (event_id is None or t.event_id == event_id)
        ]
