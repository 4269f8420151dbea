# src/event_planner/vendors/vendor_api.py

from __future__ import annotations

from ..core.result import OpResult
from ..core.state import AppState

UNKNOWN_VENDOR = "Unknown vendor"


def assign_task(state: AppState, task_id: str, vendor_id: str) -> OpResult:
    """Assign a task to an existing vendor (the task store alone does not check vendors)."""
    if state.vendors.get(vendor_id) is None:
        return OpResult.failure(f"Unknown vendor: {vendor_id}")
    return state.tasks.assign_to_vendor(task_id, vendor_id)


def vendor_name(state: AppState, vendor_id: str | None) -> str | None:
    """Display name for Task.assigned_to; dangling references render as UNKNOWN_VENDOR."""
    if not vendor_id:
        return None
    vendor = state.vendors.get(vendor_id)
    return vendor.name if vendor else UNKNOWN_VENDOR
