# src/event_planner/vendors/vendor_models.py

from __future__ import annotations

from dataclasses import dataclass

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True, slots=True)
class Vendor:
    id: str
    name: str
    service: str
    email: str
    phone: str
    location: str
    rating: int
    created_at: str


@dataclass(frozen=True, slots=True)
class VendorPerformance:
    completion_rate: int
    on_time_rate: int
    total_tasks: int
