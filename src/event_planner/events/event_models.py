# src/event_planner/events/event_models.py

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_BUDGET_TOTAL = 10000.0


@dataclass(frozen=True, slots=True)
class BudgetCategory:
    id: str
    name: str
    allocated: float
    spent: float = 0.0


@dataclass(frozen=True, slots=True)
class Budget:
    """
    Event budget.

    When categories are present, total/spent are the sums of
    categories[].allocated / categories[].spent (see with_derived_totals).
    """

    total: float = DEFAULT_BUDGET_TOTAL
    spent: float = 0.0
    categories: tuple[BudgetCategory, ...] = field(default_factory=tuple)

    def with_derived_totals(self) -> Budget:
        if not self.categories:
            return self
        return Budget(
            total=sum(c.allocated for c in self.categories),
            spent=sum(c.spent for c in self.categories),
            categories=self.categories,
        )


@dataclass(frozen=True, slots=True)
class Event:
    id: str
    name: str
    date: str
    location: str
    created_at: str
    budget: Budget
    description: str | None = None
