# src/event_planner/core/result.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OpResult:
    """
    Outcome of a store mutation.

    Mutators never raise for domain conditions (unknown id, empty title,
    last event). They return ok=False with a reason the caller can show.
    `value` optionally carries the created/affected record id.
    """

    ok: bool
    reason: str | None = None
    value: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: str | None = None) -> OpResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> OpResult:
        return cls(ok=False, reason=reason)
