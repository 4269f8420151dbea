# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class InMemoryStorage:
    """
    KeyValueStorage kept in a dict.

    - `writes` counts set() calls for assertions
    """

    slots: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)


class FailingStorage:
    """KeyValueStorage whose writes always fail (disk full, read-only fs, ...)."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")

    def remove(self, key: str) -> None:
        raise OSError("disk full")
