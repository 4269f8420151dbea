# src/event_planner/storage/kv.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Local key-value slots kept in one JSON object on disk.

    Every set()/remove() rewrites the whole file atomically (tmp + os.replace).
    A missing or unreadable file behaves as an empty storage.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileStorage ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.exception("Failed to read storage file %s; treating as empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; treating as empty", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
