from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Optional

from resizer.config import STORAGE_PATH


class MemoryStore:
    """In-process key/value store (tests, or when no durable storage is wanted)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    String key/value pairs kept as one JSON object on disk.
    Read/write errors propagate (OSError, ValueError); callers decide whether they matter.
    """

    def __init__(self, path: str | Path = STORAGE_PATH):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            # unreadable file gets replaced rather than blocking every later write
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
