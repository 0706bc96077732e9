from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Protocol

from ..core.exceptions import StoreError


class KeyValueStore(Protocol):
    """Local text key-value store (one host, not shared between clients)."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class JsonFileKeyValueStore(KeyValueStore):
    """Key-value store persisted as one JSON object on disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def _load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read key-value file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Key-value file {self._path} does not hold an object")
        return data

    def _save(self, data: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StoreError(f"Cannot write key-value file {self._path}: {exc}") from exc
