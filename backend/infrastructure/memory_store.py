"""In-memory key-value store for tests and throwaway terminals."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from domain.errors import StoreError
from .store import KeyValueStore


class InMemoryStore(KeyValueStore):
    def __init__(self):
        # Values are kept as JSON text so callers never alias stored state
        self._records: Dict[str, str] = {}

    def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            self._records[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Value for '{key}' is not JSON serializable") from exc

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._records.get(key)
        return json.loads(raw) if raw is not None else None

    def list(self, prefix: str) -> List[Dict[str, Any]]:
        return [
            {"key": key, "value": json.loads(raw)}
            for key, raw in sorted(self._records.items())
            if key.startswith(prefix)
        ]

    def remove(self, key: str) -> None:
        self._records.pop(key, None)

    def __len__(self) -> int:
        return len(self._records)
