"""Key-value store contract the POS core persists through."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class KeyValueStore(ABC):
    """Prefix-listable JSON record store so memory / SQLite share the same API.

    Keys are namespaced as ``room:<id>``, ``session-history:<id>``,
    ``menu:<id>`` and ``current-user``. Backends raise
    :class:`domain.errors.StoreError` on failure.
    """

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def list(self, prefix: str) -> List[Dict[str, Any]]:
        """Return ``[{"key": ..., "value": ...}]`` for every key starting with ``prefix``."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> None:
        raise NotImplementedError
