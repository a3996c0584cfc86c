"""Error types shared by the POS core."""
from __future__ import annotations


class PosError(Exception):
    """Base class for every error raised by the POS core."""


class StoreError(PosError):
    """A key-value backend failed to read or write."""


class PersistenceError(PosError):
    """A store operation failed after the in-memory state was already updated.

    Callers may retry the operation; the in-memory view stays authoritative.
    """

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Failed to persist '{key}'")
