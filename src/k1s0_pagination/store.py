"""CursorStore abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import CursorRecord


class CursorStore(ABC):
    """Persists cursor state behind store-backed page tokens.

    Callers cannot tell an expired record from one that never existed; both
    read as None.
    """

    @abstractmethod
    async def get(self, record_id: str) -> CursorRecord | None:
        """Return the live record for *record_id*, or None if unknown or expired."""
        ...

    @abstractmethod
    async def put(self, record: CursorRecord) -> None:
        ...

    @abstractmethod
    async def sweep(self) -> int:
        """Delete expired records and return how many were removed."""
        ...

    def start(self, interval: float) -> None:
        """Begin periodic sweeping. Stores that expire records themselves need not."""

    async def close(self) -> None:
        """Stop periodic sweeping and release resources."""
