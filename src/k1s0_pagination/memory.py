"""In-memory CursorStore."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timedelta

import structlog

from .metrics import cursor_store_evicted_total
from .models import Clock, CursorRecord, as_utc, utc_now
from .store import CursorStore

_logger = structlog.get_logger(__name__)

DEFAULT_TTL = timedelta(days=3)


class InMemoryCursorStore(CursorStore):
    """Process-local cursor store.

    Expired records are dropped lazily when read. start() runs sweep() in a
    background task until close() is awaited.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Clock = utc_now) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._records: dict[str, CursorRecord] = {}
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._records)

    async def get(self, record_id: str) -> CursorRecord | None:
        record = self._records.get(record_id)
        if record is not None and record.is_expired(self._ttl, self._now()):
            # a concurrent sweep may already have removed it
            self._records.pop(record_id, None)
            cursor_store_evicted_total.add(1)
            return None
        return record

    async def put(self, record: CursorRecord) -> None:
        self._records[record.id] = record

    async def sweep(self) -> int:
        now = self._now()
        expired = [
            record_id
            for record_id, record in list(self._records.items())
            if record.is_expired(self._ttl, now)
        ]
        removed = 0
        for record_id in expired:
            if self._records.pop(record_id, None) is not None:
                removed += 1
        if removed:
            cursor_store_evicted_total.add(removed)
            _logger.debug("cursor store swept", removed=removed, remaining=len(self._records))
        return removed

    def start(self, interval: float) -> None:
        """Run sweep() every *interval* seconds on the running event loop."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        if self.running:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._run_sweeper(interval))

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def close(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    def _now(self) -> datetime:
        return as_utc(self._clock())

    async def _run_sweeper(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep()
            except Exception:
                _logger.exception("cursor store sweep failed")
