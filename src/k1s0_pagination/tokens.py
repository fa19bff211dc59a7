"""Page token issuance and resolution."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from .codec import TokenCodec
from .exceptions import InvalidPageTokenError
from .memory import DEFAULT_TTL
from .models import (
    Clock,
    CursorPayload,
    CursorRecord,
    CursorReference,
    as_utc,
    utc_now,
)
from .store import CursorStore


class PageTokenManager:
    """Issues and resolves page tokens within a retention window.

    Without a store the cursor is sealed into the token itself. With a store
    the token only carries a random record id and the cursor lives in the
    store. Either way an expired, unknown or corrupt token raises the same
    InvalidPageTokenError.
    """

    def __init__(
        self,
        codec: TokenCodec,
        ttl: timedelta = DEFAULT_TTL,
        store: CursorStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._codec = codec
        self._ttl = ttl
        self._store = store
        self._clock = clock

    async def issue(self, offset: int, fingerprint: str) -> str:
        """Return a token that resumes at *offset* for *fingerprint*."""
        now = self._now()
        payload = CursorPayload(offset=offset, fingerprint=fingerprint, issued_at=now)
        if self._store is None:
            return self._codec.encode(payload)

        record = CursorRecord(id=uuid.uuid4().hex, payload=payload, created_at=now)
        await self._store.put(record)
        return self._codec.encode(CursorReference(record_id=record.id, issued_at=now))

    async def resolve(self, token: str) -> CursorPayload:
        """Return the cursor a token refers to."""
        decoded = self._codec.decode(token)
        if decoded.issued_at + self._ttl <= self._now():
            raise InvalidPageTokenError()

        if isinstance(decoded, CursorPayload):
            return decoded

        if self._store is None:
            raise InvalidPageTokenError()
        record = await self._store.get(decoded.record_id)
        if record is None:
            raise InvalidPageTokenError()
        return record.payload

    def _now(self) -> datetime:
        # a naive clock such as datetime.utcnow is read as UTC
        return as_utc(self._clock())
