"""Pagination data models."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, Optional, Protocol, TypeVar

T = TypeVar("T")

TOKEN_VERSION = 1

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class ListRequest:
    """A List call as received from the caller."""

    parent: str
    page_size: Optional[int] = None
    page_token: Optional[str] = None
    skip: Optional[int] = None
    filters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedRequest:
    """A validated List call with defaults applied."""

    parent: str
    filters: Mapping[str, Any]
    fingerprint: str
    page_size: int
    skip: int = 0
    cursor_offset: Optional[int] = None


@dataclass(frozen=True)
class CursorPayload:
    """Continuation state sealed inside a page token."""

    offset: int
    fingerprint: str
    issued_at: datetime
    version: int = TOKEN_VERSION


@dataclass(frozen=True)
class CursorReference:
    """Token payload pointing at a stored CursorRecord."""

    record_id: str
    issued_at: datetime
    version: int = TOKEN_VERSION


@dataclass
class CursorRecord:
    """Cursor state persisted in a CursorStore."""

    id: str
    payload: CursorPayload
    created_at: datetime

    def is_expired(self, ttl: timedelta, now: datetime) -> bool:
        """Return True once the record is older than ttl."""
        return as_utc(self.created_at) + ttl <= as_utc(now)


@dataclass(frozen=True)
class TotalSize:
    """Collection size reported by the Lister, exact or estimated."""

    value: int
    is_estimate: bool = False


@dataclass(frozen=True)
class ListQuery:
    """Arguments handed to the Lister for one page."""

    parent: str
    filters: Mapping[str, Any]
    offset: int
    limit: int


@dataclass
class ListerPage(Generic[T]):
    """Items returned by the Lister for one ListQuery."""

    items: Sequence[T]
    has_more: bool
    total_size: Optional[TotalSize] = None


@dataclass
class ListResponse(Generic[T]):
    """Page returned to the caller.

    An empty next_page_token is the only end-of-collection signal.
    """

    items: list[T]
    next_page_token: str = ""
    total_size: Optional[TotalSize] = None
    degraded: bool = False

    @property
    def has_more(self) -> bool:
        return self.next_page_token != ""


class Lister(Protocol[T]):
    """Data source capability invoked once per List call.

    Implementations apply the caller's own authorization on every call and may
    raise OffsetUnresolvedError or OffsetOutOfRangeError to report that the
    requested offset could not be reached.
    """

    async def list(self, query: ListQuery) -> ListerPage[T]:
        ...
