"""Skip resolution and bounded Lister invocation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Union

import structlog

from .exceptions import OffsetOutOfRangeError, OffsetUnresolvedError
from .metrics import pagination_degraded_total, pagination_exhausted_total
from .models import Lister, ListerPage, ListQuery, NormalizedRequest

_logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Fulfilled:
    """The Lister returned a page starting at offset."""

    offset: int
    page: ListerPage[Any]


@dataclass(frozen=True)
class Degraded:
    """The offset could not be resolved in time.

    retry_offset is where the next call resumes; items holds whatever the
    Lister produced before giving up.
    """

    retry_offset: int
    items: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Exhausted:
    """The offset lies past the end of the collection."""

    offset: int


Resolution = Union[Fulfilled, Degraded, Exhausted]


class SkipResolver:
    """Computes the start offset and fetches the page within a deadline."""

    def __init__(self, timeout: float = 5.0) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = timeout

    @staticmethod
    def effective_offset(request: NormalizedRequest) -> int:
        """Return the absolute offset of the first item of the page.

        skip counts individual resources past the token's cursor, or past the
        start of the collection when there is no token.
        """
        base = request.cursor_offset if request.cursor_offset is not None else 0
        return base + request.skip

    async def resolve(self, request: NormalizedRequest, lister: Lister[Any]) -> Resolution:
        offset = self.effective_offset(request)
        query = ListQuery(
            parent=request.parent,
            filters=request.filters,
            offset=offset,
            limit=request.page_size,
        )

        try:
            page = await asyncio.wait_for(lister.list(query), timeout=self._timeout)
        except asyncio.TimeoutError:
            return self._degraded(request, offset, offset, [], reason="timeout")
        except OffsetUnresolvedError as e:
            items = e.items[: request.page_size]
            retry_offset = offset + len(items)
            if e.resume_offset is not None and len(items) == len(e.items):
                retry_offset = max(e.resume_offset, retry_offset)
            return self._degraded(request, offset, retry_offset, items, reason="unresolved")
        except OffsetOutOfRangeError:
            pagination_exhausted_total.add(1)
            _logger.info("offset exceeds collection", parent=request.parent, offset=offset)
            return Exhausted(offset=offset)

        return Fulfilled(offset=offset, page=page)

    def _degraded(
        self,
        request: NormalizedRequest,
        offset: int,
        retry_offset: int,
        items: list[Any],
        reason: str,
    ) -> Degraded:
        pagination_degraded_total.add(1, {"reason": reason})
        _logger.warning(
            "offset not resolved in time, returning degraded page",
            parent=request.parent,
            offset=offset,
            retry_offset=retry_offset,
            partial_items=len(items),
            reason=reason,
            timeout=self._timeout,
        )
        return Degraded(retry_offset=retry_offset, items=items)
