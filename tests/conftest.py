"""Shared fixtures for the pagination tests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import structlog

from k1s0_pagination import (
    InMemoryCursorStore,
    ListerPage,
    ListQuery,
    OffsetOutOfRangeError,
    OffsetUnresolvedError,
    PageAssembler,
    PageTokenManager,
    RequestValidator,
    SkipResolver,
    TokenCodec,
    TotalSize,
    generate_key,
)

TTL = timedelta(days=3)


class ManualClock:
    """Clock that only moves when advanced."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeLister:
    """In-memory Lister that records every query."""

    def __init__(
        self,
        items: Sequence[Any],
        *,
        delay: float = 0.0,
        unresolved_from: int | None = None,
        partial: Sequence[Any] = (),
        report_total: bool = False,
        estimate: bool = False,
    ) -> None:
        self.items = list(items)
        self.delay = delay
        self.unresolved_from = unresolved_from
        self.partial = list(partial)
        self.report_total = report_total
        self.estimate = estimate
        self.calls: list[ListQuery] = []

    async def list(self, query: ListQuery) -> ListerPage[Any]:
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.unresolved_from is not None and query.offset >= self.unresolved_from:
            raise OffsetUnresolvedError(items=self.partial)
        if query.offset > len(self.items):
            raise OffsetOutOfRangeError(query.offset)
        end = query.offset + query.limit
        total = TotalSize(len(self.items), is_estimate=self.estimate) if self.report_total else None
        return ListerPage(
            items=self.items[query.offset : end],
            has_more=end < len(self.items),
            total_size=total,
        )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def key() -> str:
    return generate_key()


@pytest.fixture
def codec(key: str) -> TokenCodec:
    return TokenCodec([key])


@pytest.fixture
def tokens(codec: TokenCodec, clock: ManualClock) -> PageTokenManager:
    return PageTokenManager(codec, ttl=TTL, clock=clock)


@pytest.fixture
def store(clock: ManualClock) -> InMemoryCursorStore:
    return InMemoryCursorStore(ttl=TTL, clock=clock)


@pytest.fixture
def stored_tokens(
    codec: TokenCodec, store: InMemoryCursorStore, clock: ManualClock
) -> PageTokenManager:
    return PageTokenManager(codec, ttl=TTL, store=store, clock=clock)


def make_assembler(
    tokens: PageTokenManager,
    *,
    default_page_size: int = 10,
    max_page_size: int = 100,
    timeout: float = 1.0,
) -> PageAssembler:
    return PageAssembler(
        validator=RequestValidator(
            tokens,
            default_page_size=default_page_size,
            max_page_size=max_page_size,
        ),
        resolver=SkipResolver(timeout=timeout),
        tokens=tokens,
    )


@pytest.fixture
def assembler(tokens: PageTokenManager) -> PageAssembler:
    return make_assembler(tokens)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger("k1s0_pagination").setLevel(logging.NOTSET)
