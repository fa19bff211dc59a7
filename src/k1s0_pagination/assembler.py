"""List call orchestration and response assembly."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import replace
from typing import Any, TypeVar

import structlog

from .codec import TokenCodec
from .config import PaginationConfig
from .logger import configure_logging
from .memory import InMemoryCursorStore
from .metrics import pagination_requests_total
from .models import Lister, ListRequest, ListResponse, NormalizedRequest
from .resolver import Degraded, Exhausted, Resolution, SkipResolver
from .store import CursorStore
from .tokens import PageTokenManager
from .validator import RequestValidator

T = TypeVar("T")

_logger = structlog.get_logger(__name__)


class PageAssembler:
    """Runs one List call: validate, resolve, build the page, issue the token."""

    def __init__(
        self,
        validator: RequestValidator,
        resolver: SkipResolver,
        tokens: PageTokenManager,
        store: CursorStore | None = None,
        sweep_interval: float = 3600.0,
    ) -> None:
        self._validator = validator
        self._resolver = resolver
        self._tokens = tokens
        self.store = store
        self._sweep_interval = sweep_interval

    @classmethod
    def from_config(
        cls,
        config: PaginationConfig,
        store: CursorStore | None = None,
    ) -> PageAssembler:
        """Build an assembler from configuration.

        Applies the ``log`` section to the library's loggers. When *store*
        is omitted and ``config.store`` is ``"memory"`` an InMemoryCursorStore
        is created; call :meth:`start` to sweep it every
        ``config.sweep_interval`` seconds and :meth:`close` on shutdown.
        """
        configure_logging(config.log)
        if store is None and config.store == "memory":
            store = InMemoryCursorStore(ttl=config.token_ttl_delta)
        tokens = PageTokenManager(
            TokenCodec(config.token_keys),
            ttl=config.token_ttl_delta,
            store=store,
        )
        assembler = cls(
            validator=RequestValidator(
                tokens,
                default_page_size=config.default_page_size,
                max_page_size=config.max_page_size,
            ),
            resolver=SkipResolver(timeout=config.lister_timeout),
            tokens=tokens,
            store=store,
            sweep_interval=config.sweep_interval,
        )
        _logger.debug(
            "page assembler configured",
            store=type(store).__name__ if store is not None else None,
            max_page_size=config.max_page_size,
        )
        return assembler

    async def start(self) -> None:
        """Start background sweeping of the cursor store, if there is one."""
        if self.store is not None:
            self.store.start(self._sweep_interval)

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()

    async def list(self, request: ListRequest, lister: Lister[T]) -> ListResponse[T]:
        """Serve one List call.

        Raises InvalidArgumentError before the Lister is called when the
        request is malformed. Lister slowness never raises; it yields a
        degraded page with a token to retry from.
        """
        normalized = await self._validator.validate(request)
        resolution = await self._resolver.resolve(normalized, lister)
        response = await self.assemble(normalized, resolution)
        pagination_requests_total.add(1, {"outcome": type(resolution).__name__.lower()})
        return response

    async def assemble(
        self,
        request: NormalizedRequest,
        resolution: Resolution,
    ) -> ListResponse[Any]:
        if isinstance(resolution, Exhausted):
            return ListResponse(items=[])

        if isinstance(resolution, Degraded):
            token = await self._tokens.issue(resolution.retry_offset, request.fingerprint)
            return ListResponse(items=list(resolution.items), next_page_token=token, degraded=True)

        page = resolution.page
        items = list(page.items)
        has_more = page.has_more
        if len(items) > request.page_size:
            _logger.warning(
                "lister returned more items than requested",
                parent=request.parent,
                requested=request.page_size,
                returned=len(items),
            )
            items = items[: request.page_size]
            has_more = True

        token = ""
        if has_more:
            token = await self._tokens.issue(resolution.offset + len(items), request.fingerprint)
        return ListResponse(items=items, next_page_token=token, total_size=page.total_size)


async def iterate(
    assembler: PageAssembler,
    request: ListRequest,
    lister: Lister[T],
) -> AsyncIterator[T]:
    """Yield every item of a collection by following page tokens.

    The request's skip applies to the first call only.
    """
    current = request
    while True:
        response = await assembler.list(current, lister)
        for item in response.items:
            yield item
        if not response.has_more:
            return
        current = replace(current, page_token=response.next_page_token, skip=None)
