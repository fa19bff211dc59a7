"""List request validation."""

from __future__ import annotations

from typing import Any

import structlog

from .exceptions import InvalidArgumentError
from .fingerprint import compute_fingerprint
from .metrics import pagination_invalid_argument_total
from .models import ListRequest, NormalizedRequest
from .tokens import PageTokenManager

_logger = structlog.get_logger(__name__)

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)


def _check_int32(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(field, f"{field} must be an integer")
    if value < INT32_MIN or value > INT32_MAX:
        raise InvalidArgumentError(field, f"{field} is out of range: {value}")
    return value


class RequestValidator:
    """Turns a ListRequest into a NormalizedRequest or rejects it.

    Rejection always happens before the Lister is called. The page token is
    only read, never issued or stored, here.
    """

    def __init__(
        self,
        tokens: PageTokenManager,
        default_page_size: int = 50,
        max_page_size: int = 1000,
    ) -> None:
        if not 1 <= default_page_size <= max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")
        self._tokens = tokens
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def validate(self, request: ListRequest) -> NormalizedRequest:
        try:
            return await self._validate(request)
        except InvalidArgumentError as e:
            pagination_invalid_argument_total.add(1, {"field": e.field})
            _logger.info(
                "list request rejected",
                parent=request.parent,
                field=e.field,
                reason=str(e),
            )
            raise

    async def _validate(self, request: ListRequest) -> NormalizedRequest:
        if not isinstance(request.parent, str) or not request.parent:
            raise InvalidArgumentError("parent", "parent is required")

        page_size = self._page_size(request.page_size)

        skip = 0
        if request.skip is not None:
            skip = _check_int32("skip", request.skip)
            if skip < 0:
                raise InvalidArgumentError("skip", f"skip must not be negative: {skip}")

        fingerprint = compute_fingerprint(request.parent, request.filters)

        cursor_offset = None
        if request.page_token:
            payload = await self._tokens.resolve(request.page_token)
            if payload.fingerprint != fingerprint:
                raise InvalidArgumentError(
                    "page_token",
                    "request parameters changed since page_token was issued",
                )
            cursor_offset = payload.offset

        return NormalizedRequest(
            parent=request.parent,
            filters=dict(request.filters),
            fingerprint=fingerprint,
            page_size=page_size,
            skip=skip,
            cursor_offset=cursor_offset,
        )

    def _page_size(self, value: int | None) -> int:
        if value is None:
            return self._default_page_size
        value = _check_int32("page_size", value)
        if value < 0:
            raise InvalidArgumentError("page_size", f"page_size must not be negative: {value}")
        if value == 0:
            return self._default_page_size
        return min(value, self._max_page_size)
