"""Exception types for the pagination library."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class PaginationError(Exception):
    """Base class for pagination library errors."""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class PaginationErrorCodes:
    """Error code constants for PaginationError."""

    INVALID_ARGUMENT: str = "INVALID_ARGUMENT"
    CONFIG_ERROR: str = "CONFIG_ERROR"


class InvalidArgumentError(PaginationError):
    """The caller's request is malformed. Not retryable."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(code=PaginationErrorCodes.INVALID_ARGUMENT, message=message)
        self.field = field


_INVALID_TOKEN_MESSAGE = "page_token is invalid or has expired"


class InvalidPageTokenError(InvalidArgumentError):
    """A page token could not be resolved.

    Corrupt, unknown, expired and old-version tokens all carry the same
    message.
    """

    def __init__(self) -> None:
        super().__init__(field="page_token", message=_INVALID_TOKEN_MESSAGE)


class ConfigError(PaginationError):
    """Configuration file could not be read or validated."""


class ConfigErrorCodes:
    """Error code constants for ConfigError."""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class ListerSignal(Exception):
    """Base for exceptions a Lister raises to report on offset resolution."""


class OffsetUnresolvedError(ListerSignal):
    """The Lister could not reach the requested offset in time.

    resume_offset: offset to retry from (None means the requested offset)
    items: partial items gathered before giving up
    """

    def __init__(
        self,
        resume_offset: int | None = None,
        items: Sequence[Any] = (),
    ) -> None:
        super().__init__("offset could not be resolved in time")
        self.resume_offset = resume_offset
        self.items = list(items)


class OffsetOutOfRangeError(ListerSignal):
    """The requested offset lies past the end of the collection."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"offset {offset} exceeds collection size")
        self.offset = offset
