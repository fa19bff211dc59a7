"""k1s0 pagination library."""

from .assembler import PageAssembler, iterate
from .codec import TokenCodec, generate_key
from .config import LogSection, PaginationConfig, load
from .exceptions import (
    ConfigError,
    ConfigErrorCodes,
    InvalidArgumentError,
    InvalidPageTokenError,
    OffsetOutOfRangeError,
    OffsetUnresolvedError,
    PaginationError,
    PaginationErrorCodes,
)
from .fingerprint import compute_fingerprint
from .logger import configure_logging
from .memory import DEFAULT_TTL, InMemoryCursorStore
from .models import (
    TOKEN_VERSION,
    CursorPayload,
    CursorRecord,
    CursorReference,
    Lister,
    ListerPage,
    ListQuery,
    ListRequest,
    ListResponse,
    NormalizedRequest,
    TotalSize,
)
from .resolver import Degraded, Exhausted, Fulfilled, Resolution, SkipResolver
from .store import CursorStore
from .tokens import PageTokenManager
from .validator import RequestValidator

__all__ = [
    "ConfigError",
    "ConfigErrorCodes",
    "CursorPayload",
    "CursorRecord",
    "CursorReference",
    "CursorStore",
    "DEFAULT_TTL",
    "Degraded",
    "Exhausted",
    "Fulfilled",
    "InMemoryCursorStore",
    "InvalidArgumentError",
    "InvalidPageTokenError",
    "ListQuery",
    "ListRequest",
    "ListResponse",
    "Lister",
    "ListerPage",
    "LogSection",
    "NormalizedRequest",
    "OffsetOutOfRangeError",
    "OffsetUnresolvedError",
    "PageAssembler",
    "PageTokenManager",
    "PaginationConfig",
    "PaginationError",
    "PaginationErrorCodes",
    "RequestValidator",
    "Resolution",
    "SkipResolver",
    "TOKEN_VERSION",
    "TokenCodec",
    "TotalSize",
    "compute_fingerprint",
    "configure_logging",
    "generate_key",
    "iterate",
    "load",
]
