"""Request fingerprinting for page token consistency checks."""

from __future__ import annotations

import hashlib
import json
import uuid
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from .exceptions import InvalidArgumentError


def _canonical(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if isinstance(value, (set, frozenset)):
        # iteration order of a set follows the process hash seed
        members = [_canonical(v) for v in value]
        return sorted(members, key=lambda m: json.dumps(m, sort_keys=True))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    raise InvalidArgumentError(
        "filters", f"unsupported filter value type: {type(value).__name__}"
    )


def compute_fingerprint(parent: str, filters: Mapping[str, Any]) -> str:
    """Return a stable hash of the parent and filter/query parameters.

    Mapping keys are sorted and set members are ordered, so the digest does
    not depend on insertion order or on the interpreter's hash seed. Dates,
    Decimals and UUIDs hash by their text form; any other non-JSON value is
    rejected with InvalidArgumentError.
    """
    canonical = json.dumps(
        {"parent": parent, "filters": _canonical(filters)},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
