"""Opaque page token encoding.

Payloads are serialized as compact JSON and sealed with AES-256-GCM using the
``cryptography`` library's AESGCM primitive and a random 12-byte nonce per
token.  The token string is::

    urlsafe_base64( nonce ‖ ciphertext ‖ tag )  (padding stripped)

The format version lives inside the sealed JSON, so the visible string has no
structure a holder could parse.  Every decode failure raises the same
:class:`InvalidPageTokenError`.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import InvalidPageTokenError
from .models import TOKEN_VERSION, CursorPayload, CursorReference

_NONCE_SIZE = 12  # 96-bit nonce recommended by NIST for AES-GCM
_TAG_SIZE = 16
_KEY_SIZE = 32
_ASSOCIATED_DATA = b"k1s0_pagination.page_token"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)

_KIND_CURSOR = "c"
_KIND_REFERENCE = "r"

Payload = Union[CursorPayload, CursorReference]


def generate_key() -> str:
    """Generate a random 256-bit key as URL-safe base64 text."""
    return base64.urlsafe_b64encode(AESGCM.generate_key(bit_length=256)).decode("ascii")


def _coerce_key(key: str | bytes) -> bytes:
    raw = base64.urlsafe_b64decode(key) if isinstance(key, str) else key
    if len(raw) != _KEY_SIZE:
        raise ValueError(f"token key must be {_KEY_SIZE} bytes, got {len(raw)}")
    return raw


def _to_micros(value: datetime) -> int:
    if value.tzinfo is None:
        raise ValueError("issued_at must be timezone-aware")
    return (value - _EPOCH) // _MICROSECOND


def _from_micros(value: int) -> datetime:
    return _EPOCH + timedelta(microseconds=value)


class TokenCodec:
    """Encodes and decodes page token payloads.

    Parameters
    ----------
    keys:
        One or more 32-byte AES keys (raw bytes or URL-safe base64 text).
        The first key seals new tokens; all keys are tried when opening, so
        a key can be rotated out without breaking outstanding tokens.
    """

    def __init__(self, keys: Sequence[str | bytes]) -> None:
        if not keys:
            raise ValueError("at least one token key is required")
        self._ciphers = [AESGCM(_coerce_key(k)) for k in keys]

    def encode(self, payload: Payload) -> str:
        """Seal *payload* into a URL-safe token string.

        Raises
        ------
        ValueError
            If the payload's issued_at is a naive datetime.
        """
        return self._seal(_to_dict(payload))

    def decode(self, token: str) -> Payload:
        """Open a token produced by :meth:`encode`.

        Raises
        ------
        InvalidPageTokenError
            For any token that is not a well-formed, current-version token
            sealed by one of the configured keys.
        """
        data = self._open(token)
        try:
            return _from_dict(data)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise InvalidPageTokenError() from e

    def _seal(self, data: dict[str, Any]) -> str:
        plaintext = json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")
        nonce = os.urandom(_NONCE_SIZE)
        ct = self._ciphers[0].encrypt(nonce, plaintext, _ASSOCIATED_DATA)
        return base64.urlsafe_b64encode(nonce + ct).rstrip(b"=").decode("ascii")

    def _open(self, token: str) -> dict[str, Any]:
        try:
            padded = token + "=" * (-len(token) % 4)
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        except (UnicodeEncodeError, binascii.Error, ValueError) as e:
            raise InvalidPageTokenError() from e
        if len(raw) < _NONCE_SIZE + _TAG_SIZE:
            raise InvalidPageTokenError()

        nonce, ct = raw[:_NONCE_SIZE], raw[_NONCE_SIZE:]
        for cipher in self._ciphers:
            try:
                plaintext = cipher.decrypt(nonce, ct, _ASSOCIATED_DATA)
                break
            except InvalidTag:
                continue
        else:
            raise InvalidPageTokenError()

        try:
            data = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidPageTokenError() from e
        if not isinstance(data, dict):
            raise InvalidPageTokenError()
        return data


def _to_dict(payload: Payload) -> dict[str, Any]:
    if isinstance(payload, CursorPayload):
        return {
            "v": payload.version,
            "k": _KIND_CURSOR,
            "o": payload.offset,
            "f": payload.fingerprint,
            "t": _to_micros(payload.issued_at),
        }
    return {
        "v": payload.version,
        "k": _KIND_REFERENCE,
        "r": payload.record_id,
        "t": _to_micros(payload.issued_at),
    }


def _require(data: dict[str, Any], key: str, kind: type) -> Any:
    value = data[key]
    # bool is an int subclass; it is never a valid field value here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise TypeError(f"field {key!r} has unexpected type")
    return value


def _from_dict(data: dict[str, Any]) -> Payload:
    version = _require(data, "v", int)
    if version != TOKEN_VERSION:
        raise ValueError(f"unsupported token version: {version}")
    issued_at = _from_micros(_require(data, "t", int))
    kind = _require(data, "k", str)

    if kind == _KIND_CURSOR:
        offset = _require(data, "o", int)
        if offset < 0:
            raise ValueError("negative offset")
        return CursorPayload(
            offset=offset,
            fingerprint=_require(data, "f", str),
            issued_at=issued_at,
            version=version,
        )
    if kind == _KIND_REFERENCE:
        return CursorReference(
            record_id=_require(data, "r", str),
            issued_at=issued_at,
            version=version,
        )
    raise ValueError(f"unknown payload kind: {kind}")
