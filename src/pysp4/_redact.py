"""Helpers for safe debug logging.

Wire buffers can be long and configuration carries the AES key.  These
helpers produce bounded, key-free representations before anything is
emitted at DEBUG level.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "key_hex",
        "iv",
        "iv_hex",
    }
)


def hex_for_log(data: bytes | bytearray, *, max_bytes: int = 64) -> str:
    """Return an uppercase hex dump of *data*, truncated past *max_bytes*."""
    if len(data) > max_bytes:
        return f"{bytes(data[:max_bytes]).hex().upper()}…<{len(data)}b>"
    return bytes(data).hex().upper()


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a redacted copy of a flat mapping suitable for debug logs."""
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string)
        return redacted

    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    return value
