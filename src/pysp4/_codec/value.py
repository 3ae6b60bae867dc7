"""Compact text codec for flat SP4 state objects.

The device embeds its state as a JSON-like object inside the binary
envelope.  Only a narrow dialect is ever exchanged:

* a single flat object with string keys,
* scalar values only: ``null``, ``true``/``false``, integers and text,
* no whitespace between tokens,
* the solidus is escaped (``/`` -> ``\\/``) and non-ASCII text is sent
  verbatim (no ``\\uXXXX`` escapes).

:func:`json.dumps` cannot reproduce the solidus escaping and
:func:`json.loads` accepts far more than the firmware does, so both
directions are implemented here.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from pysp4.exceptions import Sp4FormatError, Sp4ValueTypeError

Scalar = None | bool | int | str
"""A single state value."""

StateMapping = dict[str, Scalar]
"""Flat key -> scalar mapping carried in an envelope payload."""

_ESCAPES: dict[int, str] = str.maketrans(
    {
        '"': '\\"',
        "\\": "\\\\",
        "/": "\\/",
        "\b": "\\b",
        "\f": "\\f",
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }
)

_UNESCAPES: dict[str, str] = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def escape(text: str) -> str:
    """Escape *text* for use between double quotes."""
    return text.translate(_ESCAPES)


def unescape(text: str) -> str:
    """Reverse :func:`escape`.

    Unknown two-character sequences yield the character after the
    backslash.  A trailing lone backslash is kept as-is.
    """
    if "\\" not in text:
        return text
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\\" and i + 1 < length:
            nxt = text[i + 1]
            out.append(_UNESCAPES.get(nxt, nxt))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def encode_value(value: Any) -> str:
    """Render a single value token."""
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{escape(value)}"'
    # Unsupported kinds degrade to quoted text instead of failing.
    return f'"{escape(str(value))}"'


def encode_state(state: Mapping[str, Any] | None) -> str:
    """Serialize a flat state mapping to compact object text.

    Parameters
    ----------
    state : Mapping or None
        Keys must be strings.  Entries are written in the mapping's own
        iteration order.

    Returns
    -------
    str
        ``{}`` for ``None`` or an empty mapping, otherwise
        ``{"key":value,...}`` without any whitespace.

    Notes
    -----
    Integers are written at any size, but :func:`decode_state` only reads
    back values in the signed 32-bit range.  Larger numbers should be
    sent as text.
    """
    if not state:
        return "{}"
    body = ",".join(f'"{escape(str(key))}":{encode_value(value)}' for key, value in state.items())
    return "{" + body + "}"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _outside_string(text: str, target: str) -> Iterator[int]:
    """Yield indexes of *target* characters that sit outside quoted text.

    Outside a string, a ``"`` opens one unless the character right before
    it is a backslash, and every *target* counts.  Inside a string, a
    backslash escapes exactly one following character, so ``\\\\"``
    still closes it.
    """
    in_string = False
    escaped = False
    prev = ""
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = prev != "\\"
        elif ch == target:
            yield i
        prev = ch


def _split_members(body: str) -> list[str]:
    members: list[str] = []
    start = 0
    for idx in _outside_string(body, ","):
        members.append(body[start:idx].strip())
        start = idx + 1
    members.append(body[start:].strip())
    return members


def _strip_quotes(token: str) -> str | None:
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return None


def decode_value(token: str) -> Scalar:
    """Classify and convert a trimmed value token.

    Raises
    ------
    Sp4ValueTypeError
        If *token* is not quoted text, ``true``/``false``, ``null`` or a
        base-10 integer that fits in 32 bits.
    """
    quoted = _strip_quotes(token)
    if quoted is not None:
        return unescape(quoted)
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "null":
        return None
    if _INTEGER_RE.fullmatch(token):
        number = int(token)
        if _INT32_MIN <= number <= _INT32_MAX:
            return number
    raise Sp4ValueTypeError(f"Unsupported value type: {token!r}", token=token)


def decode_state(text: str) -> StateMapping:
    """Parse compact object text into a flat state mapping.

    Parameters
    ----------
    text : str
        Object text as produced by the device (or :func:`encode_state`).
        Leading/trailing whitespace is ignored.

    Returns
    -------
    dict
        Decoded mapping.  Duplicate keys keep the last value.

    Raises
    ------
    Sp4FormatError
        If the text is not wrapped in ``{}`` or a member has no ``:``
        separator outside quoted text.
    Sp4ValueTypeError
        If a value token has an unsupported type.
    """
    content = text.strip()
    if not content.startswith("{") or not content.endswith("}"):
        raise Sp4FormatError(f"Object text must be wrapped in {{}}: {content[:64]!r}")

    body = content[1:-1].strip()
    result: StateMapping = {}
    if not body:
        return result

    for member in _split_members(body):
        colon = next(_outside_string(member, ":"), -1)
        if colon == -1:
            raise Sp4FormatError(f"Missing key/value separator in member: {member!r}")

        raw_key = member[:colon].strip()
        key = _strip_quotes(raw_key)
        result[unescape(raw_key if key is None else key)] = decode_value(member[colon + 1 :].strip())
    return result
