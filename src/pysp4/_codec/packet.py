"""SP4 state envelope: 12-byte header in front of the object text.

Envelope layout (little-endian)::

    +--------+--------+----------+------+-------+----------------+---------+
    | magic1 | magic2 | checksum | flag | const | payload length | payload |
    | A5A5   | 5A5A   | 2 bytes  | 1 B  | 0x0B  | 4 bytes        | n bytes |
    +--------+--------+----------+------+-------+----------------+---------+

The checksum is ``0xBEAF`` plus the sum of every byte of header and
payload, taken while the checksum field itself is still zero, truncated
to 16 bits.
"""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any

from pysp4._codec.value import StateMapping, decode_state, encode_state
from pysp4._constants import (
    CHECKSUM_SEED,
    ENVELOPE_CONST,
    ENVELOPE_HEADER_SIZE,
    ENVELOPE_MAGIC1,
    ENVELOPE_MAGIC2,
)
from pysp4.exceptions import Sp4CorruptionError

_HEADER = struct.Struct("<HHHBBI")
_CHECKSUM_SLICE = slice(4, 6)
_LENGTH_OFFSET = 8


def checksum16(data: bytes | bytearray) -> int:
    """Return ``(0xBEAF + sum(data)) & 0xFFFF``."""
    return sum(data, CHECKSUM_SEED) & 0xFFFF


def packet_checksum(packet: bytes | bytearray) -> int:
    """Compute the envelope checksum of *packet* with its checksum field zeroed."""
    zeroed = bytearray(packet)
    zeroed[_CHECKSUM_SLICE] = b"\x00\x00"
    return checksum16(zeroed)


def verify_packet(packet: bytes | bytearray) -> bool:
    """Return ``True`` when the stored checksum matches the recomputed one.

    Decoding never calls this; it is offered to callers that want an
    integrity check on top of the secure channel.
    """
    if len(packet) < ENVELOPE_HEADER_SIZE:
        return False
    stored = struct.unpack_from("<H", packet, _CHECKSUM_SLICE.start)[0]
    return bool(stored == packet_checksum(packet))


def encode_packet(flag: int, state: Mapping[str, Any] | None) -> bytes:
    """Wrap *state* in an envelope.

    Parameters
    ----------
    flag : int
        Command sub-selector byte (``1`` query, ``2`` apply).
    state : Mapping or None
        Flat state mapping serialized with
        :func:`pysp4._codec.value.encode_state`.

    Returns
    -------
    bytes
        Header followed by the UTF-8 object text, checksum filled in.
    """
    if not 0 <= flag <= 0xFF:
        raise ValueError(f"flag must fit in one byte, got {flag}")

    payload = encode_state(state).encode("utf-8")
    packet = bytearray(_HEADER.size)
    _HEADER.pack_into(
        packet,
        0,
        ENVELOPE_MAGIC1,
        ENVELOPE_MAGIC2,
        0x0000,
        flag,
        ENVELOPE_CONST,
        len(payload),
    )
    packet.extend(payload)
    packet[_CHECKSUM_SLICE] = checksum16(packet).to_bytes(2, "little")
    return bytes(packet)


def decode_packet(packet: bytes | bytearray) -> StateMapping:
    """Decode the state mapping carried by a decrypted envelope.

    Only the length field is consulted; magic values and checksum are
    not validated.  Trailing bytes past the declared payload (block
    padding from the secure channel) are ignored.

    Raises
    ------
    Sp4CorruptionError
        If the buffer is shorter than a header, the declared payload
        length runs past the end of the buffer, or the payload is not
        valid UTF-8.
    Sp4FormatError, Sp4ValueTypeError
        If the payload text itself is malformed.
    """
    available = len(packet)
    if available < ENVELOPE_HEADER_SIZE:
        raise Sp4CorruptionError(
            f"Envelope too short: {available} bytes, header needs {ENVELOPE_HEADER_SIZE}",
            available=available,
        )

    declared = struct.unpack_from("<I", packet, _LENGTH_OFFSET)[0]
    end = ENVELOPE_HEADER_SIZE + declared
    if end > available:
        raise Sp4CorruptionError(
            f"Declared payload length {declared} exceeds buffer ({available - ENVELOPE_HEADER_SIZE} bytes available)",
            declared=declared,
            available=available - ENVELOPE_HEADER_SIZE,
        )

    try:
        text = bytes(packet[ENVELOPE_HEADER_SIZE:end]).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Sp4CorruptionError(f"Envelope payload is not UTF-8: {exc}", declared=declared) from exc
    return decode_state(text)
