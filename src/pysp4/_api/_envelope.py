"""Outer command frame carrying an encrypted envelope.

Frame layout (little-endian, 0x38-byte header)::

    0x00  8  magic 5A A5 AA 55 5A A5 AA 55
    0x20  2  frame checksum (0xBEAF + sum of every frame byte)
    0x22  2  status code (responses only)
    0x24  2  device type
    0x26  2  opcode
    0x28  2  packet counter
    0x2A  6  MAC address, reversed
    0x30  4  device id
    0x34  2  body checksum (0xBEAF + sum of the plaintext body)
    0x38  n  AES-CBC encrypted body
"""

from __future__ import annotations

import struct

from pysp4._codec.packet import checksum16
from pysp4._constants import FRAME_CHECKSUM_OFFSET, FRAME_HEADER_SIZE, FRAME_MAGIC, STATUS_OFFSET
from pysp4._crypto import SecureChannel
from pysp4._crypto.aes import zero_pad
from pysp4.exceptions import Sp4CorruptionError

_ADDRESSING = struct.Struct("<HHH6sIH")
_ADDRESSING_OFFSET = 0x24


def build_command_frame(
    *,
    opcode: int,
    payload: bytes,
    channel: SecureChannel,
    device_type: int,
    device_id: int,
    mac: bytes,
    count: int,
) -> bytes:
    """Encrypt *payload* and wrap it in an outer command frame.

    Parameters
    ----------
    opcode : int
        Command opcode written at ``0x26``.
    payload : bytes
        Plaintext envelope.  Zero-padded to the cipher block size before
        both the body checksum and the encryption.
    channel : SecureChannel
        Cipher used for the body.
    device_type, device_id : int
        Addressing fields from the device's configuration.
    mac : bytes
        6-byte MAC address in display order; stored reversed.
    count : int
        Packet counter, truncated to 16 bits.
    """
    body = zero_pad(payload)
    frame = bytearray(FRAME_HEADER_SIZE)
    frame[0:8] = FRAME_MAGIC
    _ADDRESSING.pack_into(
        frame,
        _ADDRESSING_OFFSET,
        device_type & 0xFFFF,
        opcode,
        count & 0xFFFF,
        mac[::-1],
        device_id & 0xFFFFFFFF,
        checksum16(body),
    )
    frame.extend(channel.encrypt(body))
    frame[FRAME_CHECKSUM_OFFSET : FRAME_CHECKSUM_OFFSET + 2] = checksum16(frame).to_bytes(2, "little")
    return bytes(frame)


def read_status(frame: bytes) -> int:
    """Return the little-endian status code at ``0x22`` of a response frame."""
    if len(frame) < STATUS_OFFSET + 2:
        raise Sp4CorruptionError(
            f"Response frame too short for status field: {len(frame)} bytes",
            available=len(frame),
        )
    return int(struct.unpack_from("<H", frame, STATUS_OFFSET)[0])


def frame_body(frame: bytes) -> bytes:
    """Return the still-encrypted body of a response frame."""
    if len(frame) < FRAME_HEADER_SIZE:
        raise Sp4CorruptionError(
            f"Response frame shorter than its {FRAME_HEADER_SIZE}-byte header: {len(frame)} bytes",
            available=len(frame),
        )
    return frame[FRAME_HEADER_SIZE:]
