"""Value and envelope codecs for the SP4 state protocol."""

from __future__ import annotations

from pysp4._codec.packet import checksum16, decode_packet, encode_packet, packet_checksum, verify_packet
from pysp4._codec.value import Scalar, StateMapping, decode_state, encode_state, escape, unescape

__all__ = [
    "Scalar",
    "StateMapping",
    "checksum16",
    "decode_packet",
    "decode_state",
    "encode_packet",
    "encode_state",
    "escape",
    "packet_checksum",
    "unescape",
    "verify_packet",
]
