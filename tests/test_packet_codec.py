"""Tests for the 12-byte state envelope."""

from __future__ import annotations

import struct

import pytest

from pysp4._codec.packet import decode_packet, encode_packet, packet_checksum, verify_packet
from pysp4.exceptions import Sp4CorruptionError, Sp4FormatError


def _envelope(payload: bytes, *, declared: int | None = None, flag: int = 1) -> bytes:
    length = len(payload) if declared is None else declared
    return struct.pack("<HHHBBI", 0xA5A5, 0x5A5A, 0, flag, 0x0B, length) + payload


def test_encode_empty_query_exact_bytes() -> None:
    packet = encode_packet(1, {})
    # 0xBEAF + (A5+A5+5A+5A+01+0B+02+7B+7D) = 0xBEAF + 0x304 = 0xC1B3
    assert packet == bytes.fromhex("a5a5 5a5a b3c1 01 0b 02000000 7b7d")


def test_encode_header_fields() -> None:
    packet = encode_packet(2, {"pwr": 1})
    magic1, magic2, _checksum, flag, const, length = struct.unpack_from("<HHHBBI", packet)
    assert (magic1, magic2, flag, const) == (0xA5A5, 0x5A5A, 2, 0x0B)
    assert packet[12:] == b'{"pwr":1}'
    assert length == len(packet) - 12


def test_payload_length_counts_utf8_bytes() -> None:
    packet = encode_packet(2, {"name": "插座"})
    assert struct.unpack_from("<I", packet, 8)[0] == len('{"name":"插座"}'.encode())


@pytest.mark.parametrize(
    ("flag", "state"),
    [
        (1, {}),
        (2, {"pwr": 1, "ntlight": 0, "indicator": 1, "ntlbrightness": 100, "maxworktime": 0, "childlock": 0}),
        (0xFF, {"text": "x" * 300, "none": None, "ok": False}),
    ],
)
def test_checksum_property(flag: int, state: dict[str, object]) -> None:
    packet = encode_packet(flag, state)
    stored = int.from_bytes(packet[4:6], "little")
    recomputed = (0xBEAF + sum(packet[:4]) + sum(packet[6:])) & 0xFFFF
    assert stored == recomputed
    assert packet_checksum(packet) == stored
    assert verify_packet(packet)


def test_verify_packet_detects_tampering() -> None:
    packet = bytearray(encode_packet(2, {"pwr": 1}))
    packet[-2] ^= 0x01
    assert not verify_packet(bytes(packet))
    assert not verify_packet(b"\xa5\xa5")


def test_flag_must_fit_in_a_byte() -> None:
    with pytest.raises(ValueError):
        encode_packet(0x100, {})
    with pytest.raises(ValueError):
        encode_packet(-1, {})


def test_decode_device_response() -> None:
    payload = b'{"pwr":1,"ok":true}'
    assert len(payload) == 19
    assert decode_packet(_envelope(payload, declared=19)) == {"pwr": 1, "ok": True}


def test_decode_ignores_trailing_block_padding() -> None:
    payload = b'{"pwr":0}'
    assert decode_packet(_envelope(payload) + bytes(7)) == {"pwr": 0}


def test_decode_does_not_validate_checksum() -> None:
    packet = bytearray(encode_packet(2, {"pwr": 1}))
    packet[4:6] = b"\x00\x00"
    assert decode_packet(bytes(packet)) == {"pwr": 1}


def test_decode_short_declared_length_truncates_text() -> None:
    with pytest.raises(Sp4FormatError):
        decode_packet(_envelope(b'{"pwr":1,"ok":true}', declared=17))


@pytest.mark.parametrize("declared", [20, 0xFFFFFFFF])
def test_decode_declared_length_past_buffer(declared: int) -> None:
    with pytest.raises(Sp4CorruptionError) as exc_info:
        decode_packet(_envelope(b'{"pwr":1,"ok":true}', declared=declared))
    assert exc_info.value.declared == declared
    assert exc_info.value.available == 19


def test_decode_buffer_shorter_than_header() -> None:
    with pytest.raises(Sp4CorruptionError):
        decode_packet(b"\xa5\xa5\x5a\x5a")


def test_decode_invalid_utf8_is_corruption() -> None:
    with pytest.raises(Sp4CorruptionError):
        decode_packet(_envelope(b'{"a":"\xff"}'))


def test_encode_decode_round_trip() -> None:
    state = {"pwr": 1, "name": 'He said "hi"\n', "path": "a/b", "none": None, "ok": True}
    assert decode_packet(encode_packet(2, state)) == state
