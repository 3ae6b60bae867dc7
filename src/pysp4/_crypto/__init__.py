"""Cryptographic primitives for SP4 communication."""

from __future__ import annotations

from typing import Protocol

from pysp4._crypto.aes import AesSecureChannel, parse_hex_bytes, zero_pad


class SecureChannel(Protocol):
    """Protocol for the symmetric cipher wrapping command bodies."""

    def encrypt(self, plaintext: bytes) -> bytes: ...

    def decrypt(self, ciphertext: bytes) -> bytes: ...


__all__ = [
    "AesSecureChannel",
    "SecureChannel",
    "parse_hex_bytes",
    "zero_pad",
]
