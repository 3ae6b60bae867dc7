"""AES-128-CBC secure channel for SP4 command bodies.

The device encrypts command bodies with AES-CBC and a fixed IV.  Bodies
are zero-padded to the block size rather than PKCS#7 padded; the
envelope's own length field tells the receiver where the payload ends.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pysp4._constants import AES_BLOCK_SIZE, DEFAULT_IV_HEX, DEFAULT_KEY_HEX
from pysp4.exceptions import Sp4CryptoError


def parse_hex_bytes(
    value: str,
    *,
    name: str,
    allowed_nbytes: set[int] | None = None,
) -> bytes:
    """Decode a hex string (optional ``0x`` prefix) into bytes."""
    text = value.strip()
    if text.startswith("0x") or text.startswith("0X"):
        text = text[2:]
    if not text:
        raise Sp4CryptoError(f"{name} is empty")
    if len(text) % 2 != 0:
        raise Sp4CryptoError(f"{name} hex length must be even (got {len(text)})")
    try:
        data = bytes.fromhex(text)
    except ValueError as exc:
        raise Sp4CryptoError(f"{name} must be hex-encoded") from exc

    if allowed_nbytes is not None and len(data) not in allowed_nbytes:
        allowed = ", ".join(str(n) for n in sorted(allowed_nbytes))
        raise Sp4CryptoError(f"{name} must be {allowed} bytes (got {len(data)})")
    return data


def zero_pad(data: bytes) -> bytes:
    """Pad *data* with zero bytes up to the next AES block boundary."""
    return data + bytes(-len(data) % AES_BLOCK_SIZE)


class AesSecureChannel:
    """Symmetric AES-CBC channel with a fixed IV.

    Parameters
    ----------
    key : bytes
        16-byte AES key.  Defaults to the factory key used before the
        authentication handshake.
    iv : bytes
        16-byte initialisation vector, reused for every message.
    """

    def __init__(self, key: bytes | None = None, iv: bytes | None = None) -> None:
        self._key = key if key is not None else bytes.fromhex(DEFAULT_KEY_HEX)
        self._iv = iv if iv is not None else bytes.fromhex(DEFAULT_IV_HEX)
        if len(self._key) != 16:
            raise Sp4CryptoError(f"AES key must be 16 bytes (got {len(self._key)})")
        if len(self._iv) != AES_BLOCK_SIZE:
            raise Sp4CryptoError(f"AES IV must be {AES_BLOCK_SIZE} bytes (got {len(self._iv)})")

    @classmethod
    def from_hex(cls, key_hex: str = DEFAULT_KEY_HEX, iv_hex: str = DEFAULT_IV_HEX) -> AesSecureChannel:
        """Build a channel from hex-encoded key and IV."""
        key = parse_hex_bytes(key_hex, name="AES key", allowed_nbytes={16})
        iv = parse_hex_bytes(iv_hex, name="AES IV", allowed_nbytes={AES_BLOCK_SIZE})
        return cls(key, iv)

    def _cipher(self) -> Cipher[modes.CBC]:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, plaintext: bytes) -> bytes:
        """Zero-pad and encrypt *plaintext*."""
        try:
            encryptor = self._cipher().encryptor()
            return encryptor.update(zero_pad(plaintext)) + encryptor.finalize()
        except Exception as exc:
            raise Sp4CryptoError(f"AES encryption failed: {exc}") from exc

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt *ciphertext*; zero padding is left in place."""
        if len(ciphertext) % AES_BLOCK_SIZE != 0:
            raise Sp4CryptoError(
                f"AES ciphertext length must be a multiple of {AES_BLOCK_SIZE} (got {len(ciphertext)})"
            )
        try:
            decryptor = self._cipher().decryptor()
            return decryptor.update(ciphertext) + decryptor.finalize()
        except Exception as exc:
            raise Sp4CryptoError(f"AES decryption failed: {exc}") from exc
