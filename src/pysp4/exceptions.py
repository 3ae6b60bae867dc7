"""Custom exception hierarchy for pysp4."""

from __future__ import annotations


class Sp4Error(Exception):
    """Base exception for all pysp4 errors."""


class Sp4ConfigError(Sp4Error):
    """Invalid or missing configuration."""


class Sp4CryptoError(Sp4Error):
    """Encryption or decryption failure."""


class Sp4DecodeError(Sp4Error):
    """A state payload or envelope could not be decoded."""


class Sp4FormatError(Sp4DecodeError):
    """Malformed object text (wrapper braces, missing key/value separator)."""


class Sp4ValueTypeError(Sp4DecodeError):
    """A value token is not quoted text, a boolean, ``null`` or an integer."""

    def __init__(self, message: str, *, token: str = "") -> None:
        self.token = token
        super().__init__(message)


class Sp4CorruptionError(Sp4DecodeError):
    """Received bytes are too short or do not match their declared length."""

    def __init__(
        self,
        message: str,
        *,
        declared: int | None = None,
        available: int | None = None,
    ) -> None:
        self.declared = declared
        self.available = available
        super().__init__(message)


class Sp4DeviceError(Sp4Error):
    """Device answered with a non-zero status code.

    Command operations report this through
    :class:`pysp4.models.command.CommandResult` instead of raising it, so
    callers can decide their own retry policy.  It is only raised by
    :meth:`CommandResult.raise_for_status`.
    """

    def __init__(self, message: str, *, status: int, opcode: int | None = None) -> None:
        self.status = status
        self.opcode = opcode
        super().__init__(message)


class Sp4TransportError(Sp4Error):
    """UDP-level failure (socket error or no answer before the timeout)."""

    def __init__(
        self,
        message: str,
        *,
        host: str = "",
        port: int | None = None,
    ) -> None:
        self.host = host
        self.port = port
        super().__init__(message)
