"""pysp4 - Python client for SP4 smart plugs over the local UDP protocol."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysp4")
except PackageNotFoundError:
    __version__ = "0+local"
from pysp4._codec import decode_packet, decode_state, encode_packet, encode_state, verify_packet
from pysp4._crypto import AesSecureChannel, SecureChannel
from pysp4._transport import CommandLink, DeviceLink, Transport, UdpTransport
from pysp4.client import Sp4Device
from pysp4.config import Sp4Config
from pysp4.exceptions import (
    Sp4ConfigError,
    Sp4CorruptionError,
    Sp4CryptoError,
    Sp4DecodeError,
    Sp4DeviceError,
    Sp4Error,
    Sp4FormatError,
    Sp4TransportError,
    Sp4ValueTypeError,
)
from pysp4.models import Command, CommandResult, Scalar, StateMapping, StateParams, state_mismatches
from pysp4.observer import CommandObserver, LoggingObserver

__all__ = [
    "__version__",
    "AesSecureChannel",
    "Command",
    "CommandLink",
    "CommandObserver",
    "CommandResult",
    "DeviceLink",
    "LoggingObserver",
    "Scalar",
    "SecureChannel",
    "Sp4Config",
    "Sp4ConfigError",
    "Sp4CorruptionError",
    "Sp4CryptoError",
    "Sp4DecodeError",
    "Sp4Device",
    "Sp4DeviceError",
    "Sp4Error",
    "Sp4FormatError",
    "Sp4TransportError",
    "Sp4ValueTypeError",
    "StateMapping",
    "StateParams",
    "Transport",
    "UdpTransport",
    "decode_packet",
    "decode_state",
    "encode_packet",
    "encode_state",
    "state_mismatches",
    "verify_packet",
]
