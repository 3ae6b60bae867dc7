"""Observer hooks invoked by command operations.

Protocol code never logs on its own.  It reports to a
:class:`CommandObserver` at three points:

* ``on_send`` right before the envelope is handed to the link,
* ``on_decode`` after a successful response was decoded,
* ``on_error`` when the device answered with a non-zero status, or
  when the exchange failed with a transport or decode error.

:class:`LoggingObserver` is the default and writes to the standard
``logging`` hierarchy under ``pysp4.observer``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pysp4._codec.value import StateMapping
from pysp4._redact import hex_for_log
from pysp4.exceptions import Sp4DeviceError, Sp4Error
from pysp4.models.command import Command

_logger = logging.getLogger(__name__)


class CommandObserver(Protocol):
    """Structural interface for command lifecycle callbacks."""

    def on_send(self, command: Command, envelope: bytes) -> None: ...

    def on_decode(self, command: Command, state: StateMapping) -> None: ...

    def on_error(self, command: Command, error: Sp4Error) -> None: ...


class LoggingObserver:
    """Log command traffic through :mod:`logging`.

    Envelopes are logged at DEBUG, truncated unless *trace* is set.
    Device status codes and failed exchanges are logged at WARNING.
    """

    def __init__(self, *, trace: bool = False, logger: logging.Logger | None = None) -> None:
        self._max_bytes = 1 << 16 if trace else 64
        self._logger = logger or _logger

    def on_send(self, command: Command, envelope: bytes) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug("%r sending envelope: %s", command, hex_for_log(envelope, max_bytes=self._max_bytes))

    def on_decode(self, command: Command, state: StateMapping) -> None:
        self._logger.debug("%r decoded state: %s", command, state)

    def on_error(self, command: Command, error: Sp4Error) -> None:
        if isinstance(error, Sp4DeviceError):
            self._logger.warning("%r returned error: 0x%X / %d", command, error.status, error.status)
        else:
            self._logger.warning("%r failed: %s", command, error)
