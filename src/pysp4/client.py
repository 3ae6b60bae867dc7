"""High-level synchronous client for SP4 smart plugs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pysp4._api import state as _state_api
from pysp4._codec.value import StateMapping
from pysp4._redact import redact_for_log
from pysp4._transport import CommandLink, DeviceLink, Transport
from pysp4.config import Sp4Config
from pysp4.exceptions import Sp4Error
from pysp4.models.command import CommandResult
from pysp4.models.state import StateParams, state_mismatches
from pysp4.observer import CommandObserver, LoggingObserver

_logger = logging.getLogger(__name__)


class Sp4Device:
    """Client for one SP4 plug.

    Usage::

        with Sp4Device(Sp4Config(host="192.168.1.20", mac="aa:bb:cc:dd:ee:ff")) as plug:
            state = plug.get_state()
            plug.set_state(StateParams(pwr=True))
    """

    def __init__(
        self,
        config: Sp4Config,
        *,
        transport: Transport | None = None,
        link: CommandLink | None = None,
        observer: CommandObserver | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._external_link = link is not None
        self._link: CommandLink | None = link
        self._observer: CommandObserver = observer or LoggingObserver(trace=config.trace_enabled)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> Sp4Device:
        self.open()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def open(self) -> None:
        """Create the device link unless one was injected."""
        if self._link is None:
            _logger.debug("Opening link with config %s", redact_for_log(vars(self._config)))
            self._link = DeviceLink.from_config(self._config, self._transport)

    def close(self) -> None:
        """Release the link's socket.  Injected links and transports are left open."""
        if self._external_link or self._link is None:
            return
        if self._transport is None and isinstance(self._link, DeviceLink):
            self._link.close()
        self._link = None

    def _require_link(self) -> CommandLink:
        if self._link is None:
            raise Sp4Error("Device not opened. Use 'with Sp4Device(...) as plug:' or call open()")
        return self._link

    # ------------------------------------------------------------------
    # State commands
    # ------------------------------------------------------------------

    def query_state(self) -> CommandResult:
        """Query the device and return the full result, status included."""
        return _state_api.query_state(self._require_link(), observer=self._observer)

    def apply_state(self, state: StateParams | Mapping[str, Any]) -> CommandResult:
        """Apply *state* and return the full result, status included."""
        return _state_api.apply_state(self._require_link(), state, observer=self._observer)

    def get_state(self) -> StateMapping:
        """Return the device state, or ``{}`` when the device reported an error."""
        return self.query_state().state

    def set_state(
        self,
        pwr: bool | None = None,
        ntlight: bool | None = None,
        indicator: bool | None = None,
        ntlbrightness: int | None = None,
        maxworktime: int | None = None,
        childlock: bool | None = None,
    ) -> StateMapping:
        """Apply the given fields and return the acknowledged state.

        Returns ``{}`` when the device reported an error.  Fields the
        device acknowledged with a different value are logged at WARNING.
        Raises ``ValueError`` when no field is given.
        """
        params = StateParams(
            pwr=pwr,
            ntlight=ntlight,
            indicator=indicator,
            ntlbrightness=ntlbrightness,
            maxworktime=maxworktime,
            childlock=childlock,
        )
        if not params.to_state_mapping():
            raise ValueError("set_state() needs at least one field to apply")
        result = self.apply_state(params)
        if result.ok:
            mismatches = state_mismatches(params.to_state_mapping(), result.state)
            if mismatches:
                _logger.warning("Device acknowledged different values: %s", mismatches)
        return result.state
