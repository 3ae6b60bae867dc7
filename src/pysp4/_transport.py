"""UDP transport and the device link combining framing, cipher and socket."""

from __future__ import annotations

import logging
import socket
from typing import Protocol

from pysp4._api._envelope import build_command_frame, frame_body
from pysp4._crypto import SecureChannel
from pysp4._crypto.aes import AesSecureChannel
from pysp4._redact import hex_for_log
from pysp4.config import Sp4Config
from pysp4.exceptions import Sp4TransportError

_logger = logging.getLogger(__name__)

_MAX_DATAGRAM = 2048


class Transport(Protocol):
    """Structural transport interface: one request datagram, one response."""

    def send(self, packet: bytes) -> bytes: ...

    def close(self) -> None: ...


class CommandLink(Protocol):
    """Structural interface used by command operations.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (:class:`DeviceLink`) concrete.
    """

    def send_command(self, opcode: int, payload: bytes) -> bytes: ...

    def decrypt_response(self, frame: bytes) -> bytes: ...


class UdpTransport:
    """Blocking UDP request/response transport with bounded retries.

    Every :meth:`send` opens its own socket and closes it before
    returning, so a reply that arrives after its call gave up can never
    be read as the answer to a later command.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        timeout: float = 10.0,
        retries: int = 3,
    ) -> None:
        self._address = (host, port)
        self._timeout = timeout
        self._retries = retries
        self._closed = False

    def send(self, packet: bytes) -> bytes:
        """Send *packet* and return the first datagram received back.

        Raises
        ------
        Sp4TransportError
            On socket errors, when every attempt timed out, or after
            :meth:`close`.
        """
        host, port = self._address
        if self._closed:
            raise Sp4TransportError(f"Transport to {host}:{port} is closed", host=host, port=port)
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            raise Sp4TransportError(f"Cannot open UDP socket for {host}:{port}: {exc}", host=host, port=port) from exc

        with sock:
            sock.settimeout(self._timeout)
            for attempt in range(1, self._retries + 1):
                _logger.debug("UDP send %s:%d attempt=%d (%d bytes)", host, port, attempt, len(packet))
                try:
                    sock.sendto(packet, self._address)
                    response, _peer = sock.recvfrom(_MAX_DATAGRAM)
                except TimeoutError:
                    _logger.debug("UDP timeout from %s:%d attempt=%d", host, port, attempt)
                    continue
                except OSError as exc:
                    raise Sp4TransportError(
                        f"UDP exchange with {host}:{port} failed: {exc}", host=host, port=port
                    ) from exc
                return response

        raise Sp4TransportError(
            f"No response from {host}:{port} after {self._retries} attempt(s)",
            host=host,
            port=port,
        )

    def close(self) -> None:
        self._closed = True


class DeviceLink:
    """Frame, encrypt and send command envelopes to one device.

    Keeps a per-link packet counter, so a link must not be shared between
    threads without external locking.
    """

    def __init__(
        self,
        transport: Transport,
        channel: SecureChannel,
        *,
        mac: bytes,
        device_type: int,
        device_id: int = 0,
        trace: bool = False,
    ) -> None:
        self._transport = transport
        self._channel = channel
        self._mac = mac
        self._device_type = device_type
        self._device_id = device_id
        self._count = 0
        self._trace = trace

    @classmethod
    def from_config(cls, config: Sp4Config, transport: Transport | None = None) -> DeviceLink:
        """Build a link (and, unless given, a UDP transport) from *config*."""
        if transport is None:
            transport = UdpTransport(config.host, config.port, timeout=config.timeout, retries=config.retries)
        return cls(
            transport,
            AesSecureChannel.from_hex(config.key_hex, config.iv_hex),
            mac=config.mac_bytes,
            device_type=config.device_type,
            device_id=config.device_id,
            trace=config.trace_enabled,
        )

    def send_command(self, opcode: int, payload: bytes) -> bytes:
        """Send one command and return the raw response frame."""
        self._count = (self._count + 1) & 0xFFFF
        frame = build_command_frame(
            opcode=opcode,
            payload=payload,
            channel=self._channel,
            device_type=self._device_type,
            device_id=self._device_id,
            mac=self._mac,
            count=self._count,
        )
        response = self._transport.send(frame)
        if self._trace:
            _logger.debug("Response frame (encrypted): %s", hex_for_log(response, max_bytes=len(response)))
        return response

    def decrypt_response(self, frame: bytes) -> bytes:
        """Decrypt the body of a response frame into a plaintext envelope."""
        payload = self._channel.decrypt(frame_body(frame))
        if self._trace:
            _logger.debug("Response body (decrypted): %s", hex_for_log(payload, max_bytes=len(payload)))
        return payload

    def close(self) -> None:
        self._transport.close()
