from __future__ import annotations

import socket
import threading
from collections.abc import Iterator

import pytest

from pysp4._transport import UdpTransport
from pysp4.exceptions import Sp4TransportError


@pytest.fixture
def udp_peer() -> Iterator[socket.socket]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_send_returns_response_datagram(udp_peer: socket.socket) -> None:
    def _echo() -> None:
        data, peer = udp_peer.recvfrom(2048)
        udp_peer.sendto(data[::-1], peer)

    worker = threading.Thread(target=_echo)
    worker.start()
    transport = UdpTransport("127.0.0.1", udp_peer.getsockname()[1], timeout=2.0, retries=1)
    try:
        assert transport.send(b"\x01\x02\x03") == b"\x03\x02\x01"
    finally:
        transport.close()
        worker.join()


def test_send_retries_then_raises(udp_peer: socket.socket) -> None:
    port = udp_peer.getsockname()[1]
    transport = UdpTransport("127.0.0.1", port, timeout=0.05, retries=2)
    try:
        with pytest.raises(Sp4TransportError, match="after 2 attempt") as exc_info:
            transport.send(b"ping")
    finally:
        transport.close()

    assert exc_info.value.port == port
    assert udp_peer.recvfrom(2048)[0] == b"ping"
    assert udp_peer.recvfrom(2048)[0] == b"ping"


def test_late_reply_is_not_returned_to_next_send(udp_peer: socket.socket) -> None:
    port = udp_peer.getsockname()[1]
    transport = UdpTransport("127.0.0.1", port, timeout=0.5, retries=1)
    with pytest.raises(Sp4TransportError):
        transport.send(b"apply")
    _data, first_sender = udp_peer.recvfrom(2048)
    udp_peer.sendto(b"stale", first_sender)

    def _answer() -> None:
        data, peer = udp_peer.recvfrom(2048)
        udp_peer.sendto(b"fresh:" + data, peer)

    worker = threading.Thread(target=_answer)
    worker.start()
    try:
        assert transport.send(b"query") == b"fresh:query"
    finally:
        worker.join()


def test_close_is_idempotent() -> None:
    transport = UdpTransport("127.0.0.1", 9, timeout=0.05, retries=1)
    transport.close()
    transport.close()


def test_send_after_close_raises() -> None:
    transport = UdpTransport("127.0.0.1", 9, timeout=0.05, retries=1)
    transport.close()
    with pytest.raises(Sp4TransportError, match="closed") as exc_info:
        transport.send(b"ping")
    assert exc_info.value.host == "127.0.0.1"
