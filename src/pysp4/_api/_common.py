"""Shared command round trip for SP4 endpoint modules.

This module centralizes the send / status check / decode sequence so the
individual command modules only describe their payloads.

It is internal to pysp4 and may change at any time.
"""

from __future__ import annotations

from pysp4._api._envelope import read_status
from pysp4._codec.packet import decode_packet
from pysp4._codec.value import StateMapping
from pysp4._transport import CommandLink
from pysp4.exceptions import Sp4DeviceError, Sp4Error
from pysp4.models.command import Command, CommandResult
from pysp4.observer import CommandObserver


def execute_command(
    link: CommandLink,
    command: Command,
    *,
    observer: CommandObserver,
) -> CommandResult:
    """Send *command* once and decode the device's answer.

    A non-zero status is returned inside the result, never raised.
    Transport and decode errors are reported to ``observer.on_error``
    and then propagate unchanged; nothing is retried here.
    """
    envelope = command.build_payload()
    observer.on_send(command, envelope)

    state: StateMapping = {}
    try:
        frame = link.send_command(command.opcode, envelope)
        status = read_status(frame)
        if status == 0:
            state = decode_packet(link.decrypt_response(frame))
    except Sp4Error as exc:
        observer.on_error(command, exc)
        raise

    if status != 0:
        error = Sp4DeviceError(
            f"{command!r} failed: device status 0x{status:04X} ({status})",
            status=status,
            opcode=command.opcode,
        )
        observer.on_error(command, error)
        return CommandResult(status=status, error=error)

    observer.on_decode(command, state)
    return CommandResult(status=status, state=state)
