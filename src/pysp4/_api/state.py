"""State query / apply commands (opcode ``0x6A``).

Both directions share the opcode; the envelope flag selects the
operation: ``1`` queries the current state with an empty object, ``2``
applies the fields present in the payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import partial
from typing import Any

from pysp4._api._common import execute_command
from pysp4._codec.packet import encode_packet
from pysp4._codec.value import StateMapping
from pysp4._constants import FLAG_APPLY, FLAG_QUERY, STATE_OPCODE
from pysp4._transport import CommandLink
from pysp4.models.command import Command, CommandResult
from pysp4.models.state import StateParams
from pysp4.observer import CommandObserver


def _wire_state(state: Mapping[str, Any]) -> StateMapping:
    """Render booleans as ``0``/``1`` the way the device expects them."""
    return {key: int(value) if isinstance(value, bool) else value for key, value in state.items()}


def build_query_command() -> Command:
    return Command(STATE_OPCODE, partial(encode_packet, FLAG_QUERY, {}), name="query_state")


def build_apply_command(state: StateParams | Mapping[str, Any]) -> Command:
    """Build the apply command for *state*.

    ``StateParams`` render their own wire form; plain mappings get their
    boolean values converted to integers.
    """
    if isinstance(state, StateParams):
        payload = state.to_state_mapping()
    else:
        payload = _wire_state(state)
    return Command(STATE_OPCODE, partial(encode_packet, FLAG_APPLY, payload), name="apply_state")


def query_state(link: CommandLink, *, observer: CommandObserver) -> CommandResult:
    """Ask the device for its current state."""
    return execute_command(link, build_query_command(), observer=observer)


def apply_state(
    link: CommandLink,
    state: StateParams | Mapping[str, Any],
    *,
    observer: CommandObserver,
) -> CommandResult:
    """Apply *state*; on success the result holds the acknowledged values."""
    return execute_command(link, build_apply_command(state), observer=observer)
