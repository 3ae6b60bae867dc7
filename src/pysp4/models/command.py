"""Command value objects and results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from pysp4._codec.value import StateMapping
from pysp4.exceptions import Sp4DeviceError


@dataclass(frozen=True)
class Command:
    """A single device command.

    ``build_payload`` is called exactly once per send to produce the
    plaintext envelope that goes into the outer frame.
    """

    opcode: int
    build_payload: Callable[[], bytes]
    name: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"opcode must fit in one byte, got {self.opcode}")

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"Command(opcode=0x{self.opcode:02X}{label})"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command round trip.

    A non-zero device status is reported here rather than raised: ``error``
    carries the :class:`Sp4DeviceError` and ``state`` is empty.
    """

    status: int
    state: StateMapping = field(default_factory=dict)
    error: Sp4DeviceError | None = None

    @property
    def ok(self) -> bool:
        """Whether the device reported status ``0``."""
        return self.error is None

    def raise_for_status(self) -> StateMapping:
        """Raise the device error, if any; otherwise return ``state``."""
        if self.error is not None:
            raise self.error
        return self.state
