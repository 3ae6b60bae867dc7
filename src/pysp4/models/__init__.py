"""Data models for SP4 commands and state."""

from pysp4._codec.value import Scalar, StateMapping
from pysp4.models.command import Command, CommandResult
from pysp4.models.state import StateParams, state_mismatches

__all__ = [
    "Command",
    "CommandResult",
    "Scalar",
    "StateMapping",
    "StateParams",
    "state_mismatches",
]
