"""Typed parameters for the SP4 state apply command.

The device expects its switch-like fields as ``0``/``1`` integers, not
JSON booleans.  :class:`StateParams` keeps a Python-friendly ``bool``
API and renders the wire form in :meth:`StateParams.to_state_mapping`.

Read-back values are never coerced: a queried or acknowledged state is
the raw mapping the device sent, so ``pwr`` comes back as ``1``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from pysp4._codec.value import Scalar, StateMapping


class StateParams(BaseModel):
    """Desired state for an SP4 plug.

    Unset fields are left out of the apply payload so the device keeps
    its current value for them.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    pwr: bool | None = None
    """Relay on/off."""

    ntlight: bool | None = None
    """Night light on/off."""

    indicator: bool | None = None
    """Status LED on/off."""

    ntlbrightness: int | None = Field(default=None, ge=0, le=100)
    """Night light brightness in percent."""

    maxworktime: int | None = Field(default=None, ge=0)
    """Auto-off timer in minutes (``0`` disables it)."""

    childlock: bool | None = None
    """Physical button lock on/off."""

    @field_serializer("pwr", "ntlight", "indicator", "childlock")
    def _bool_as_int(self, value: bool | None) -> int | None:
        if value is None:
            return None
        return 1 if value else 0

    def to_state_mapping(self) -> StateMapping:
        """Return the wire-form mapping for the apply envelope."""
        return self.model_dump(exclude_none=True)


def state_mismatches(requested: Mapping[str, Any], acknowledged: Mapping[str, Scalar]) -> dict[str, Scalar]:
    """Return the acknowledged value of every requested field that differs.

    Fields missing from *acknowledged* are reported with ``None``.  Values
    are compared as sent, so ``True`` matches an acknowledged ``1``.
    """
    mismatches: dict[str, Scalar] = {}
    for key, wanted in requested.items():
        got = acknowledged.get(key)
        if key not in acknowledged or got != wanted:
            mismatches[key] = got
    return mismatches
