"""Tests for state parameters and command results."""

from __future__ import annotations

import pytest

from pysp4.exceptions import Sp4DeviceError
from pysp4.models import CommandResult, StateParams, state_mismatches


class TestStateParams:
    def test_booleans_render_as_integers(self) -> None:
        params = StateParams(pwr=True, ntlight=False, indicator=True, ntlbrightness=80, maxworktime=30, childlock=False)
        assert params.to_state_mapping() == {
            "pwr": 1,
            "ntlight": 0,
            "indicator": 1,
            "ntlbrightness": 80,
            "maxworktime": 30,
            "childlock": 0,
        }
        assert all(type(v) is int for v in params.to_state_mapping().values())

    def test_unset_fields_are_omitted(self) -> None:
        assert StateParams(childlock=True).to_state_mapping() == {"childlock": 1}
        assert StateParams().to_state_mapping() == {}

    @pytest.mark.parametrize("kwargs", [{"ntlbrightness": 101}, {"ntlbrightness": -1}, {"maxworktime": -5}])
    def test_rejects_out_of_range(self, kwargs: dict[str, int]) -> None:
        with pytest.raises(ValueError):
            StateParams(**kwargs)

    def test_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValueError):
            StateParams(power=True)  # type: ignore[call-arg]


def test_state_mismatches() -> None:
    requested = {"pwr": 1, "ntlbrightness": 50, "childlock": 0}
    acknowledged = {"pwr": 1, "ntlbrightness": 40}
    assert state_mismatches(requested, acknowledged) == {"ntlbrightness": 40, "childlock": None}


def test_state_mismatches_compares_bool_with_int() -> None:
    assert state_mismatches({"pwr": True}, {"pwr": 1}) == {}


def test_command_result_ok() -> None:
    result = CommandResult(status=0, state={"pwr": 1})
    assert result.ok
    assert result.raise_for_status() == {"pwr": 1}


def test_command_result_error() -> None:
    error = Sp4DeviceError("failed", status=0xFFFF, opcode=0x6A)
    result = CommandResult(status=0xFFFF, error=error)
    assert not result.ok
    assert result.state == {}
    with pytest.raises(Sp4DeviceError) as exc_info:
        result.raise_for_status()
    assert exc_info.value.status == 0xFFFF
