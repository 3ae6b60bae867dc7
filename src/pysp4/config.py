"""Client configuration for pysp4."""

from __future__ import annotations

import dataclasses
import os
import re
from typing import Any

from pysp4._constants import DEFAULT_DEVICE_TYPE, DEFAULT_IV_HEX, DEFAULT_KEY_HEX, DEFAULT_PORT
from pysp4.exceptions import Sp4ConfigError

_MAC_RE = re.compile(r"[0-9a-fA-F]{2}([:-]?)[0-9a-fA-F]{2}(?:\1[0-9a-fA-F]{2}){4}")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def parse_mac(value: str | bytes) -> bytes:
    """Normalize a MAC address to its 6 raw bytes.

    Accepts ``aa:bb:cc:dd:ee:ff``, ``aa-bb-cc-dd-ee-ff``, ``aabbccddeeff``
    or the raw 6 bytes.
    """
    if isinstance(value, bytes):
        if len(value) != 6:
            raise Sp4ConfigError(f"MAC address must be 6 bytes (got {len(value)})")
        return value
    text = value.strip()
    if not _MAC_RE.fullmatch(text):
        raise Sp4ConfigError(f"Invalid MAC address: {value!r}")
    return bytes.fromhex(re.sub(r"[:-]", "", text))


@dataclasses.dataclass(frozen=True)
class Sp4Config:
    """Client configuration.

    Parameters
    ----------
    host : str
        Device IP address or host name.
    mac : str
        Device MAC address (``aa:bb:cc:dd:ee:ff``).
    port : int
        Device UDP port.
    timeout : float
        Seconds to wait for each response datagram.
    retries : int
        Send attempts before giving up with a transport error.
    device_type : int
        Device type code written into the outer command frame.
    device_id : int
        Device id assigned by the authentication handshake (``0``
        before authentication).
    key_hex : str
        Hex-encoded AES key.  Defaults to the factory key.
    iv_hex : str
        Hex-encoded AES IV.
    trace_enabled : bool
        Log full hex dumps of envelopes and frames at DEBUG level.
    """

    host: str
    mac: str
    port: int = DEFAULT_PORT
    timeout: float = 10.0
    retries: int = 3
    device_type: int = DEFAULT_DEVICE_TYPE
    device_id: int = 0
    key_hex: str = DEFAULT_KEY_HEX
    iv_hex: str = DEFAULT_IV_HEX
    trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.host:
            raise Sp4ConfigError("host is required")
        parse_mac(self.mac)
        if self.retries < 1:
            raise Sp4ConfigError(f"retries must be at least 1, got {self.retries}")
        if self.timeout <= 0:
            raise Sp4ConfigError(f"timeout must be positive, got {self.timeout}")

    @property
    def mac_bytes(self) -> bytes:
        """MAC address as 6 raw bytes."""
        return parse_mac(self.mac)

    @classmethod
    def from_env(cls, **overrides: Any) -> Sp4Config:
        """Create configuration from environment variables.

        Reads ``SP4_HOST`` and ``SP4_MAC`` plus the optional ``SP4_*``
        variables listed below.  Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        Sp4Config
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SP4_HOST": "host",
            "SP4_MAC": "mac",
            "SP4_KEY": "key_hex",
            "SP4_IV": "iv_hex",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields accept decimal or 0x-prefixed values
        _ENV_INT_MAP = {
            "SP4_PORT": "port",
            "SP4_RETRIES": "retries",
            "SP4_DEVICE_TYPE": "device_type",
            "SP4_DEVICE_ID": "device_id",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val, 0)
                except ValueError as exc:
                    raise Sp4ConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        timeout_env = env.get("SP4_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            try:
                config_kwargs["timeout"] = float(timeout_env)
            except ValueError as exc:
                raise Sp4ConfigError(f"SP4_TIMEOUT must be a number, got {timeout_env!r}") from exc

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _env_bool(env.get("SP4_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)
        for required in ("host", "mac"):
            if required not in config_kwargs:
                raise Sp4ConfigError(f"Missing {required!r} (set SP4_{required.upper()} or pass {required}=...)")

        return cls(**config_kwargs)
