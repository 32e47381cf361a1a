"""Relay server configuration, read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

__all__ = ["RelayConfig"]


def _optional_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class RelayConfig:
    gpsd_host: str = "localhost"
    gpsd_port: int = 2947
    gpsd_timeout: float | None = None
    queue_size: int = 10
    idle_timeout: float = 5.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RelayConfig":
        env = os.environ if environ is None else environ
        return cls(
            gpsd_host=env.get("GPSD_HOST", "localhost"),
            gpsd_port=int(env.get("GPSD_PORT", "2947")),
            gpsd_timeout=_optional_float(env.get("GPSD_TIMEOUT")),
            queue_size=int(env.get("RELAY_QUEUE_SIZE", "10")),
            idle_timeout=float(env.get("RELAY_IDLE_TIMEOUT", "5.0")),
            log_level=env.get("RELAY_LOG_LEVEL", "INFO").upper(),
        )
