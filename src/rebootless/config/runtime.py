"""Runtime configuration for the engine and its node adapters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from rebootless.domain.reconciliation.engine import (
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_SERVICE_TIMEOUT_SECONDS,
    Timeouts,
)

from .env import env_path, env_seconds, optional_env_var

DEFAULT_SYSTEMCTL: Final[str] = "systemctl"
DEFAULT_UNIT_DIR: Final[Path] = Path("/etc/systemd/system")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    command_timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    service_timeout_seconds: float = DEFAULT_SERVICE_TIMEOUT_SECONDS
    systemctl: str = DEFAULT_SYSTEMCTL
    unit_dir: Path = DEFAULT_UNIT_DIR

    @property
    def timeouts(self) -> Timeouts:
        return Timeouts(
            command_seconds=self.command_timeout_seconds,
            service_seconds=self.service_timeout_seconds,
        )


def get_runtime_config() -> RuntimeConfig:
    return RuntimeConfig(
        command_timeout_seconds=env_seconds(
            "REBOOTLESS_COMMAND_TIMEOUT_SECONDS", DEFAULT_COMMAND_TIMEOUT_SECONDS
        ),
        service_timeout_seconds=env_seconds(
            "REBOOTLESS_SERVICE_TIMEOUT_SECONDS", DEFAULT_SERVICE_TIMEOUT_SECONDS
        ),
        systemctl=optional_env_var("REBOOTLESS_SYSTEMCTL") or DEFAULT_SYSTEMCTL,
        unit_dir=env_path("REBOOTLESS_UNIT_DIR") or DEFAULT_UNIT_DIR,
    )
