"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name``, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_path(name: str) -> Path | None:
    value = optional_env_var(name)
    return Path(value).expanduser() if value is not None else None


def env_seconds(name: str, default: float) -> float:
    """Return a positive number of seconds from ``name`` or ``default`` if unset."""

    value = optional_env_var(name)
    if value is None:
        return default
    try:
        seconds = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got {value!r}") from exc
    if not seconds > 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return seconds
