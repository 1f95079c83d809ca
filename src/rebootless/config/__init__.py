"""Application configuration helpers."""

from __future__ import annotations

from .env import env_path, env_seconds, optional_env_var
from .errors import ConfigurationError, PolicyConfigurationError
from .logging import configure_logging
from .policy import (
    DEFAULT_POLICY_RULES,
    POLICY_FILE_ENV,
    PolicyDocument,
    default_policy_table,
    get_policy_table,
    load_policy_table,
    parse_policy_document,
)
from .runtime import RuntimeConfig, get_runtime_config

__all__ = [
    "DEFAULT_POLICY_RULES",
    "POLICY_FILE_ENV",
    "ConfigurationError",
    "PolicyConfigurationError",
    "PolicyDocument",
    "RuntimeConfig",
    "configure_logging",
    "default_policy_table",
    "env_path",
    "env_seconds",
    "get_policy_table",
    "get_runtime_config",
    "load_policy_table",
    "optional_env_var",
    "parse_policy_document",
]
