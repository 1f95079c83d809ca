"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class PolicyConfigurationError(ConfigurationError):
    """Raised when the remediation policy document cannot be loaded."""
