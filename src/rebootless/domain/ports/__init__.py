"""Domain port definitions for adapters."""

from __future__ import annotations

from .apply import DrainNode, FileApplier, UnitApplier
from .process import CommandResult, CommandRunner
from .services import ServiceManager

__all__ = [
    "CommandResult",
    "CommandRunner",
    "DrainNode",
    "FileApplier",
    "ServiceManager",
    "UnitApplier",
]
