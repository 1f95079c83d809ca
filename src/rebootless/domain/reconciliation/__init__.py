"""Reboot-avoidance core for node configuration updates.

Layered flow of one pass:
1) diff the previous and current desired-state snapshots
2) resolve every change against the ordered policy table
3) aggregate the drain requirement of the resolved plan
4) apply file/unit writes through the apply ports
5) execute the plan; any failure falls back to a reboot
"""

from __future__ import annotations

from .apply import ApplyResult, apply_changes, apply_file_changes, apply_unit_changes
from .diff import diff_files, diff_snapshots, diff_units
from .drain import aggregate_drain
from .engine import RebootAvoidanceEngine, Timeouts
from .execute import execute_plan
from .globbing import MalformedPatternError, compile_glob
from .policy import (
    MalformedPatternWarning,
    PolicyRule,
    PolicyTable,
    RuleResolution,
    derive_service_name,
)
from .resolve import build_plan, resolve_changes

__all__ = [
    "ApplyResult",
    "MalformedPatternError",
    "MalformedPatternWarning",
    "PolicyRule",
    "PolicyTable",
    "RebootAvoidanceEngine",
    "RuleResolution",
    "Timeouts",
    "aggregate_drain",
    "apply_changes",
    "apply_file_changes",
    "apply_unit_changes",
    "build_plan",
    "compile_glob",
    "derive_service_name",
    "diff_files",
    "diff_snapshots",
    "diff_units",
    "execute_plan",
    "resolve_changes",
]
