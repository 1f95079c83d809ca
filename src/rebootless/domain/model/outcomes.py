"""Terminal values of execution and of a whole reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from rebootless.domain.errors import ActionExecutionError

    from .actions import ActionPlan, PlannedAction
    from .enums import RebootReason


@dataclass(frozen=True, slots=True, kw_only=True)
class AllSucceeded:
    executed: int
    succeeded: Literal[True] = True


@dataclass(frozen=True, slots=True, kw_only=True)
class FailedAt:
    """Execution stopped at ``index``; no later step was started."""

    index: int
    step: PlannedAction
    error: ActionExecutionError
    succeeded: Literal[False] = False


type ExecutionResult = AllSucceeded | FailedAt


@dataclass(frozen=True, slots=True, kw_only=True)
class RequiresReboot:
    """The update cannot be applied without a full reboot of the node."""

    reason: RebootReason
    identity: str | None = None
    detail: str | None = None
    requires_reboot: Literal[True] = True


@dataclass(frozen=True, slots=True, kw_only=True)
class Applied:
    """The update is (or can be) applied through ``plan`` without rebooting.

    ``execution`` stays ``None`` until the plan has actually been run.
    """

    plan: ActionPlan
    execution: ExecutionResult | None = None
    requires_reboot: Literal[False] = False


type ReconciliationOutcome = RequiresReboot | Applied
