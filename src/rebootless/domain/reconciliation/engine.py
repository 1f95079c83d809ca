"""Orchestrator for one reboot-avoidance reconciliation pass.

The engine composes the stages with the collaborator ports but does not
prescribe concrete adapters: tests wire in-memory fakes, the daemon wires the
subprocess/systemctl adapters.

A pass is: diff -> resolve -> (drain) -> apply writes -> execute plan. Passes
on one engine are serialized; a new pass waits until the running one has
finished executing its plan.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.model import FailedAt, RebootReason, RequiresReboot

from .apply import apply_changes
from .diff import diff_snapshots
from .execute import execute_plan
from .resolve import resolve_changes

if TYPE_CHECKING:
    from rebootless.domain.model import ReconciliationOutcome, Snapshot
    from rebootless.domain.ports import (
        CommandRunner,
        DrainNode,
        FileApplier,
        ServiceManager,
        UnitApplier,
    )

    from .policy import PolicyTable

log = getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT_SECONDS = 300.0
DEFAULT_SERVICE_TIMEOUT_SECONDS = 90.0


@dataclass(frozen=True, slots=True)
class Timeouts:
    command_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    service_seconds: float = DEFAULT_SERVICE_TIMEOUT_SECONDS


@dataclass(slots=True)
class RebootAvoidanceEngine:
    """Decide whether an update needs a reboot and, if not, remediate in place."""

    policy: PolicyTable
    files: FileApplier
    units: UnitApplier
    commands: CommandRunner
    services: ServiceManager
    drain: DrainNode | None = None
    timeouts: Timeouts = field(default_factory=Timeouts)
    _pass_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def plan(self, old: Snapshot, new: Snapshot) -> ReconciliationOutcome:
        """Diff and resolve only; nothing on the node is touched."""

        return resolve_changes(diff_snapshots(old, new), self.policy)

    def reconcile(self, old: Snapshot, new: Snapshot) -> ReconciliationOutcome:
        """Run one full pass from ``old`` to ``new``."""

        with self._pass_lock:
            changes = diff_snapshots(old, new)
            if not changes:
                log.info("No changes between configurations, nothing to do")
            outcome = resolve_changes(changes, self.policy)
            if isinstance(outcome, RequiresReboot):
                return outcome

            plan = outcome.plan
            if plan.drain_required:
                if self.drain is None:
                    log.warning("Plan requires a drain but no drain collaborator is configured")
                    return RequiresReboot(
                        reason=RebootReason.DRAIN_UNAVAILABLE,
                        detail="drain required but unavailable",
                    )
                log.info("Draining node before running %d action(s)", len(plan))
                self.drain()

            apply_changes(changes, files=self.files, units=self.units)
            execution = execute_plan(
                plan,
                commands=self.commands,
                services=self.services,
                command_timeout=self.timeouts.command_seconds,
                service_timeout=self.timeouts.service_seconds,
            )
            if isinstance(execution, FailedAt):
                log.error(
                    "Post update action for %s failed, reboot will be required",
                    execution.step.change.describe(),
                )
                return RequiresReboot(
                    reason=RebootReason.EXECUTION_FAILURE,
                    identity=execution.step.change.identity,
                    detail=f"action #{execution.index} failed: {execution.error}",
                )
            return replace(outcome, execution=execution)
