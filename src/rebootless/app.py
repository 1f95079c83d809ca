"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from rebootless.adapters.filesystem import LocalFileApplier, LocalUnitApplier
from rebootless.adapters.process import SubprocessCommandRunner
from rebootless.adapters.systemd import SystemctlServiceManager
from rebootless.config import get_policy_table, get_runtime_config
from rebootless.domain.model import Applied
from rebootless.domain.reconciliation import RebootAvoidanceEngine

if TYPE_CHECKING:
    from rebootless.config import RuntimeConfig
    from rebootless.domain.model import ReconciliationOutcome, Snapshot
    from rebootless.domain.ports import DrainNode
    from rebootless.domain.reconciliation import PolicyTable


log = getLogger(__name__)


def build_engine(
    *,
    policy: PolicyTable | None = None,
    runtime: RuntimeConfig | None = None,
    drain: DrainNode | None = None,
    root: Path = Path("/"),
) -> RebootAvoidanceEngine:
    """Wire the engine with the local subprocess/systemctl/filesystem adapters."""

    effective_runtime = runtime or get_runtime_config()
    runner = SubprocessCommandRunner()
    systemd = SystemctlServiceManager(
        runner,
        systemctl=effective_runtime.systemctl,
        timeout=effective_runtime.service_timeout_seconds,
    )
    return RebootAvoidanceEngine(
        policy=policy or get_policy_table(),
        files=LocalFileApplier(root=root),
        units=LocalUnitApplier(
            unit_dir=root / str(effective_runtime.unit_dir).lstrip("/"),
            systemd=systemd,
        ),
        commands=runner,
        services=systemd,
        drain=drain,
        timeouts=effective_runtime.timeouts,
    )


def plan_update(
    old: Snapshot,
    new: Snapshot,
    *,
    engine: RebootAvoidanceEngine | None = None,
) -> ReconciliationOutcome:
    """Decide whether moving from ``old`` to ``new`` needs a reboot, without side effects."""

    effective_engine = engine or build_engine()
    outcome = effective_engine.plan(old, new)
    _log_outcome(outcome)
    return outcome


def reconcile_update(
    old: Snapshot,
    new: Snapshot,
    *,
    engine: RebootAvoidanceEngine | None = None,
) -> ReconciliationOutcome:
    """Apply ``new`` over ``old`` without a reboot where the policy allows it."""

    effective_engine = engine or build_engine()
    log.info(
        "Starting reconciliation: files=%s->%s, units=%s->%s",
        len(old.files),
        len(new.files),
        len(old.units),
        len(new.units),
    )
    outcome = effective_engine.reconcile(old, new)
    _log_outcome(outcome)
    return outcome


def _log_outcome(outcome: ReconciliationOutcome) -> None:
    if isinstance(outcome, Applied):
        log.info(
            "Update can be applied without reboot: actions=%s, drain_required=%s",
            len(outcome.plan),
            outcome.plan.drain_required,
        )
        return
    log.warning(
        "Reboot required: reason=%s, identity=%s, detail=%s",
        outcome.reason,
        outcome.identity,
        outcome.detail,
    )
