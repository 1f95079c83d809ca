"""Action resolver: turn an ordered change list into a plan or a reboot verdict.

Matching policy:
- deleted file/unit -> ``RequiresReboot(deletion)``, never looked up
- created/updated -> first matching policy rule
  - no match -> ``RequiresReboot(no_matching_rule)``
  - always-reboot rule -> ``RequiresReboot(always_reboot_rule)``
  - any other rule -> one plan step, in change order

The first reboot verdict ends resolution. Only when every change resolves to an
action is an ``ActionPlan`` produced; its drain flag is aggregated right away.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.errors import ReconciliationInvariantError
from rebootless.domain.model import (
    ActionPlan,
    Applied,
    PlannedAction,
    RebootReason,
    RequiresReboot,
)

from .drain import aggregate_drain

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from rebootless.domain.model import Change, ReconciliationOutcome

    from .policy import PolicyTable

log = getLogger(__name__)


def resolve_changes(changes: Sequence[Change], policy: PolicyTable) -> ReconciliationOutcome:
    log.info("Checking whether %d change(s) require a system reboot", len(changes))
    steps: list[PlannedAction] = []
    for change in changes:
        _check_change(change)

        if change.is_deletion:
            log.warning("%s was removed, reboot will be required", change.describe())
            return RequiresReboot(
                reason=RebootReason.DELETION,
                identity=change.identity,
                detail=f"{change.entity} was deleted",
            )

        resolution = policy.resolve(change.entity, change.identity)
        if resolution.requires_reboot or resolution.action is None:
            reason = resolution.reboot_reason or RebootReason.NO_MATCHING_RULE
            if reason is RebootReason.ALWAYS_REBOOT_RULE:
                detail = f"matched always-reboot rule #{resolution.rule_index}"
            else:
                detail = "no policy rule matched"
            log.warning("%s: %s, reboot will be required", change.describe(), detail)
            return RequiresReboot(reason=reason, identity=change.identity, detail=detail)

        log.info(
            "Action found for %s via rule #%s: %s (drain=%s)",
            change.describe(),
            resolution.rule_index,
            resolution.action.describe(),
            resolution.action.drain,
        )
        steps.append(PlannedAction(change=change, action=resolution.action))

    return Applied(plan=build_plan(steps))


def build_plan(steps: Iterable[PlannedAction]) -> ActionPlan:
    ordered = tuple(steps)
    return ActionPlan(
        steps=ordered,
        drain_required=aggregate_drain(step.action for step in ordered),
    )


def _check_change(change: Change) -> None:
    if change.is_deletion:
        if change.before is None:
            raise ReconciliationInvariantError(
                f"Deleted change for {change.identity!r} carries no previous descriptor"
            )
        return
    if change.after is None:
        raise ReconciliationInvariantError(
            f"{change.kind} change for {change.identity!r} carries no desired descriptor"
        )
    if change.after.identity != change.identity:
        raise ReconciliationInvariantError(
            f"Change identity {change.identity!r} does not match descriptor "
            f"{change.after.identity!r}"
        )
