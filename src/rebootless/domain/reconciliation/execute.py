"""Action executor.

Responsibilities of this stage:
- run plan steps strictly in plan order through the process/service ports
- stop at the first failing step and report its index
- never retry and never roll back steps that already succeeded

Callers treat any ``FailedAt`` as a reboot verdict for the whole pass.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.errors import (
    ActionExecutionError,
    CommandExecutionError,
    ReconciliationInvariantError,
)
from rebootless.domain.model import (
    AllSucceeded,
    FailedAt,
    NoOpAction,
    RunCommandAction,
    ServiceControlAction,
)

if TYPE_CHECKING:
    from rebootless.domain.model import ActionPlan, ExecutionResult, RemediationAction
    from rebootless.domain.ports import CommandRunner, ServiceManager

log = getLogger(__name__)


def execute_plan(
    plan: ActionPlan,
    *,
    commands: CommandRunner,
    services: ServiceManager,
    command_timeout: float | None = None,
    service_timeout: float | None = None,
) -> ExecutionResult:
    """Run every step of ``plan`` in order, stopping at the first failure."""

    log.info("Running %d post update action(s)...", len(plan))
    for index, step in enumerate(plan.steps):
        try:
            _run_action(
                step.action,
                commands=commands,
                services=services,
                command_timeout=command_timeout,
                service_timeout=service_timeout,
            )
        except ActionExecutionError as exc:
            log.error(
                "Post update action #%d for %s failed: %s%s",
                index,
                step.change.describe(),
                exc,
                f"; output: {exc.output}" if exc.output else "",
            )
            return FailedAt(index=index, step=step, error=exc)
    log.info("Running post update actions was successful")
    return AllSucceeded(executed=len(plan))


def _run_action(
    action: RemediationAction,
    *,
    commands: CommandRunner,
    services: ServiceManager,
    command_timeout: float | None,
    service_timeout: float | None,
) -> None:
    if isinstance(action, RunCommandAction):
        _run_command(action, commands=commands, timeout=command_timeout)
    elif isinstance(action, ServiceControlAction):
        if action.service is None:
            raise ReconciliationInvariantError("Service action reached the executor unbound")
        log.info("Running post update action: %s %s", action.operation, action.service)
        services.control(action.service, action.operation, timeout=service_timeout)
    elif isinstance(action, NoOpAction):
        log.debug("Running post update action: no-op")
    else:
        raise ReconciliationInvariantError(f"Action cannot be executed: {action!r}")


def _run_command(
    action: RunCommandAction,
    *,
    commands: CommandRunner,
    timeout: float | None,
) -> None:
    log.info("Running post update action: running command: %s", action.describe())
    result = commands(action.binary, action.args, timeout=timeout)
    if result.exit_code != action.expected_exit_code:
        raise CommandExecutionError(
            f"Command {action.describe()!r} exited with {result.exit_code}, "
            f"expected {action.expected_exit_code}",
            exit_code=result.exit_code,
            output=result.output,
        )
