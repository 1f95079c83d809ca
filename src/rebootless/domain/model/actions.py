"""Remediation actions and the plans built from them.

``Action`` is a closed union of frozen dataclasses, discriminated by ``kind``.
Every variant carries its own ``drain`` flag as a plain field. Policy rules
hold action *templates* and stamp their drain flag onto the instantiated
action when a rule matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from .enums import ActionKind, ServiceOperation

if TYPE_CHECKING:
    from .changes import Change


@dataclass(frozen=True, slots=True, kw_only=True)
class RunCommandAction:
    """Run an external program; success means ``expected_exit_code``."""

    binary: str
    args: tuple[str, ...] = ()
    expected_exit_code: int = 0
    drain: bool = False
    kind: Literal[ActionKind.RUN_COMMAND] = ActionKind.RUN_COMMAND

    def describe(self) -> str:
        return " ".join((self.binary, *self.args))


@dataclass(frozen=True, slots=True, kw_only=True)
class ServiceControlAction:
    """Restart or reload a service through the init system.

    In a policy template ``service`` may be left unset; it is then derived from
    the matched identity. A resolved action always names its service.
    """

    operation: ServiceOperation = ServiceOperation.RESTART
    service: str | None = None
    drain: bool = False
    kind: Literal[ActionKind.SERVICE_CONTROL] = ActionKind.SERVICE_CONTROL

    def describe(self) -> str:
        return f"systemctl {self.operation} {self.service or '<derived>'}"


@dataclass(frozen=True, slots=True, kw_only=True)
class NoOpAction:
    """The change is known to be harmless; nothing has to run."""

    drain: bool = False
    kind: Literal[ActionKind.NOOP] = ActionKind.NOOP

    def describe(self) -> str:
        return "no-op"


@dataclass(frozen=True, slots=True, kw_only=True)
class AlwaysRebootAction:
    """Sentinel: any change matched by this rule requires a reboot."""

    drain: bool = False
    kind: Literal[ActionKind.ALWAYS_REBOOT] = ActionKind.ALWAYS_REBOOT

    def describe(self) -> str:
        return "reboot"


type Action = RunCommandAction | ServiceControlAction | NoOpAction | AlwaysRebootAction
type RemediationAction = RunCommandAction | ServiceControlAction | NoOpAction


@dataclass(frozen=True, slots=True, kw_only=True)
class PlannedAction:
    """A resolved action together with the change that produced it."""

    change: Change
    action: RemediationAction


@dataclass(frozen=True, slots=True)
class ActionPlan:
    """Ordered remediation steps for one pass plus the aggregate drain flag.

    ``drain_required`` is filled in by the resolver when the plan is built, so
    callers can decide on evacuating workloads before anything runs.
    """

    steps: tuple[PlannedAction, ...] = ()
    drain_required: bool = False

    @property
    def actions(self) -> tuple[RemediationAction, ...]:
        return tuple(step.action for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)
