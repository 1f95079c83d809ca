"""Remediation policy configuration.

The policy table is read once at startup, either from the JSON document named
by ``REBOOTLESS_POLICY_FILE`` or from the built-in default table. Document shape::

    {"rules": [
        {"match": "file", "pattern": "/etc/kubernetes/kubelet.conf",
         "action": {"kind": "service", "service": "kubelet.service", "operation": "reload"},
         "drain": false}
    ]}

Malformed glob patterns are not a load error; the table skips those rules and
reports them whenever it has to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rebootless.domain.model import (
    AlwaysRebootAction,
    EntityKind,
    NoOpAction,
    RunCommandAction,
    ServiceControlAction,
    ServiceOperation,
)
from rebootless.domain.reconciliation.policy import PolicyRule, PolicyTable

from .env import env_path
from .errors import PolicyConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

POLICY_FILE_ENV: Final[str] = "REBOOTLESS_POLICY_FILE"


class PolicyBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CommandActionModel(PolicyBaseModel):
    kind: Literal["command"]
    binary: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list[str])
    expected_exit_code: int = 0

    def to_action(self) -> RunCommandAction:
        return RunCommandAction(
            binary=self.binary,
            args=tuple(self.args),
            expected_exit_code=self.expected_exit_code,
        )


class ServiceActionModel(PolicyBaseModel):
    kind: Literal["service"]
    service: str | None = Field(default=None, min_length=1)
    operation: ServiceOperation = ServiceOperation.RESTART

    def to_action(self) -> ServiceControlAction:
        return ServiceControlAction(service=self.service, operation=self.operation)


class NoneActionModel(PolicyBaseModel):
    kind: Literal["none"]

    def to_action(self) -> NoOpAction:
        return NoOpAction()


class AlwaysRebootActionModel(PolicyBaseModel):
    kind: Literal["always-reboot"]

    def to_action(self) -> AlwaysRebootAction:
        return AlwaysRebootAction()


ActionModel = Annotated[
    CommandActionModel | ServiceActionModel | NoneActionModel | AlwaysRebootActionModel,
    Field(discriminator="kind"),
]


class RuleModel(PolicyBaseModel):
    match: EntityKind
    pattern: str = Field(min_length=1)
    action: ActionModel
    drain: bool = False

    def to_rule(self) -> PolicyRule:
        return PolicyRule(
            entity=self.match,
            pattern=self.pattern,
            action=self.action.to_action(),
            drain_required=self.drain,
        )


class PolicyDocument(PolicyBaseModel):
    rules: list[RuleModel] = Field(default_factory=list[RuleModel])

    def to_table(self) -> PolicyTable:
        return PolicyTable.of(rule.to_rule() for rule in self.rules)


DEFAULT_POLICY_RULES: Final[tuple[PolicyRule, ...]] = (
    PolicyRule(
        entity=EntityKind.FILE,
        pattern="/etc/kubernetes/kubelet.conf",
        action=ServiceControlAction(
            service="kubelet.service",
            operation=ServiceOperation.RELOAD,
        ),
    ),
    PolicyRule(
        entity=EntityKind.UNIT,
        pattern="chronyd.service",
        action=ServiceControlAction(operation=ServiceOperation.RESTART),
    ),
    PolicyRule(
        entity=EntityKind.UNIT,
        pattern="sshd.service",
        action=ServiceControlAction(operation=ServiceOperation.RESTART),
    ),
)


def default_policy_table() -> PolicyTable:
    return PolicyTable.of(DEFAULT_POLICY_RULES)


def parse_policy_document(payload: str | bytes | dict[str, object]) -> PolicyTable:
    """Validate a policy document (JSON text or already-decoded mapping)."""

    try:
        if isinstance(payload, str | bytes):
            document = PolicyDocument.model_validate_json(payload)
        else:
            document = PolicyDocument.model_validate(payload)
    except ValidationError as exc:
        raise PolicyConfigurationError(f"Invalid policy document: {exc}") from exc
    return document.to_table()


def load_policy_table(path: Path) -> PolicyTable:
    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise PolicyConfigurationError(f"Cannot read policy file {path}: {exc}") from exc
    return parse_policy_document(payload)


def get_policy_table(*, path: Path | None = None) -> PolicyTable:
    """Return the configured policy table, falling back to the built-in defaults."""

    effective_path = path or env_path(POLICY_FILE_ENV)
    if effective_path is None:
        return default_policy_table()
    return load_policy_table(effective_path)
