"""Ordered remediation-policy table.

Responsibilities of this stage:
- hold the immutable, ordered list of policy rules loaded at startup
- map one changed identity to the first matching rule (first match wins)
- instantiate the matched rule's action template for that identity

The table never changes after construction and can be shared by any number
of reconciliation passes without locking. Patterns are compiled once, when the
table is built. A malformed pattern disables glob matching for its own rule
(a unit rule still matches its exact unit name) and is reported back on every
resolution that had to skip it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Final

from rebootless.domain.model import (
    AlwaysRebootAction,
    EntityKind,
    RebootReason,
    ServiceControlAction,
)

from .globbing import MalformedPatternError, compile_glob, glob_matches

if TYPE_CHECKING:
    import re
    from collections.abc import Iterable

    from rebootless.domain.model import Action, RemediationAction

log = getLogger(__name__)

UNIT_SUFFIXES: Final[tuple[str, ...]] = (
    ".service",
    ".socket",
    ".timer",
    ".target",
    ".path",
    ".mount",
    ".automount",
    ".swap",
    ".slice",
    ".scope",
    ".device",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class PolicyRule:
    """One row of the remediation table.

    ``action`` is a template: its own ``drain`` flag is ignored and replaced by
    ``drain_required`` when the rule matches.
    """

    entity: EntityKind
    pattern: str
    action: Action
    drain_required: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class MalformedPatternWarning:
    """A rule was skipped because its pattern does not compile."""

    rule_index: int
    pattern: str
    reason: str

    def __str__(self) -> str:
        return (
            f"policy rule #{self.rule_index} skipped: "
            f"malformed pattern {self.pattern!r} ({self.reason})"
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class RuleResolution:
    """Result of looking up one identity in the policy table."""

    requires_reboot: bool
    action: RemediationAction | None = None
    rule: PolicyRule | None = None
    rule_index: int | None = None
    warnings: tuple[MalformedPatternWarning, ...] = ()

    @property
    def reboot_reason(self) -> RebootReason | None:
        if not self.requires_reboot:
            return None
        if self.rule is None:
            return RebootReason.NO_MATCHING_RULE
        return RebootReason.ALWAYS_REBOOT_RULE


@dataclass(frozen=True, slots=True)
class _CompiledRule:
    index: int
    rule: PolicyRule
    matcher: re.Pattern[str] | None
    error: MalformedPatternError | None

    def matches(self, identity: str) -> bool:
        if self.rule.entity is EntityKind.UNIT and self.rule.pattern == identity:
            return True
        if self.matcher is None:
            return False
        return glob_matches(self.matcher, identity)


def _compile(index: int, rule: PolicyRule) -> _CompiledRule:
    try:
        matcher = compile_glob(rule.pattern)
    except MalformedPatternError as exc:
        log.warning("Policy rule #%s has a malformed pattern: %s", index, exc)
        return _CompiledRule(index=index, rule=rule, matcher=None, error=exc)
    return _CompiledRule(index=index, rule=rule, matcher=matcher, error=None)


@dataclass(frozen=True, slots=True)
class PolicyTable:
    """Immutable, ordered remediation policy."""

    rules: tuple[PolicyRule, ...] = ()
    _compiled: tuple[_CompiledRule, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        rules = tuple(self.rules)
        object.__setattr__(self, "rules", rules)
        object.__setattr__(
            self, "_compiled", tuple(_compile(index, rule) for index, rule in enumerate(rules))
        )

    @classmethod
    def of(cls, rules: Iterable[PolicyRule]) -> PolicyTable:
        return cls(tuple(rules))

    @property
    def malformed(self) -> tuple[MalformedPatternWarning, ...]:
        return tuple(
            _warning_for(compiled) for compiled in self._compiled if compiled.error is not None
        )

    def resolve(self, entity: EntityKind, identity: str) -> RuleResolution:
        """Return the action of the first rule matching ``identity``.

        No match resolves to ``requires_reboot=True`` without an action; an
        always-reboot rule resolves to ``requires_reboot=True`` with the rule set.
        """

        warnings: list[MalformedPatternWarning] = []
        for compiled in self._compiled:
            if compiled.rule.entity is not entity:
                continue
            if not compiled.matches(identity):
                if compiled.error is not None:
                    warning = _warning_for(compiled)
                    log.warning(
                        "Skipping rule while resolving %s %r: %s", entity, identity, warning
                    )
                    warnings.append(warning)
                continue

            rule = compiled.rule
            if isinstance(rule.action, AlwaysRebootAction):
                return RuleResolution(
                    requires_reboot=True,
                    rule=rule,
                    rule_index=compiled.index,
                    warnings=tuple(warnings),
                )
            return RuleResolution(
                requires_reboot=False,
                action=instantiate_action(rule, entity=entity, identity=identity),
                rule=rule,
                rule_index=compiled.index,
                warnings=tuple(warnings),
            )

        return RuleResolution(requires_reboot=True, warnings=tuple(warnings))


def instantiate_action(
    rule: PolicyRule,
    *,
    entity: EntityKind,
    identity: str,
) -> RemediationAction:
    """Bind ``rule``'s action template to a matched identity."""

    action = rule.action
    if isinstance(action, AlwaysRebootAction):
        raise TypeError("always-reboot rules have no action to instantiate")
    if isinstance(action, ServiceControlAction) and action.service is None:
        return replace(
            action,
            service=derive_service_name(entity, identity),
            drain=rule.drain_required,
        )
    return replace(action, drain=rule.drain_required)


def derive_service_name(entity: EntityKind, identity: str) -> str:
    """Service to restart/reload when a rule does not name one.

    Units control themselves. For files, a basename that already is a unit name
    is used as-is; otherwise its stem is taken, so ``/etc/kubernetes/kubelet.conf``
    maps to ``kubelet.service``.
    """

    if entity is EntityKind.UNIT:
        return identity
    basename = PurePosixPath(identity).name
    if basename.endswith(UNIT_SUFFIXES):
        return basename
    return f"{PurePosixPath(basename).stem}.service"


def _warning_for(compiled: _CompiledRule) -> MalformedPatternWarning:
    error = compiled.error
    return MalformedPatternWarning(
        rule_index=compiled.index,
        pattern=compiled.rule.pattern,
        reason=error.reason if error is not None else "unknown",
    )
