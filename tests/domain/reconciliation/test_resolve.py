from __future__ import annotations

import pytest

from rebootless.domain.errors import ReconciliationInvariantError
from rebootless.domain.model import (
    AlwaysRebootAction,
    Applied,
    Change,
    ChangeKind,
    EntityKind,
    NoOpAction,
    RebootReason,
    RequiresReboot,
    RunCommandAction,
    ServiceControlAction,
    ServiceOperation,
)
from rebootless.domain.reconciliation import (
    PolicyRule,
    PolicyTable,
    diff_snapshots,
    resolve_changes,
)
from tests.helpers.node import make_file, make_snapshot, make_unit


def test_created_unit_resolves_to_restart() -> None:
    policy = PolicyTable.of(
        [
            PolicyRule(
                entity=EntityKind.UNIT,
                pattern="*.service",
                action=ServiceControlAction(operation=ServiceOperation.RESTART),
            )
        ]
    )
    changes = diff_snapshots(make_snapshot(), make_snapshot(units=[make_unit("foo.service")]))

    outcome = resolve_changes(changes, policy)

    assert isinstance(outcome, Applied)
    assert outcome.requires_reboot is False
    assert outcome.plan.actions == (
        ServiceControlAction(operation=ServiceOperation.RESTART, service="foo.service"),
    )
    assert outcome.plan.drain_required is False


def test_updated_kubelet_config_resolves_to_reload(policy: PolicyTable) -> None:
    old = make_snapshot(files=[make_file("/etc/kubernetes/kubelet.conf", "v1")])
    new = make_snapshot(files=[make_file("/etc/kubernetes/kubelet.conf", "v2")])

    outcome = resolve_changes(diff_snapshots(old, new), policy)

    assert isinstance(outcome, Applied)
    assert outcome.plan.actions == (
        ServiceControlAction(operation=ServiceOperation.RELOAD, service="kubelet.service"),
    )
    assert outcome.plan.drain_required is False


def test_deletion_requires_reboot_regardless_of_rules() -> None:
    permissive = PolicyTable.of(
        [PolicyRule(entity=EntityKind.FILE, pattern="*", action=NoOpAction())]
    )
    old = make_snapshot(files=[make_file("A")])

    outcome = resolve_changes(diff_snapshots(old, make_snapshot()), permissive)

    assert outcome == RequiresReboot(
        reason=RebootReason.DELETION, identity="A", detail="file was deleted"
    )


def test_unit_deletion_requires_reboot(policy: PolicyTable) -> None:
    old = make_snapshot(units=[make_unit("foo.service")])

    outcome = resolve_changes(diff_snapshots(old, make_snapshot()), policy)

    assert isinstance(outcome, RequiresReboot)
    assert outcome.reason is RebootReason.DELETION


def test_unmatched_unit_requires_reboot() -> None:
    policy = PolicyTable.of(
        [PolicyRule(entity=EntityKind.UNIT, pattern="crio.service", action=NoOpAction())]
    )
    changes = diff_snapshots(
        make_snapshot(), make_snapshot(units=[make_unit("unmatched.service")])
    )

    outcome = resolve_changes(changes, policy)

    assert isinstance(outcome, RequiresReboot)
    assert outcome.reason is RebootReason.NO_MATCHING_RULE
    assert outcome.identity == "unmatched.service"


def test_always_reboot_rule_requires_reboot() -> None:
    policy = PolicyTable.of(
        [
            PolicyRule(
                entity=EntityKind.FILE,
                pattern="/etc/kernel/*",
                action=AlwaysRebootAction(),
            ),
            PolicyRule(
                entity=EntityKind.FILE,
                pattern="/etc/kernel/*",
                action=RunCommandAction(binary="/bin/true"),
            ),
        ]
    )
    changes = diff_snapshots(
        make_snapshot(), make_snapshot(files=[make_file("/etc/kernel/cmdline")])
    )

    outcome = resolve_changes(changes, policy)

    assert isinstance(outcome, RequiresReboot)
    assert outcome.reason is RebootReason.ALWAYS_REBOOT_RULE


def test_noop_rule_applies_without_reboot(policy: PolicyTable) -> None:
    old = make_snapshot(files=[make_file("/etc/motd", "hello")])
    new = make_snapshot(files=[make_file("/etc/motd", "welcome")])

    outcome = resolve_changes(diff_snapshots(old, new), policy)

    assert isinstance(outcome, Applied)
    assert outcome.requires_reboot is False
    assert outcome.plan.actions == (NoOpAction(),)
    assert outcome.plan.drain_required is False


def test_one_unresolvable_change_forces_reboot_for_the_whole_pass(policy: PolicyTable) -> None:
    new = make_snapshot(
        files=[make_file("/etc/motd", "hello"), make_file("/etc/unknown", "x")],
        units=[make_unit("foo.service")],
    )

    outcome = resolve_changes(diff_snapshots(make_snapshot(), new), policy)

    assert isinstance(outcome, RequiresReboot)
    assert outcome.identity == "/etc/unknown"


def test_plan_preserves_change_order_and_aggregates_drain(policy: PolicyTable) -> None:
    new = make_snapshot(
        files=[
            make_file("/etc/motd", "hello"),
            make_file("/etc/containers/registries.conf", "x"),
        ],
        units=[make_unit("foo.service")],
    )

    outcome = resolve_changes(diff_snapshots(make_snapshot(), new), policy)

    assert isinstance(outcome, Applied)
    assert [step.change.identity for step in outcome.plan.steps] == [
        "/etc/containers/registries.conf",
        "/etc/motd",
        "foo.service",
    ]
    assert outcome.plan.actions[0] == RunCommandAction(binary="/usr/bin/crio-reload", drain=True)
    assert outcome.plan.drain_required is True


def test_no_changes_resolve_to_empty_plan(policy: PolicyTable) -> None:
    outcome = resolve_changes([], policy)

    assert isinstance(outcome, Applied)
    assert len(outcome.plan) == 0
    assert outcome.plan.drain_required is False


def test_change_without_descriptor_is_an_invariant_violation(policy: PolicyTable) -> None:
    broken = Change(kind=ChangeKind.CREATED, entity=EntityKind.FILE, identity="/etc/motd")

    with pytest.raises(ReconciliationInvariantError):
        resolve_changes([broken], policy)


def test_mismatched_identity_is_an_invariant_violation(policy: PolicyTable) -> None:
    broken = Change(
        kind=ChangeKind.UPDATED,
        entity=EntityKind.FILE,
        identity="/etc/motd",
        before=make_file("/etc/motd"),
        after=make_file("/etc/issue"),
    )

    with pytest.raises(ReconciliationInvariantError):
        resolve_changes([broken], policy)


def test_deleted_change_without_previous_descriptor_is_an_invariant_violation(
    policy: PolicyTable,
) -> None:
    broken = Change(kind=ChangeKind.DELETED, entity=EntityKind.UNIT, identity="foo.service")

    with pytest.raises(ReconciliationInvariantError):
        resolve_changes([broken], policy)
