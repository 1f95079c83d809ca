from __future__ import annotations

import pytest

from rebootless.domain.model import (
    EntityKind,
    NoOpAction,
    RunCommandAction,
    ServiceControlAction,
    ServiceOperation,
)
from rebootless.domain.reconciliation import PolicyRule, PolicyTable
from tests.helpers.node import (
    CountingDrain,
    FakeCommandRunner,
    FakeServiceManager,
    RecordingFileApplier,
    RecordingUnitApplier,
)


@pytest.fixture
def policy() -> PolicyTable:
    return PolicyTable.of(
        (
            PolicyRule(
                entity=EntityKind.FILE,
                pattern="/etc/kubernetes/kubelet.conf",
                action=ServiceControlAction(
                    service="kubelet.service",
                    operation=ServiceOperation.RELOAD,
                ),
            ),
            PolicyRule(
                entity=EntityKind.FILE,
                pattern="/etc/motd",
                action=NoOpAction(),
            ),
            PolicyRule(
                entity=EntityKind.FILE,
                pattern="/etc/containers/*.conf",
                action=RunCommandAction(binary="/usr/bin/crio-reload"),
                drain_required=True,
            ),
            PolicyRule(
                entity=EntityKind.UNIT,
                pattern="*.service",
                action=ServiceControlAction(operation=ServiceOperation.RESTART),
            ),
        )
    )


@pytest.fixture
def commands() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def services() -> FakeServiceManager:
    return FakeServiceManager()


@pytest.fixture
def files() -> RecordingFileApplier:
    return RecordingFileApplier()


@pytest.fixture
def units() -> RecordingUnitApplier:
    return RecordingUnitApplier()


@pytest.fixture
def drain() -> CountingDrain:
    return CountingDrain()
