"""Public domain model surface."""

from __future__ import annotations

from rebootless.domain.model.actions import (
    Action,
    ActionPlan,
    AlwaysRebootAction,
    NoOpAction,
    PlannedAction,
    RemediationAction,
    RunCommandAction,
    ServiceControlAction,
)
from rebootless.domain.model.changes import Change, Descriptor
from rebootless.domain.model.enums import (
    ActionKind,
    ChangeKind,
    EntityKind,
    RebootReason,
    ServiceOperation,
)
from rebootless.domain.model.outcomes import (
    AllSucceeded,
    Applied,
    ExecutionResult,
    FailedAt,
    ReconciliationOutcome,
    RequiresReboot,
)
from rebootless.domain.model.snapshot import (
    DEFAULT_FILE_MODE,
    Dropin,
    FileDescriptor,
    Snapshot,
    SnapshotError,
    UnitDescriptor,
)

__all__ = [  # noqa: RUF022
    # snapshot
    "DEFAULT_FILE_MODE",
    "Dropin",
    "FileDescriptor",
    "Snapshot",
    "SnapshotError",
    "UnitDescriptor",
    # changes
    "Change",
    "Descriptor",
    # actions
    "Action",
    "ActionPlan",
    "AlwaysRebootAction",
    "NoOpAction",
    "PlannedAction",
    "RemediationAction",
    "RunCommandAction",
    "ServiceControlAction",
    # outcomes
    "AllSucceeded",
    "Applied",
    "ExecutionResult",
    "FailedAt",
    "ReconciliationOutcome",
    "RequiresReboot",
    # enums
    "ActionKind",
    "ChangeKind",
    "EntityKind",
    "RebootReason",
    "ServiceOperation",
]
