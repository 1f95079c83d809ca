"""Materialize file and unit changes through the apply ports.

Responsibilities of this stage:
- write created/updated files and delete removed ones
- create new units, replace updated units (delete, then create), delete removed units
- stop at the first collaborator failure

This stage never decides about reboots. On the rebootless path it only ever
sees created/updated changes; deletions arrive here only on the reboot path.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.errors import ApplyError, ReconciliationInvariantError
from rebootless.domain.model import ChangeKind, EntityKind, FileDescriptor, UnitDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rebootless.domain.model import Change
    from rebootless.domain.ports import FileApplier, UnitApplier

log = getLogger(__name__)


@dataclass(slots=True)
class ApplyResult:
    """Summary of collaborator calls made while applying changes."""

    written: int = 0
    deleted: int = 0
    units_created: int = 0
    units_deleted: int = 0

    def __iadd__(self, other: ApplyResult) -> ApplyResult:
        self.written += other.written
        self.deleted += other.deleted
        self.units_created += other.units_created
        self.units_deleted += other.units_deleted
        return self


def apply_file_changes(changes: Iterable[Change], files: FileApplier) -> ApplyResult:
    result = ApplyResult()
    for change in changes:
        if change.entity is not EntityKind.FILE:
            continue
        try:
            if change.is_deletion:
                files.delete_file(change.identity)
                result.deleted += 1
            else:
                files.write_file(_expect(change.after, FileDescriptor, change))
                result.written += 1
        except OSError as exc:
            raise ApplyError(
                f"Failed to apply {change.describe()}: {exc}", identity=change.identity
            ) from exc
    return result


def apply_unit_changes(changes: Iterable[Change], units: UnitApplier) -> ApplyResult:
    result = ApplyResult()
    for change in changes:
        if change.entity is not EntityKind.UNIT:
            continue
        try:
            if change.kind in (ChangeKind.UPDATED, ChangeKind.DELETED):
                units.delete_unit(_expect(change.before, UnitDescriptor, change))
                result.units_deleted += 1
            if change.kind in (ChangeKind.CREATED, ChangeKind.UPDATED):
                units.create_unit(_expect(change.after, UnitDescriptor, change))
                result.units_created += 1
        except OSError as exc:
            raise ApplyError(
                f"Failed to apply {change.describe()}: {exc}", identity=change.identity
            ) from exc
    return result


def apply_changes(
    changes: Iterable[Change],
    *,
    files: FileApplier,
    units: UnitApplier,
) -> ApplyResult:
    """Apply file changes first, then unit changes."""

    ordered = list(changes)
    result = apply_file_changes(ordered, files)
    result += apply_unit_changes(ordered, units)
    log.info(
        "Applied changes: written=%s, deleted=%s, units_created=%s, units_deleted=%s",
        result.written,
        result.deleted,
        result.units_created,
        result.units_deleted,
    )
    return result


def _expect[T: (FileDescriptor, UnitDescriptor)](
    descriptor: object, expected: type[T], change: Change
) -> T:
    if not isinstance(descriptor, expected):
        raise ReconciliationInvariantError(
            f"{change.describe()} is missing its {expected.__name__}"
        )
    return descriptor
