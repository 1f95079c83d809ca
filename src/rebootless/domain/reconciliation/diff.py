"""Config differ: compute changes between two desired-state snapshots.

Identity (file path or unit name) is the only diff key:
- identities only in ``new`` -> ``created``
- identities only in ``old`` -> ``deleted``
- identities in both with a different ``content_key()`` -> ``updated``

Within each entity kind, changes are emitted in lexical identity order so the
output never depends on the ordering of the decoded configuration. Files come
before units, which is also the order remediation actions will run in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rebootless.domain.model import Change, ChangeKind, EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rebootless.domain.model import FileDescriptor, Snapshot, UnitDescriptor


def diff_files(
    old: Mapping[str, FileDescriptor],
    new: Mapping[str, FileDescriptor],
) -> list[Change]:
    """Return file changes keyed by path."""

    return _diff_by_identity(old, new, entity=EntityKind.FILE)


def diff_units(
    old: Mapping[str, UnitDescriptor],
    new: Mapping[str, UnitDescriptor],
) -> list[Change]:
    """Return unit changes keyed by unit name, drop-ins and enablement included."""

    return _diff_by_identity(old, new, entity=EntityKind.UNIT)


def diff_snapshots(old: Snapshot, new: Snapshot) -> list[Change]:
    """Return all changes from ``old`` to ``new``: files first, then units."""

    return [*diff_files(old.files, new.files), *diff_units(old.units, new.units)]


def _diff_by_identity[T: (FileDescriptor, UnitDescriptor)](
    old: Mapping[str, T],
    new: Mapping[str, T],
    *,
    entity: EntityKind,
) -> list[Change]:
    changes: list[Change] = []
    for identity in sorted(old.keys() | new.keys()):
        before = old.get(identity)
        after = new.get(identity)
        if before is None:
            changes.append(
                Change(kind=ChangeKind.CREATED, entity=entity, identity=identity, after=after)
            )
        elif after is None:
            changes.append(
                Change(kind=ChangeKind.DELETED, entity=entity, identity=identity, before=before)
            )
        elif before.content_key() != after.content_key():
            changes.append(
                Change(
                    kind=ChangeKind.UPDATED,
                    entity=entity,
                    identity=identity,
                    before=before,
                    after=after,
                )
            )
    return changes
