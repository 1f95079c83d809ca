"""Change records produced by the config differ."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ChangeKind, EntityKind
from .snapshot import FileDescriptor, UnitDescriptor

type Descriptor = FileDescriptor | UnitDescriptor


@dataclass(frozen=True, slots=True, kw_only=True)
class Change:
    """One detected difference between two snapshots for a single identity.

    ``before`` is set for updated and deleted changes, ``after`` for created and
    updated changes.
    """

    kind: ChangeKind
    entity: EntityKind
    identity: str
    before: Descriptor | None = None
    after: Descriptor | None = None

    @property
    def is_deletion(self) -> bool:
        return self.kind is ChangeKind.DELETED

    def describe(self) -> str:
        return f"{self.entity} {self.identity!r} ({self.kind})"
