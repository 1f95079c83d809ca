"""Desired-state snapshot descriptors.

Descriptors are immutable value objects captured from a decoded configuration.
Diffing never compares descriptors with ``==`` directly; it compares their
``content_key()``, which is the normalized representation of everything that
matters on disk. Incidental differences (absent vs. default file mode, drop-in
ordering, line endings of unit bodies) therefore never surface as updates.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_FILE_MODE: Final[int] = 0o644

type Owner = str | int
type FileContentKey = tuple[str, int, Owner | None, Owner | None]
type UnitContentKey = tuple[bool | None, bool, str | None, tuple[tuple[str, str], ...]]


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be built from the given descriptors."""


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.replace("\r\n", "\n")


@dataclass(frozen=True, slots=True, kw_only=True)
class FileDescriptor:
    """A managed file in desired state, identified by its absolute path.

    ``user`` and ``group`` hold an account name or a numeric id.
    """

    path: str
    contents: bytes = b""
    mode: int | None = None
    user: Owner | None = None
    group: Owner | None = None

    @property
    def identity(self) -> str:
        return self.path

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.contents).hexdigest()

    @property
    def effective_mode(self) -> int:
        return DEFAULT_FILE_MODE if self.mode is None else self.mode

    def content_key(self) -> FileContentKey:
        return (self.digest, self.effective_mode, self.user, self.group)


@dataclass(frozen=True, slots=True, kw_only=True)
class Dropin:
    """A drop-in fragment (``<unit>.d/<name>``) of a systemd unit."""

    name: str
    contents: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitDescriptor:
    """A managed systemd unit in desired state, identified by its unit name.

    ``enabled`` is tri-state: ``None`` leaves the enablement untouched, which is
    not the same thing as explicitly disabling the unit.
    """

    name: str
    enabled: bool | None = None
    mask: bool = False
    contents: str | None = None
    dropins: tuple[Dropin, ...] = ()

    @property
    def identity(self) -> str:
        return self.name

    def content_key(self) -> UnitContentKey:
        dropins = tuple(
            sorted(
                (dropin.name, _normalize_text(dropin.contents) or "") for dropin in self.dropins
            )
        )
        return (self.enabled, self.mask, _normalize_text(self.contents), dropins)


def _index_by_identity[T: (FileDescriptor, UnitDescriptor)](
    descriptors: Iterable[T], *, kind: str
) -> dict[str, T]:
    indexed: dict[str, T] = {}
    for descriptor in descriptors:
        if descriptor.identity in indexed:
            raise SnapshotError(f"Duplicate {kind} in snapshot: {descriptor.identity}")
        indexed[descriptor.identity] = descriptor
    return indexed


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Complete set of files and units a node should have at a point in time."""

    _files: Mapping[str, FileDescriptor] = field(default_factory=dict[str, FileDescriptor])
    _units: Mapping[str, UnitDescriptor] = field(default_factory=dict[str, UnitDescriptor])

    @classmethod
    def of(
        cls,
        *,
        files: Iterable[FileDescriptor] = (),
        units: Iterable[UnitDescriptor] = (),
    ) -> Snapshot:
        return cls(
            _index_by_identity(files, kind="file"),
            _index_by_identity(units, kind="unit"),
        )

    @property
    def files(self) -> Mapping[str, FileDescriptor]:
        return self._files

    @property
    def units(self) -> Mapping[str, UnitDescriptor]:
        return self._units

    def file(self, path: str) -> FileDescriptor | None:
        return self._files.get(path)

    def unit(self, name: str) -> UnitDescriptor | None:
        return self._units.get(name)
