"""Ports for materializing desired state on the node."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rebootless.domain.model import FileDescriptor, UnitDescriptor


@runtime_checkable
class FileApplier(Protocol):
    def write_file(self, descriptor: FileDescriptor) -> None: ...

    def delete_file(self, path: str) -> None: ...


@runtime_checkable
class UnitApplier(Protocol):
    def create_unit(self, descriptor: UnitDescriptor) -> None: ...

    def delete_unit(self, descriptor: UnitDescriptor) -> None: ...


@runtime_checkable
class DrainNode(Protocol):
    """Evacuate workloads from the node before disruptive remediation."""

    def __call__(self) -> None: ...


__all__ = ["DrainNode", "FileApplier", "UnitApplier"]
