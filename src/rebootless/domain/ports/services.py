"""Port for the node's init system / service manager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rebootless.domain.model import ServiceOperation


@runtime_checkable
class ServiceManager(Protocol):
    """Restart or reload a named service, raising ``ServiceControlError`` on failure."""

    def control(
        self,
        service: str,
        operation: ServiceOperation,
        *,
        timeout: float | None = None,
    ) -> None: ...


__all__ = ["ServiceManager"]
