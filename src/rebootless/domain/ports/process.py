"""Port for executing external programs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and combined stdout/stderr of a finished command."""

    exit_code: int
    output: str = ""


@runtime_checkable
class CommandRunner(Protocol):
    """Run ``binary`` with ``args`` and wait for it, bounded by ``timeout``.

    Implementations return a ``CommandResult`` for any process that ran to
    completion, whatever its exit code, and raise ``CommandExecutionError``
    when the process could not be started or exceeded the timeout.
    """

    def __call__(
        self,
        binary: str,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult: ...


__all__ = ["CommandResult", "CommandRunner"]
