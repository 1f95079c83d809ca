"""Error types raised across the reconciliation core and its ports."""

from __future__ import annotations


class ReconciliationInvariantError(RuntimeError):
    """Raised when the pass would otherwise continue on corrupt state.

    This is a programming error, never a recoverable outcome: callers must not
    translate it into a reboot decision.
    """


class ActionExecutionError(RuntimeError):
    """Base class for failures of a single remediation action."""

    def __init__(self, message: str, *, output: str | None = None) -> None:
        super().__init__(message)
        self.output = output


class CommandExecutionError(ActionExecutionError):
    """Raised when a command cannot be launched, times out or exits unexpectedly."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        output: str | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message, output=output)
        self.exit_code = exit_code
        self.timed_out = timed_out


class ServiceControlError(ActionExecutionError):
    """Raised when the service manager refuses or fails a restart/reload."""


class ApplyError(RuntimeError):
    """Raised when writing or deleting a managed file or unit fails."""

    def __init__(self, message: str, *, identity: str) -> None:
        super().__init__(message)
        self.identity = identity
