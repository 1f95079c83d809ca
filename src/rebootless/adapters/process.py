"""Subprocess-backed command runner."""

from __future__ import annotations

import subprocess
from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.errors import CommandExecutionError
from rebootless.domain.ports import CommandResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

log = getLogger(__name__)


def _as_text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class SubprocessCommandRunner:
    """Run commands synchronously, capturing stdout and stderr together.

    Output is decoded as UTF-8 with replacement characters; binary noise from a
    command never turns into an exception.
    """

    def __init__(self, *, env: Mapping[str, str] | None = None) -> None:
        self._env = dict(env) if env is not None else None

    def __call__(
        self,
        binary: str,
        args: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        command = [binary, *args]
        command_str = " ".join(command)
        log.debug("Running: %s (timeout=%s)", command_str, timeout)
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
                env=self._env,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandExecutionError(
                f"Command {command_str!r} timed out after {timeout}s",
                output=_as_text(exc.output),
                timed_out=True,
            ) from exc
        except OSError as exc:
            raise CommandExecutionError(
                f"Command {command_str!r} could not be started: {exc}"
            ) from exc

        return CommandResult(exit_code=completed.returncode, output=_as_text(completed.stdout))
