"""``systemctl``-backed service manager."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rebootless.domain.errors import CommandExecutionError, ServiceControlError

if TYPE_CHECKING:
    from rebootless.domain.model import ServiceOperation
    from rebootless.domain.ports import CommandRunner

log = getLogger(__name__)


class SystemctlServiceManager:
    """Talk to systemd through ``systemctl`` using a command runner."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        systemctl: str = "systemctl",
        timeout: float | None = None,
    ) -> None:
        self._runner = runner
        self._systemctl = systemctl
        self._timeout = timeout

    def control(
        self,
        service: str,
        operation: ServiceOperation,
        *,
        timeout: float | None = None,
    ) -> None:
        log.info("systemctl %s %s", operation, service)
        self._systemctl_call(str(operation), service, timeout=timeout)

    def daemon_reload(self) -> None:
        self._systemctl_call("daemon-reload", timeout=self._timeout)

    def set_enabled(self, unit: str, *, enabled: bool) -> None:
        self._systemctl_call("enable" if enabled else "disable", unit, timeout=self._timeout)

    def _systemctl_call(self, *args: str, timeout: float | None) -> None:
        effective_timeout = timeout if timeout is not None else self._timeout
        try:
            result = self._runner(self._systemctl, args, timeout=effective_timeout)
        except CommandExecutionError as exc:
            raise ServiceControlError(
                f"systemctl {' '.join(args)} failed: {exc}", output=exc.output
            ) from exc
        if result.exit_code != 0:
            raise ServiceControlError(
                f"systemctl {' '.join(args)} exited with {result.exit_code}",
                output=result.output,
            )
