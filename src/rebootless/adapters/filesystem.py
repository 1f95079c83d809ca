"""Local filesystem appliers for managed files and systemd units.

Paths in descriptors are absolute node paths; ``root`` lets tests and image
builds redirect them into another tree.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from rebootless.domain.errors import ApplyError, ServiceControlError

if TYPE_CHECKING:
    from rebootless.domain.model import FileDescriptor, UnitDescriptor
    from rebootless.domain.model.snapshot import Owner

    from .systemd import SystemctlServiceManager

log = getLogger(__name__)

DEV_NULL: Final[str] = "/dev/null"


def _under_root(root: Path, path: str) -> Path:
    return root / path.lstrip("/")


def _atomic_write(
    target: Path,
    contents: bytes,
    *,
    mode: int,
    user: Owner | None = None,
    group: Owner | None = None,
) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(contents)
        Path(tmp_name).chmod(mode)
        if user is not None or group is not None:
            shutil.chown(tmp_name, user=user, group=group)
        Path(tmp_name).replace(target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class LocalFileApplier:
    """Write and delete managed files below ``root``."""

    def __init__(self, *, root: Path = Path("/")) -> None:
        self._root = root

    def write_file(self, descriptor: FileDescriptor) -> None:
        target = _under_root(self._root, descriptor.path)
        log.info("Writing file %s (mode=%o)", descriptor.path, descriptor.effective_mode)
        try:
            _atomic_write(
                target,
                descriptor.contents,
                mode=descriptor.effective_mode,
                user=descriptor.user,
                group=descriptor.group,
            )
        except LookupError as exc:
            # unknown user or group name
            raise ApplyError(str(exc), identity=descriptor.path) from exc

    def delete_file(self, path: str) -> None:
        log.info("Deleting file %s", path)
        _under_root(self._root, path).unlink(missing_ok=True)


class LocalUnitApplier:
    """Install and remove unit files, drop-ins and masks in ``unit_dir``.

    When a ``systemd`` manager is given, the daemon is reloaded after every
    change and the unit's enablement is applied.
    """

    def __init__(
        self,
        *,
        unit_dir: Path,
        systemd: SystemctlServiceManager | None = None,
    ) -> None:
        self._unit_dir = unit_dir
        self._systemd = systemd

    def create_unit(self, descriptor: UnitDescriptor) -> None:
        unit_path = self._unit_dir / descriptor.name
        log.info("Creating unit %s", descriptor.name)
        if descriptor.mask:
            unit_path.unlink(missing_ok=True)
            unit_path.parent.mkdir(parents=True, exist_ok=True)
            unit_path.symlink_to(DEV_NULL)
        elif descriptor.contents is not None:
            _atomic_write(unit_path, descriptor.contents.encode(), mode=0o644)

        for dropin in descriptor.dropins:
            dropin_path = self._dropin_dir(descriptor) / dropin.name
            _atomic_write(dropin_path, dropin.contents.encode(), mode=0o644)

        self._notify_systemd(descriptor)

    def delete_unit(self, descriptor: UnitDescriptor) -> None:
        log.info("Deleting unit %s", descriptor.name)
        for dropin in descriptor.dropins:
            (self._dropin_dir(descriptor) / dropin.name).unlink(missing_ok=True)
        dropin_dir = self._dropin_dir(descriptor)
        if dropin_dir.is_dir() and not any(dropin_dir.iterdir()):
            dropin_dir.rmdir()
        (self._unit_dir / descriptor.name).unlink(missing_ok=True)
        self._reload(descriptor)

    def _dropin_dir(self, descriptor: UnitDescriptor) -> Path:
        return self._unit_dir / f"{descriptor.name}.d"

    def _notify_systemd(self, descriptor: UnitDescriptor) -> None:
        if self._systemd is None:
            return
        self._reload(descriptor)
        if descriptor.enabled is None or descriptor.mask:
            return
        try:
            self._systemd.set_enabled(descriptor.name, enabled=descriptor.enabled)
        except ServiceControlError as exc:
            raise ApplyError(str(exc), identity=descriptor.name) from exc

    def _reload(self, descriptor: UnitDescriptor) -> None:
        if self._systemd is None:
            return
        try:
            self._systemd.daemon_reload()
        except ServiceControlError as exc:
            raise ApplyError(str(exc), identity=descriptor.name) from exc
