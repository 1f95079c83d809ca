"""Translate Ignition-style payloads into desired-state snapshots.

File contents arrive as ``data:`` URLs, either percent-encoded or base64. They
are decoded to raw bytes here, so two sources with different encodings of the
same bytes produce equal descriptors.
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING
from urllib.parse import unquote_to_bytes

from pydantic import ValidationError

from rebootless.domain.model import (
    Dropin,
    FileDescriptor,
    Snapshot,
    SnapshotError,
    UnitDescriptor,
)

from .schema import ConfigPayload

if TYPE_CHECKING:
    from pathlib import Path

    from .schema import FilePayload, UnitPayload


def decode_data_url(source: str | None) -> bytes:
    """Decode an RFC 2397 ``data:`` URL; ``None`` means empty contents."""

    if source is None:
        return b""
    if not source.startswith("data:"):
        raise SnapshotError(f"Unsupported file source (only data: URLs): {source[:40]!r}")
    header, separator, data = source[len("data:") :].partition(",")
    if not separator:
        raise SnapshotError("Malformed data URL: missing ','")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(unquote_to_bytes(data), validate=True)
        except binascii.Error as exc:
            raise SnapshotError(f"Malformed base64 data URL: {exc}") from exc
    return unquote_to_bytes(data)


def file_from_payload(payload: FilePayload) -> FileDescriptor:
    return FileDescriptor(
        path=payload.path,
        contents=decode_data_url(payload.contents.source),
        mode=payload.mode,
        user=payload.user.ref if payload.user else None,
        group=payload.group.ref if payload.group else None,
    )


def unit_from_payload(payload: UnitPayload) -> UnitDescriptor:
    return UnitDescriptor(
        name=payload.name,
        enabled=payload.enabled,
        mask=payload.mask,
        contents=payload.contents,
        dropins=tuple(
            Dropin(name=dropin.name, contents=dropin.contents) for dropin in payload.dropins
        ),
    )


def snapshot_from_payload(payload: ConfigPayload) -> Snapshot:
    return Snapshot.of(
        files=(file_from_payload(file) for file in payload.storage.files),
        units=(unit_from_payload(unit) for unit in payload.systemd.units),
    )


def parse_snapshot(document: str | bytes) -> Snapshot:
    try:
        payload = ConfigPayload.model_validate_json(document)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid configuration document: {exc}") from exc
    return snapshot_from_payload(payload)


def load_snapshot(path: Path) -> Snapshot:
    try:
        document = path.read_bytes()
    except OSError as exc:
        raise SnapshotError(f"Cannot read configuration {path}: {exc}") from exc
    return parse_snapshot(document)
