"""Public interface for the Ignition configuration adapter."""

from __future__ import annotations

from .schema import ConfigPayload, FilePayload, UnitPayload
from .translator import decode_data_url, load_snapshot, parse_snapshot, snapshot_from_payload

__all__ = [
    "ConfigPayload",
    "FilePayload",
    "UnitPayload",
    "decode_data_url",
    "load_snapshot",
    "parse_snapshot",
    "snapshot_from_payload",
]
