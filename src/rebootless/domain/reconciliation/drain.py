"""Drain aggregation over resolved actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rebootless.domain.model import RemediationAction


def aggregate_drain(actions: Iterable[RemediationAction]) -> bool:
    """Return ``True`` iff at least one action requires a drain (``False`` when empty)."""

    return any(action.drain for action in actions)
