"""Shared fixtures for Ignition adapter tests."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parents[2] / "data" / "ignition"


@pytest.fixture
def ignition_fixtures() -> Path:
    return FIXTURES
