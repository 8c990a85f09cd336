"""Shared fixtures for plugsync tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    path = tmp_path / "plugins"
    path.mkdir()
    return path
