"""Project-wide pytest configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent


@pytest.fixture(name="config_path")
def fixture_config_path() -> Path:
    """Path of the project's config.yaml."""
    return PROJECT_ROOT / "config.yaml"
