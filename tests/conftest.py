"""Shared pytest fixtures for reckon tests."""

from pathlib import Path

import pytest

from reckon.core.environment import BasicEnvironment


@pytest.fixture
def env() -> BasicEnvironment:
    """Return a fresh environment with the default builtins and ans = 0."""
    return BasicEnvironment()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Return the path of a reckon.toml inside a temporary directory (not yet written)."""
    return tmp_path / "reckon.toml"
