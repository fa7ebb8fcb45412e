"""Shared pytest fixtures for psgraph tests."""

from pathlib import Path

import pytest

from psgraph.core.limits import Limits, default_limits
from psgraph.render.canvas import Canvas


@pytest.fixture
def window() -> Limits:
    """Return the default ±10 window."""
    return default_limits()


@pytest.fixture
def canvas() -> Canvas:
    """Return an empty canvas."""
    return Canvas()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a small psgraph.toml and return its path."""
    path = tmp_path / "psgraph.toml"
    path.write_text(
        """
[page]
width = 612
height = 792

[sampling]
step = 0.05

[colors]
curve = [0.0, 0.4, 0.0]

[limits]
default = 5
"""
    )
    return path
