"""Root pytest configuration for all tests.

Imports resolve through ``pythonpath = ["src", "."]`` in pyproject.toml, so
tests use ``domain.*`` and ``infrastructure.*`` exactly like application code.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

from domain.grid.services import create_default_grid
from domain.grid.value_objects import Grid
from tests.conftest_utils import build_surfer6_bytes


@pytest.fixture
def default_grid() -> Grid:
    """Fresh 11x11 example grid (cells 0..120)."""
    return create_default_grid()


@pytest.fixture
def make_grid() -> Callable[..., Grid]:
    """Factory for small grids with sequential cells.

    Usage:
        grid = make_grid(4, 3, x_min=-1.0)
    """

    def _make(
        x_size: int = 4,
        y_size: int = 3,
        *,
        x_min: float = 0.0,
        x_max: float = 3.0,
        y_min: float = 0.0,
        y_max: float = 2.0,
        **kwargs,
    ) -> Grid:
        return Grid(
            x_min=x_min,
            x_max=x_max,
            y_min=y_min,
            y_max=y_max,
            x_size=x_size,
            y_size=y_size,
            data=np.arange(x_size * y_size, dtype=np.float64),
            **kwargs,
        )

    return _make


@pytest.fixture
def surfer6_file(tmp_path: Path) -> Path:
    """3x2 Surfer 6 file on disk with known values."""
    path = tmp_path / "small.grd"
    path.write_bytes(
        build_surfer6_bytes(
            3,
            2,
            [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
            bounds=(10.0, 12.0, 20.0, 21.0),
            z_range=(1.0, 6.0),
        )
    )
    return path
