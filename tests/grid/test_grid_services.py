"""Tests for grid domain services: default grid, release, text dumps."""

from __future__ import annotations

import numpy as np
import pytest

from domain.grid.errors import InsufficientMemoryError
from domain.grid.services import (
    create_default_grid,
    format_grid_data,
    format_grid_info,
    release_grid,
)
from domain.grid.value_objects import DEFAULT_BLANK_VALUE


def test_default_grid_shape_and_steps(default_grid):
    assert (default_grid.x_size, default_grid.y_size) == (11, 11)
    assert (default_grid.x_min, default_grid.x_max) == (0.0, 10.0)
    assert (default_grid.y_min, default_grid.y_max) == (0.0, 10.0)
    assert default_grid.x_step == 1.0
    assert default_grid.y_step == 1.0
    assert default_grid.blank_value == DEFAULT_BLANK_VALUE


def test_default_grid_values_and_z_range(default_grid):
    assert default_grid.get_value(0, 0) == 0.0
    assert default_grid.get_value(10, 0) == 10.0
    assert default_grid.get_value(0, 1) == 11.0
    assert default_grid.get_value(10, 10) == 120.0
    # Placeholder [0, 1] replaced by the real range
    assert default_grid.z_min == 0.0
    assert default_grid.z_max == 120.0


def test_default_grid_is_independent_per_call():
    first = create_default_grid()
    second = create_default_grid()

    assert first == second

    first.set_value(5, 5, 99.0)

    assert second.get_value(5, 5) == 60.0
    assert first != second


def test_default_grid_allocation_failure(monkeypatch):
    def _raise_memory_error(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr("domain.grid.services.np.arange", _raise_memory_error)

    with pytest.raises(InsufficientMemoryError):
        create_default_grid()


def test_release_grid_none_is_noop():
    release_grid(None)


def test_release_grid_twice(default_grid):
    release_grid(default_grid)
    release_grid(default_grid)

    assert default_grid.is_released
    assert default_grid.get_value(0, 0) == DEFAULT_BLANK_VALUE


def test_format_grid_info(default_grid):
    text = format_grid_info(default_grid)

    assert text.splitlines() == [
        "Grid Information:",
        "X Min: 0.000000, X Max: 10.000000",
        "Y Min: 0.000000, Y Max: 10.000000",
        "X Size: 11, Y Size: 11",
        "X Step: 1.000000, Y Step: 1.000000",
        "Z Min: 0.000000, Z Max: 120.000000",
        "Blank Value: 170141000918782798866653488190622531584.000000",
    ]


def test_format_grid_data_rows(default_grid):
    lines = format_grid_data(default_grid).splitlines()

    assert lines[0] == "Grid Data:"
    assert len(lines) == 1 + 11
    assert lines[1].startswith("  0.00   1.00   2.00 ")
    assert lines[-1].endswith("120.00 ")
    assert len(lines[1]) == 11 * 7


def test_format_released_grid(default_grid):
    release_grid(default_grid)

    assert format_grid_info(default_grid).endswith("(released)")
    assert format_grid_data(default_grid) == "Grid Data:"


def test_default_grid_buffer_is_float64(default_grid):
    assert default_grid.data.dtype == np.float64
    assert default_grid.data.flags.c_contiguous
