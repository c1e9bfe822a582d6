#!/usr/bin/env python3
"""Generate example Surfer 6 binary grids for the demo driver.

Usage:
    python scripts/gen_examples.py

Output:
    examples/example_input.grd

The grid is synthetic: a smooth bump over [0, 20] x [0, 14] with the
south-west corner blanked, so the demo shows blank handling as well.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from domain.grid.value_objects import DEFAULT_BLANK_VALUE, Grid
from infrastructure.grid import Surfer6GridAdapter

# Output directory
EXAMPLES_DIR = Path(__file__).parent.parent / "examples"

# Example bounds and shape
EX_MIN_X, EX_MAX_X = 0.0, 20.0
EX_MIN_Y, EX_MAX_Y = 0.0, 14.0
EX_X_SIZE, EX_Y_SIZE = 21, 15
BLANK_CORNER = 3  # Blanked rows/columns in the south-west corner


def ensure_dir() -> None:
    """Ensure examples directory exists."""
    EXAMPLES_DIR.mkdir(parents=True, exist_ok=True)
    print(f"Output directory: {EXAMPLES_DIR}")


def bump_surface() -> NDArray[np.float64]:
    """Return a (rows, columns) Gaussian bump peaking at 100 in the centre."""
    xs = np.linspace(EX_MIN_X, EX_MAX_X, EX_X_SIZE)
    ys = np.linspace(EX_MIN_Y, EX_MAX_Y, EX_Y_SIZE)
    xx, yy = np.meshgrid(xs, ys)
    cx, cy = (EX_MIN_X + EX_MAX_X) / 2, (EX_MIN_Y + EX_MAX_Y) / 2
    return 100.0 * np.exp(-((xx - cx) ** 2 + (yy - cy) ** 2) / 40.0)


def gen_example_input(adapter: Surfer6GridAdapter) -> Path:
    values = bump_surface()
    values[:BLANK_CORNER, :BLANK_CORNER] = DEFAULT_BLANK_VALUE

    grid = Grid.from_array(
        values, x_min=EX_MIN_X, x_max=EX_MAX_X, y_min=EX_MIN_Y, y_max=EX_MAX_Y
    )
    path = EXAMPLES_DIR / "example_input.grd"
    adapter.save_grid(grid, path)
    print(
        f"  Created: {path.name} ({EX_X_SIZE}x{EX_Y_SIZE}, "
        f"{grid.blank_count()} blank, z {grid.z_min:.2f}..{grid.z_max:.2f})"
    )
    return path


def main() -> int:
    try:
        ensure_dir()
    except OSError as e:
        print(f"ERROR: Cannot create examples directory: {e}")
        return 1

    adapter = Surfer6GridAdapter(strict_tag=True)
    path = gen_example_input(adapter)

    # Read back to verify the file decodes with the expected shape
    grid = adapter.load_grid(path)
    if (grid.x_size, grid.y_size) != (EX_X_SIZE, EX_Y_SIZE):
        print(f"ERROR: {path.name} decoded as {grid.x_size}x{grid.y_size}")
        return 1

    print(f"\nVerified {path.name} ({path.stat().st_size}B).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
