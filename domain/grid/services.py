"""Grid Bounded Context - Domain Services.

Pure domain logic around the Grid model: the built-in example grid, explicit
release, and the text dumps used by the demo driver.
NO I/O operations - Surfer 6 files are handled by infrastructure adapters
under `src/infrastructure/grid/surfer6_adapter.py` via domain ports.
"""

from __future__ import annotations

import numpy as np

from domain.grid.errors import InsufficientMemoryError
from domain.grid.value_objects import Grid

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_GRID_SIZE = 11  # Nodes per axis
DEFAULT_GRID_EXTENT = (0.0, 10.0)  # Same on both axes


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def create_default_grid() -> Grid:
    """Build the 11x11 example grid.

    Bounds [0, 10] x [0, 10], so both steps are 1.0. Cells hold 0..120 in
    row-major order; the placeholder z-range [0, 1] is replaced by the real
    one (0, 120) before returning.

    Raises:
        InsufficientMemoryError: If the cell buffer cannot be allocated

    Example:
        >>> grid = create_default_grid()
        >>> grid.get_value(10, 10)
        120.0
    """
    lo, hi = DEFAULT_GRID_EXTENT
    n = DEFAULT_GRID_SIZE

    try:
        grid = Grid(
            x_min=lo,
            x_max=hi,
            y_min=lo,
            y_max=hi,
            x_size=n,
            y_size=n,
            z_min=0.0,
            z_max=1.0,
            data=np.arange(n * n, dtype=np.float64),
        )
    except MemoryError as e:
        raise InsufficientMemoryError("Memory allocation for data array failed") from e

    grid.recompute_z_range()
    return grid


def release_grid(grid: Grid | None) -> None:
    """Release a grid's buffer. No-op for None or an already released grid."""
    if grid is None:
        return
    grid.release()


# ---------------------------------------------------------------------------
# Text dumps
# ---------------------------------------------------------------------------
def format_grid_info(grid: Grid) -> str:
    """Return a multi-line metadata summary."""
    lines = [
        "Grid Information:",
        f"X Min: {grid.x_min:f}, X Max: {grid.x_max:f}",
        f"Y Min: {grid.y_min:f}, Y Max: {grid.y_max:f}",
        f"X Size: {grid.x_size}, Y Size: {grid.y_size}",
        f"X Step: {grid.x_step:f}, Y Step: {grid.y_step:f}",
        f"Z Min: {grid.z_min:f}, Z Max: {grid.z_max:f}",
        f"Blank Value: {grid.blank_value:f}",
    ]
    if grid.is_released:
        lines.append("(released)")
    return "\n".join(lines)


def format_grid_data(grid: Grid) -> str:
    """Return every cell as text, one line per row, row 0 first."""
    lines = ["Grid Data:"]
    if grid.is_released:
        return "\n".join(lines)
    for row in grid.values:
        lines.append("".join(f"{value:6.2f} " for value in row))
    return "\n".join(lines)
