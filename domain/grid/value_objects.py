"""Grid Bounded Context - Grid Model.

A regular rectangular mesh of float64 samples over a bounding box, stored
row-major (index = y * x_size + x, y is the slow axis).

Grid is mutable: cells and bounds change in place through its accessor
methods. Construction still goes through Pydantic, so sizes and buffer length
are validated up front.

Invariants:
    G-1: x_size >= 2 and y_size >= 2
    G-2: data is an owned, contiguous float64 buffer of x_size * y_size values
    G-3: x_step == (x_max - x_min) / (x_size - 1), same for y
    G-4: z_min/z_max are a cache; cell writes do NOT refresh them
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Any

import numpy as np
from affine import Affine
from numpy.typing import ArrayLike, NDArray
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)

from domain.grid.errors import CellOutOfBoundsError, ReleasedGridError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
# Surfer's blank sentinel; exactly representable as float32 so it survives
# narrowing on encode.
DEFAULT_BLANK_VALUE = 170141000918782798866653488190622531584.0

# Seeds for the z-range scan. A grid whose z-range was never computed holds them.
Z_MIN_SEED = sys.float_info.max
Z_MAX_SEED = -sys.float_info.max

MIN_AXIS_SIZE = 2  # Steps divide by (size - 1)


# ---------------------------------------------------------------------------
# Z-Range Statistics
# ---------------------------------------------------------------------------
def compute_z_range(
    values: NDArray[np.float64], blank_value: float
) -> tuple[float, float]:
    """Return (z_min, z_max) over all non-blank values.

    Blank cells are excluded by exact equality, not tolerance. NaN cells never
    win a comparison, so they never contribute either.

    If either extreme is still at its seed after the scan (nothing
    contributed), both collapse to ``blank_value``.
    """
    candidates = values[(values != blank_value) & ~np.isnan(values)]
    z_min = float(np.min(candidates, initial=Z_MIN_SEED))
    z_max = float(np.max(candidates, initial=Z_MAX_SEED))

    if z_min == Z_MIN_SEED or z_max == Z_MAX_SEED:
        return (blank_value, blank_value)
    return (z_min, z_max)


def _step(lo: float, hi: float, size: int) -> float:
    return (hi - lo) / (size - 1)


class Grid(BaseModel):
    """2D scalar grid with spatial metadata.

    Build one directly, with ``Grid.from_array``, with
    ``domain.grid.services.create_default_grid`` or by decoding a Surfer 6
    file (``infrastructure.grid``).
    """

    x_min: float  # Western edge
    x_max: float  # Eastern edge
    y_min: float  # Southern edge (row 0)
    y_max: float  # Northern edge (last row)
    x_size: int = Field(ge=MIN_AXIS_SIZE)  # Columns
    y_size: int = Field(ge=MIN_AXIS_SIZE)  # Rows
    z_min: float = Z_MIN_SEED
    z_max: float = Z_MAX_SEED
    blank_value: float = DEFAULT_BLANK_VALUE
    data: NDArray[np.float64]  # Flat, row-major

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _released: bool = PrivateAttr(default=False)

    @field_validator("data", mode="before")
    @classmethod
    def copy_data(cls, value: Any) -> NDArray[np.float64]:
        # Always an owned copy: a Grid never aliases the caller's array
        return np.array(value, dtype=np.float64, copy=True, order="C").reshape(-1)

    @model_validator(mode="after")
    def validate_grid(self) -> "Grid":
        expected = self.x_size * self.y_size
        if self.data.size != expected:
            raise ValueError(
                f"Data must hold x_size*y_size={expected} values, got {self.data.size}"
            )
        return self

    @classmethod
    def from_array(
        cls,
        values: ArrayLike,
        *,
        x_min: float,
        x_max: float,
        y_min: float,
        y_max: float,
        blank_value: float = DEFAULT_BLANK_VALUE,
    ) -> "Grid":
        """Build a grid from a (y_size, x_size) array and compute its z-range."""
        array = np.asarray(values, dtype=np.float64)
        if array.ndim != 2:
            raise ValueError(f"Values must be 2D (rows x columns), got {array.ndim}D")
        y_size, x_size = array.shape

        grid = cls(
            x_min=x_min,
            x_max=x_max,
            y_min=y_min,
            y_max=y_max,
            x_size=x_size,
            y_size=y_size,
            blank_value=blank_value,
            data=array,
        )
        grid.recompute_z_range()
        return grid

    # -----------------------------------------------------------------------
    # Derived geometry
    # -----------------------------------------------------------------------
    @property
    def x_step(self) -> float:
        return _step(self.x_min, self.x_max, self.x_size)

    @property
    def y_step(self) -> float:
        return _step(self.y_min, self.y_max, self.y_size)

    @property
    def transform(self) -> Affine:
        """Map (column, row) node indices to world (x, y) coordinates.

        Row 0 sits on y_min, so unlike a north-up raster the y scale is positive.
        """
        return Affine.translation(self.x_min, self.y_min) @ Affine.scale(
            self.x_step, self.y_step
        )

    def node_coordinates(self, x: int, y: int) -> tuple[float, float]:
        """Return world coordinates of node (x, y). Does not check the index."""
        wx, wy = self.transform @ (x, y)
        return (float(wx), float(wy))

    @property
    def values(self) -> NDArray[np.float64]:
        """Read-only (y_size, x_size) view of the cell buffer."""
        if self._released:
            raise ReleasedGridError("Grid has been released")
        view = self.data.reshape(self.y_size, self.x_size)
        view.flags.writeable = False
        return view

    # -----------------------------------------------------------------------
    # Copy / equality
    # -----------------------------------------------------------------------
    def __copy__(self) -> "Grid":
        # Cells are never shared: model_copy() and copy.copy() both deep-copy
        return self.__deepcopy__()

    def __eq__(self, other: object) -> bool:
        """Grids are equal when every field matches and cells are identical."""
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.model_dump(exclude={"data"}) == other.model_dump(exclude={"data"})
            and self._released == other._released
            and bool(np.array_equal(self.data, other.data))
        )

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------
    @property
    def is_released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Drop the cell buffer. Releasing twice is a no-op."""
        if self._released:
            logger.debug("Grid already released")
            return
        self.data = np.empty(0, dtype=np.float64)
        self._released = True

    # -----------------------------------------------------------------------
    # Cell access
    # -----------------------------------------------------------------------
    def in_range(self, x: int, y: int) -> bool:
        return 0 <= x < self.x_size and 0 <= y < self.y_size

    def get_value(self, x: int, y: int) -> float:
        """Return cell (x, y).

        Out-of-range indices return ``blank_value`` and log a warning; a
        released grid returns ``DEFAULT_BLANK_VALUE``. Never raises.
        """
        if self._released:
            logger.error("Grid has been released; returning default blank value")
            return DEFAULT_BLANK_VALUE
        if not self.in_range(x, y):
            logger.warning(
                "Index out of bounds: (%d, %d) for %dx%d grid",
                x,
                y,
                self.x_size,
                self.y_size,
            )
            return self.blank_value
        return float(self.data[y * self.x_size + x])

    def set_value(self, x: int, y: int, value: float) -> None:
        """Write cell (x, y). Out-of-range or released: logged no-op.

        z_min/z_max are left untouched; call ``recompute_z_range`` afterwards
        if the cached range matters.
        """
        if self._released:
            logger.error("Grid has been released; write to (%d, %d) dropped", x, y)
            return
        if not self.in_range(x, y):
            logger.warning(
                "Index out of bounds: (%d, %d) for %dx%d grid",
                x,
                y,
                self.x_size,
                self.y_size,
            )
            return
        self.data[y * self.x_size + x] = value

    def get_value_strict(self, x: int, y: int) -> float:
        """Like ``get_value`` but raises instead of returning the sentinel.

        Raises:
            ReleasedGridError: If the grid has been released
            CellOutOfBoundsError: If (x, y) is outside the grid
        """
        self._check_cell(x, y)
        return float(self.data[y * self.x_size + x])

    def set_value_strict(self, x: int, y: int, value: float) -> None:
        """Like ``set_value`` but raises instead of dropping the write."""
        self._check_cell(x, y)
        self.data[y * self.x_size + x] = value

    def _check_cell(self, x: int, y: int) -> None:
        if self._released:
            raise ReleasedGridError("Grid has been released")
        if not self.in_range(x, y):
            raise CellOutOfBoundsError(x, y, self.x_size, self.y_size)

    def blank_count(self) -> int:
        """Return number of cells equal to blank_value."""
        return int(np.count_nonzero(self.data == self.blank_value))

    # -----------------------------------------------------------------------
    # Bounds (steps follow automatically)
    # -----------------------------------------------------------------------
    def set_x_min(self, x_min: float) -> None:
        self.x_min = x_min
        self._report_step("x", self.x_step)

    def set_x_max(self, x_max: float) -> None:
        self.x_max = x_max
        self._report_step("x", self.x_step)

    def set_y_min(self, y_min: float) -> None:
        self.y_min = y_min
        self._report_step("y", self.y_step)

    def set_y_max(self, y_max: float) -> None:
        self.y_max = y_max
        self._report_step("y", self.y_step)

    def _report_step(self, axis: str, step: float) -> None:
        # Degenerate bounds are accepted as-is; only reported
        if not math.isfinite(step) or step <= 0:
            logger.warning("Degenerate %s_step after bound update: %r", axis, step)
        else:
            logger.debug("%s_step updated to %r", axis, step)

    # -----------------------------------------------------------------------
    # Statistics
    # -----------------------------------------------------------------------
    def recompute_z_range(self) -> None:
        """Rescan all cells and refresh z_min/z_max."""
        if self._released:
            logger.error("Grid has been released; z-range not recomputed")
            return
        self.z_min, self.z_max = compute_z_range(self.data, self.blank_value)
        if self.z_min == self.blank_value:
            logger.warning(
                "All %d cells are blank; z-range collapsed to blank value",
                self.data.size,
            )
