"""Grid Bounded Context - Error Hierarchy.

Custom exceptions for grid model and Surfer 6 codec operations.

Legacy accessors (get_value/set_value) never raise these; they degrade to the
blank sentinel or a no-op and log instead. Strict accessors and the codec raise.
"""

from __future__ import annotations


class GridError(Exception):
    """Base error for grid operations."""


class InvalidGridFileError(GridError):
    """Stream is not a usable Surfer 6 binary grid."""


class TruncatedGridError(InvalidGridFileError):
    """Stream ended before a complete section could be read.

    Attributes:
        section: Name of the section being read ("header" or "cell data")
        expected: Number of bytes required
        actual: Number of bytes available
    """

    def __init__(self, section: str, expected: int, actual: int) -> None:
        self.section = section
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Truncated {section}: expected {expected} bytes, got {actual}"
        )


class InsufficientMemoryError(GridError):
    """Cell buffer allocation failed or exceeds the configured budget."""


class CellOutOfBoundsError(GridError):
    """Cell index is outside the grid.

    Attributes:
        x: Column index requested
        y: Row index requested
        x_size: Number of columns in the grid
        y_size: Number of rows in the grid
    """

    def __init__(self, x: int, y: int, x_size: int, y_size: int) -> None:
        self.x = x
        self.y = y
        self.x_size = x_size
        self.y_size = y_size
        super().__init__(
            f"Cell ({x}, {y}) outside grid [0, {x_size}) x [0, {y_size})"
        )


class ReleasedGridError(GridError):
    """Grid buffer has already been released."""

    pass
