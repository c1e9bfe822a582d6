"""Domain Port(s) for Grid I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .value_objects import Grid


class GridRepository(Protocol):
    """Port for reading and writing grids in an external format.

    Implementations live in infrastructure (e.g., Surfer 6 binary adapter).
    """

    def load_grid(self, file_path: Path | str) -> Grid:
        """Load a grid file and return an owned Grid."""
        ...

    def save_grid(self, grid: Grid, file_path: Path | str) -> None:
        """Write a grid to a file, replacing any existing content."""
        ...
