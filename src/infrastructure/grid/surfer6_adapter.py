"""Surfer 6 binary adapter for GridRepository.

Implements reading and writing of Golden Software Surfer 6 binary grids
("DSBB") and returns domain Grid objects.

Layout (little-endian, 56-byte header, no padding):
    0   4   tag "DSBB"
    4   2   x_size (int16)
    6   2   y_size (int16)
    8   48  x_min, x_max, y_min, y_max, z_min, z_max (float64)
    56  4*x_size*y_size  cells, row-major from y_min upwards (float32)

Round-trip behavior:
1) Cells are narrowed float64 -> float32 on encode and widened on decode, so
   values only survive to single precision
2) z_min/z_max are copied verbatim both ways, never recomputed here
3) blank_value is not stored; decode always resets it to DEFAULT_BLANK_VALUE
4) Steps are derived from bounds and sizes, never stored
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray
from pydantic import ValidationError

from domain.grid.errors import (
    InsufficientMemoryError,
    InvalidGridFileError,
    ReleasedGridError,
    TruncatedGridError,
)
from domain.grid.value_objects import DEFAULT_BLANK_VALUE, MIN_AXIS_SIZE, Grid

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

SURFER6_TAG = b"DSBB"

HEADER_DTYPE = np.dtype(
    [
        ("tag", "S4"),
        ("x_size", "<i2"),
        ("y_size", "<i2"),
        ("x_min", "<f8"),
        ("x_max", "<f8"),
        ("y_min", "<f8"),
        ("y_max", "<f8"),
        ("z_min", "<f8"),
        ("z_max", "<f8"),
    ]
)
HEADER_SIZE = HEADER_DTYPE.itemsize  # 56
CELL_DTYPE = np.dtype("<f4")


def _read_exact(stream: BinaryIO, n_bytes: int, section: str) -> bytes:
    """Read exactly n_bytes or raise TruncatedGridError."""
    chunk = stream.read(n_bytes)
    if len(chunk) < n_bytes:
        raise TruncatedGridError(section, n_bytes, len(chunk))
    return chunk


def _to_int16(value: int, field: str) -> int:
    """Narrow to int16 with two's-complement wrap, like a C short cast."""
    wrapped = int(np.array(value, dtype=np.int64).astype(np.int16))
    if wrapped != value:
        logger.warning("%s=%d does not fit int16; written as %d", field, value, wrapped)
    return wrapped


def _narrow_cells(data: NDArray[np.float64]) -> NDArray[np.float32]:
    """Round cells to float32; out-of-range magnitudes become +/-inf."""
    with np.errstate(over="ignore"):
        cells = data.astype(CELL_DTYPE)
    overflowed = int(np.count_nonzero(np.isinf(cells) & np.isfinite(data)))
    if overflowed:
        logger.warning(
            "%d cell(s) exceed float32 range and were written as inf", overflowed
        )
    return cells


# ---------------------------------------------------------------------------
# Stream codec
# ---------------------------------------------------------------------------
def decode(
    stream: BinaryIO, *, strict_tag: bool = False, max_bytes: int | None = None
) -> Grid:
    """Read a Surfer 6 binary grid from an open binary stream.

    The 4 tag bytes are skipped without inspection unless ``strict_tag`` is
    set, in which case they must equal ``DSBB``.

    Args:
        stream: Binary file-like object positioned at the tag
        strict_tag: Reject streams whose tag is not DSBB
        max_bytes: Optional budget for the float64 cell buffer

    Returns:
        Grid with DEFAULT_BLANK_VALUE as blank value

    Raises:
        TruncatedGridError: If the header or cell block is short
        InvalidGridFileError: If the tag (strict mode) or sizes are unusable
        InsufficientMemoryError: If the buffer exceeds max_bytes or cannot be allocated
    """
    raw = _read_exact(stream, HEADER_SIZE, "header")
    # Tag taken from the raw bytes: numpy "S4" would strip trailing NULs
    tag = raw[:4]
    if strict_tag and tag != SURFER6_TAG:
        raise InvalidGridFileError(f"Invalid Surfer 6 tag: {tag!r}")

    header = np.frombuffer(raw, dtype=HEADER_DTYPE, count=1)[0]
    x_size = int(header["x_size"])
    y_size = int(header["y_size"])
    if x_size < MIN_AXIS_SIZE or y_size < MIN_AXIS_SIZE:
        raise InvalidGridFileError(
            f"Grid sizes must be >= {MIN_AXIS_SIZE}, got {x_size}x{y_size}"
        )

    n_cells = x_size * y_size
    # Memory budget check BEFORE allocation
    if max_bytes is not None:
        est_bytes = n_cells * np.dtype(np.float64).itemsize
        if est_bytes > max_bytes:
            raise InsufficientMemoryError(
                f"Estimated grid size {est_bytes}B exceeds budget {max_bytes}B"
            )

    payload = _read_exact(stream, n_cells * CELL_DTYPE.itemsize, "cell data")

    try:
        cells = np.frombuffer(payload, dtype=CELL_DTYPE).astype(np.float64)
        return Grid(
            x_min=float(header["x_min"]),
            x_max=float(header["x_max"]),
            y_min=float(header["y_min"]),
            y_max=float(header["y_max"]),
            x_size=x_size,
            y_size=y_size,
            z_min=float(header["z_min"]),
            z_max=float(header["z_max"]),
            blank_value=DEFAULT_BLANK_VALUE,
            data=cells,
        )
    except MemoryError as e:
        raise InsufficientMemoryError("Memory allocation for data array failed") from e
    except ValidationError as e:
        raise InvalidGridFileError(f"Inconsistent Surfer 6 header: {e}") from e


def encode(grid: Grid, stream: BinaryIO) -> None:
    """Write ``grid`` to an open binary stream in Surfer 6 binary layout.

    The cached z_min/z_max are written as they are; call
    ``grid.recompute_z_range()`` first if cells changed since.

    Raises:
        ReleasedGridError: If the grid buffer has been released
    """
    if grid.is_released:
        raise ReleasedGridError("Cannot encode a released grid")

    header = np.array(
        [
            (
                SURFER6_TAG,
                _to_int16(grid.x_size, "x_size"),
                _to_int16(grid.y_size, "y_size"),
                grid.x_min,
                grid.x_max,
                grid.y_min,
                grid.y_max,
                grid.z_min,
                grid.z_max,
            )
        ],
        dtype=HEADER_DTYPE,
    )
    stream.write(header.tobytes())
    stream.write(_narrow_cells(grid.data).tobytes())


def to_bytes(grid: Grid) -> bytes:
    """Encode ``grid`` into an in-memory Surfer 6 binary blob."""
    buffer = io.BytesIO()
    encode(grid, buffer)
    return buffer.getvalue()


def from_bytes(
    data: bytes, *, strict_tag: bool = False, max_bytes: int | None = None
) -> Grid:
    """Decode a Surfer 6 binary blob held in memory."""
    with io.BytesIO(data) as buffer:
        return decode(buffer, strict_tag=strict_tag, max_bytes=max_bytes)


# ---------------------------------------------------------------------------
# Repository adapter
# ---------------------------------------------------------------------------
class Surfer6GridAdapter:
    """Infrastructure adapter for Surfer 6 binary grid files.

    Parameters
    ----------
    max_bytes: int | None
        Optional memory budget for the decoded float64 buffer
        (x_size*y_size*8). Exceeding it raises InsufficientMemoryError before
        the cell block is read.
    strict_tag: bool
        Reject files whose first 4 bytes are not "DSBB". Off by default: the
        legacy reader skips the tag without looking at it.
    """

    def __init__(
        self, max_bytes: int | None = None, strict_tag: bool = False
    ) -> None:
        self.max_bytes = max_bytes
        self.strict_tag = strict_tag

    def load_grid(self, file_path: Path | str) -> Grid:
        """Load a Surfer 6 binary grid file.

        Raises:
            FileNotFoundError: If the file does not exist
            PermissionError: If the file cannot be opened (file name only)
            TruncatedGridError, InvalidGridFileError, InsufficientMemoryError:
                See ``decode``
        """
        path = Path(file_path)

        # Check existence first to ensure missing files surface as FileNotFoundError
        if not path.exists():
            logger.error("Failed to open file: %s", path.name)
            raise FileNotFoundError(str(path))

        try:
            with path.open("rb") as stream:
                grid = decode(
                    stream, strict_tag=self.strict_tag, max_bytes=self.max_bytes
                )
        except PermissionError as e:
            logger.error("Failed to open file: %s (permission denied)", path.name)
            # Re-raise with filename only to avoid leaking full path in logs
            raise PermissionError(path.name) from e
        except OSError as e:
            # Log only filename, errno, and strerror to avoid leaking absolute paths
            logger.error(
                "Failed to read %s (errno=%s, strerror=%s)",
                path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise

        blanks = grid.blank_count()
        if blanks == grid.data.size:
            logger.warning("Grid %s: all %d cells are blank", path.name, blanks)
        logger.debug(
            "Grid %s: Loaded %dx%d grid", path.name, grid.x_size, grid.y_size
        )
        return grid

    def save_grid(self, grid: Grid, file_path: Path | str) -> None:
        """Write ``grid`` to a Surfer 6 binary grid file (overwrites).

        Raises:
            ReleasedGridError: If the grid buffer has been released
            PermissionError: If the file cannot be opened (file name only)
            OSError: Any other failure opening or writing the file
        """
        path = Path(file_path)

        # Check before opening so a released grid never truncates an existing file
        if grid.is_released:
            raise ReleasedGridError("Cannot encode a released grid")

        try:
            with path.open("wb") as stream:
                encode(grid, stream)
        except PermissionError as e:
            logger.error("Failed to open file: %s (permission denied)", path.name)
            raise PermissionError(path.name) from e
        except OSError as e:
            logger.error(
                "Failed to write %s (errno=%s, strerror=%s)",
                path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise

        logger.debug(
            "Grid %s: Wrote %dx%d grid", path.name, grid.x_size, grid.y_size
        )
