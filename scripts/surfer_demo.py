#!/usr/bin/env python3
"""Demonstrate the grid model and the Surfer 6 codec.

Usage:
    python scripts/surfer_demo.py [INPUT [OUTPUT]]

Defaults:
    INPUT  = examples/example_input.grd  (see scripts/gen_examples.py)
    OUTPUT = examples/example_output.grd

Example 1 reads INPUT, prints it, sets cell (3, 3) to 42 and writes OUTPUT.
A failure there is logged and the driver moves on to Example 2, which builds
the built-in 11x11 grid, prints it and sets cell (5, 5) to 99.

Report goes to stdout; diagnostics go to stderr through logging.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from domain.grid.errors import GridError
from domain.grid.repositories import GridRepository
from domain.grid.services import (
    create_default_grid,
    format_grid_data,
    format_grid_info,
    release_grid,
)
from infrastructure.grid import Surfer6GridAdapter

logger = logging.getLogger("surfer_demo")

DEFAULT_INPUT = Path("examples") / "example_input.grd"
DEFAULT_OUTPUT = Path("examples") / "example_output.grd"


def run_file_example(
    repository: GridRepository, input_path: Path, output_path: Path
) -> bool:
    """Example 1: load, print, modify, save. Returns False on failure."""
    try:
        file_grid = repository.load_grid(input_path)
    except (GridError, OSError) as e:
        logger.error("Failed to read grid from file %s: %s", input_path.name, e)
        return False

    print("Grid read from file:")
    print(format_grid_info(file_grid))
    print()
    print(format_grid_data(file_grid))

    file_grid.set_value(3, 3, 42.0)
    print(f"\nUpdated Grid Value at (3, 3): {file_grid.get_value(3, 3):6.2f}")

    try:
        repository.save_grid(file_grid, output_path)
    except (GridError, OSError) as e:
        logger.error("Failed to write grid to file %s: %s", output_path.name, e)
        return False
    finally:
        release_grid(file_grid)

    print(f"\nModified grid written to file: {output_path}")
    return True


def run_default_example() -> bool:
    """Example 2: build, print and modify the default grid."""
    try:
        example_grid = create_default_grid()
    except GridError as e:
        logger.error("Failed to create example grid: %s", e)
        return False

    print("\nExample Grid Information:")
    print(format_grid_info(example_grid))
    print()
    print(format_grid_data(example_grid))

    example_grid.set_value(5, 5, 99.0)
    print(
        f"\nUpdated Example Grid Value at (5, 5): {example_grid.get_value(5, 5):6.2f}"
    )

    release_grid(example_grid)
    return True


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    input_path = Path(args[0]) if len(args) > 0 else DEFAULT_INPUT
    output_path = Path(args[1]) if len(args) > 1 else DEFAULT_OUTPUT

    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    adapter = Surfer6GridAdapter()
    run_file_example(adapter, input_path, output_path)

    # Exit if grid creation failed
    if not run_default_example():
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
