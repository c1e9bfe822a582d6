"""Tests for the demo driver and the example generator in scripts/.

scripts/ is not a package, so modules are loaded from their file paths.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

from infrastructure.grid import Surfer6GridAdapter
from tests.conftest_utils import build_surfer6_bytes

SCRIPTS_DIR = Path(__file__).resolve().parents[2] / "scripts"


def load_script(name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def surfer_demo() -> ModuleType:
    return load_script("surfer_demo")


@pytest.fixture
def gen_examples() -> ModuleType:
    return load_script("gen_examples")


def test_demo_runs_both_examples(surfer_demo, tmp_path, capsys):
    input_path = tmp_path / "in.grd"
    output_path = tmp_path / "out.grd"
    input_path.write_bytes(
        build_surfer6_bytes(5, 5, [float(i) for i in range(25)], z_range=(0.0, 24.0))
    )

    assert surfer_demo.main([str(input_path), str(output_path)]) == 0

    out = capsys.readouterr().out
    assert "Grid read from file:" in out
    assert "Updated Grid Value at (3, 3):  42.00" in out
    assert "Example Grid Information:" in out
    assert "Updated Example Grid Value at (5, 5):  99.00" in out

    written = Surfer6GridAdapter().load_grid(output_path)
    assert written.get_value(3, 3) == 42.0
    # z-range not recomputed before writing
    assert (written.z_min, written.z_max) == (0.0, 24.0)


def test_demo_continues_after_missing_input(surfer_demo, tmp_path, capsys, caplog):
    output_path = tmp_path / "out.grd"
    caplog.set_level("ERROR")

    assert surfer_demo.main([str(tmp_path / "missing.grd"), str(output_path)]) == 0

    out = capsys.readouterr().out
    assert "Grid read from file:" not in out
    assert "Example Grid Information:" in out
    assert not output_path.exists()
    assert "Failed to read grid from file missing.grd" in caplog.text


def test_demo_continues_after_truncated_input(surfer_demo, tmp_path, capsys):
    input_path = tmp_path / "short.grd"
    input_path.write_bytes(b"DSBB\x05\x00")

    assert surfer_demo.main([str(input_path), str(tmp_path / "out.grd")]) == 0

    assert "Example Grid Information:" in capsys.readouterr().out


def test_demo_fails_when_default_grid_cannot_be_built(
    surfer_demo, tmp_path, monkeypatch
):
    from domain.grid.errors import InsufficientMemoryError

    def _fail():
        raise InsufficientMemoryError("Memory allocation for data array failed")

    monkeypatch.setattr(surfer_demo, "create_default_grid", _fail)

    assert surfer_demo.main([str(tmp_path / "missing.grd")]) == 1


def test_gen_examples_writes_input_grid(gen_examples, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(gen_examples, "EXAMPLES_DIR", tmp_path)

    assert gen_examples.main() == 0

    grid = Surfer6GridAdapter(strict_tag=True).load_grid(tmp_path / "example_input.grd")
    assert (grid.x_size, grid.y_size) == (21, 15)
    assert grid.blank_count() == 9
    # Bump peaks on the centre node (10, 7)
    assert grid.z_max == 100.0
    assert grid.get_value(10, 7) == 100.0
    assert "Created: example_input.grd" in capsys.readouterr().out
