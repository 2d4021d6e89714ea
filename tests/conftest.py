# tests/conftest.py
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to sys.path so "logicgrid" and "scripts" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from logicgrid.core.puzzle import SudokuGeometry, TangoGeometry, as_grid  # noqa: E402


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def sudoku9():
    return SudokuGeometry()


@pytest.fixture
def sudoku6():
    return SudokuGeometry.for_size(6)


@pytest.fixture
def sudoku4():
    return SudokuGeometry.for_size(4)


@pytest.fixture
def tango():
    return TangoGeometry()


@pytest.fixture
def tango_solution():
    """A balanced 6x6 tango grid with no three in a row"""
    return as_grid([
        [1, 1, 2, 1, 2, 2],
        [2, 2, 1, 2, 1, 1],
        [1, 1, 2, 1, 2, 2],
        [2, 2, 1, 2, 1, 1],
        [1, 1, 2, 1, 2, 2],
        [2, 2, 1, 2, 1, 1],
    ])


@pytest.fixture
def classic_sudoku():
    """Well known 9x9 puzzle with a single solution: (puzzle, solution)"""
    puzzle = [
        "530070000",
        "600195000",
        "098000060",
        "800060003",
        "400803001",
        "700020006",
        "060000280",
        "000419005",
        "000080079",
    ]
    solution = [
        "534678912",
        "672195348",
        "198342567",
        "859761423",
        "426853791",
        "713924856",
        "961537284",
        "287419635",
        "345286179",
    ]
    return (as_grid([[int(ch) for ch in row] for row in puzzle]),
            as_grid([[int(ch) for ch in row] for row in solution]))
