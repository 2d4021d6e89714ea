"""
Sudoku and tango puzzle generation.

Typical use::

    from logicgrid import generate_puzzle, SudokuDifficulty

    puzzle = generate_puzzle(SudokuDifficulty.EXPERT)
    print(puzzle)
"""

from typing import Optional

import numpy as np

from .core import (
    EMPTY, Constraint, ConstraintDirection, ConstraintType, Difficulty, Geometry,
    GeometryError, Puzzle, PuzzleFamily, SudokuDifficulty, SudokuGeometry,
    TangoDifficulty, TangoGeometry, TangoSymbol, default_geometry, is_legal_move
)
from .generators import (
    CompleteGridGenerator, ConfigError, GridGenerationError,
    PuzzleGenerator, PuzzleGeneratorConfig
)
from .solvers import count_solutions

__version__ = "0.1.0"


def generate_solved_grid(geometry: Geometry,
                         rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Produce one completely filled, valid grid for `geometry`."""
    return CompleteGridGenerator(geometry, rng).generate()


def generate_puzzle(difficulty: Difficulty, geometry: Optional[Geometry] = None,
                    rng: Optional[np.random.Generator] = None,
                    config: Optional[PuzzleGeneratorConfig] = None) -> Puzzle:
    """
    Generate a uniquely solvable puzzle.

    Args:
        difficulty: Sudoku or tango difficulty level
        geometry: Grid geometry; defaults to 9x9 sudoku or 6x6 tango by difficulty
        rng: Random source; seeded from config.random_seed when omitted
        config: Generator configuration

    Raises:
        ValueError: If the difficulty does not belong to the geometry's family
    """
    geometry = geometry or default_geometry(difficulty)
    return PuzzleGenerator(geometry, config, rng).generate(difficulty)


__all__ = [
    'EMPTY', 'Constraint', 'ConstraintDirection', 'ConstraintType',
    'GeometryError', 'Puzzle', 'PuzzleFamily',
    'SudokuDifficulty', 'SudokuGeometry', 'TangoDifficulty', 'TangoGeometry', 'TangoSymbol',
    'ConfigError', 'GridGenerationError', 'PuzzleGenerator', 'PuzzleGeneratorConfig',
    'generate_solved_grid', 'generate_puzzle', 'is_legal_move', 'count_solutions',
]
