"""
Core data structures and rules for sudoku and tango grids.
"""

from .puzzle import (
    EMPTY, GRID_DTYPE, GeometryError,
    PuzzleFamily, SudokuDifficulty, TangoDifficulty, TangoSymbol,
    ConstraintType, ConstraintDirection, Constraint,
    SudokuGeometry, TangoGeometry, Geometry, Difficulty, Puzzle, geometry_from_dict,
    default_geometry, empty_grid, as_grid, count_filled
)
from .rules import BaseRules, SudokuRules, TangoRules, get_rules
from .validator import PuzzleValidator, ValidationResult, is_legal_move, next_hint
from .utils import setup_logger, timer, memory_usage, GridConverter, shuffled_positions

__all__ = [
    # Data structures
    'EMPTY', 'GRID_DTYPE', 'GeometryError',
    'PuzzleFamily', 'SudokuDifficulty', 'TangoDifficulty', 'TangoSymbol',
    'ConstraintType', 'ConstraintDirection', 'Constraint',
    'SudokuGeometry', 'TangoGeometry', 'Geometry', 'Difficulty', 'Puzzle', 'geometry_from_dict',
    'default_geometry', 'empty_grid', 'as_grid', 'count_filled',

    # Rules
    'BaseRules', 'SudokuRules', 'TangoRules', 'get_rules',

    # Validation
    'PuzzleValidator', 'ValidationResult', 'is_legal_move', 'next_hint',

    # Utilities
    'setup_logger', 'timer', 'memory_usage', 'GridConverter', 'shuffled_positions',
]
