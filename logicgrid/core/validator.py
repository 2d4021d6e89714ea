"""
Validator for sudoku and tango grids.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .puzzle import EMPTY, Constraint, Geometry, PuzzleFamily
from .rules import Position, get_rules


class ValidationResult:
    """Result of grid validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def merge(self, other: 'ValidationResult'):
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


def is_legal_move(geometry: Geometry, grid: np.ndarray, row: int, col: int,
                  symbol: int, constraints: Sequence[Constraint] = ()) -> bool:
    """
    Check whether `symbol` may stand at (row, col).

    This is the entry point for interactive play; it fails fast on indices
    outside the board instead of letting numpy wrap negative ones.

    Raises:
        IndexError: If (row, col) is outside the grid
    """
    if not (0 <= row < geometry.size and 0 <= col < geometry.size):
        raise IndexError(f"Cell ({row}, {col}) is outside a {geometry.size}x{geometry.size} grid")
    return get_rules(geometry).is_legal(grid, row, col, symbol, constraints)


class PuzzleValidator:
    """Whole-grid checks built on the placement rules"""

    @staticmethod
    def validate_grid_structure(geometry: Geometry, grid: np.ndarray) -> ValidationResult:
        """Check shape and symbol domain"""
        result = ValidationResult()

        expected = (geometry.size, geometry.size)
        if grid.shape != expected:
            result.add_error(f"Grid shape {grid.shape} does not match {expected}")
            return result

        allowed = np.array((EMPTY,) + geometry.symbols)
        bad = np.argwhere(~np.isin(grid, allowed))
        for row, col in bad:
            result.add_error(f"Cell ({row}, {col}) holds invalid value {grid[row, col]}")

        return result

    @staticmethod
    def validate_constraints(geometry: Geometry,
                             constraints: Sequence[Constraint]) -> ValidationResult:
        """Check that every constraint joins two cells on the board"""
        result = ValidationResult()

        if constraints and geometry.family is not PuzzleFamily.TANGO:
            result.add_error(f"{geometry.family.value} puzzles do not take constraints")
            return result

        seen = set()
        for constraint in constraints:
            for row, col in constraint.cells:
                if not (0 <= row < geometry.size and 0 <= col < geometry.size):
                    result.add_error(f"{constraint} leaves the board")
                    break
            key = (constraint.row, constraint.col, constraint.direction)
            if key in seen:
                result.add_warning(f"Duplicate constraint on {constraint.cells}")
            seen.add(key)

        return result

    @staticmethod
    def validate_partial(geometry: Geometry, grid: np.ndarray,
                         constraints: Sequence[Constraint] = ()) -> ValidationResult:
        """Check a partially filled grid: every filled cell must be legal"""
        result = PuzzleValidator.validate_grid_structure(geometry, grid)
        result.merge(PuzzleValidator.validate_constraints(geometry, constraints))
        if not result:
            return result

        rules = get_rules(geometry)
        for row, col in np.argwhere(grid != EMPTY):
            row, col = int(row), int(col)
            if not rules.is_legal(grid, row, col, grid[row, col], constraints):
                result.add_error(f"Cell ({row}, {col}) = {grid[row, col]} breaks a rule")

        empty = int(np.count_nonzero(grid == EMPTY))
        if empty:
            result.add_warning(f"{empty} cells are empty")

        return result

    @staticmethod
    def validate_solution(geometry: Geometry, grid: np.ndarray,
                          constraints: Sequence[Constraint] = ()) -> ValidationResult:
        """Check that a grid is completely and legally filled"""
        result = PuzzleValidator.validate_partial(geometry, grid, constraints)
        if result and not PuzzleValidator.is_filled(grid):
            result.add_error("Grid is not completely filled")
        return result

    @staticmethod
    def is_filled(grid: np.ndarray) -> bool:
        return not np.any(grid == EMPTY)

    @staticmethod
    def is_complete(grid: np.ndarray, solution: np.ndarray) -> bool:
        """True once the player's grid matches the solution everywhere"""
        return PuzzleValidator.is_filled(grid) and np.array_equal(grid, solution)

    @staticmethod
    def conflicts(geometry: Geometry, grid: np.ndarray, row: int, col: int,
                  constraints: Sequence[Constraint] = ()) -> List[Position]:
        return get_rules(geometry).conflicts(grid, row, col, constraints)

    @staticmethod
    def find_errors(geometry: Geometry, grid: np.ndarray, initial: np.ndarray,
                    constraints: Sequence[Constraint] = ()) -> List[Position]:
        """Player-entered cells whose value breaks a rule; clues are never reported"""
        rules = get_rules(geometry)
        errors = []
        for row, col in np.argwhere((grid != EMPTY) & (initial == EMPTY)):
            row, col = int(row), int(col)
            if not rules.is_legal(grid, row, col, grid[row, col], constraints):
                errors.append((row, col))
        return errors


def next_hint(grid: np.ndarray, initial: np.ndarray, solution: np.ndarray,
              rng: np.random.Generator) -> Optional[Tuple[int, int, int]]:
    """
    Pick a random empty, non-clue cell and the value the solution holds there.

    Returns:
        (row, col, value), or None when nothing is left to reveal
    """
    candidates = np.argwhere((grid == EMPTY) & (initial == EMPTY))
    if len(candidates) == 0:
        return None
    row, col = candidates[rng.integers(len(candidates))]
    return int(row), int(col), int(solution[row, col])
