"""
Exhaustive backtracking solver with a bounded solution counter.

The search always fills the first empty cell in row-major order and tries
every symbol in domain order, so it is deterministic. It stops as soon as
`max_solutions` completions have been seen; uniqueness is therefore
`count_solutions(grid, max_solutions=2) == 1`.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .. import config
from ..core.puzzle import EMPTY, GRID_DTYPE, Constraint, Geometry
from ..core.rules import SearchState
from .base_solver import BaseSolver, SolverConfig, SolverResult


class BacktrackingSolver(BaseSolver):
    """Counts (and optionally captures) completions of a partial grid"""

    def __init__(self, geometry: Geometry, config: Optional[SolverConfig] = None):
        super().__init__(geometry, config)
        self._first_solution: Optional[np.ndarray] = None
        self._capture = False

    def count_solutions(self, grid: np.ndarray, constraints: Sequence[Constraint] = (),
                        max_solutions: Optional[int] = None) -> int:
        """
        Count completions of `grid`, stopping at `max_solutions`.

        Given cells are checked first: a grid whose clues already break a
        rule has no completion, however many cells are empty. The caller's
        grid is never modified; the search runs on a private copy.
        """
        limit = self.config.max_solutions if max_solutions is None else max_solutions
        if limit <= 0:
            return 0

        work = np.array(grid, dtype=GRID_DTYPE)
        constraints = tuple(constraints)
        if not self._clues_consistent(work, constraints):
            return 0

        state = self.rules.search_state(work, constraints)
        empties = state.empties()
        if not empties:
            self._record(state)
            return 1

        return self._count(state, empties, 0, limit)

    def _clues_consistent(self, grid: np.ndarray, constraints: Tuple[Constraint, ...]) -> bool:
        symbols = set(self.rules.symbols)
        for row, col in np.argwhere(grid != EMPTY):
            row, col = int(row), int(col)
            value = int(grid[row, col])
            if value not in symbols or not self.rules.is_legal(grid, row, col, value, constraints):
                return False
        return True

    def _count(self, state: SearchState, empties: List[Tuple[int, int]], index: int,
               limit: int) -> int:
        if index == len(empties):
            self._record(state)
            return 1

        row, col = empties[index]
        self._increment_iteration()
        found = 0
        for symbol in state.candidates(row, col):
            state.place(row, col, symbol)
            found += self._count(state, empties, index + 1, limit - found)
            state.remove(row, col, symbol)
            if found >= limit:
                break
        return found

    def _record(self, state: SearchState):
        if self._capture and self._first_solution is None:
            self._first_solution = state.to_grid()
            self._call_progress_callbacks(self._first_solution, {'event': 'solution'})

    def has_unique_solution(self, grid: np.ndarray, constraints: Sequence[Constraint] = ()) -> bool:
        return self.count_solutions(grid, constraints, max_solutions=2) == 1

    def _solve(self, grid: np.ndarray, constraints: Sequence[Constraint]) -> SolverResult:
        self._first_solution = None
        self._capture = True
        try:
            count = self.count_solutions(grid, constraints)
        finally:
            self._capture = False

        if count == 0:
            return SolverResult(success=False, message="Grid has no solution")

        limit = self.config.max_solutions
        return SolverResult(
            success=True,
            solution=self._first_solution,
            solution_count=count,
            has_multiple_solutions=count > 1,
            message="Unique solution" if count == 1 else f"At least {count} solutions",
            stats={'cap': limit, 'cap_reached': count >= limit},
        )


def count_solutions(geometry: Geometry, grid: np.ndarray,
                    constraints: Sequence[Constraint] = (),
                    max_solutions: int = config.DEFAULT_MAX_SOLUTIONS) -> int:
    """Count completions of `grid` up to `max_solutions`."""
    return BacktrackingSolver(geometry).count_solutions(grid, constraints, max_solutions)
