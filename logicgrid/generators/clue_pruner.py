"""
Uniqueness-preserving clue removal.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .. import config
from ..core.puzzle import EMPTY, GRID_DTYPE, Constraint, Geometry
from ..core.utils import setup_logger, shuffled_positions, timer
from ..solvers import BacktrackingSolver


@dataclass
class PruneReport:
    """What the last pruning pass achieved"""
    target: int
    removed: int = 0
    checks: int = 0

    @property
    def shortfall(self) -> int:
        return max(0, self.target - self.removed)


class CluePruner:
    """
    Clear cells from a solved grid one at a time, keeping each removal only
    if the grid still has exactly one solution.

    Running out of positions before the target is reached is accepted: the
    result carries more clues than asked for, but every kept removal was
    verified, so it is still uniquely solvable.
    """

    def __init__(self, geometry: Geometry, rng: Optional[np.random.Generator] = None,
                 solver: Optional[BacktrackingSolver] = None,
                 max_solutions: int = config.DEFAULT_MAX_SOLUTIONS):
        if max_solutions < 2:
            raise ValueError(f"Uniqueness needs a solution cap of at least 2, got {max_solutions}")
        self.geometry = geometry
        self.rng = rng if rng is not None else np.random.default_rng()
        self.solver = solver or BacktrackingSolver(geometry)
        self.max_solutions = max_solutions
        self.logger = setup_logger(self.__class__.__name__)
        self.last_report: Optional[PruneReport] = None

    @timer
    def prune(self, solution: np.ndarray, constraints: Sequence[Constraint] = (),
              cells_to_remove: Optional[int] = None,
              cells_to_keep: Optional[int] = None) -> np.ndarray:
        """
        Return a clued copy of `solution`.

        Args:
            solution: Fully solved grid (left untouched)
            constraints: Constraints the solver must honour (tango)
            cells_to_remove: Number of cells to clear
            cells_to_keep: Number of cells to leave visible, as an alternative target

        Raises:
            ValueError: Unless exactly one non-negative target is given
        """
        if (cells_to_remove is None) == (cells_to_keep is None):
            raise ValueError("Give exactly one of cells_to_remove or cells_to_keep")

        total = self.geometry.cell_count
        target = cells_to_remove if cells_to_remove is not None else total - cells_to_keep
        if target < 0 or target > total:
            raise ValueError(f"Cannot remove {target} cells from a grid of {total}")

        puzzle = np.array(solution, dtype=GRID_DTYPE)
        report = PruneReport(target=target)
        self.last_report = report
        constraints = tuple(constraints)

        for row, col in shuffled_positions(self.geometry.size, self.rng):
            if report.removed >= target:
                break
            if puzzle[row, col] == EMPTY:
                continue

            backup = puzzle[row, col]
            puzzle[row, col] = EMPTY
            report.checks += 1

            count = self.solver.count_solutions(puzzle, constraints, self.max_solutions)
            if count == 1:
                report.removed += 1
                self.logger.debug(f"Cleared ({row}, {col}); {report.removed}/{target} removed")
            else:
                puzzle[row, col] = backup

        if report.shortfall:
            self.logger.info(f"Removed {report.removed} of {target} requested cells; "
                             f"keeping {report.shortfall} extra clues")
        return puzzle
