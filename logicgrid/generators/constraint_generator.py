"""
Constraint derivation for tango puzzles.
"""

from typing import List, Optional

import numpy as np

from ..core.puzzle import Constraint, ConstraintDirection, ConstraintType
from ..core.utils import setup_logger


class ConstraintDeriver:
    """Sample adjacency constraints that a solved grid already satisfies"""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.logger = setup_logger(self.__class__.__name__)

    @staticmethod
    def candidate_pool(solution: np.ndarray) -> List[Constraint]:
        """Every right and bottom neighbour pair, related as the solution relates them"""
        rows, cols = solution.shape
        pool = []
        for row in range(rows):
            for col in range(cols):
                if col < cols - 1:
                    pool.append(Constraint(
                        row, col,
                        ConstraintDeriver._relation(solution[row, col], solution[row, col + 1]),
                        ConstraintDirection.HORIZONTAL,
                    ))
                if row < rows - 1:
                    pool.append(Constraint(
                        row, col,
                        ConstraintDeriver._relation(solution[row, col], solution[row + 1, col]),
                        ConstraintDirection.VERTICAL,
                    ))
        return pool

    @staticmethod
    def _relation(first: int, second: int) -> ConstraintType:
        return ConstraintType.EQUALS if first == second else ConstraintType.NOT_EQUALS

    def derive(self, solution: np.ndarray, target_count: int) -> List[Constraint]:
        """
        Draw `target_count` constraints without replacement.

        Returns fewer when the pool is smaller than the target.

        Raises:
            ValueError: If target_count is negative
        """
        if target_count < 0:
            raise ValueError(f"Constraint count must be non-negative, got {target_count}")

        pool = self.candidate_pool(solution)
        order = self.rng.permutation(len(pool))
        selected = [pool[i] for i in order[:min(target_count, len(pool))]]

        self.logger.debug(f"Selected {len(selected)} of {len(pool)} candidate constraints")
        return selected
