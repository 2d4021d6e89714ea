"""
Solved grid generator.

Fills an empty grid cell by cell in row-major order, trying the symbols of
each cell in a fresh random order and backtracking when none fits.
"""

from typing import Optional

import numpy as np

from ..core.puzzle import Geometry, empty_grid
from ..core.rules import SearchState, get_rules
from ..core.utils import setup_logger, timer


class GridGenerationError(RuntimeError):
    """Raised when backtracking cannot fill a grid; retry with fresh randomness"""


class CompleteGridGenerator:
    """Generate fully solved grids for one geometry"""

    def __init__(self, geometry: Geometry, rng: Optional[np.random.Generator] = None):
        self.geometry = geometry
        self.rules = get_rules(geometry)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.logger = setup_logger(self.__class__.__name__)
        self.backtracks = 0

    @timer
    def generate(self) -> np.ndarray:
        """
        Produce a completely filled, valid grid.

        Raises:
            GridGenerationError: If the search fails at the top level
        """
        state = self.rules.search_state(empty_grid(self.geometry))
        self.backtracks = 0

        if not self._fill(state, 0):
            raise GridGenerationError(
                f"Could not fill a {self.geometry.size}x{self.geometry.size} "
                f"{self.geometry.family.value} grid after {self.backtracks} backtracks"
            )

        self.logger.debug(f"Filled grid with {self.backtracks} backtracks")
        return state.to_grid()

    def _fill(self, state: SearchState, index: int) -> bool:
        size = self.geometry.size
        if index == size * size:
            return True

        row, col = divmod(index, size)
        for symbol in self.rng.permutation(self.rules.symbols).tolist():
            if state.allows(row, col, symbol):
                state.place(row, col, symbol)
                if self._fill(state, index + 1):
                    return True
                state.remove(row, col, symbol)

        self.backtracks += 1
        return False
