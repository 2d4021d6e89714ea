"""
Placement rules for each puzzle family.

Every rules object answers one question, `is_legal(grid, row, col, symbol)`,
and that same predicate drives move checking during play and the validity
check of given clues. The cell under test is never compared against itself,
so an occupied cell can be re-tested with its own value.

Backtracking searches place and undo millions of symbols, so each rules
object also hands out a search state (`search_state`) that answers the same
question for empty cells from occupancy counts kept on plain python lists.

Bounds are not checked here; callers guarantee 0 <= row, col < size.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple, Type

import numpy as np

from .puzzle import (
    EMPTY, Constraint, Geometry, PuzzleFamily, as_grid,
    SudokuGeometry, TangoGeometry
)


Position = Tuple[int, int]

# free-symbol bitmask -> symbols it holds, ascending
_MASK_SYMBOLS: Dict[int, List[int]] = {}


def _symbols_in(mask: int) -> List[int]:
    symbols = _MASK_SYMBOLS.get(mask)
    if symbols is None:
        symbols = [s for s in range(1, mask.bit_length()) if mask >> s & 1]
        _MASK_SYMBOLS[mask] = symbols
    return symbols


class SearchState(ABC):
    """
    Grid under construction, held as nested lists with occupancy counts.

    `allows` gives the same answer as the owning rules' `is_legal` for any
    empty cell; it says nothing useful about occupied ones. Callers pair
    every `place` with a `remove` of the same symbol on backtrack.
    """

    def __init__(self, rules: 'BaseRules', grid: np.ndarray):
        self.size = rules.size
        self.symbols = rules.symbols
        self.cells: List[List[int]] = np.asarray(grid).tolist()

    @abstractmethod
    def allows(self, row: int, col: int, symbol: int) -> bool:
        pass

    @abstractmethod
    def place(self, row: int, col: int, symbol: int):
        pass

    @abstractmethod
    def remove(self, row: int, col: int, symbol: int):
        pass

    def candidates(self, row: int, col: int) -> List[int]:
        """Symbols allowed at an empty cell, in domain order"""
        return [s for s in self.symbols if self.allows(row, col, s)]

    def empties(self) -> List[Position]:
        """Empty cells in row-major order"""
        return [(row, col)
                for row, line in enumerate(self.cells)
                for col, value in enumerate(line) if value == EMPTY]

    def to_grid(self) -> np.ndarray:
        return as_grid(self.cells)


class SudokuSearchState(SearchState):
    """Row, column and region occupancy as symbol bitmasks"""

    def __init__(self, rules: 'SudokuRules', grid: np.ndarray):
        super().__init__(rules, grid)
        self.region_rows = rules.region_rows
        self.region_cols = rules.region_cols
        self.regions_across = self.size // self.region_cols
        self.full = sum(1 << s for s in self.symbols)

        self.rows = [0] * self.size
        self.cols = [0] * self.size
        self.regions = [0] * self.size
        for row, line in enumerate(self.cells):
            for col, value in enumerate(line):
                if value != EMPTY:
                    self.place(row, col, value)

    def _region(self, row: int, col: int) -> int:
        return (row // self.region_rows) * self.regions_across + col // self.region_cols

    def _used(self, row: int, col: int) -> int:
        return self.rows[row] | self.cols[col] | self.regions[self._region(row, col)]

    def allows(self, row, col, symbol):
        return not self._used(row, col) & (1 << symbol)

    def candidates(self, row, col):
        return _symbols_in(self.full & ~self._used(row, col))

    def place(self, row, col, symbol):
        bit = 1 << symbol
        self.rows[row] |= bit
        self.cols[col] |= bit
        self.regions[self._region(row, col)] |= bit
        self.cells[row][col] = symbol

    def remove(self, row, col, symbol):
        bit = ~(1 << symbol)
        self.rows[row] &= bit
        self.cols[col] &= bit
        self.regions[self._region(row, col)] &= bit
        self.cells[row][col] = EMPTY


class TangoSearchState(SearchState):
    """Per-line symbol counts plus the constraints touching each cell"""

    def __init__(self, rules: 'TangoRules', grid: np.ndarray,
                 constraints: Sequence[Constraint] = ()):
        super().__init__(rules, grid)
        self.quota = rules.quota
        width = max(self.symbols) + 1
        self.row_counts = [[0] * width for _ in range(self.size)]
        self.col_counts = [[0] * width for _ in range(self.size)]

        self.links: Dict[Position, List[Tuple[Position, Constraint]]] = {}
        for constraint in constraints:
            first, second = constraint.cells
            self.links.setdefault(first, []).append((second, constraint))
            self.links.setdefault(second, []).append((first, constraint))

        for row, line in enumerate(self.cells):
            for col, value in enumerate(line):
                if value != EMPTY:
                    self.place(row, col, value)

    def _windows(self, index: int):
        # Pairs of other cells forming a run of three with `index`
        for start in range(max(0, index - 2), min(index, self.size - 3) + 1):
            yield [i for i in (start, start + 1, start + 2) if i != index]

    def allows(self, row, col, symbol):
        if self.row_counts[row][symbol] >= self.quota:
            return False
        if self.col_counts[col][symbol] >= self.quota:
            return False

        cells = self.cells
        line = cells[row]
        for a, b in self._windows(col):
            if line[a] == symbol and line[b] == symbol:
                return False
        for a, b in self._windows(row):
            if cells[a][col] == symbol and cells[b][col] == symbol:
                return False

        for (r, c), constraint in self.links.get((row, col), ()):
            value = cells[r][c]
            if value != EMPTY and not constraint.is_satisfied_by(symbol, value):
                return False
        return True

    def place(self, row, col, symbol):
        self.row_counts[row][symbol] += 1
        self.col_counts[col][symbol] += 1
        self.cells[row][col] = symbol

    def remove(self, row, col, symbol):
        self.row_counts[row][symbol] -= 1
        self.col_counts[col][symbol] -= 1
        self.cells[row][col] = EMPTY


class BaseRules(ABC):
    """Legality predicate shared by generators, solvers and validators"""

    def __init__(self, geometry: Geometry):
        self.geometry = geometry
        self.size = geometry.size
        self.symbols: Tuple[int, ...] = geometry.symbols

    @abstractmethod
    def is_legal(self, grid: np.ndarray, row: int, col: int, symbol: int,
                 constraints: Sequence[Constraint] = ()) -> bool:
        """True if `symbol` at (row, col) breaks no rule against the other cells."""
        pass

    @abstractmethod
    def conflicts(self, grid: np.ndarray, row: int, col: int,
                  constraints: Sequence[Constraint] = ()) -> List[Position]:
        """Cells that clash with the value currently at (row, col)."""
        pass

    @abstractmethod
    def search_state(self, grid: np.ndarray,
                     constraints: Sequence[Constraint] = ()) -> SearchState:
        """Mutable copy of `grid` for backtracking searches."""
        pass


class SudokuRules(BaseRules):
    """Row, column and region uniqueness"""

    def __init__(self, geometry: SudokuGeometry):
        super().__init__(geometry)
        self.region_rows = geometry.region_rows
        self.region_cols = geometry.region_cols

    def search_state(self, grid, constraints=()):
        return SudokuSearchState(self, grid)

    def is_legal(self, grid, row, col, symbol, constraints=()):
        hits = grid[row] == symbol
        hits[col] = False
        if hits.any():
            return False

        hits = grid[:, col] == symbol
        hits[row] = False
        if hits.any():
            return False

        r0 = row - row % self.region_rows
        c0 = col - col % self.region_cols
        hits = grid[r0:r0 + self.region_rows, c0:c0 + self.region_cols] == symbol
        hits[row - r0, col - c0] = False
        return not hits.any()

    def conflicts(self, grid, row, col, constraints=()):
        value = grid[row, col]
        if value == EMPTY:
            return []

        found: List[Position] = []
        for c in range(self.size):
            if c != col and grid[row, c] == value:
                found.append((row, c))
        for r in range(self.size):
            if r != row and grid[r, col] == value:
                found.append((r, col))

        r0 = row - row % self.region_rows
        c0 = col - col % self.region_cols
        for r in range(r0, r0 + self.region_rows):
            for c in range(c0, c0 + self.region_cols):
                if (r, c) != (row, col) and grid[r, c] == value and (r, c) not in found:
                    found.append((r, c))
        return found


class TangoRules(BaseRules):
    """No three in a row, balanced lines, and adjacency constraints"""

    def __init__(self, geometry: TangoGeometry):
        super().__init__(geometry)
        self.quota = geometry.line_quota

    def search_state(self, grid, constraints=()):
        return TangoSearchState(self, grid, constraints)

    def _completes_run(self, line: np.ndarray, index: int, symbol: int) -> bool:
        # Windows where `index` is the 3rd, 2nd and 1st element of a run of three
        for start in (index - 2, index - 1, index):
            if start < 0 or start + 2 >= self.size:
                continue
            others = [i for i in (start, start + 1, start + 2) if i != index]
            if line[others[0]] == symbol and line[others[1]] == symbol:
                return True
        return False

    def _over_quota(self, line: np.ndarray, index: int, symbol: int) -> bool:
        count = int(np.count_nonzero(line == symbol))
        if line[index] == symbol:
            count -= 1
        return count + 1 > self.quota

    def is_legal(self, grid, row, col, symbol, constraints=()):
        row_line = grid[row]
        col_line = grid[:, col]

        if self._completes_run(row_line, col, symbol):
            return False
        if self._completes_run(col_line, row, symbol):
            return False
        if self._over_quota(row_line, col, symbol):
            return False
        if self._over_quota(col_line, row, symbol):
            return False

        for constraint in constraints:
            other = constraint.other_end(row, col)
            if other is None:
                continue
            value = grid[other]
            if value == EMPTY:
                continue
            if not constraint.is_satisfied_by(symbol, value):
                return False
        return True

    def conflicts(self, grid, row, col, constraints=()):
        value = grid[row, col]
        if value == EMPTY:
            return []

        found: List[Position] = []

        def add(position: Position):
            if position not in found:
                found.append(position)

        for start in (col - 2, col - 1, col):
            if 0 <= start and start + 2 < self.size:
                others = [(row, c) for c in range(start, start + 3) if c != col]
                if all(grid[p] == value for p in others):
                    for p in others:
                        add(p)
        for start in (row - 2, row - 1, row):
            if 0 <= start and start + 2 < self.size:
                others = [(r, col) for r in range(start, start + 3) if r != row]
                if all(grid[p] == value for p in others):
                    for p in others:
                        add(p)

        if np.count_nonzero(grid[row] == value) > self.quota:
            for c in np.flatnonzero(grid[row] == value):
                if c != col:
                    add((row, int(c)))
        if np.count_nonzero(grid[:, col] == value) > self.quota:
            for r in np.flatnonzero(grid[:, col] == value):
                if r != row:
                    add((int(r), col))

        for constraint in constraints:
            other = constraint.other_end(row, col)
            if other is None or grid[other] == EMPTY:
                continue
            if not constraint.is_satisfied_by(value, grid[other]):
                add(other)
        return found


RULES_REGISTRY: Dict[PuzzleFamily, Type[BaseRules]] = {
    PuzzleFamily.SUDOKU: SudokuRules,
    PuzzleFamily.TANGO: TangoRules,
}


def get_rules(geometry: Geometry) -> BaseRules:
    """
    Get the rules object for a geometry.

    Raises:
        ValueError: If the geometry's family has no rules registered
    """
    rules_class = RULES_REGISTRY.get(geometry.family)
    if not rules_class:
        raise ValueError(f"No rules for family: {geometry.family}. "
                         f"Available: {[f.value for f in RULES_REGISTRY]}")
    return rules_class(geometry)
