"""
Core data structures for sudoku and tango puzzles.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .. import config


GRID_DTYPE = np.int16
EMPTY = 0


class GeometryError(ValueError):
    """Raised when a grid geometry cannot be tiled or filled"""


class PuzzleFamily(Enum):
    """Puzzle families handled by the engine"""
    SUDOKU = "sudoku"
    TANGO = "tango"


class SudokuDifficulty(Enum):
    """Sudoku difficulty levels, easiest first"""
    SIMPLE = "simple"
    NORMAL = "normal"
    EXPERT = "expert"
    MASTER = "master"
    LEGEND = "legend"

    @property
    def family(self) -> PuzzleFamily:
        return PuzzleFamily.SUDOKU

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)


class TangoDifficulty(Enum):
    """Tango difficulty levels, easiest first"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def family(self) -> PuzzleFamily:
        return PuzzleFamily.TANGO

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)


Difficulty = Union[SudokuDifficulty, TangoDifficulty]


class TangoSymbol(IntEnum):
    """Cell values of a tango grid"""
    EMPTY = EMPTY
    SUN = 1
    MOON = 2


class ConstraintType(Enum):
    EQUALS = "="
    NOT_EQUALS = "x"


class ConstraintDirection(Enum):
    HORIZONTAL = "horizontal"  # towards the right neighbour
    VERTICAL = "vertical"  # towards the bottom neighbour


@dataclass(frozen=True)
class SudokuGeometry:
    """Square grid of `size` symbols tiled by region_rows x region_cols regions"""
    size: int = 9
    region_rows: int = 3
    region_cols: int = 3

    def __post_init__(self):
        if self.size <= 0 or self.region_rows <= 0 or self.region_cols <= 0:
            raise GeometryError(
                f"Grid and region dimensions must be positive, got size={self.size}, "
                f"region={self.region_rows}x{self.region_cols}"
            )
        if self.region_rows * self.region_cols != self.size:
            raise GeometryError(
                f"Region {self.region_rows}x{self.region_cols} does not tile a "
                f"{self.size}x{self.size} grid"
            )

    @classmethod
    def for_size(cls, size: int) -> 'SudokuGeometry':
        """Standard geometry for a grid size (4, 6 or 9)"""
        if size not in config.SUDOKU_REGION_SHAPES:
            raise GeometryError(
                f"No standard region shape for size {size}. "
                f"Available: {sorted(config.SUDOKU_REGION_SHAPES)}"
            )
        region_rows, region_cols = config.SUDOKU_REGION_SHAPES[size]
        return cls(size, region_rows, region_cols)

    @property
    def family(self) -> PuzzleFamily:
        return PuzzleFamily.SUDOKU

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @property
    def symbols(self) -> Tuple[int, ...]:
        return tuple(range(1, self.size + 1))

    def region_origin(self, row: int, col: int) -> Tuple[int, int]:
        """Top-left corner of the region containing (row, col)"""
        return row - row % self.region_rows, col - col % self.region_cols

    def region_origins(self) -> List[Tuple[int, int]]:
        return [(r, c)
                for r in range(0, self.size, self.region_rows)
                for c in range(0, self.size, self.region_cols)]

    def to_dict(self) -> dict:
        return {
            'family': self.family.value,
            'size': self.size,
            'region_rows': self.region_rows,
            'region_cols': self.region_cols,
        }


@dataclass(frozen=True)
class TangoGeometry:
    """The fixed 6x6 tango board"""
    size: int = field(default=config.TANGO_SIZE, init=False)

    @property
    def family(self) -> PuzzleFamily:
        return PuzzleFamily.TANGO

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @property
    def line_quota(self) -> int:
        """Occurrences of each symbol in a complete row or column"""
        return config.TANGO_LINE_QUOTA

    @property
    def symbols(self) -> Tuple[int, ...]:
        return (int(TangoSymbol.SUN), int(TangoSymbol.MOON))

    def to_dict(self) -> dict:
        return {'family': self.family.value, 'size': self.size}


Geometry = Union[SudokuGeometry, TangoGeometry]


def geometry_from_dict(data: dict) -> Geometry:
    """Rebuild a geometry from its to_dict() form"""
    family = PuzzleFamily(data['family'])
    if family is PuzzleFamily.TANGO:
        return TangoGeometry()
    return SudokuGeometry(data['size'], data['region_rows'], data['region_cols'])


def default_geometry(difficulty: Difficulty) -> Geometry:
    """Geometry used when a caller only names a difficulty"""
    if difficulty.family is PuzzleFamily.TANGO:
        return TangoGeometry()
    return SudokuGeometry()


@dataclass(frozen=True)
class Constraint:
    """Equality or inequality between a cell and its right or bottom neighbour"""
    row: int
    col: int
    relation: ConstraintType
    direction: ConstraintDirection

    @property
    def neighbor(self) -> Tuple[int, int]:
        if self.direction is ConstraintDirection.HORIZONTAL:
            return self.row, self.col + 1
        return self.row + 1, self.col

    @property
    def cells(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return (self.row, self.col), self.neighbor

    def other_end(self, row: int, col: int) -> Optional[Tuple[int, int]]:
        """The cell paired with (row, col), or None if this constraint doesn't touch it"""
        if (row, col) == (self.row, self.col):
            return self.neighbor
        if (row, col) == self.neighbor:
            return self.row, self.col
        return None

    def is_satisfied_by(self, first: int, second: int) -> bool:
        if self.relation is ConstraintType.EQUALS:
            return first == second
        return first != second

    def to_dict(self) -> dict:
        return {
            'row': self.row,
            'col': self.col,
            'relation': self.relation.value,
            'direction': self.direction.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Constraint':
        return cls(
            int(data['row']),
            int(data['col']),
            ConstraintType(data['relation']),
            ConstraintDirection(data['direction']),
        )

    def __repr__(self):
        arrow = "->" if self.direction is ConstraintDirection.HORIZONTAL else "v"
        return f"Constraint(({self.row}, {self.col}) {arrow} {self.relation.value})"


def empty_grid(geometry: Geometry) -> np.ndarray:
    """A writable grid with every cell EMPTY"""
    return np.full((geometry.size, geometry.size), EMPTY, dtype=GRID_DTYPE)


def as_grid(values: Iterable[Iterable[int]]) -> np.ndarray:
    """Copy nested sequences (or an array) into a writable grid"""
    return np.array(values, dtype=GRID_DTYPE)


def count_filled(grid: np.ndarray) -> int:
    return int(np.count_nonzero(grid != EMPTY))


def frozen_copy(grid: np.ndarray) -> np.ndarray:
    copy = np.array(grid, dtype=GRID_DTYPE)
    copy.setflags(write=False)
    return copy


@dataclass
class Puzzle:
    """A generated puzzle: clued grid, its unique solution and any constraints"""
    geometry: Geometry
    difficulty: Difficulty
    initial: np.ndarray
    solution: np.ndarray
    constraints: Tuple[Constraint, ...] = ()

    def __post_init__(self):
        self.initial = frozen_copy(self.initial)
        self.solution = frozen_copy(self.solution)
        self.constraints = tuple(self.constraints)

    @property
    def family(self) -> PuzzleFamily:
        return self.geometry.family

    @property
    def clue_count(self) -> int:
        return count_filled(self.initial)

    def new_board(self) -> np.ndarray:
        """Writable copy of the initial grid for interactive play"""
        return np.array(self.initial, dtype=GRID_DTYPE)

    def is_clue(self, row: int, col: int) -> bool:
        return self.initial[row, col] != EMPTY

    def to_dict(self) -> dict:
        """Convert puzzle to plain python types"""
        return {
            'geometry': self.geometry.to_dict(),
            'difficulty': self.difficulty.value,
            'initial': self.initial.tolist(),
            'solution': self.solution.tolist(),
            'constraints': [c.to_dict() for c in self.constraints],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Puzzle':
        geometry = geometry_from_dict(data['geometry'])
        if geometry.family is PuzzleFamily.TANGO:
            difficulty = TangoDifficulty(data['difficulty'])
        else:
            difficulty = SudokuDifficulty(data['difficulty'])
        return cls(
            geometry=geometry,
            difficulty=difficulty,
            initial=as_grid(data['initial']),
            solution=as_grid(data['solution']),
            constraints=tuple(Constraint.from_dict(c) for c in data.get('constraints', [])),
        )

    def __str__(self):
        from .utils import GridConverter
        return GridConverter.to_string(self.initial, self.geometry, self.constraints)

    def __repr__(self):
        return (f"Puzzle({self.family.value}, {self.geometry.size}x{self.geometry.size}, "
                f"difficulty={self.difficulty.value}, clues={self.clue_count}, "
                f"constraints={len(self.constraints)})")
