"""
Puzzle generator for sudoku and tango.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import yaml

from .. import config
from ..core.puzzle import (
    Constraint, Difficulty, Geometry, Puzzle, PuzzleFamily,
    SudokuDifficulty, SudokuGeometry, TangoDifficulty, count_filled
)
from ..core.utils import setup_logger, timer
from ..solvers import BacktrackingSolver, SolverConfig
from .clue_pruner import CluePruner
from .constraint_generator import ConstraintDeriver
from .grid_generator import CompleteGridGenerator, GridGenerationError


class ConfigError(ValueError):
    """Raised when generator configuration is malformed"""


def _difficulty_key(enum_class, key):
    if isinstance(key, enum_class):
        return key
    try:
        return enum_class(str(key).lower())
    except ValueError:
        raise ConfigError(f"Unknown {enum_class.__name__} '{key}'. "
                          f"Available: {[d.value for d in enum_class]}")


class PuzzleGeneratorConfig:
    """Configuration for puzzle generator"""

    def __init__(self, **kwargs):
        self.max_attempts: int = kwargs.get('max_attempts', config.DEFAULT_MAX_ATTEMPTS)
        self.max_solutions: int = kwargs.get('max_solutions', config.DEFAULT_MAX_SOLUTIONS)
        self.random_seed: Optional[int] = kwargs.get('random_seed', None)
        # Overrides the sudoku table for every difficulty when set
        self.cells_to_remove: Optional[int] = kwargs.get('cells_to_remove', None)

        # Difficulty tables
        self.sudoku_cells_to_remove: Dict[int, Dict[SudokuDifficulty, int]] = {}
        tables = dict(config.SUDOKU_CELLS_TO_REMOVE)
        tables.update(kwargs.get('sudoku_cells_to_remove', {}))
        for size, table in tables.items():
            merged = {SudokuDifficulty(k): v
                      for k, v in config.SUDOKU_CELLS_TO_REMOVE.get(int(size), {}).items()}
            merged.update({_difficulty_key(SudokuDifficulty, k): int(v) for k, v in table.items()})
            self.sudoku_cells_to_remove[int(size)] = merged

        self.tango_targets: Dict[TangoDifficulty, Tuple[int, int]] = {
            TangoDifficulty(k): v for k, v in config.TANGO_TARGETS.items()
        }
        for key, value in kwargs.get('tango_targets', {}).items():
            self.tango_targets[_difficulty_key(TangoDifficulty, key)] = self._tango_target(key, value)

        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.max_solutions < 2:
            raise ConfigError(f"max_solutions must be at least 2, got {self.max_solutions}")

    @staticmethod
    def _tango_target(key, value) -> Tuple[int, int]:
        if isinstance(value, dict):
            try:
                return int(value['constraints']), int(value['visible_cells'])
            except KeyError as e:
                raise ConfigError(f"Tango target '{key}' is missing {e}")
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return int(value[0]), int(value[1])
        raise ConfigError(f"Tango target '{key}' must be a mapping or a pair, got {value!r}")

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'PuzzleGeneratorConfig':
        """
        Load configuration from a YAML file.

        The file holds a `generator:` mapping whose keys are the keyword
        arguments of this class.

        Raises:
            ConfigError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a mapping, got {type(data).__name__}")

        settings = data.get('generator', {})
        if not isinstance(settings, dict):
            raise ConfigError("'generator' section must be a mapping")
        return cls(**settings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_attempts': self.max_attempts,
            'max_solutions': self.max_solutions,
            'random_seed': self.random_seed,
            'cells_to_remove': self.cells_to_remove,
            'sudoku_cells_to_remove': {
                size: {d.value: n for d, n in table.items()}
                for size, table in self.sudoku_cells_to_remove.items()
            },
            'tango_targets': {
                d.value: {'constraints': c, 'visible_cells': v}
                for d, (c, v) in self.tango_targets.items()
            },
        }


class PuzzleGenerator:
    """Generate uniquely solvable puzzles for one geometry"""

    def __init__(self, geometry: Optional[Geometry] = None,
                 config: Optional[PuzzleGeneratorConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.geometry = geometry or SudokuGeometry()
        self.config = config or PuzzleGeneratorConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)
        self.logger = setup_logger(self.__class__.__name__)

        # Solver for uniqueness checking
        self.solver = BacktrackingSolver(
            self.geometry, SolverConfig(max_solutions=self.config.max_solutions))

        self.grid_generator = CompleteGridGenerator(self.geometry, self.rng)
        self.constraint_deriver = ConstraintDeriver(self.rng)
        self.pruner = CluePruner(self.geometry, self.rng, self.solver, self.config.max_solutions)

    def generate_solved_grid(self) -> np.ndarray:
        """
        Fill a grid, retrying with fresh randomness on failure.

        Raises:
            GridGenerationError: If every attempt fails
        """
        for attempt in range(1, self.config.max_attempts + 1):
            try:
                return self.grid_generator.generate()
            except GridGenerationError as e:
                if attempt == self.config.max_attempts:
                    self.logger.error(f"Failed to generate solved grid after "
                                      f"{self.config.max_attempts} attempts")
                    raise
                self.logger.warning(f"Attempt {attempt} failed: {e}")

    def targets(self, difficulty: Difficulty) -> Tuple[int, int]:
        """
        Look up (constraints to keep, cells to remove) for a difficulty.

        Raises:
            ValueError: If the difficulty does not belong to this geometry's
                family or no table entry exists for it
        """
        if difficulty.family is not self.geometry.family:
            raise ValueError(f"{difficulty} is not a {self.geometry.family.value} difficulty")

        if self.geometry.family is PuzzleFamily.TANGO:
            constraint_count, visible = self.tango_targets_for(difficulty)
            return constraint_count, self.geometry.cell_count - visible

        if self.config.cells_to_remove is not None:
            return 0, self.config.cells_to_remove
        table = self.config.sudoku_cells_to_remove.get(self.geometry.size, {})
        if difficulty not in table:
            raise ValueError(f"No cells-to-remove entry for size {self.geometry.size} "
                             f"at {difficulty.value}; set cells_to_remove")
        return 0, table[difficulty]

    def tango_targets_for(self, difficulty: TangoDifficulty) -> Tuple[int, int]:
        if difficulty not in self.config.tango_targets:
            raise ValueError(f"No tango target for {difficulty.value}")
        return self.config.tango_targets[difficulty]

    @timer
    def generate(self, difficulty: Difficulty) -> Puzzle:
        """
        Generate a puzzle.

        Args:
            difficulty: Target difficulty level; its family must match the geometry

        Returns:
            Puzzle whose initial grid has exactly one completion, the solution
        """
        constraint_count, cells_to_remove = self.targets(difficulty)
        self.logger.info(f"Generating {self.geometry.size}x{self.geometry.size} "
                         f"{self.geometry.family.value} puzzle at {difficulty.value}")

        solution = self.generate_solved_grid()

        constraints: List[Constraint] = []
        if self.geometry.family is PuzzleFamily.TANGO:
            constraints = self.constraint_deriver.derive(solution, constraint_count)

        initial = self.pruner.prune(solution, constraints, cells_to_remove=cells_to_remove)

        puzzle = Puzzle(
            geometry=self.geometry,
            difficulty=difficulty,
            initial=initial,
            solution=solution,
            constraints=tuple(constraints),
        )
        self.logger.info(f"Generated puzzle with {count_filled(initial)} clues and "
                         f"{len(constraints)} constraints")
        return puzzle
