"""
Base solver class for sudoku and tango grids.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
import time

import numpy as np

from .. import config
from ..core.puzzle import Constraint, Geometry
from ..core.rules import get_rules
from ..core.validator import PuzzleValidator
from ..core.utils import setup_logger, memory_usage


@dataclass
class SolverConfig:
    """Configuration for grid solvers"""
    max_solutions: int = config.DEFAULT_MAX_SOLUTIONS
    verbose: bool = False
    log_file: Optional[Path] = None


@dataclass
class SolverResult:
    """Result from grid solver"""
    success: bool
    solution: Optional[np.ndarray] = None
    solution_count: int = 0
    solve_time: float = 0.0
    iterations: int = 0
    memory_used: float = 0.0  # MB
    message: str = ""

    has_multiple_solutions: bool = False
    stats: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return (f"SolverResult({status}, solutions={self.solution_count}, "
                f"time={self.solve_time:.2f}s, iterations={self.iterations})")


class BaseSolver(ABC):
    """Abstract base class for grid solvers"""

    def __init__(self, geometry: Geometry, config: Optional[SolverConfig] = None):
        """Initialize solver for one geometry."""
        self.geometry = geometry
        self.rules = get_rules(geometry)
        self.config = config or SolverConfig()
        self.logger = setup_logger(
            self.__class__.__name__,
            self.config.log_file,
            "DEBUG" if self.config.verbose else None
        )

        # Callbacks for monitoring progress
        self._progress_callbacks: List[Callable] = []

        # Statistics tracking
        self._start_time: Optional[float] = None
        self._iterations: int = 0

    def add_progress_callback(self, callback: Callable):
        """Add a callback function to monitor solving progress."""
        self._progress_callbacks.append(callback)

    def solve(self, grid: np.ndarray, constraints: Sequence[Constraint] = ()) -> SolverResult:
        """Solve a partially filled grid."""
        self.logger.info(f"Starting {self.__class__.__name__} solver")
        self.logger.debug(f"Grid:\n{grid}")

        # Validate input grid
        validation = PuzzleValidator.validate_partial(self.geometry, grid, constraints)
        if not validation:
            return SolverResult(
                success=False,
                message=f"Invalid grid: {'; '.join(validation.errors)}"
            )

        self._start_time = time.time()
        self._iterations = 0
        initial_memory = memory_usage()

        result = self._solve(grid, constraints)

        # Validate solution if found
        if result.success and result.solution is not None:
            validation = PuzzleValidator.validate_solution(self.geometry, result.solution, constraints)
            if not validation:
                result.success = False
                result.message = f"Invalid solution: {'; '.join(validation.errors)}"

        result.solve_time = time.time() - self._start_time
        result.memory_used = memory_usage() - initial_memory
        result.iterations = self._iterations

        if result.success:
            self.logger.info(f"Solved in {result.solve_time:.2f}s with {result.iterations} iterations")
        else:
            self.logger.warning(f"Failed to solve: {result.message}")

        return result

    @abstractmethod
    def _solve(self, grid: np.ndarray, constraints: Sequence[Constraint]) -> SolverResult:
        """Implement the specific solving algorithm."""
        pass

    def _increment_iteration(self):
        self._iterations += 1

    def _call_progress_callbacks(self, current: Optional[np.ndarray] = None,
                                 stats: Optional[Dict[str, Any]] = None):
        """Call all registered progress callbacks"""
        for callback in self._progress_callbacks:
            try:
                callback(self._iterations, current, stats or {})
            except Exception as e:
                self.logger.error(f"Error in progress callback: {e}")
