"""
Solvers for sudoku and tango grids.
"""

from .base_solver import BaseSolver, SolverConfig, SolverResult
from .backtracking_solver import BacktrackingSolver, count_solutions

__all__ = [
    # Base classes
    'BaseSolver',
    'SolverConfig',
    'SolverResult',

    # Exhaustive search
    'BacktrackingSolver',
    'count_solutions',
]


# Solver registry for easy access
SOLVER_REGISTRY = {
    'backtracking': BacktrackingSolver,
}


def get_solver(name: str, geometry, config: SolverConfig = None) -> BaseSolver:
    """
    Get a solver by name.

    Args:
        name: Solver name (backtracking)
        geometry: Grid geometry the solver works on
        config: Optional solver configuration

    Returns:
        Solver instance

    Raises:
        ValueError: If solver name is not recognized
    """
    solver_class = SOLVER_REGISTRY.get(name.lower())
    if not solver_class:
        raise ValueError(f"Unknown solver: {name}. Available: {list(SOLVER_REGISTRY.keys())}")
    return solver_class(geometry, config)
