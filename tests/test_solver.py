"""Unit tests for the bounded backtracking solver."""

import numpy as np
import pytest

from logicgrid.core.puzzle import (
    EMPTY, Constraint, ConstraintDirection, ConstraintType, empty_grid
)
from logicgrid.solvers import (
    BacktrackingSolver, SolverConfig, count_solutions, get_solver
)


class TestCountSolutions:
    """Tests for solution counting."""

    def test_classic_puzzle_is_unique(self, classic_sudoku, sudoku9):
        puzzle, _ = classic_sudoku
        assert count_solutions(sudoku9, puzzle) == 1

    def test_caller_grid_untouched(self, classic_sudoku, sudoku9):
        puzzle, _ = classic_sudoku
        before = puzzle.copy()
        count_solutions(sudoku9, puzzle)
        assert np.array_equal(puzzle, before)

    def test_empty_grid_hits_cap(self, sudoku4):
        assert count_solutions(sudoku4, empty_grid(sudoku4)) == 2
        assert count_solutions(sudoku4, empty_grid(sudoku4), max_solutions=5) == 5

    def test_full_grids(self, classic_sudoku, sudoku9):
        _, solution = classic_sudoku
        assert count_solutions(sudoku9, solution) == 1

        broken = solution.copy()
        broken[0, 0], broken[0, 1] = broken[0, 1], broken[0, 0]
        assert count_solutions(sudoku9, broken) == 0

    def test_broken_clues_with_empty_cells(self, classic_sudoku, sudoku9):
        """Clues that already clash leave nothing to complete, even with cells open."""
        _, solution = classic_sudoku
        broken = solution.copy()
        broken[0, 0], broken[0, 1] = broken[0, 1], broken[0, 0]
        broken[8, 8] = EMPTY
        assert count_solutions(sudoku9, broken) == 0
        assert not BacktrackingSolver(sudoku9).has_unique_solution(broken)

        puzzle = empty_grid(sudoku9)
        puzzle[0, 0] = puzzle[4, 0] = 9
        assert count_solutions(sudoku9, puzzle) == 0

    def test_out_of_domain_clue(self, sudoku4, tango):
        grid = empty_grid(sudoku4)
        grid[0, 0] = 5
        assert count_solutions(sudoku4, grid) == 0

        board = empty_grid(tango)
        board[2, 2] = 3
        assert count_solutions(tango, board) == 0

    def test_tango_clues_break_constraint(self, tango, tango_solution):
        equals = Constraint(0, 1, ConstraintType.EQUALS, ConstraintDirection.HORIZONTAL)
        grid = tango_solution.copy()
        grid[5, 5] = EMPTY
        # (0, 1) and (0, 2) hold different symbols
        assert count_solutions(tango, grid, [equals]) == 0

    def test_contradiction_has_no_solution(self, sudoku4):
        grid = empty_grid(sudoku4)
        grid[0, :3] = [1, 2, 3]
        grid[1, 3] = 4  # (0, 3) can only be 4, which the region forbids
        assert count_solutions(sudoku4, grid) == 0

    def test_zero_cap(self, sudoku4):
        assert count_solutions(sudoku4, empty_grid(sudoku4), max_solutions=0) == 0

    def test_tango(self, tango, tango_solution):
        assert count_solutions(tango, tango_solution) == 1
        assert count_solutions(tango, empty_grid(tango)) == 2

    def test_tango_constraints_restrict_search(self, tango, tango_solution):
        # Every equality and inequality of the solution, plus one clue,
        # pins the grid down completely.
        constraints = []
        for row in range(6):
            for col in range(5):
                relation = (ConstraintType.EQUALS if tango_solution[row, col] == tango_solution[row, col + 1]
                            else ConstraintType.NOT_EQUALS)
                constraints.append(Constraint(row, col, relation, ConstraintDirection.HORIZONTAL))
        for row in range(5):
            relation = (ConstraintType.EQUALS if tango_solution[row, 0] == tango_solution[row + 1, 0]
                        else ConstraintType.NOT_EQUALS)
            constraints.append(Constraint(row, 0, relation, ConstraintDirection.VERTICAL))

        grid = empty_grid(tango)
        grid[0, 0] = tango_solution[0, 0]
        assert count_solutions(tango, grid, constraints) == 1


class TestBacktrackingSolver:
    """Tests for the solver template."""

    def test_solve_classic(self, classic_sudoku, sudoku9):
        puzzle, solution = classic_sudoku
        result = BacktrackingSolver(sudoku9).solve(puzzle)
        assert result.success
        assert result.solution_count == 1
        assert not result.has_multiple_solutions
        assert np.array_equal(result.solution, solution)
        assert result.iterations > 0
        assert result.stats['cap'] == 2

    def test_solve_reports_multiple(self, sudoku4):
        result = BacktrackingSolver(sudoku4).solve(empty_grid(sudoku4))
        assert result.success
        assert result.has_multiple_solutions
        assert result.stats['cap_reached']
        assert np.all(result.solution != EMPTY)

    def test_solve_rejects_invalid_grid(self, sudoku4):
        grid = empty_grid(sudoku4)
        grid[0, 0] = grid[0, 1] = 1
        result = BacktrackingSolver(sudoku4).solve(grid)
        assert not result.success
        assert "Invalid grid" in result.message

    def test_solve_without_solution(self, sudoku4):
        grid = empty_grid(sudoku4)
        grid[0, :3] = [1, 2, 3]
        grid[1, 3] = 4
        result = BacktrackingSolver(sudoku4).solve(grid)
        assert not result.success

    def test_has_unique_solution(self, classic_sudoku, sudoku9):
        puzzle, _ = classic_sudoku
        solver = BacktrackingSolver(sudoku9)
        assert solver.has_unique_solution(puzzle)
        assert not solver.has_unique_solution(empty_grid(sudoku9))

    def test_progress_callback(self, classic_sudoku, sudoku9):
        puzzle, _ = classic_sudoku
        events = []
        solver = BacktrackingSolver(sudoku9, SolverConfig(verbose=True))
        solver.add_progress_callback(lambda iterations, grid, stats: events.append(stats))
        solver.solve(puzzle)
        assert events == [{'event': 'solution'}]

    def test_registry(self, sudoku4):
        assert isinstance(get_solver('Backtracking', sudoku4), BacktrackingSolver)
        with pytest.raises(ValueError):
            get_solver('ilp', sudoku4)

    def test_config_fields(self):
        config = SolverConfig()
        assert (config.max_solutions, config.verbose, config.log_file) == (2, False, None)
        assert not hasattr(config, 'extra_params')
