"""Tests for solved-grid generation, constraint derivation, pruning and the full pipeline."""

import numpy as np
import pytest

from logicgrid import generate_puzzle, generate_solved_grid
from logicgrid.core.puzzle import (
    EMPTY, PuzzleFamily, SudokuDifficulty, SudokuGeometry, TangoDifficulty,
    TangoGeometry, count_filled
)
from logicgrid.core.validator import PuzzleValidator
from logicgrid.generators import (
    CluePruner, CompleteGridGenerator, ConstraintDeriver, GridGenerationError,
    PuzzleGenerator, PuzzleGeneratorConfig
)
from logicgrid.solvers import count_solutions


def assert_latin(grid, geometry):
    """Every row, column and region holds each symbol exactly once."""
    symbols = list(geometry.symbols)
    for i in range(geometry.size):
        assert sorted(grid[i]) == symbols
        assert sorted(grid[:, i]) == symbols
    for r0, c0 in geometry.region_origins():
        block = grid[r0:r0 + geometry.region_rows, c0:c0 + geometry.region_cols]
        assert sorted(block.ravel()) == symbols


def assert_balanced(grid):
    """Three of each symbol per line and no run of three."""
    for line in list(grid) + list(grid.T):
        assert np.count_nonzero(line == 1) == 3
        assert np.count_nonzero(line == 2) == 3
        for i in range(len(line) - 2):
            assert not (line[i] == line[i + 1] == line[i + 2])


class TestCompleteGridGenerator:
    """Tests for solved-grid generation."""

    @pytest.mark.parametrize("size", [4, 6, 9])
    def test_sudoku_grids_are_latin(self, size, rng):
        geometry = SudokuGeometry.for_size(size)
        grid = generate_solved_grid(geometry, rng)
        assert grid.shape == (size, size)
        assert_latin(grid, geometry)

    def test_tango_grids_are_balanced(self, tango, rng):
        for _ in range(5):
            assert_balanced(generate_solved_grid(tango, rng))

    def test_seed_reproducibility(self, sudoku9):
        first = generate_solved_grid(sudoku9, np.random.default_rng(7))
        second = generate_solved_grid(sudoku9, np.random.default_rng(7))
        assert np.array_equal(first, second)

    def test_grids_vary(self, sudoku9, rng):
        generator = CompleteGridGenerator(sudoku9, rng)
        assert not np.array_equal(generator.generate(), generator.generate())

    def test_generated_grid_passes_validation(self, sudoku6, rng):
        assert PuzzleValidator.validate_solution(sudoku6, generate_solved_grid(sudoku6, rng))


class TestConstraintDeriver:
    """Tests for tango constraint derivation."""

    def test_candidate_pool(self, tango_solution):
        pool = ConstraintDeriver.candidate_pool(tango_solution)
        assert len(pool) == 60
        assert len(set(pool)) == 60

    def test_derived_constraints_hold(self, tango_solution, rng):
        constraints = ConstraintDeriver(rng).derive(tango_solution, 8)
        assert len(constraints) == 8
        assert len(set(constraints)) == 8
        for c in constraints:
            (r1, c1), (r2, c2) = c.cells
            assert c.is_satisfied_by(tango_solution[r1, c1], tango_solution[r2, c2])

    def test_target_above_pool(self, tango_solution, rng):
        assert len(ConstraintDeriver(rng).derive(tango_solution, 100)) == 60

    def test_negative_target(self, tango_solution, rng):
        with pytest.raises(ValueError):
            ConstraintDeriver(rng).derive(tango_solution, -1)


class TestCluePruner:
    """Tests for uniqueness-preserving clue removal."""

    def test_result_is_unique(self, sudoku6, rng):
        solution = generate_solved_grid(sudoku6, rng)
        pruner = CluePruner(sudoku6, rng)
        puzzle = pruner.prune(solution, cells_to_remove=18)

        assert count_filled(puzzle) >= 36 - 18
        assert count_filled(puzzle) == 36 - pruner.last_report.removed
        assert count_solutions(sudoku6, puzzle) == 1
        # Clues are a subset of the solution
        filled = puzzle != EMPTY
        assert np.array_equal(puzzle[filled], solution[filled])

    def test_solution_untouched(self, sudoku4, rng):
        solution = generate_solved_grid(sudoku4, rng)
        before = solution.copy()
        CluePruner(sudoku4, rng).prune(solution, cells_to_remove=8)
        assert np.array_equal(solution, before)

    def test_shortfall_is_graceful(self, sudoku4, rng):
        """Asking for every cell back leaves a still-unique grid with extra clues."""
        solution = generate_solved_grid(sudoku4, rng)
        pruner = CluePruner(sudoku4, rng)
        puzzle = pruner.prune(solution, cells_to_remove=16)

        assert pruner.last_report.shortfall > 0
        assert count_filled(puzzle) > 0
        assert count_solutions(sudoku4, puzzle) == 1

    def test_nothing_to_remove(self, sudoku4, rng):
        solution = generate_solved_grid(sudoku4, rng)
        puzzle = CluePruner(sudoku4, rng).prune(solution, cells_to_remove=0)
        assert np.array_equal(puzzle, solution)

    def test_cells_to_keep(self, tango, rng):
        solution = generate_solved_grid(tango, rng)
        constraints = ConstraintDeriver(rng).derive(solution, 8)
        puzzle = CluePruner(tango, rng).prune(solution, constraints, cells_to_keep=18)
        assert count_filled(puzzle) >= 18
        assert count_solutions(tango, puzzle, constraints) == 1

    def test_bad_targets(self, sudoku4, rng):
        solution = generate_solved_grid(sudoku4, rng)
        pruner = CluePruner(sudoku4, rng)
        with pytest.raises(ValueError):
            pruner.prune(solution)
        with pytest.raises(ValueError):
            pruner.prune(solution, cells_to_remove=4, cells_to_keep=4)
        with pytest.raises(ValueError):
            pruner.prune(solution, cells_to_remove=-1)
        with pytest.raises(ValueError):
            pruner.prune(solution, cells_to_remove=17)

    def test_cap_below_two_rejected(self, sudoku4):
        with pytest.raises(ValueError):
            CluePruner(sudoku4, max_solutions=1)


class TestPuzzleGenerator:
    """End-to-end generation."""

    @pytest.mark.slow
    def test_classic_normal(self, rng):
        """9x9 with 45 cells removed: at most 36 clues and one completion."""
        puzzle = generate_puzzle(SudokuDifficulty.NORMAL, rng=rng)

        assert puzzle.geometry == SudokuGeometry()
        assert puzzle.clue_count <= 81 - 45
        assert count_solutions(puzzle.geometry, puzzle.initial) == 1
        assert_latin(puzzle.solution, puzzle.geometry)
        result = PuzzleGenerator(puzzle.geometry).solver.solve(puzzle.initial)
        assert np.array_equal(result.solution, puzzle.solution)

    @pytest.mark.slow
    def test_classic_legend(self, sudoku9):
        """The hardest 9x9 level prunes as far as uniqueness allows."""
        generator = PuzzleGenerator(sudoku9, rng=np.random.default_rng(1))
        puzzle = generator.generate(SudokuDifficulty.LEGEND)

        report = generator.pruner.last_report
        assert report.target == 64
        assert puzzle.clue_count == 81 - report.removed
        assert count_solutions(sudoku9, puzzle.initial) == 1
        filled = puzzle.initial != EMPTY
        assert np.array_equal(puzzle.initial[filled], puzzle.solution[filled])

    def test_six_by_six(self, sudoku6, rng):
        """Size 6 with 20 cells removed leaves at most 16 clues."""
        generator = PuzzleGenerator(sudoku6, rng=rng)
        puzzle = generator.generate(SudokuDifficulty.EXPERT)

        assert generator.targets(SudokuDifficulty.EXPERT) == (0, 20)
        assert puzzle.clue_count <= 16
        assert_latin(puzzle.solution, sudoku6)
        assert count_solutions(sudoku6, puzzle.initial) == 1

    def test_tango_easy(self, tango, rng):
        """Easy tango: at most 8 constraints and 18 visible cells, one completion."""
        puzzle = generate_puzzle(TangoDifficulty.EASY, rng=rng)

        assert puzzle.family is PuzzleFamily.TANGO
        assert len(puzzle.constraints) <= 8
        assert puzzle.clue_count <= 18
        assert_balanced(puzzle.solution)
        for c in puzzle.constraints:
            (r1, c1), (r2, c2) = c.cells
            assert c.is_satisfied_by(puzzle.solution[r1, c1], puzzle.solution[r2, c2])
        assert count_solutions(tango, puzzle.initial, puzzle.constraints) == 1

    def test_tango_hard(self, tango, rng):
        puzzle = generate_puzzle(TangoDifficulty.HARD, tango, rng)
        assert len(puzzle.constraints) <= 4
        assert count_solutions(tango, puzzle.initial, puzzle.constraints) == 1

    def test_same_seed_same_puzzle(self, sudoku4):
        config = PuzzleGeneratorConfig(random_seed=99)
        first = PuzzleGenerator(sudoku4, config).generate(SudokuDifficulty.MASTER)
        second = PuzzleGenerator(sudoku4, config).generate(SudokuDifficulty.MASTER)
        assert np.array_equal(first.initial, second.initial)
        assert np.array_equal(first.solution, second.solution)

    def test_family_mismatch(self, tango, sudoku4):
        with pytest.raises(ValueError):
            PuzzleGenerator(tango).generate(SudokuDifficulty.SIMPLE)
        with pytest.raises(ValueError):
            generate_puzzle(TangoDifficulty.EASY, sudoku4)

    def test_missing_table_entry(self, rng):
        geometry = SudokuGeometry(8, 2, 4)
        generator = PuzzleGenerator(geometry, rng=rng)
        with pytest.raises(ValueError):
            generator.generate(SudokuDifficulty.NORMAL)

    def test_cells_to_remove_override(self, rng):
        geometry = SudokuGeometry(8, 2, 4)
        generator = PuzzleGenerator(geometry, PuzzleGeneratorConfig(cells_to_remove=10), rng)
        puzzle = generator.generate(SudokuDifficulty.NORMAL)
        assert puzzle.clue_count == 64 - 10

    def test_retries_then_raises(self, sudoku4, rng, monkeypatch):
        generator = PuzzleGenerator(sudoku4, PuzzleGeneratorConfig(max_attempts=3), rng)
        calls = []

        def failing_generate():
            calls.append(1)
            raise GridGenerationError("stuck")

        monkeypatch.setattr(generator.grid_generator, 'generate', failing_generate)
        with pytest.raises(GridGenerationError):
            generator.generate_solved_grid()
        assert len(calls) == 3

    def test_retry_recovers(self, sudoku4, rng, monkeypatch):
        generator = PuzzleGenerator(sudoku4, PuzzleGeneratorConfig(max_attempts=3), rng)
        real_generate = generator.grid_generator.generate
        calls = []

        def flaky_generate():
            calls.append(1)
            if len(calls) == 1:
                raise GridGenerationError("stuck")
            return real_generate()

        monkeypatch.setattr(generator.grid_generator, 'generate', flaky_generate)
        assert_latin(generator.generate_solved_grid(), sudoku4)
        assert len(calls) == 2
