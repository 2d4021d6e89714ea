#!/usr/bin/env python3
"""
Script to generate sudoku and tango puzzles.

Usage:
    python scripts/generate_puzzles.py --count 3 --difficulty expert
    python scripts/generate_puzzles.py --family sudoku --size 6 --difficulty normal --seed 7
    python scripts/generate_puzzles.py --family tango --difficulty hard --json
    python scripts/generate_puzzles.py --config generator.yaml --family tango
"""

import click
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from logicgrid import config
from logicgrid.core.puzzle import (
    PuzzleFamily, SudokuDifficulty, SudokuGeometry, TangoDifficulty, TangoGeometry
)
from logicgrid.generators.puzzle_generator import (
    ConfigError, PuzzleGenerator, PuzzleGeneratorConfig
)


DIFFICULTIES = [d.value for d in SudokuDifficulty] + [d.value for d in TangoDifficulty]
DEFAULT_DIFFICULTY = {
    PuzzleFamily.SUDOKU: SudokuDifficulty.NORMAL,
    PuzzleFamily.TANGO: TangoDifficulty.MEDIUM,
}


def resolve_difficulty(family: PuzzleFamily, name):
    if name is None:
        return DEFAULT_DIFFICULTY[family]
    enum_class = TangoDifficulty if family is PuzzleFamily.TANGO else SudokuDifficulty
    try:
        return enum_class(name)
    except ValueError:
        raise click.BadParameter(
            f"'{name}' is not a {family.value} difficulty "
            f"(choose from {', '.join(d.value for d in enum_class)})",
            param_hint="'--difficulty'")


@click.command()
@click.option('--family', '-f', type=click.Choice([f.value for f in PuzzleFamily]),
              default=PuzzleFamily.SUDOKU.value, help='Puzzle family')
@click.option('--size', '-s', type=int, default=9,
              help='Sudoku grid size (4, 6 or 9); tango is always 6x6')
@click.option('--difficulty', '-d', type=click.Choice(DIFFICULTIES), default=None,
              help='Difficulty level; must belong to the chosen family')
@click.option('--count', '-n', type=int, default=1,
              help='Number of puzzles to generate')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
@click.option('--config', 'config_file', type=click.Path(), default=None,
              help='YAML file with a generator: section')
@click.option('--json', 'as_json', is_flag=True,
              help='Print puzzles as JSON instead of grids')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def main(family, size, difficulty, count, seed, config_file, as_json, verbose):
    """Generate uniquely solvable sudoku and tango puzzles."""
    # Only loggers created during this run pick up the level
    previous_level = config.LOG_LEVEL
    config.LOG_LEVEL = "DEBUG" if verbose else "WARNING"
    try:
        run_generation(PuzzleFamily(family), size, difficulty, count, seed,
                       config_file, as_json)
    finally:
        config.LOG_LEVEL = previous_level


def run_generation(family, size, difficulty, count, seed, config_file, as_json):
    level = resolve_difficulty(family, difficulty)
    if count < 1:
        raise click.BadParameter("must be at least 1", param_hint="'--count'")

    try:
        generator_config = (PuzzleGeneratorConfig.from_yaml(config_file)
                            if config_file else PuzzleGeneratorConfig())
        if seed is not None:
            generator_config.random_seed = seed
        geometry = TangoGeometry() if family is PuzzleFamily.TANGO else SudokuGeometry.for_size(size)
    except (ConfigError, ValueError) as e:
        raise click.ClickException(str(e))

    generator = PuzzleGenerator(geometry, generator_config)

    puzzles = []
    for i in range(count):
        puzzle = generator.generate(level)
        puzzles.append(puzzle)

        if not as_json:
            click.echo(f"# Puzzle {i + 1}/{count}: {family.value} "
                       f"{geometry.size}x{geometry.size}, {level.value}, "
                       f"{puzzle.clue_count} clues, {len(puzzle.constraints)} constraints")
            click.echo(str(puzzle))
            click.echo()

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in puzzles], indent=2))


if __name__ == "__main__":
    main()
