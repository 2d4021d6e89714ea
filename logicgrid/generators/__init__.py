"""
Puzzle generators for sudoku and tango.
"""

from .grid_generator import CompleteGridGenerator, GridGenerationError
from .constraint_generator import ConstraintDeriver
from .clue_pruner import CluePruner, PruneReport
from .puzzle_generator import ConfigError, PuzzleGenerator, PuzzleGeneratorConfig

__all__ = [
    # Main generator
    'PuzzleGenerator', 'PuzzleGeneratorConfig', 'ConfigError',

    # Pipeline stages
    'CompleteGridGenerator', 'GridGenerationError',
    'ConstraintDeriver',
    'CluePruner', 'PruneReport',
]
