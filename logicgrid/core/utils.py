"""
Utility functions for the puzzle engine.
"""

import logging
import os
import time
from functools import wraps
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import psutil

from .. import config
from .puzzle import (
    EMPTY, Constraint, ConstraintDirection, Geometry, PuzzleFamily,
    TangoSymbol, as_grid
)


def setup_logger(name: str, log_file: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Components call this on construction, so the same name is configured
    many times; handlers from the previous call are closed and replaced.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level, config.LOG_LEVEL when omitted

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, (level or config.LOG_LEVEL).upper())
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def timer(func):
    """Decorator logging the wall time of a call at DEBUG"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            owner = args[0] if args else None
            logger = getattr(owner, 'logger', None) or logging.getLogger(func.__module__)
            logger.debug(f"{func.__qualname__} took {elapsed:.3f}s")
    return wrapper


def memory_usage() -> float:
    """Resident set size of this process in MB"""
    return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)


class GridConverter:
    """Convert grids to and from text"""

    EMPTY_CHAR = '.'
    TANGO_CHARS: Dict[int, str] = {int(TangoSymbol.SUN): 'S', int(TangoSymbol.MOON): 'M'}

    @staticmethod
    def _cell_char(value: int, family: PuzzleFamily) -> str:
        if value == EMPTY:
            return GridConverter.EMPTY_CHAR
        if family is PuzzleFamily.TANGO:
            return GridConverter.TANGO_CHARS[int(value)]
        # Sizes above 9 continue with letters
        return str(value) if value < 10 else chr(ord('A') + int(value) - 10)

    @staticmethod
    def to_string(grid: np.ndarray, geometry: Geometry,
                  constraints: Sequence[Constraint] = ()) -> str:
        """
        Render a grid as text.

        Sudoku regions are separated by '|' and '-' rules. Tango constraints
        are drawn between the cells they join: '=' or 'x' to the right of the
        anchor for horizontal ones, on the spacer row below for vertical ones.
        """
        family = geometry.family
        size = geometry.size

        if family is PuzzleFamily.SUDOKU:
            lines = []
            for row in range(size):
                if row and row % geometry.region_rows == 0:
                    width = size * 2 + (size // geometry.region_cols - 1) * 2 - 1
                    lines.append('-' * width)
                cells = []
                for col in range(size):
                    if col and col % geometry.region_cols == 0:
                        cells.append('|')
                    cells.append(GridConverter._cell_char(grid[row, col], family))
                lines.append(' '.join(cells))
            return '\n'.join(lines)

        horizontal = {(c.row, c.col): c.relation.value for c in constraints
                      if c.direction is ConstraintDirection.HORIZONTAL}
        vertical = {(c.row, c.col): c.relation.value for c in constraints
                    if c.direction is ConstraintDirection.VERTICAL}

        lines = []
        for row in range(size):
            chars = []
            for col in range(size):
                chars.append(GridConverter._cell_char(grid[row, col], family))
                if col < size - 1:
                    chars.append(horizontal.get((row, col), ' '))
            lines.append(''.join(chars))
            if row < size - 1:
                spacer = [vertical.get((row, col), ' ') for col in range(size)]
                lines.append(' '.join(spacer).rstrip())
        return '\n'.join(lines)

    @staticmethod
    def from_string(s: str, geometry: Geometry) -> np.ndarray:
        """
        Parse a grid from text, one row per line.

        Whitespace and region separators are ignored; '.' or '0' is an
        empty cell. Tango rows use 'S' and 'M'.
        """
        rows = []
        for line in s.strip().splitlines():
            cells = [ch for ch in line if ch not in ' \t|-=x']
            if not cells:
                continue
            rows.append([GridConverter._parse_cell(ch, geometry.family) for ch in cells])

        if len(rows) != geometry.size or any(len(r) != geometry.size for r in rows):
            raise ValueError(f"Expected {geometry.size} rows of {geometry.size} cells, "
                             f"got {[len(r) for r in rows]}")
        return as_grid(rows)

    @staticmethod
    def _parse_cell(ch: str, family: PuzzleFamily) -> int:
        if ch in ('.', '0'):
            return EMPTY
        if family is PuzzleFamily.TANGO:
            for value, symbol in GridConverter.TANGO_CHARS.items():
                if ch.upper() == symbol:
                    return value
            raise ValueError(f"Unknown tango symbol '{ch}'")
        if ch.isdigit():
            return int(ch)
        if ch.isalpha():
            return ord(ch.upper()) - ord('A') + 10
        raise ValueError(f"Unknown sudoku symbol '{ch}'")


def shuffled_positions(size: int, rng: np.random.Generator) -> List[Tuple[int, int]]:
    """All cell positions of a size x size grid in random order"""
    order = rng.permutation(size * size)
    return [(int(i) // size, int(i) % size) for i in order]
