"""
Default settings for puzzle generation.
"""

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Search parameters
DEFAULT_MAX_SOLUTIONS = 2  # uniqueness needs to tell 1 from "more than 1"
DEFAULT_MAX_ATTEMPTS = 10  # solved-grid retries before giving up

# Tango board
TANGO_SIZE = 6
TANGO_LINE_QUOTA = TANGO_SIZE // 2

# Standard sudoku region shapes: size -> (region_rows, region_cols)
SUDOKU_REGION_SHAPES = {
    4: (2, 2),
    6: (2, 3),
    9: (3, 3),
}

# Cells cleared from a solved sudoku grid, keyed by size then difficulty value
SUDOKU_CELLS_TO_REMOVE = {
    9: {
        "simple": 35,
        "normal": 45,
        "expert": 52,
        "master": 58,
        "legend": 64,
    },
    6: {
        "simple": 14,
        "normal": 18,
        "expert": 20,
        "master": 22,
        "legend": 24,
    },
    4: {
        "simple": 6,
        "normal": 7,
        "expert": 8,
        "master": 9,
        "legend": 10,
    },
}

# Tango: difficulty value -> (constraints kept, cells left visible)
TANGO_TARGETS = {
    "easy": (8, 18),
    "medium": (6, 12),
    "hard": (4, 6),
}
