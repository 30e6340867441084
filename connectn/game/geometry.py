"""
geometry.py - Pure board geometry helpers

Nothing here touches game state. The functions derive index sequences and
bounds from a board's dimensions and are used to validate user settings.
"""

import math
from typing import List


def column_indices(columns: int) -> List[int]:
    return list(range(max(columns, 0)))


def row_indices(rows: int) -> List[int]:
    return list(range(max(rows, 0)))


def count_indices(winning_count: int) -> List[int]:
    """Step offsets 0..N-1 for a winning count N."""
    return list(range(max(winning_count, 0)))


def max_run_length(rows: int, columns: int) -> int:
    """
    Longest winning count a board can be configured with.

    The bound is the board diagonal, floor(sqrt(rows^2 + columns^2)).
    """
    return math.floor(math.sqrt(rows ** 2 + columns ** 2))


def is_inside(row: int, col: int, rows: int, columns: int) -> bool:
    """Check that (row, col) is a cell of a rows x columns board."""
    return 0 <= row < rows and 0 <= col < columns


def clamp_winning_count(winning_count: int, rows: int, columns: int) -> int:
    """Clamp a winning count into [1, max_run_length(rows, columns)]."""
    upper = max(max_run_length(rows, columns), 1)
    return min(max(winning_count, 1), upper)
