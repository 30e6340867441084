"""
utils.py - Shared constants, enumerations and helpers for the connect-N engine

Defaults mirror the board a fresh game starts with. Everything else about the
board size is configurable per game, see connectn.game.state.GameConfig.
"""

from enum import Enum, auto
from typing import Dict, List, Tuple

import numpy as np

# Default game configuration
DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 5
DEFAULT_WINNING_COUNT = 4
DEFAULT_INTERVAL_MS = 100  # Drop animation tick

# Grid encoding used by numpy snapshots and observations
EMPTY_CELL = 0


class Player(Enum):
    """The two players, named after the colors they play."""
    FIRST = 1   # green
    SECOND = 2  # red

    def other(self) -> 'Player':
        """Get the opponent."""
        return Player.SECOND if self == Player.FIRST else Player.FIRST

    @property
    def color(self) -> str:
        return "green" if self == Player.FIRST else "red"

    @property
    def symbol(self) -> str:
        return "X" if self == Player.FIRST else "O"

    @classmethod
    def from_color(cls, color: str) -> 'Player':
        """
        Map a color name back to its player.

        Raises:
            ValueError: if the color belongs to neither player
        """
        name = color.strip().lower()
        for player in cls:
            if player.color == name:
                return player
        raise ValueError(f"Unknown player color: {color!r}")

    def __str__(self):
        return self.color.capitalize()


class Direction(Enum):
    """Line directions checked by the win scanner, in scan order."""
    VERTICAL = auto()
    HORIZONTAL = auto()
    RISING_DIAGONAL = auto()   # bottom-left to top-right
    FALLING_DIAGONAL = auto()  # top-left to bottom-right


# (forward, backward) unit steps as (row, col) deltas. Row grows downwards.
DIRECTION_STEPS: Dict[Direction, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    Direction.VERTICAL: ((-1, 0), (1, 0)),             # up, down
    Direction.HORIZONTAL: ((0, -1), (0, 1)),           # left, right
    Direction.RISING_DIAGONAL: ((1, -1), (-1, 1)),     # down-left, up-right
    Direction.FALLING_DIAGONAL: ((-1, -1), (1, 1)),    # up-left, down-right
}


def render_board_ascii(grid: np.ndarray, highlight: List[Tuple[int, int]] = None) -> str:
    """
    Render a grid snapshot as ASCII art.

    Args:
        grid: 2D array with 0 for empty cells and Player values elsewhere
        highlight: Cells drawn with '*' instead of the player symbol

    Returns:
        Multi-line string with a column ruler underneath
    """
    rows, cols = grid.shape
    marked = set(highlight or [])
    symbols = {EMPTY_CELL: ".", Player.FIRST.value: Player.FIRST.symbol,
               Player.SECOND.value: Player.SECOND.symbol}

    width = max(len(str(cols - 1)), 1)
    border = "+" + "-" * (cols * (width + 1) + 1) + "+"

    lines = [border]
    for row in range(rows):
        cells = []
        for col in range(cols):
            symbol = "*" if (row, col) in marked else symbols[int(grid[row, col])]
            cells.append(symbol.rjust(width))
        lines.append("| " + " ".join(cells) + " |")
    lines.append(border)
    lines.append("  " + " ".join(str(col).rjust(width) for col in range(cols)))

    return "\n".join(lines)
