"""
errors.py - Recoverable game errors

Commands never raise these. They record the instance as the game's last
error and leave the board untouched.
"""


class GameError(Exception):
    """Base class for every condition a game command can record."""


class ColumnOutOfRange(GameError):
    def __init__(self, col: int, columns: int):
        super().__init__(f"column {col} is outside the board (0-{columns - 1})")
        self.col = col
        self.columns = columns


class ColumnFull(GameError):
    def __init__(self, col: int):
        super().__init__(f"no more row in column {col}")
        self.col = col


class RowOutOfRange(GameError):
    def __init__(self, row: int, rows: int):
        super().__init__(f"row {row} is outside the board (0-{rows - 1})")
        self.row = row
        self.rows = rows


class CellOccupied(GameError):
    def __init__(self, row: int, col: int):
        super().__init__(f"cell ({row}, {col}) already holds a piece")
        self.row = row
        self.col = col


class InvalidConfiguration(GameError):
    """A dimension, winning count or interval that the board cannot use."""
