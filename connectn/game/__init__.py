"""
connectn.game - Core game mechanics for connect-N

This package contains the board geometry, game state, placement and win
rules, the turn controller and the drop animator.
"""

from connectn.game.errors import (CellOccupied, ColumnFull, ColumnOutOfRange,
                                  GameError, InvalidConfiguration, RowOutOfRange)
from connectn.game.state import DroppingPiece, GameConfig, GameState, Piece
from connectn.game.animator import DropAnimator, TickScheduler
from connectn.game.rules import ConnectNEnv, ConnectNGame

__all__ = [
    'CellOccupied', 'ColumnFull', 'ColumnOutOfRange', 'GameError',
    'InvalidConfiguration', 'RowOutOfRange',
    'DroppingPiece', 'GameConfig', 'GameState', 'Piece',
    'DropAnimator', 'TickScheduler',
    'ConnectNEnv', 'ConnectNGame',
]
