"""
state.py - Game state for connect-N

This module holds the authoritative mutable record of a game: board
configuration, committed pieces, the piece location index, turn, winner,
the winning run, the in-flight dropping piece and the last recorded error.

Placement and turn rules live in their own modules and mutate a GameState
through its fields. The configuration commands and reset are defined here
because they only touch this record.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from connectn.debug import debug
from connectn.game import geometry
from connectn.game.errors import GameError, InvalidConfiguration
from connectn.utils import (DEFAULT_COLUMNS, DEFAULT_INTERVAL_MS, DEFAULT_ROWS,
                            DEFAULT_WINNING_COUNT, EMPTY_CELL, Player,
                            render_board_ascii)

Coord = Tuple[int, int]
Listener = Callable[['GameState', str], None]


@dataclass(frozen=True)
class GameConfig:
    """
    Board configuration.

    Attributes:
        columns: Number of columns, at least 1
        rows: Number of rows, at least 1
        winning_count: Run length that wins, between 1 and the board diagonal
        interval_ms: Milliseconds between drop animation ticks
        first_player: Player that moves first and after every reset
        toggle_enabled: Whether turns alternate after a placement

    Raises:
        InvalidConfiguration: if any value is out of bounds
    """
    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    winning_count: int = DEFAULT_WINNING_COUNT
    interval_ms: int = DEFAULT_INTERVAL_MS
    first_player: Player = Player.FIRST
    toggle_enabled: bool = True

    def __post_init__(self):
        if self.columns < 1 or self.rows < 1:
            raise InvalidConfiguration(
                f"board must have at least one column and one row, got {self.columns}x{self.rows}")
        upper = geometry.max_run_length(self.rows, self.columns)
        if not 1 <= self.winning_count <= upper:
            raise InvalidConfiguration(
                f"winning count {self.winning_count} must be between 1 and {upper}")
        if self.interval_ms <= 0:
            raise InvalidConfiguration(f"interval must be positive, got {self.interval_ms}ms")

    @property
    def max_winning_count(self) -> int:
        return geometry.max_run_length(self.rows, self.columns)


@dataclass(frozen=True)
class Piece:
    """A committed piece. Its (row, col) is the location index key."""
    row: int
    col: int
    player: Player

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)


@dataclass
class DroppingPiece:
    """A piece falling towards resting_row, not yet on the board."""
    player: Player
    col: int
    row: int
    resting_row: int

    @property
    def landed(self) -> bool:
        return self.row >= self.resting_row


class GameState:
    """
    Mutable state of one connect-N board.

    Each instance owns its pieces and location index; nothing is shared
    between boards.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 pieces: Iterable[Piece] = (),
                 player: Optional[Player] = None,
                 toggle_enabled: Optional[bool] = None):
        """
        Create a game, optionally resuming from existing pieces.

        Args:
            config: Board configuration, defaults to GameConfig()
            pieces: Pieces already on the board, in placement order. They are
                loaded as-is and not scanned for a winner.
            player: Active player, defaults to config.first_player
            toggle_enabled: Turn toggle policy, defaults to config.toggle_enabled

        Raises:
            InvalidConfiguration: if a piece lies outside the board or two
                pieces share a cell
        """
        self.config = config or GameConfig()
        self.player = player or self.config.first_player
        self.toggle_enabled = self.config.toggle_enabled if toggle_enabled is None else toggle_enabled
        self.pieces: List[Piece] = []
        self.locations: Dict[Coord, Player] = {}
        self.winner: Optional[Player] = None
        self.winning_run: List[Piece] = []
        self.dropping: Optional[DroppingPiece] = None
        self.last_error: Optional[GameError] = None
        # Bumped on reset so that drop ticks scheduled earlier can tell they are stale
        self.generation = 0
        self._listeners: List[Listener] = []

        for piece in pieces:
            self._load_piece(piece)

        debug.debug(f"Created {self.columns}x{self.rows} board, winning count "
                    f"{self.winning_count}, {len(self.pieces)} preset pieces", "state")

    def _load_piece(self, piece: Piece) -> None:
        if not geometry.is_inside(piece.row, piece.col, self.rows, self.columns):
            raise InvalidConfiguration(f"preset piece {piece.coord} is outside the board")
        if piece.coord in self.locations:
            raise InvalidConfiguration(f"preset pieces overlap at {piece.coord}")
        self.pieces.append(piece)
        self.locations[piece.coord] = piece.player

    # Queries

    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def winning_count(self) -> int:
        return self.config.winning_count

    @property
    def max_winning_count(self) -> int:
        return self.config.max_winning_count

    @property
    def interval_ms(self) -> int:
        return self.config.interval_ms

    @property
    def has_winner(self) -> bool:
        return self.winner is not None

    @property
    def has_dropping_piece(self) -> bool:
        return self.dropping is not None

    @property
    def is_full(self) -> bool:
        return len(self.locations) == self.rows * self.columns

    @property
    def player_turn_label(self) -> str:
        """Header text such as "Green Turn" or "Red Won"."""
        suffix = "Won" if self.has_winner else "Turn"
        return f"{self.player} {suffix}"

    def column_height(self, col: int) -> int:
        """Number of pieces in a column."""
        return sum(1 for piece in self.pieces if piece.col == col)

    def owner(self, row: int, col: int) -> Optional[Player]:
        return self.locations.get((row, col))

    def to_grid(self) -> np.ndarray:
        """
        Snapshot the board as a numpy array.

        Returns:
            rows x columns int8 array, 0 for empty cells, Player values elsewhere
        """
        grid = np.full((self.rows, self.columns), EMPTY_CELL, dtype=np.int8)
        for (row, col), player in self.locations.items():
            grid[row, col] = player.value
        return grid

    def render(self) -> str:
        return render_board_ascii(self.to_grid(), [piece.coord for piece in self.winning_run])

    def snapshot(self) -> dict:
        """Plain copy of the observable state, for comparisons."""
        return {
            'columns': self.columns,
            'rows': self.rows,
            'winning_count': self.winning_count,
            'player': self.player,
            'toggle_enabled': self.toggle_enabled,
            'pieces': list(self.pieces),
            'locations': dict(self.locations),
            'winner': self.winner,
            'winning_run': list(self.winning_run),
            'dropping': None if self.dropping is None else replace(self.dropping),
        }

    # Errors and change notification

    def record_error(self, error: GameError, component: str = "state") -> None:
        """Remember a non-fatal error and report it on the diagnostic channel."""
        self.last_error = error
        debug.warning(f"{type(error).__name__}: {error}", component)
        self.notify("error")

    def clear_error(self) -> None:
        self.last_error = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback run after every state change.

        Args:
            listener: Called as listener(state, event)

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(self, event)

    # Configuration commands

    def _check_reconfigurable(self) -> bool:
        if self.pieces or self.dropping is not None:
            self.record_error(InvalidConfiguration("board can only be reconfigured while empty"))
            return False
        return True

    def set_dimensions(self, columns: int, rows: int) -> bool:
        """
        Resize an empty board. The winning count is clamped to the new bound.

        Returns:
            True if the board was resized
        """
        if not self._check_reconfigurable():
            return False
        if columns < 1 or rows < 1:
            self.record_error(InvalidConfiguration(
                f"board must have at least one column and one row, got {columns}x{rows}"))
            return False

        winning_count = geometry.clamp_winning_count(self.winning_count, rows, columns)
        if winning_count != self.winning_count:
            debug.debug(f"Winning count clamped from {self.winning_count} to {winning_count}", "state")
        self.config = replace(self.config, columns=columns, rows=rows, winning_count=winning_count)
        debug.info(f"Board resized to {columns}x{rows}", "state")
        self.notify("config")
        return True

    def set_winning_count(self, winning_count: int) -> bool:
        """
        Set the run length that wins, clamped to [1, max_winning_count].

        An out-of-range value is still applied after clamping, and recorded as
        InvalidConfiguration.

        Returns:
            True if the winning count changed
        """
        if not self._check_reconfigurable():
            return False

        clamped = geometry.clamp_winning_count(winning_count, self.rows, self.columns)
        if clamped != winning_count:
            self.record_error(InvalidConfiguration(
                f"winning count {winning_count} clamped to {clamped}"))
        if clamped == self.winning_count:
            return False

        self.config = replace(self.config, winning_count=clamped)
        debug.info(f"Winning count set to {clamped}", "state")
        self.notify("config")
        return True

    def set_interval(self, interval_ms: int) -> bool:
        """Change the drop animation tick. Takes effect from the next tick."""
        if interval_ms <= 0:
            self.record_error(InvalidConfiguration(f"interval must be positive, got {interval_ms}ms"))
            return False
        self.config = replace(self.config, interval_ms=interval_ms)
        self.notify("config")
        return True

    def reset(self) -> None:
        """Clear the board and any in-flight drop, and restore the first player."""
        debug.debug("Resetting game state", "state")
        self.pieces = []
        self.locations.clear()
        self.winner = None
        self.winning_run = []
        self.dropping = None
        self.last_error = None
        self.player = self.config.first_player
        self.generation += 1
        self.notify("reset")

    def __str__(self) -> str:
        return self.render()
