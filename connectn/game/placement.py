"""
placement.py - Placing pieces under gravity

place_piece is the only path by which pieces reach the board, whether from a
click, a replay, or a drop animation landing. Invalid requests are recorded
on the state and otherwise ignored.
"""

from typing import Optional

from connectn.debug import debug
from connectn.game import scanner, turns
from connectn.game.errors import CellOccupied, ColumnFull, ColumnOutOfRange, RowOutOfRange
from connectn.game.state import GameState, Piece


def is_full_column(state: GameState, col: int) -> bool:
    return state.column_height(col) == state.rows


def find_next_row(state: GameState, col: int) -> Optional[int]:
    """
    Find the row a piece dropped into `col` comes to rest on.

    A piece lands one row above the highest piece in the column, or on the
    bottom row of an empty column.

    Returns:
        The landing row, or None if the column is full (ColumnFull is recorded)
    """
    occupied = [piece.row for piece in state.pieces if piece.col == col]
    if len(occupied) >= state.rows:
        state.record_error(ColumnFull(col), "placement")
        return None
    if not occupied:
        return state.rows - 1
    return min(occupied) - 1


def place_piece(state: GameState, col: int, row: Optional[int] = None) -> Optional[Piece]:
    """
    Place a piece for the active player and check for a win.

    Args:
        state: Game to mutate
        col: Target column
        row: Explicit row; when omitted the piece falls to the landing row

    Returns:
        The committed piece, or None if the placement was rejected
    """
    if state.has_winner:
        debug.debug(f"Ignoring placement in column {col}: {state.winner} already won", "placement")
        return None

    if not 0 <= col < state.columns:
        state.record_error(ColumnOutOfRange(col, state.columns), "placement")
        return None

    if row is None:
        row = find_next_row(state, col)
        if row is None:
            return None

    if not 0 <= row < state.rows:
        state.record_error(RowOutOfRange(row, state.rows), "placement")
        return None

    if (row, col) in state.locations:
        state.record_error(CellOccupied(row, col), "placement")
        return None

    player = state.player
    piece = Piece(row, col, player)
    debug.debug(f"Placing {player} piece at ({row}, {col})", "placement")

    # The scanner reads occupancy from the index, so the piece goes in first
    state.locations[piece.coord] = player

    debug.start_timer("win_scan")
    run = scanner.scan(state, piece)
    debug.end_timer("win_scan", "placement")

    if run:
        state.winner = player
        state.winning_run = run
        debug.info(f"Player {player} wins with {len(run)} pieces after move at {piece.coord}", "placement")
    else:
        turns.toggle_player(state)

    state.pieces.append(piece)
    state.notify("place")
    return piece
