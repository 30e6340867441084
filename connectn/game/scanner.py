"""
scanner.py - Win detection around a newly placed piece

The scanner looks along the four line directions through the piece that was
just placed. For each direction it walks outwards in both senses, at most
winning_count - 1 cells each way, and collects the active player's
contiguous pieces. The first direction whose run reaches the winning count
is reported, in the order vertical, horizontal, rising diagonal, falling
diagonal.

The walk is bounded: when the real run is longer than the winning
count, the reported run only holds the cells reached within that bound.
"""

from typing import List, Optional, Tuple

from connectn.debug import debug
from connectn.game import geometry
from connectn.game.state import GameState, Piece
from connectn.utils import DIRECTION_STEPS, Direction


def walk(state: GameState, piece: Piece, step: Tuple[int, int]) -> List[Piece]:
    """
    Collect the active player's pieces next to `piece` along one step vector.

    Args:
        state: Game whose location index is read
        piece: Starting piece, excluded from the result
        step: (row, col) delta applied repeatedly

    Returns:
        Contiguous pieces in walking order, at most winning_count - 1 of them
    """
    dr, dc = step
    found = []
    for i in range(1, state.winning_count):
        row, col = piece.row + dr * i, piece.col + dc * i
        if not geometry.is_inside(row, col, state.rows, state.columns):
            break
        if state.locations.get((row, col)) != state.player:
            break
        found.append(Piece(row, col, state.player))
    return found


def run_in_direction(state: GameState, piece: Piece, direction: Direction) -> Optional[List[Piece]]:
    """Return the run through `piece` along `direction` if it is long enough to win."""
    forward, backward = DIRECTION_STEPS[direction]
    forward_pieces = walk(state, piece, forward)
    backward_pieces = walk(state, piece, backward)

    total = len(forward_pieces) + len(backward_pieces) + 1
    debug.trace(f"{direction.name}: run of {total} through {piece.coord}", "scanner")
    if total >= state.winning_count:
        return forward_pieces + backward_pieces + [piece]
    return None


def scan(state: GameState, piece: Piece) -> Optional[List[Piece]]:
    """
    Find the winning run through a piece.

    The piece must already be in state.locations, owned by the active player.

    Returns:
        Pieces of the first qualifying direction, or None without a win
    """
    for direction in Direction:
        run = run_in_direction(state, piece, direction)
        if run is not None:
            debug.debug(f"{direction.name.lower()} run of {len(run)} through {piece.coord}", "scanner")
            return run
    return None
