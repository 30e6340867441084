import logging

import pytest

from connectn.game.errors import CellOccupied, ColumnFull, ColumnOutOfRange, RowOutOfRange
from connectn.game.placement import find_next_row, is_full_column, place_piece
from connectn.game.state import GameConfig, GameState, Piece
from connectn.utils import Player


def new_state(columns=5, rows=5, count=4, toggle=True, **kwargs) -> GameState:
    config = GameConfig(columns=columns, rows=rows, winning_count=count, toggle_enabled=toggle)
    return GameState(config, **kwargs)


def coords(pieces):
    return {piece.coord for piece in pieces}


def test_gravity_stacks_pieces_from_the_bottom():
    state = new_state(columns=3, rows=6, count=4)

    for n in range(1, 7):
        piece = place_piece(state, 0)
        assert piece is not None
        assert piece.row == state.rows - n

    assert is_full_column(state, 0)
    before = state.snapshot()

    assert place_piece(state, 0) is None
    assert isinstance(state.last_error, ColumnFull)
    assert state.snapshot() == before


def test_find_next_row():
    state = new_state(pieces=[Piece(4, 1, Player.FIRST), Piece(3, 1, Player.SECOND)])
    assert find_next_row(state, 0) == 4
    assert find_next_row(state, 1) == 2


def test_scenario_two_in_a_row_on_bottom_row():
    state = new_state(count=2, toggle=False)

    place_piece(state, 0)
    place_piece(state, 1)

    assert state.winner == Player.FIRST
    assert len(state.pieces) == 2
    assert state.locations == {(4, 0): Player.FIRST, (4, 1): Player.FIRST}


def test_no_more_pieces_once_there_is_a_winner():
    state = new_state(count=3, toggle=False, player=Player.SECOND)

    for col in range(6):
        place_piece(state, col)

    assert state.winner == Player.SECOND
    assert len(state.pieces) == 3
    assert state.locations == {(4, 0): Player.SECOND, (4, 1): Player.SECOND, (4, 2): Player.SECOND}


def test_placement_after_win_changes_nothing():
    state = new_state(count=2, toggle=False)
    place_piece(state, 0)
    place_piece(state, 1)
    before = state.snapshot()

    assert place_piece(state, 2) is None
    assert place_piece(state, 0, row=0) is None
    assert state.snapshot() == before


def test_scenario_vertical_explicit_rows():
    state = new_state(count=3, toggle=False)

    for row in [4, 3, 2, 1, 0]:
        place_piece(state, 0, row=row)

    assert state.winner == Player.FIRST
    assert len(state.pieces) == 3
    assert len(state.winning_run) == 3
    assert coords(state.winning_run) == {(4, 0), (3, 0), (2, 0)}


def test_column_out_of_range_is_recorded():
    state = new_state(columns=2, rows=2, count=2)

    assert place_piece(state, 3) is None
    assert isinstance(state.last_error, ColumnOutOfRange)
    assert place_piece(state, -1) is None
    assert place_piece(state, 10, row=20) is None

    assert state.pieces == []
    assert state.locations == {}
    assert state.player == Player.FIRST
    assert state.winner is None


def test_row_out_of_range_is_recorded():
    state = new_state()

    assert place_piece(state, 0, row=5) is None
    assert isinstance(state.last_error, RowOutOfRange)
    assert place_piece(state, 0, row=-1) is None
    assert state.pieces == []


def test_explicit_row_on_occupied_cell_is_rejected():
    state = new_state()
    place_piece(state, 0)

    assert place_piece(state, 0, row=4) is None
    assert isinstance(state.last_error, CellOccupied)
    assert len(state.pieces) == len(state.locations) == 1


def test_errors_are_logged(caplog):
    state = new_state(columns=1, rows=1, count=1)
    state.player = Player.FIRST
    state.locations[(0, 0)] = Player.SECOND
    state.pieces.append(Piece(0, 0, Player.SECOND))

    with caplog.at_level(logging.WARNING, logger="connectn"):
        place_piece(state, 0)

    assert "ColumnFull" in caplog.text
    assert "no more row in column 0" in caplog.text


def test_error_is_overwritten_and_clearable():
    state = new_state()
    place_piece(state, 7)
    assert isinstance(state.last_error, ColumnOutOfRange)

    place_piece(state, 0, row=9)
    assert isinstance(state.last_error, RowOutOfRange)

    state.clear_error()
    assert state.last_error is None


def test_successful_placement_keeps_last_error():
    state = new_state()
    place_piece(state, 7)
    place_piece(state, 0)
    assert isinstance(state.last_error, ColumnOutOfRange)


def test_index_and_pieces_stay_in_lockstep():
    state = new_state(columns=4, rows=4, count=4)
    for col in [0, 1, 2, 3, 0, 9, 1, 2, 3, 0, 0, 0]:
        place_piece(state, col)
        assert len(state.locations) == len(state.pieces)
        assert all(state.locations[piece.coord] == piece.player for piece in state.pieces)


def test_turn_alternates_on_each_placement():
    state = new_state(columns=1, rows=10, count=10)

    expected = Player.FIRST
    for _ in range(8):
        assert state.player == expected
        place_piece(state, 0)
        expected = expected.other()


def test_turn_stays_put_when_toggling_disabled():
    state = new_state(columns=1, rows=10, count=10, toggle=False)
    for _ in range(8):
        place_piece(state, 0)
        assert state.player == Player.FIRST


def test_winner_keeps_the_turn():
    state = new_state(count=2)
    place_piece(state, 0)                # green (4,0)
    place_piece(state, 1)                # red (4,1)
    place_piece(state, 0)                # green (3,0), wins vertically
    assert state.winner == Player.FIRST
    assert state.player == Player.FIRST


@pytest.mark.parametrize("preset, move", [
    # horizontal
    ([(4, 0), (4, 1)], (4, 2)),
    # vertical
    ([(4, 3), (3, 3)], (2, 3)),
    # rising diagonal
    ([(4, 0), (3, 1)], (2, 2)),
    # falling diagonal
    ([(2, 0), (3, 1)], (4, 2)),
])
def test_each_direction_wins_at_count_not_below(preset, move):
    pieces = [Piece(row, col, Player.FIRST) for row, col in preset]

    winning = new_state(count=3, toggle=False, pieces=pieces)
    place_piece(winning, move[1], row=move[0])
    assert winning.winner == Player.FIRST
    assert coords(winning.winning_run) == set(preset) | {move}

    short = new_state(count=4, toggle=False, pieces=pieces)
    place_piece(short, move[1], row=move[0])
    assert short.winner is None
    assert short.winning_run == []


def test_opponent_pieces_break_a_run():
    pieces = [Piece(4, 0, Player.FIRST), Piece(4, 1, Player.SECOND)]
    state = new_state(count=2, toggle=False, pieces=pieces)

    place_piece(state, 2)
    assert state.winner is None


def test_preset_star_wins_through_center():
    #   0    1     2     3     4     5     6
    # 0
    # 1      G-1,1       G-1,3       G-1,5
    # 2            G-2,2 G-2,3 G-2,4
    # 3      G-3,1 G-3,2  add  G-3,4 G-3,5
    # 4            G-4,2 G-4,3 G-4,4
    # 5      G-5,1       G-5,3       G-5,5
    # 6
    cells = [(3, 2), (3, 1), (3, 4), (3, 5),
             (2, 3), (1, 3), (4, 3), (5, 3),
             (1, 1), (2, 2), (4, 4), (5, 5),
             (5, 1), (4, 2), (2, 4), (1, 5)]
    state = new_state(columns=7, rows=7, count=5,
                      pieces=[Piece(row, col, Player.FIRST) for row, col in cells])
    assert len(state.pieces) == 16
    assert state.winner is None

    place_piece(state, 3, row=3)

    assert len(state.pieces) == 17
    assert state.locations[(3, 3)] == Player.FIRST
    assert state.winner == Player.FIRST
    # vertical is checked first
    assert coords(state.winning_run) == {(1, 3), (2, 3), (3, 3), (4, 3), (5, 3)}
