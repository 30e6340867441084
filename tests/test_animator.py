from connectn.game.errors import ColumnFull, ColumnOutOfRange
from connectn.game.state import Piece
from connectn.utils import Player


def test_drop_falls_one_row_per_tick_then_commits(make_game, advance):
    game = make_game()
    assert game.request_drop(0)

    dropping = game.dropping_piece
    assert (dropping.col, dropping.row, dropping.resting_row) == (0, 0, 4)
    assert game.pieces == []

    for expected_row in [1, 2, 3]:
        advance(100)
        assert game.dropping_piece.row == expected_row
        assert game.pieces == []
        assert game.locations == {}

    advance(100)
    assert game.dropping_piece is None
    assert game.pieces == [Piece(4, 0, Player.FIRST)]
    assert game.player == Player.SECOND


def test_nothing_happens_before_interval(make_game, advance):
    game = make_game()
    game.set_interval(300)
    game.request_drop(0)

    advance(100)
    advance(100)
    assert game.dropping_piece.row == 0
    advance(100)
    assert game.dropping_piece.row == 1


def test_run_animation_blocks_until_landed(make_game, clock):
    game = make_game()
    game.place_piece(2)
    game.request_drop(2, start_row=-1)

    piece = game.run_animation()

    assert piece == Piece(3, 2, Player.SECOND)
    assert game.dropping_piece is None
    assert abs(clock.now - 0.4) < 1e-9


def test_run_animation_without_drop(make_game):
    assert make_game().run_animation() is None


def test_start_row_below_landing_row_is_clamped(make_game, advance):
    game = make_game()
    game.request_drop(1, start_row=10)
    assert game.dropping_piece.row == 4

    advance(100)
    assert game.pieces == [Piece(4, 1, Player.FIRST)]


def test_only_one_drop_in_flight(make_game, advance):
    game = make_game()
    assert game.request_drop(0)
    assert not game.request_drop(1)
    assert game.last_error is None
    assert game.dropping_piece.col == 0

    for _ in range(4):
        advance(100)
    assert [p.coord for p in game.pieces] == [(4, 0)]
    assert game.request_drop(1)


def test_drop_rejected_after_win(make_game):
    game = make_game(count=1)
    game.place_piece(0)
    assert game.winner == Player.FIRST

    assert not game.request_drop(1)
    assert game.dropping_piece is None


def test_drop_into_bad_column_records_error(make_game):
    game = make_game(columns=2, rows=1, count=1)
    assert not game.request_drop(5)
    assert isinstance(game.last_error, ColumnOutOfRange)

    game = make_game(columns=2, rows=1, count=2)
    game.place_piece(0)
    assert not game.request_drop(0)
    assert isinstance(game.last_error, ColumnFull)
    assert game.dropping_piece is None


def test_reset_cancels_drop(make_game, advance, scheduler):
    game = make_game()
    game.request_drop(0)
    advance(100)

    game.reset()
    assert game.dropping_piece is None
    assert scheduler.pending == 0

    for _ in range(10):
        advance(100)
    assert game.pieces == []


def test_tick_scheduled_before_state_reset_is_ignored(make_game, advance, scheduler):
    game = make_game()
    game.request_drop(0)
    # Reset the state directly, leaving the scheduled tick behind
    game.state.reset()
    assert scheduler.pending == 1

    for _ in range(10):
        advance(100)
    assert game.pieces == []
    assert game.dropping_piece is None
    assert scheduler.pending == 0


def test_drop_can_win(make_game):
    game = make_game(count=2, toggle=False)
    game.place_piece(0)
    game.request_drop(1)
    game.run_animation()

    assert game.winner == Player.FIRST
    assert {p.coord for p in game.winning_run} == {(4, 0), (4, 1)}


def test_drop_notifies_each_tick(make_game, advance):
    game = make_game()
    events = []
    game.subscribe(lambda g, event: events.append((event, g.dropping_piece and g.dropping_piece.row)))

    game.request_drop(0, start_row=2)
    advance(100)
    advance(100)

    assert events == [("drop", 2), ("drop", 3), ("place", None)]


def test_manual_tick(make_game, scheduler):
    game = make_game()
    game.request_drop(0, start_row=3)
    game.animator.tick()
    assert game.pieces == [Piece(4, 0, Player.FIRST)]
    assert scheduler.pending == 0
