"""
cli.py - Command-line interface for connect-N

Hot-seat play in the terminal, replaying a list of moves, and checking a
board position for a winning run.
"""

import argparse
from typing import List, Optional, Sequence

import numpy as np

from connectn.debug import debug
from connectn.game import scanner
from connectn.game.animator import TickScheduler
from connectn.game.errors import GameError
from connectn.game.rules import ConnectNGame
from connectn.game.state import GameConfig, GameState, Piece
from connectn.utils import (DEFAULT_COLUMNS, DEFAULT_INTERVAL_MS, DEFAULT_ROWS,
                            DEFAULT_WINNING_COUNT, EMPTY_CELL, Player,
                            render_board_ascii)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Connect-N CLI')
    parser.add_argument('--debug-level', default='warning',
                        choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                        help='Logging verbosity')
    parser.add_argument('--log-file', default=None, help='Also write log messages to this file')

    board = argparse.ArgumentParser(add_help=False)
    board.add_argument('--columns', type=int, default=DEFAULT_COLUMNS, help='Number of columns')
    board.add_argument('--rows', type=int, default=DEFAULT_ROWS, help='Number of rows')
    board.add_argument('--count', type=int, default=DEFAULT_WINNING_COUNT,
                       help='Pieces in a row needed to win')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    play_parser = subparsers.add_parser('play', parents=[board], help='Play a two-player game')
    play_parser.add_argument('--animate', action='store_true', help='Animate falling pieces')
    play_parser.add_argument('--interval', type=int, default=DEFAULT_INTERVAL_MS,
                             help='Milliseconds per row while a piece falls')
    play_parser.add_argument('--no-toggle', action='store_true',
                             help='Keep the turn on the starting player')
    play_parser.add_argument('--first', choices=['green', 'red'], default='green',
                             help='Player that moves first')

    replay_parser = subparsers.add_parser('replay', parents=[board], help='Replay a list of moves')
    replay_parser.add_argument('--moves', required=True, help='Comma-separated columns, e.g. 3,2,3')
    replay_parser.add_argument('--animate', action='store_true', help='Show each piece falling')
    replay_parser.add_argument('--interval', type=int, default=DEFAULT_INTERVAL_MS,
                               help='Milliseconds per row while a piece falls')

    check_parser = subparsers.add_parser('check', parents=[board], help='Look for a winning run')
    check_parser.add_argument('--position', required=True,
                              help='Comma-separated cells row by row: 0 empty, 1 green, 2 red')
    check_parser.add_argument('--row', type=int, help='Only check runs through this row')
    check_parser.add_argument('--col', type=int, help='Only check runs through this column')

    return parser


def parse_moves(raw: str) -> List[int]:
    """
    Parse "3,2,3" into column indices.

    Raises:
        ValueError: on anything that is not an integer
    """
    return [int(part) for part in raw.split(',') if part.strip()]


def render_with_drop(game: ConnectNGame) -> str:
    """Render the board with the falling piece drawn in place."""
    grid = game.grid()
    dropping = game.dropping_piece
    if dropping is not None and 0 <= dropping.row < game.rows:
        grid[dropping.row, dropping.col] = dropping.player.value
    return render_board_ascii(grid, [piece.coord for piece in game.winning_run])


def find_winning_run(state: GameState, cells: Sequence[tuple]) -> Optional[List[Piece]]:
    """Scan the given occupied cells, each as its owner's move, for a winning run."""
    for row, col in cells:
        owner = state.owner(row, col)
        if owner is None:
            continue
        state.player = owner
        run = scanner.scan(state, Piece(row, col, owner))
        if run:
            return run
    return None


class SimpleCLI:
    """Command-line front end for connect-N."""

    def __init__(self, argv: Optional[Sequence[str]] = None):
        self.argv = argv
        self.args = None
        self.game: Optional[ConnectNGame] = None

    def parse_args(self) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = build_parser().parse_args(self.argv)
        debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self) -> int:
        """Run the selected command. Returns a process exit code."""
        if not self.args:
            self.parse_args()

        try:
            if self.args.command == 'play':
                return self.play_game()
            elif self.args.command == 'replay':
                return self.replay_moves()
            elif self.args.command == 'check':
                return self.check_position()
        except GameError as e:
            print(f"Error: {e}")
            return 1

        print("Please specify a command. Use --help for options.")
        return 1

    def _make_game(self, **overrides) -> ConnectNGame:
        config = GameConfig(columns=self.args.columns, rows=self.args.rows,
                            winning_count=self.args.count,
                            interval_ms=getattr(self.args, 'interval', DEFAULT_INTERVAL_MS),
                            **overrides)
        return ConnectNGame(config, scheduler=TickScheduler())

    def _move(self, col: int) -> Optional[Piece]:
        """Place a piece, animated when requested."""
        if not self.args.animate:
            return self.game.place_piece(col)

        unsubscribe = self.game.subscribe(self._show_drop)
        try:
            if not self.game.request_drop(col, start_row=-1):
                return None
            return self.game.run_animation()
        finally:
            unsubscribe()

    def _show_drop(self, game: ConnectNGame, event: str) -> None:
        if event == 'drop':
            print(render_with_drop(game))
            print()

    def _report_outcome(self) -> None:
        if self.game.winner is not None:
            cells = ", ".join(str(piece.coord) for piece in self.game.winning_run)
            print(f"{self.game.player_turn_label}! Winning run: {cells}")
        elif self.game.state.is_full:
            print("The board is full. It's a draw!")

    def play_game(self) -> int:
        """Play a hot-seat game."""
        self.game = self._make_game(first_player=Player.from_color(self.args.first),
                                    toggle_enabled=not self.args.no_toggle)
        print(f"Starting a new connect-{self.game.winning_count} game on a "
              f"{self.game.columns}x{self.game.rows} board!")
        print(f"Enter a column number (0-{self.game.columns - 1}). 'r' restarts, 'q' quits.")
        print(self.game.render())

        while not self.game.is_game_over():
            user_input = input(f"{self.game.player_turn_label}: ").strip().lower()
            if user_input == 'q':
                print("Quitting game.")
                return 0
            if user_input == 'r':
                self.game.reset()
                print("Game restarted.")
                print(self.game.render())
                continue

            try:
                col = int(user_input)
            except ValueError:
                print("Invalid input. Please enter a column number, 'r' or 'q'.")
                continue

            self.game.clear_error()
            if self._move(col) is None:
                print(f"Invalid move: {self.game.last_error or col}")
                continue
            print(self.game.render())

        print("Game over!")
        self._report_outcome()
        return 0

    def replay_moves(self) -> int:
        """Replay comma-separated column moves and show the result."""
        try:
            moves = parse_moves(self.args.moves)
        except ValueError as e:
            print(f"Error parsing moves: {e}")
            return 1

        self.game = self._make_game()
        for i, col in enumerate(moves):
            if self.game.winner is not None:
                print(f"Ignoring {len(moves) - i} move(s) after the game was won")
                break
            self.game.clear_error()
            if self._move(col) is None:
                print(f"Move {i + 1} (column {col}) rejected: {self.game.last_error}")

        print(self.game.render())
        self._report_outcome()
        return 0

    def check_position(self) -> int:
        """Load a board position and look for a winning run."""
        columns, rows = self.args.columns, self.args.rows
        try:
            values = parse_moves(self.args.position)
            if len(values) != rows * columns:
                raise ValueError(f"position must have {rows * columns} values, got {len(values)}")
            grid = np.array(values, dtype=np.int8).reshape(rows, columns)
            pieces = [Piece(int(r), int(c), Player(int(grid[r, c])))
                      for r, c in zip(*np.nonzero(grid != EMPTY_CELL))]
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return 1

        state = GameState(GameConfig(columns=columns, rows=rows, winning_count=self.args.count), pieces)
        print("Loaded position:")
        print(state.render())

        if self.args.row is not None and self.args.col is not None:
            cells = [(self.args.row, self.args.col)]
        else:
            cells = [piece.coord for piece in state.pieces]

        run = find_winning_run(state, cells)
        if run is None:
            print("No winning run found")
            empty = rows * columns - len(state.pieces)
            print("Board is full" if empty == 0 else f"Empty spaces: {empty}")
        else:
            state.winning_run = run
            print(f"Winning run for {run[-1].player}: {', '.join(str(p.coord) for p in run)}")
            print(state.render())
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    return SimpleCLI(argv).run()
