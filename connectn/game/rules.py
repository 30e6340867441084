"""
rules.py - Game facade and Gymnasium environment for connect-N

This module provides:
1. ConnectNGame, the command and query surface a user interface drives
2. ConnectNEnv, a gymnasium-compatible environment on top of it
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from connectn.debug import debug
from connectn.game import placement, turns
from connectn.game.animator import DropAnimator, TickScheduler
from connectn.game.errors import GameError
from connectn.game.state import DroppingPiece, GameConfig, GameState, Piece
from connectn.utils import Player

GameListener = Callable[['ConnectNGame', str], None]


class ConnectNGame:
    """
    High-level connect-N game.

    Wraps a GameState together with the drop animator so a front end only
    deals with one object. Every command tolerates bad input: it records an
    error on `last_error` and leaves the board alone.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 pieces: Iterable[Piece] = (),
                 scheduler: Optional[TickScheduler] = None,
                 player: Optional[Player] = None,
                 toggle_enabled: Optional[bool] = None):
        debug.debug("Initializing ConnectNGame", "game")
        self.state = GameState(config, pieces, player=player, toggle_enabled=toggle_enabled)
        self.animator = DropAnimator(self.state, scheduler)

    # Queries

    @property
    def columns(self) -> int:
        return self.state.columns

    @property
    def rows(self) -> int:
        return self.state.rows

    @property
    def winning_count(self) -> int:
        return self.state.winning_count

    @property
    def max_winning_count(self) -> int:
        return self.state.max_winning_count

    @property
    def interval_ms(self) -> int:
        return self.state.interval_ms

    @property
    def pieces(self) -> List[Piece]:
        return list(self.state.pieces)

    @property
    def locations(self) -> Dict[Tuple[int, int], Player]:
        return dict(self.state.locations)

    @property
    def player(self) -> Player:
        return self.state.player

    @property
    def winner(self) -> Optional[Player]:
        return self.state.winner

    @property
    def winning_run(self) -> List[Piece]:
        return list(self.state.winning_run)

    @property
    def dropping_piece(self) -> Optional[DroppingPiece]:
        return self.state.dropping

    @property
    def toggle_enabled(self) -> bool:
        return self.state.toggle_enabled

    @property
    def last_error(self) -> Optional[GameError]:
        return self.state.last_error

    @property
    def player_turn_label(self) -> str:
        return self.state.player_turn_label

    def is_game_over(self) -> bool:
        return self.state.has_winner or self.state.is_full

    def get_valid_moves(self) -> List[int]:
        """Columns that can still take a piece."""
        if self.state.has_winner:
            return []
        return [col for col in range(self.columns) if not placement.is_full_column(self.state, col)]

    def grid(self) -> np.ndarray:
        return self.state.to_grid()

    def render(self) -> str:
        return self.state.render()

    # Commands

    def place_piece(self, col: int, row: Optional[int] = None) -> Optional[Piece]:
        return placement.place_piece(self.state, col, row)

    def request_drop(self, col: int, start_row: int = 0) -> bool:
        return self.animator.request_drop(col, start_row)

    def run_animation(self) -> Optional[Piece]:
        """
        Block until the in-flight drop has landed.

        Returns:
            The piece the drop committed, or None if nothing was in flight
        """
        if self.state.dropping is None:
            return None
        self.animator.last_committed = None
        self.animator.scheduler.run(blocking=True)
        return self.animator.last_committed

    def toggle_player(self) -> Player:
        player = turns.toggle_player(self.state)
        self.state.notify("turn")
        return player

    def set_toggle_enabled(self, enabled: bool) -> None:
        turns.set_toggle_enabled(self.state, enabled)

    def set_active_player(self, player: Player) -> bool:
        return turns.set_active_player(self.state, player)

    def set_dimensions(self, columns: int, rows: int) -> bool:
        return self.state.set_dimensions(columns, rows)

    def set_winning_count(self, winning_count: int) -> bool:
        return self.state.set_winning_count(winning_count)

    def set_interval(self, interval_ms: int) -> bool:
        return self.state.set_interval(interval_ms)

    def clear_error(self) -> None:
        self.state.clear_error()

    def reset(self) -> None:
        """Reset the game and cancel any drop in flight."""
        debug.debug("Resetting game", "game")
        self.animator.cancel_pending()
        self.state.reset()

    def subscribe(self, listener: GameListener) -> Callable[[], None]:
        """
        Get notified after every change.

        Args:
            listener: Called as listener(game, event) where event is one of
                "place", "drop", "turn", "config", "error", "reset"

        Returns:
            Function that unsubscribes the listener
        """
        return self.state.subscribe(lambda _state, event: listener(self, event))


class ConnectNEnv(gym.Env):
    """
    Connect-N environment following the Gymnasium interface.

    Actions are column indices. Rewards are given from the point of view of
    the player who just moved.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None):
        """
        Initialize the environment.

        Args:
            config: Board configuration, defaults to GameConfig()
            render_mode: "ascii", "human" or None
        """
        debug.debug("Initializing ConnectNEnv", "env")
        self.game = ConnectNGame(config)
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(self.game.columns)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(self.game.rows, self.game.columns), dtype=np.int8
        )

        self.reward_win = 1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        super().reset(seed=seed)
        self.game.reset()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop a piece for the player to move.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        debug.debug(f"Environment step with action {action}", "env")

        mover = self.game.player
        piece = None if self.game.is_game_over() else self.game.place_piece(action)

        if piece is None:
            debug.warning(f"Invalid action: {action}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = False
        if self.game.winner == mover:
            debug.info(f"Game over: {mover} wins", "env")
            reward = self.reward_win
            terminated = True
        elif self.game.state.is_full:
            debug.info("Game over: draw", "env")
            reward = self.reward_draw
            terminated = True

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode == "ascii":
            return self.game.render()
        if self.render_mode == "human":
            print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.game.grid()

    def _get_info(self) -> Dict:
        valid_moves = self.game.get_valid_moves()
        return {
            'valid_moves': valid_moves,
            'num_valid_moves': len(valid_moves),
            'current_player': self.game.player.value,
            'winner': None if self.game.winner is None else self.game.winner.value,
            'moves_made': len(self.game.pieces),
            'winning_line': [piece.coord for piece in self.game.winning_run],
        }
