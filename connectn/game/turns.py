"""
turns.py - Turn controller

Whose turn it is, and whether it changes after a placement. Disabling the
toggle pins the turn on the current player until it is enabled again.
"""

from connectn.debug import debug
from connectn.game.state import GameState
from connectn.utils import Player


def toggle_player(state: GameState) -> Player:
    """
    Hand the turn to the other player.

    Returns:
        The active player afterwards. Unchanged if the game has a winner or
        toggling is disabled.
    """
    if state.has_winner or not state.toggle_enabled:
        return state.player

    state.player = state.player.other()
    debug.debug(f"Switching to player {state.player}", "turns")
    return state.player


def set_toggle_enabled(state: GameState, enabled: bool) -> None:
    """Gate future toggles. The current player is left alone."""
    state.toggle_enabled = enabled
    debug.debug(f"Turn toggling {'enabled' if enabled else 'disabled'}", "turns")
    state.notify("turn")


def set_active_player(state: GameState, player: Player) -> bool:
    """
    Force the active player, e.g. to set up a position.

    Returns:
        False if the game already has a winner, which freezes the turn
    """
    if state.has_winner:
        debug.debug(f"Ignoring player change to {player}: game is won", "turns")
        return False

    state.player = player
    state.notify("turn")
    return True
