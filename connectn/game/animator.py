"""
animator.py - Animated piece drops

A drop puts a piece above the board and lets it fall one row per tick until
it reaches the row gravity assigns it, then commits it through place_piece.
Only one drop can be in flight per game. Ticks are callbacks on a
cooperative, single-threaded scheduler; resetting the game cancels the
pending tick and any tick that still fires afterwards is ignored.
"""

import sched
import time
from typing import Callable, Optional

from connectn.debug import debug
from connectn.game import placement
from connectn.game.errors import ColumnOutOfRange
from connectn.game.state import DroppingPiece, GameState, Piece


class TickScheduler:
    """
    Thin wrapper around sched.scheduler working in milliseconds.

    Nothing runs on its own: callbacks fire when the owner calls run(). Pass
    a fake clock and sleep function to step through time in tests.
    """

    def __init__(self, timefunc: Callable[[], float] = time.monotonic,
                 delayfunc: Callable[[float], None] = time.sleep):
        self._scheduler = sched.scheduler(timefunc, delayfunc)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> sched.Event:
        return self._scheduler.enter(delay_ms / 1000.0, 0, callback)

    def cancel(self, handle: sched.Event) -> None:
        try:
            self._scheduler.cancel(handle)
        except ValueError:
            # Already ran or was cancelled
            pass

    def run(self, blocking: bool = True) -> None:
        """Run due callbacks; when blocking, wait until the queue drains."""
        self._scheduler.run(blocking=blocking)

    @property
    def pending(self) -> int:
        return len(self._scheduler.queue)


class DropAnimator:
    """Drives the dropping piece of one GameState."""

    def __init__(self, state: GameState, scheduler: Optional[TickScheduler] = None):
        self.state = state
        self.scheduler = scheduler or TickScheduler()
        self._handle: Optional[sched.Event] = None
        self.last_committed: Optional[Piece] = None

    @property
    def is_idle(self) -> bool:
        return self.state.dropping is None

    def request_drop(self, col: int, start_row: int = 0) -> bool:
        """
        Start dropping a piece for the active player into `col`.

        Args:
            col: Target column
            start_row: Row the piece starts falling from; may be negative to
                start above the board. Rows below the landing row are clamped.

        Returns:
            True if a drop was started
        """
        state = self.state
        if state.has_dropping_piece or state.has_winner:
            debug.debug(f"Drop into column {col} rejected: "
                        f"{'drop in flight' if state.has_dropping_piece else 'game is won'}", "animator")
            return False

        if not 0 <= col < state.columns:
            state.record_error(ColumnOutOfRange(col, state.columns), "animator")
            return False

        resting_row = placement.find_next_row(state, col)
        if resting_row is None:
            return False

        state.dropping = DroppingPiece(player=state.player, col=col,
                                       row=min(start_row, resting_row),
                                       resting_row=resting_row)
        debug.debug(f"Dropping {state.player} piece into column {col}, "
                    f"from row {state.dropping.row} to row {resting_row}", "animator")
        state.notify("drop")
        self._schedule()
        return True

    def _schedule(self) -> None:
        generation = self.state.generation
        dropping = self.state.dropping
        self._handle = self.scheduler.after(self.state.interval_ms,
                                            lambda: self._tick(generation, dropping))

    def _tick(self, generation: int, dropping: DroppingPiece) -> None:
        self._handle = None
        state = self.state
        if state.generation != generation or state.dropping is not dropping:
            debug.debug("Discarding stale drop tick", "animator")
            return

        if dropping.row < dropping.resting_row:
            dropping.row += 1
            debug.trace(f"Piece falling in column {dropping.col}, row {dropping.row}", "animator")

        if dropping.landed:
            self._commit(dropping)
        else:
            state.notify("drop")
            self._schedule()

    def _commit(self, dropping: DroppingPiece) -> None:
        self.state.dropping = None
        self.last_committed = placement.place_piece(self.state, dropping.col, dropping.resting_row)

    def cancel_pending(self) -> None:
        """Forget the scheduled tick. Used when the game is reset."""
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def tick(self) -> None:
        """Advance the in-flight drop immediately instead of waiting for the scheduler."""
        if self._handle is None or self.state.dropping is None:
            return
        self.cancel_pending()
        self._tick(self.state.generation, self.state.dropping)
