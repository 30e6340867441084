import pytest

from connectn.debug import DebugLevel, debug
from connectn.game.animator import TickScheduler
from connectn.game.rules import ConnectNGame
from connectn.game.state import GameConfig


class VirtualClock:
    """Clock for sched that only moves when told to."""

    def __init__(self):
        self.now = 0.0

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def quiet_debug():
    debug.configure(level=DebugLevel.WARNING, enabled=True, components=[])
    yield
    debug.configure(level=DebugLevel.WARNING, enabled=True, components=[])


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def scheduler(clock):
    return TickScheduler(timefunc=clock.time, delayfunc=clock.sleep)


@pytest.fixture
def advance(clock, scheduler):
    """Move virtual time forward and run whatever became due."""
    def _advance(ms: int) -> None:
        clock.now += ms / 1000.0
        scheduler.run(blocking=False)
    return _advance


@pytest.fixture
def make_game(scheduler):
    def _make(columns=5, rows=5, count=4, toggle=True, **kwargs):
        config = GameConfig(columns=columns, rows=rows, winning_count=count, toggle_enabled=toggle)
        return ConnectNGame(config, scheduler=scheduler, **kwargs)
    return _make
