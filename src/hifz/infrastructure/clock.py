import time

from hifz.domain.constants import MS_PER_DAY
from hifz.domain.ports import Clock


class SystemClock(Clock):
    """Wall-clock time in epoch milliseconds."""

    def now(self) -> int:
        return int(time.time() * 1000)


class ManualClock(Clock):
    """
    A clock that only moves when told to.

    Used by tests and review simulations to make scheduling deterministic.
    """

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        self._now = value

    def advance(self, ms: int = 0, *, days: float = 0) -> int:
        self._now += ms + int(days * MS_PER_DAY)
        return self._now
