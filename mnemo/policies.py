from collections import deque
from datetime import datetime, timedelta
from numbers import Real
from typing import Hashable

from loguru import logger

# last-refresh stand-in for keys that were never loaded
NEVER = datetime.min


def to_timedelta(duration: timedelta | Real) -> timedelta:
    """Accept a timedelta or a number of seconds; reject non-positive values."""
    if isinstance(duration, bool) or not isinstance(duration, (timedelta, Real)):
        raise TypeError(f"duration must be a timedelta or seconds, got {duration!r}")
    if not isinstance(duration, timedelta):
        duration = timedelta(seconds=duration)
    if duration <= timedelta(0):
        raise ValueError(f"duration must be positive, got {duration}")
    return duration


class CalledWithin:
    """
    Validity policy that keeps a cached value for ``duration`` after it was loaded.

    Every key has its own refresh time, so f(x) expires independently of f(y).
    A query that finds the entry stale stamps the key with the current time
    before answering False, because the caller is about to reload it.

    If ``duration`` is so long that ``datetime.min + duration`` cannot be
    represented, the policy answers True even for keys it has never seen.
    The memoizer checks its own cache first, so a true miss is still computed.
    """

    def __init__(self, duration: timedelta | Real):
        self.duration = to_timedelta(duration)
        self.refreshed: dict[Hashable, datetime] = {}

    def __call__(self, key) -> bool:
        now = datetime.now()
        last = self.refreshed.get(key, NEVER)
        try:
            valid = last + self.duration > now
        except OverflowError:
            valid = True
        if not valid:
            self.refreshed[key] = now
        return valid


def called_within(duration: timedelta | Real) -> CalledWithin:
    return CalledWithin(duration)


class CallRateTracker:
    """
    Zero-argument probe answering "was I called ``n`` times within ``duration``?".

    Only the ``n`` most recent recorded calls are kept. A call that finds the
    window full returns True and is not recorded itself; any other call is
    recorded and returns False. A timestamp exactly ``duration`` old is
    outside the window.

    Not thread-safe; wrap with :func:`mnemo.sync.synchronized` when shared.
    """

    def __init__(self, n: int, duration: timedelta | Real):
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"n must be an int, got {n!r}")
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        self.n = n
        self.duration = to_timedelta(duration)
        self.calls: deque[datetime] = deque(maxlen=n)

    def __call__(self) -> bool:
        now = datetime.now()
        before = now - self.duration
        if len(self.calls) == self.n and all(ts > before for ts in self.calls):
            logger.debug(f"{self.n} calls within {self.duration}, not recording")
            return True
        self.calls.append(now)
        return False


def calls_in(n: int, duration: timedelta | Real) -> CallRateTracker:
    return CallRateTracker(n, duration)
