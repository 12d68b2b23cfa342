import inspect
import threading
from typing import Callable

from mnemo.memoize import AsyncMemoized


class Synchronized:
    """Serializes calls into a stateful callable with a re-entrant lock.

    Attributes not defined here (``cache``, ``clear``, ``calls``...) are read
    from the wrapped object.
    """

    def __init__(self, func: Callable):
        if isinstance(func, AsyncMemoized) or inspect.iscoroutinefunction(func):
            raise TypeError("coroutine functions cannot be synchronized with a thread lock")
        self.func = func
        self.lock = threading.RLock()

    def __call__(self, *args, **kwargs):
        with self.lock:
            return self.func(*args, **kwargs)

    def __getattr__(self, name):
        if name == "func":
            raise AttributeError(name)
        return getattr(self.func, name)


def synchronized(func: Callable) -> Synchronized:
    return Synchronized(func)
