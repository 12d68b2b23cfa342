import inspect
from datetime import timedelta
from functools import update_wrapper
from numbers import Real
from typing import Any, Callable, Hashable

from loguru import logger

from mnemo.cache import Cache
from mnemo.policies import called_within, to_timedelta


def make_key(args: tuple, kwargs: dict) -> Hashable:
    """
    Build the cache key for one call.

    Always the full positional tuple, so ``f(())`` and ``f()`` or ``f((1, 2))``
    and ``f(1, 2)`` stay distinct. Keyword arguments are folded in unordered.
    """
    if kwargs:
        return (args, frozenset(kwargs.items()))
    return args


def policy_key(args: tuple, kwargs: dict) -> Hashable:
    """The key handed to ``use_cache``: the argument itself for one-argument calls."""
    if len(args) == 1 and not kwargs:
        return args[0]
    return make_key(args, kwargs)


class Memoized:
    """
    A function that remembers its results per argument.

    Without a policy a stored result is returned forever. With ``use_cache``
    the predicate is called exactly once on every call, hit or miss, and a
    stored result is only reused while it answers True. A key that has never
    been stored is always computed, whatever the predicate says.

    If the wrapped function raises, the exception propagates and the cache is
    left as it was. The cache is never trimmed, and calls are not
    synchronized; see :func:`mnemo.sync.synchronized`.
    """

    def __init__(self, func: Callable, use_cache: Callable[[Any], bool] | None = None):
        update_wrapper(self, func)
        self.func = func
        self.use_cache = use_cache
        self.cache = Cache()

    def _lookup(self, args: tuple, kwargs: dict) -> tuple[Hashable, Any, bool, bool]:
        key = make_key(args, kwargs)
        if self.use_cache is not None:
            use_cache = self.use_cache(policy_key(args, kwargs))
        else:
            use_cache = True
        value, found = self.cache.get(key)
        if found and not use_cache:
            logger.debug(f"Refreshing {self.func!r} for {key!r}")
        return key, value, found, found and use_cache

    def _store(self, key, value, found: bool):
        # overwrite only on refresh
        if found:
            self.cache.set(key, value)
        else:
            self.cache.add(key, value)

    def __call__(self, *args, **kwargs):
        key, value, found, hit = self._lookup(args, kwargs)
        if hit:
            return value
        value = self.func(*args, **kwargs)
        self._store(key, value, found)
        return value

    def clear(self):
        self.cache.clear()


class AsyncMemoized(Memoized):
    """:class:`Memoized` for coroutine functions. The policy stays synchronous."""

    async def __call__(self, *args, **kwargs):
        key, value, found, hit = self._lookup(args, kwargs)
        if hit:
            return value
        value = await self.func(*args, **kwargs)
        self._store(key, value, found)
        return value


class Memoize:
    """
    Decorator factory::

        @Memoize(duration=timedelta(minutes=5))
        def lookup(name): ...

    Each decorated function gets its own cache and, for ``duration``, its own
    refresh times.
    """

    def __init__(
        self,
        use_cache: Callable[[Any], bool] | None = None,
        duration: timedelta | Real | None = None,
    ):
        if use_cache is not None and duration is not None:
            raise ValueError("pass either use_cache or duration, not both")
        self.use_cache = use_cache
        self.duration = to_timedelta(duration) if duration is not None else None

    def __call__(self, func: Callable) -> Memoized:
        if self.duration is not None:
            policy = called_within(self.duration)
        else:
            policy = self.use_cache
        if inspect.iscoroutinefunction(func):
            return AsyncMemoized(func, policy)
        return Memoized(func, policy)


def memoize(
    func: Callable | None = None,
    *,
    use_cache: Callable[[Any], bool] | None = None,
    duration: timedelta | Real | None = None,
):
    decorator = Memoize(use_cache=use_cache, duration=duration)
    if func is None:
        return decorator
    return decorator(func)
