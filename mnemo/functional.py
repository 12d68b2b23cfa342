from collections.abc import Iterable, Mapping
from functools import partial
from time import perf_counter
from typing import Any, Callable

from loguru import logger


def curry(func: Callable, value) -> Callable:
    # fixes the first argument, whatever the arity
    return partial(func, value)


def reverse_args(func: Callable) -> Callable:
    """f(a, b, c) becomes g(c, b, a)."""
    return lambda *args: func(*reversed(args))


def dispatch(predicate: Callable, true_fn: Callable, false_fn: Callable) -> Callable:
    def dispatcher(value):
        if predicate(value):
            return true_fn(value)
        return false_fn(value)

    return dispatcher


def filter_arg(func: Callable, arg_filter: Callable) -> Callable:
    return lambda value: func(arg_filter(value))


def until(func: Callable, halt: Callable[[Any], bool]) -> Callable:
    """Apply ``func`` repeatedly, starting from the input, until ``halt`` is true."""

    def run(value):
        current = value
        while not halt(current):
            current = func(current)
        return current

    return run


def same_as_last() -> Callable[[Any], bool]:
    """Predicate that is true when it sees the same value twice in a row."""
    last = None
    has_last = False

    def check(value) -> bool:
        nonlocal last, has_last
        result = has_last and last == value
        last = value
        has_last = True
        return result

    return check


def until_stops(func: Callable) -> Callable:
    # a fresh predicate per call, so runs don't see each other's last value
    return lambda value: until(func, same_as_last())(value)


def then(func: Callable, other: Callable) -> Callable:
    return lambda value: other(func(value))


def or_(predicate: Callable, other: Callable) -> Callable[[Any], bool]:
    return lambda value: predicate(value) or other(value)


def and_(predicate: Callable, other: Callable) -> Callable[[Any], bool]:
    return lambda value: predicate(value) and other(value)


def _average_ms(run: Callable[[], None], num_runs: int) -> int:
    if num_runs <= 0:
        raise ValueError(f"num_runs must be positive, got {num_runs}")
    total = 0.0
    for _ in range(num_runs):
        start = perf_counter()
        run()
        total += (perf_counter() - start) * 1000
    return int(total / num_runs)


def benchmark(func: Callable, test_data: Iterable, num_runs: int = 5) -> int:
    """
    Run ``func`` over every item of ``test_data`` ``num_runs`` times.

    Returns the average wall time of one pass, in whole milliseconds.
    """
    data = list(test_data)

    def run():
        for item in data:
            func(item)

    average = _average_ms(run, num_runs)
    logger.info(f"{getattr(func, '__name__', func)}: {average}ms over {num_runs} runs")
    return average


def benchmark_pairs(
    func: Callable, pairs: Mapping | Iterable[tuple], num_runs: int = 5
) -> int:
    """Two-argument :func:`benchmark`; ``pairs`` is a mapping or (a, b) tuples."""
    data = list(pairs.items() if isinstance(pairs, Mapping) else pairs)

    def run():
        for first, second in data:
            func(first, second)

    average = _average_ms(run, num_runs)
    logger.info(f"{getattr(func, '__name__', func)}: {average}ms over {num_runs} runs")
    return average
