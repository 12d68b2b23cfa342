from typing import Any, Hashable


class Cache:
    """Unbounded key/value store owned by a single memoized function.

    Entries never expire on their own; whether a stored value may be reused
    is decided by the memoizer's validity policy. Not thread-safe.
    """

    def __init__(self):
        self.store: dict[Hashable, Any] = {}

    def get(self, key) -> tuple[Any, bool]:
        if key in self.store:
            return self.store[key], True
        return None, False

    def set(self, key, value):
        self.store[key] = value

    def add(self, key, value) -> bool:
        if key in self.store:
            return False
        self.store[key] = value
        return True

    def delete(self, key):
        if key in self.store:
            del self.store[key]

    def clear(self):
        self.store.clear()

    def __contains__(self, key) -> bool:
        return key in self.store

    def __len__(self) -> int:
        return len(self.store)
