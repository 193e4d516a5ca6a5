from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager


class KeyedLocks:
    """
    One lock per key, created on first use and dropped once nobody holds or waits on it.

    Serialises check-then-write per booking, staff day and customer day.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _acquire(self, key: str) -> None:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        lock.acquire()

    def _release(self, key: str) -> None:
        with self._guard:
            self._locks[key].release()
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        # Sorted acquisition keeps two callers with overlapping keys from deadlocking.
        acquired: list[str] = []
        try:
            for key in sorted(set(keys)):
                self._acquire(key)
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._release(key)
