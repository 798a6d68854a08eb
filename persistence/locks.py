from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator


class NameLockRegistry:
    """
    Provides a stable re-entrant lock per key (sanitized document name) so
    concurrent mutations of the same document are serialized without a global lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextlib.contextmanager
    def held(self, key: str) -> Iterator[None]:
        with self.lock_for(key):
            yield
