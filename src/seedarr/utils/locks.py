"""Per-key lock registry."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLocks:
    """Hand out one reentrant lock per key.

    Used to serialise work on the same source path or release name while
    leaving unrelated keys free to proceed in parallel.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def _get(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._get(key)
        with lock:
            yield
