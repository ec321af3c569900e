"""
In-process locks keyed on an unordered pair of parties.

Row locks (SELECT ... FOR UPDATE) serialise like/unlike across workers on
PostgreSQL. These locks cover the same pair inside one worker, including on
SQLite where row locks are not available.
"""

from contextlib import contextmanager
from threading import Lock


class PairLocks:
    def __init__(self):
        self._guard = Lock()
        self._locks: dict[tuple[str, str], Lock] = {}
        self._holders: dict[tuple[str, str], int] = {}

    @staticmethod
    def key(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a <= b else (b, a)

    @contextmanager
    def hold(self, a: str, b: str):
        key = self.key(a, b)
        with self._guard:
            lock = self._locks.setdefault(key, Lock())
            self._holders[key] = self._holders.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[key] -= 1
                # Drop idle locks so the map does not grow with every pair ever seen
                if self._holders[key] == 0:
                    del self._holders[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


pair_locks = PairLocks()
