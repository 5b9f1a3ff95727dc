# spa_booking/services/scheduling/locks.py
"""
Per-resource write serialization.

Every booking write holds the locks of the (resource, date) pairs it reads
and writes, so "check conflicts, then insert" cannot interleave with another
write touching the same therapist or room on the same day.

Keys are acquired in sorted order; two writers never wait on each other in
opposite order.
"""

import threading
from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, NamedTuple


class LockKey(NamedTuple):
    kind: str
    resource_id: int
    day: str  # ISO date

    @classmethod
    def of(cls, kind: str, resource_id: int, day: date) -> "LockKey":
        return cls(kind, resource_id, day.isoformat())


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        # holders plus waiters
        self.users = 0


class ResourceLocks:
    """
    Process-wide registry of locks keyed by (kind, resource_id, date).

    Entries are reference counted and dropped once no thread holds or waits
    on them, so the registry only ever contains keys in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[LockKey, _Entry] = {}

    def _checkout(self, key: LockKey) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: LockKey, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, keys: Iterable[LockKey]) -> Iterator[None]:
        ordered = sorted(set(keys))
        acquired: list[tuple[LockKey, _Entry]] = []
        try:
            for key in ordered:
                entry = self._checkout(key)
                entry.lock.acquire()
                acquired.append((key, entry))
            yield
        finally:
            for key, entry in reversed(acquired):
                entry.lock.release()
                self._checkin(key, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


resource_locks = ResourceLocks()
