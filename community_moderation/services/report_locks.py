from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager


class ReportLockRegistry:
    """One lock per report id, shared by every engine instance in the process.

    Sync endpoints run on the threadpool, so two requests touching the same
    report would otherwise interleave their read-then-write checks. Locks are
    held weakly and disappear once no caller holds or waits on them.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._lock = threading.Lock()

    def _lock_for(self, report_id: str) -> threading.Lock:
        with self._lock:
            lock = self._locks.get(report_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[report_id] = lock
            return lock

    @contextmanager
    def hold(self, report_id: str) -> Iterator[None]:
        lock = self._lock_for(report_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._lock:
            return len(self._locks)


report_locks = ReportLockRegistry()
