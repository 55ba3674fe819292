from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator, Optional

from ..core.constants import DEFAULT_SESSION_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import ConflictError


class SessionLockRegistry:
    """One lock per session id, created on demand.

    Locks live in a WeakValueDictionary so ids of finished sessions do not pile up.
    """

    def __init__(self, timeout: float = DEFAULT_SESSION_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout)
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def _lock_for(self, session_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[session_id] = lock
            return lock

    @contextmanager
    def hold(self, session_id: int, *, timeout: Optional[float] = None) -> Iterator[None]:
        lock = self._lock_for(session_id)
        wait = self._timeout if timeout is None else float(timeout)
        if not lock.acquire(timeout=wait):
            raise ConflictError("Buổi điểm danh đang được cập nhật, vui lòng thử lại")
        try:
            yield
        finally:
            lock.release()
