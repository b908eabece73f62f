"""Per-employee reconciliation locks using threading.Lock.

Serializes the lookup / delete / insert sequence for one ``employee_id``
inside this process.  Separate processes (or API replicas) sharing the same
store are not coordinated.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

_registry_lock = threading.Lock()
# Entries disappear once no caller holds a reference to the lock.
_employee_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()


def _lock_for(employee_id: str) -> threading.Lock:
    with _registry_lock:
        lock = _employee_locks.get(employee_id)
        if lock is None:
            lock = threading.Lock()
            _employee_locks[employee_id] = lock
        return lock


@contextmanager
def employee_lock(employee_id: str) -> Iterator[None]:
    """Hold the lock for *employee_id* for the duration of the block."""
    lock = _lock_for(employee_id)
    with lock:
        yield
