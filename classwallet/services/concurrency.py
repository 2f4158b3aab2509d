"""
Per-student serialization of balance changes.

Recording a transaction reads the current balance and then
writes a new snapshot. Two writers for the same student must
not interleave those steps, or one update is lost. Writers take
the student's lock for the whole read-insert-commit sequence;
writers for different students never wait on each other.
"""

import threading
from contextlib import contextmanager


class StudentLocks:
    """A registry of one lock per student id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, student_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[student_id] = lock
            return lock

    @contextmanager
    def hold(self, student_id: int):
        lock = self._lock_for(student_id)
        with lock:
            yield


# Shared by every WalletService in the process
student_locks = StudentLocks()


def lock_for_update(query):
    """
    Apply row-level locking on top of the in-process lock.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs honor it,
    which covers writers in other processes.
    """
    return query.with_for_update()
