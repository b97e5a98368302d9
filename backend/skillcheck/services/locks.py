"""Per-user write serialisation.

Aggregate state (results, skills, progress, level, CV, recommendation
overlay) is updated read-modify-write. Holding the user's lock for the whole
unit of work keeps two requests of the same user from losing each other's
update. The registry is process-local: separate worker processes are not
coordinated.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

_registry_lock = threading.Lock()
_user_locks: dict[str, threading.Lock] = {}


def _lock_for(user_id: str) -> threading.Lock:
    with _registry_lock:
        lock = _user_locks.get(user_id)
        if lock is None:
            lock = threading.Lock()
            _user_locks[user_id] = lock
        return lock


@contextmanager
def user_lock(user_id: str) -> Iterator[None]:
    lock = _lock_for(user_id)
    with lock:
        yield
