"""
Per-repository locks guarding the shared local clones
"""

import threading
from typing import Dict, Tuple

from src.models.events import Repository


class RepoLockRegistry:
    """Hands out one lock per repository identity (owner and name)

    The locks are threading locks because the guarded git work runs in worker
    threads; a lock is only released once that work has returned, even when
    the request awaiting it has been cancelled.
    """

    def __init__(self):
        self._locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, repository: Repository) -> threading.Lock:
        # GitHub owner and repository names are case-insensitive
        key = (repository.owner.lower(), repository.name.lower())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock
