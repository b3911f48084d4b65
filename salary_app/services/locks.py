"""Process-local serialization of writes per user."""
from __future__ import annotations

from contextlib import ExitStack, contextmanager
from threading import Lock
from typing import Iterable, Iterator


class UserLockRegistry:
    """Hands out one lock per user id; entries are dropped once no thread holds them.

    Complements the database row lock: two threads updating the same user in
    one process never open overlapping transactions.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[int, tuple[Lock, int]] = {}

    def _acquire_entry(self, user_id: int) -> Lock:
        with self._guard:
            lock, waiters = self._locks.get(user_id, (None, 0))
            if lock is None:
                lock = Lock()
            self._locks[user_id] = (lock, waiters + 1)
            return lock

    def _release_entry(self, user_id: int) -> None:
        with self._guard:
            lock, waiters = self._locks[user_id]
            if waiters <= 1:
                del self._locks[user_id]
            else:
                self._locks[user_id] = (lock, waiters - 1)

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        lock = self._acquire_entry(user_id)
        try:
            with lock:
                yield
        finally:
            self._release_entry(user_id)

    @contextmanager
    def hold_many(self, user_ids: Iterable[int]) -> Iterator[None]:
        """Hold the locks of several users, acquired in ascending id order."""

        with ExitStack() as stack:
            for user_id in sorted(set(user_ids)):
                stack.enter_context(self.hold(user_id))
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


user_locks = UserLockRegistry()
