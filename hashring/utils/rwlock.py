from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from threading import Condition, Lock
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class ReadWriteLock:
    """Fair reader/writer lock.

    Requests are granted in arrival order. Readers at the head of the queue
    share the lock; a queued writer holds back every request behind it, so
    a steady stream of readers can never starve a writer. The lock is not
    reentrant: a thread holding it must not acquire it again.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._wait_queue: deque[object] = deque()
        self._readers = 0
        self._writer_active = False

    @property
    def readers(self) -> int:
        with self._cond:
            return self._readers

    @property
    def writer_active(self) -> bool:
        with self._cond:
            return self._writer_active

    @property
    def queued(self) -> int:
        with self._cond:
            return len(self._wait_queue)

    def acquire_read(self) -> None:
        with self._cond:
            request = object()
            self._wait_turn(
                request,
                lambda: not self._writer_active and self._wait_queue[0] is request,
            )
            self._readers += 1
            # the next queued request may be another reader
            self._cond.notify_all()

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("Read lock released without being held")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            request = object()
            self._wait_turn(
                request,
                lambda: not self._writer_active
                and self._readers == 0
                and self._wait_queue[0] is request,
            )
            self._writer_active = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer_active:
                raise RuntimeError("Write lock released without being held")
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    def _wait_turn(self, request: object, ready: Callable[[], bool]) -> None:
        # caller holds self._cond
        self._wait_queue.append(request)
        try:
            self._cond.wait_for(ready)
        except BaseException:
            # an abandoned request must not block the ones queued behind it
            self._wait_queue.remove(request)
            self._cond.notify_all()
            raise
        self._wait_queue.popleft()
