"""
Locking primitives shared by the session and torrent wrappers.
"""

import threading
from contextlib import contextmanager


class LockClosedError(RuntimeError):
    """The lock was closed before it could be acquired."""


class ReadWriteLock:
    """
    Any number of readers or a single writer.

    Waiting writers block new readers so that ``close()`` cannot be starved
    by a steady stream of torrent calls. Not reentrant.

    ``close()`` is for the final writer: from then on every other acquirer,
    including ones already waiting, raises ``LockClosedError`` instead of
    queueing behind it. Holders keep the lock until they release it.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def acquire_read(self) -> None:
        with self._cond:
            while True:
                if self._closed:
                    raise LockClosedError()
                if not (self._writer or self._writers_waiting):
                    break
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self, closing: bool = False) -> None:
        """
        Args:
            closing: Close the lock first, then wait for the current holders
        """
        with self._cond:
            if closing:
                self._closed = True
                self._cond.notify_all()
            elif self._closed:
                raise LockClosedError()

            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
                    if self._closed and not closing:
                        raise LockClosedError()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self, closing: bool = False):
        self.acquire_write(closing)
        try:
            yield
        finally:
            self.release_write()
