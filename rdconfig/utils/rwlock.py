"""
Reader/writer lock and the guarded singleton holder built on it.

Every persisted entity lives in exactly one in-memory value per store.
Readers take shared access, writers take exclusive access; there is no
upgrade from a read to a write lock. Waiting writers block new readers so a
steady stream of readers cannot starve a writer.
"""

import copy
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Optional, Tuple, TypeVar

T = TypeVar('T')
R = TypeVar('R')


class ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
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
    def write(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class Guarded(Generic[T]):
    """
    Lazily-initialized singleton slot guarded by a ReadWriteLock.

    ``read`` hands a callback the live value under shared access;
    ``snapshot`` returns a deep copy. ``update`` runs a mutator under
    exclusive access and returns ``(changed, copy)`` so the caller can
    persist the copy after the lock is released.
    """

    def __init__(self, loader: Callable[[], T]):
        self._loader = loader
        self._value: Optional[T] = None
        self._loaded = False
        self._init_lock = threading.Lock()
        self.lock = ReadWriteLock()

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._init_lock:
            if not self._loaded:
                self._value = self._loader()
                self._loaded = True

    @property
    def loaded(self) -> bool:
        return self._loaded

    def read(self, fn: Callable[[T], R]) -> R:
        self._ensure_loaded()
        with self.lock.read():
            return fn(self._value)

    def snapshot(self) -> T:
        return self.read(copy.deepcopy)

    def update(self, fn: Callable[[T], bool]) -> Tuple[bool, Optional[T]]:
        """Apply ``fn`` to the live value; ``fn`` returns True on change."""
        self._ensure_loaded()
        with self.lock.write():
            changed = bool(fn(self._value))
            return changed, (copy.deepcopy(self._value) if changed else None)

    def replace(self, value: T) -> bool:
        """Swap in ``value`` iff it differs from the current one."""
        self._ensure_loaded()
        with self.lock.write():
            if self._value == value:
                return False
            self._value = copy.deepcopy(value)
            return True

    def reload(self) -> None:
        with self._init_lock:
            value = self._loader()
            with self.lock.write():
                self._value = value
                self._loaded = True
