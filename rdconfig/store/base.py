"""
Common load/store plumbing for the per-entity stores.

Each entity keeps exactly one in-memory record per ``ConfigStore``, held in
a ``Guarded`` slot and loaded on first use. Writers mutate the record under
the write lock, release it, and then persist a snapshot, so the in-memory
value is always at least as current as the file. Every write replaces the
whole file; the last write wins.

Store failures are logged and dropped: the in-memory value stays
authoritative for the rest of the process lifetime.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Type, TypeVar

from ..codec import Record, load_path, store_path
from ..utils.error_handling import ErrorCategory, safe_execute
from ..utils.rwlock import Guarded

if TYPE_CHECKING:
    from ..config_store import ConfigStore

logger = logging.getLogger(__name__)

R = TypeVar('R', bound=Record)
T = TypeVar('T')


def write_record(path: Path, data: Dict[str, Any], label: str) -> bool:
    """Persist ``data`` at ``path``; returns False after logging a failure."""
    with safe_execute(
        f"store {label}",
        ErrorCategory.FILESYSTEM,
        additional_context={'path': str(path)},
    ) as result:
        store_path(path, data)
    return result.success


class EntityStore(Generic[R]):
    """
    Singleton holder for one persisted record.

    Subclasses set ``record_cls`` and ``suffix`` and may override ``load``
    (to decrypt after reading) and ``encode`` (to encrypt before writing).
    """

    record_cls: Type[R]
    suffix: str = ""
    label: str = "config"

    def __init__(self, root: 'ConfigStore'):
        self._root = root
        self._slot: Guarded[R] = Guarded(self.load)

    @property
    def settings(self):
        return self._root.settings

    @property
    def cipher(self):
        return self._root.cipher

    def path(self) -> Path:
        return self._root.paths.file(self.suffix)

    def load(self) -> R:
        """Read the record from disk, without touching the singleton."""
        return load_path(self.path(), self.record_cls)

    def encode(self, record: R) -> Dict[str, Any]:
        return record.to_dict()

    def write(self, record: R) -> bool:
        return write_record(self.path(), self.encode(record), self.label)

    def store(self) -> None:
        """Persist the current in-memory record."""
        self.write(self._slot.snapshot())

    def get(self) -> R:
        """A copy of the in-memory record."""
        return self._slot.snapshot()

    def set(self, value: R) -> bool:
        """Replace the record iff it differs; persists only on change."""
        if not self._slot.replace(value):
            return False
        self.write(value)
        return True

    def reload(self) -> None:
        self._slot.reload()

    def _read(self, fn: Callable[[R], T]) -> T:
        return self._slot.read(fn)

    def _update(self, fn: Callable[[R], bool]) -> bool:
        """Run ``fn`` under the write lock and persist if it reports a change."""
        changed, snapshot = self._slot.update(fn)
        if changed:
            self.write(snapshot)
        return changed
