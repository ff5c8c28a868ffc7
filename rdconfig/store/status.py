"""
Status store: small key/value facts kept across restarts, stored in plain
text.
"""

from ..models.status import StatusRecord
from .base import EntityStore


class StatusStore(EntityStore[StatusRecord]):
    record_cls = StatusRecord
    suffix = "_status"
    label = "status"

    def get_option(self, key: str) -> str:
        return self._read(lambda r: r.values.get(key, ""))

    def set_option(self, key: str, value: str) -> None:
        def apply(record: StatusRecord) -> bool:
            if record.values.get(key, "") == value:
                return False
            record.values[key] = value
            return True
        self._update(apply)


__all__ = ['StatusStore']
