"""
Local store: window geometry, favourites, keyboard layout and the LOCAL
option family.
"""

import logging
from typing import List

from ..codec import load_path
from ..constants import Limits
from ..models.local import LocalRecord, Size
from ..options import keys
from ..options.keys import FAMILY_LOCAL
from ..options.resolver import apply_option, check_known, get_or, is_option_can_save, option2bool
from .base import EntityStore

logger = logging.getLogger(__name__)


class LocalStore(EntityStore[LocalRecord]):
    record_cls = LocalRecord
    suffix = "_local"
    label = "local config"

    def get_kb_layout_type(self) -> str:
        return self._read(lambda r: r.kb_layout_type)

    def set_kb_layout_type(self, kb_layout_type: str) -> None:
        # Always persisted, even when unchanged
        def apply(record: LocalRecord) -> bool:
            record.kb_layout_type = kb_layout_type
            return True
        self._update(apply)

    def get_size(self) -> Size:
        return self._read(lambda r: r.size)

    def set_size(self, x: int, y: int, w: int, h: int) -> None:
        """Ignored for windows smaller than 300x300."""
        size = (x, y, w, h)

        def apply(record: LocalRecord) -> bool:
            if size == record.size or w < Limits.MIN_WINDOW_SIZE or h < Limits.MIN_WINDOW_SIZE:
                return False
            record.size = size
            return True

        self._update(apply)

    def get_remote_id(self) -> str:
        return self._read(lambda r: r.remote_id)

    def set_remote_id(self, remote_id: str) -> None:
        def apply(record: LocalRecord) -> bool:
            if record.remote_id == remote_id:
                return False
            record.remote_id = remote_id
            return True
        self._update(apply)

    def get_fav(self) -> List[str]:
        return self._read(lambda r: list(r.fav))

    def set_fav(self, fav: List[str]) -> None:
        fav = list(fav)

        def apply(record: LocalRecord) -> bool:
            if record.fav == fav:
                return False
            record.fav = fav
            return True

        self._update(apply)

    # -- options --------------------------------------------------------------

    def get_option(self, key: str) -> str:
        overwrite, default = self.settings.pair(FAMILY_LOCAL)
        return self._read(lambda r: get_or(overwrite, r.options, default, key)) or ""

    def get_option_from_file(self, key: str) -> str:
        """Like ``get_option`` but reads the stored options from disk."""
        overwrite, default = self.settings.pair(FAMILY_LOCAL)
        stored = load_path(self.path(), LocalRecord).options
        return get_or(overwrite, stored, default, key) or ""

    def get_bool_option(self, key: str) -> bool:
        return option2bool(key, self.get_option(key))

    def set_option(self, key: str, value: str) -> None:
        overwrite, default = self.settings.pair(FAMILY_LOCAL)
        if not is_option_can_save(overwrite, key, default, value):
            return
        check_known(key, FAMILY_LOCAL)

        if key == keys.OPTION_LANGUAGE and value == "default":
            # A custom client names its default language explicitly
            def apply(record: LocalRecord) -> bool:
                record.options[key] = ""
                return True
            self._update(apply)
            return

        self._update(lambda r: apply_option(r.options, key, value))

    def get_flutter_option(self, key: str) -> str:
        overwrite, default = self.settings.pair(FAMILY_LOCAL)
        return self._read(lambda r: get_or(overwrite, r.ui_flutter, default, key)) or ""

    def set_flutter_option(self, key: str, value: str) -> None:
        self._update(lambda r: apply_option(r.ui_flutter, key, value))


__all__ = ['LocalStore']
