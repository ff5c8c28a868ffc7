"""
User display defaults.

The preferences a user picked as defaults for new remote sessions. Another
process may change the file at any time, so ``read`` re-reads it when the
cached copy is more than a second old.

Some keys accept only a fixed set of values or a numeric range; anything
else reads back as the key's default:

    view_style            original | adaptive   (adaptive first on mobile)
    scroll_style          scrollauto | scrollbar
    image_quality         balanced | best | low | custom
    codec-preference      auto | vp8 | vp9 | av1 | h264 | h265
    custom_image_quality  10..4095, default 50
    custom-fps            5..120, default 30
    enable-file-copy-paste  Y | "" | N
    trackpad-speed        10..1000 (integer), default 100
"""

import logging
import math
import re
import threading
import time
from typing import Callable, Mapping, Optional, Sequence, Union

from ..constants import Limits
from ..models.user_default import UserDefaultRecord
from ..options import keys
from ..options.keys import FAMILY_DISPLAY
from ..options.resolver import get_or, is_option_can_save
from .base import EntityStore

logger = logging.getLogger(__name__)

Number = Union[int, float]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str) -> Optional[int]:
    if not _INT_PATTERN.fullmatch(text):
        return None
    return int(text)


def parse_float(text: str) -> Optional[float]:
    if not text or text != text.strip() or '_' in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def format_number(value: Number) -> str:
    """Shortest decimal form; whole floats print without a fraction."""
    if isinstance(value, float) and math.isfinite(value) and value == int(value):
        return str(int(value))
    return str(value)


class DisplayStore(EntityStore[UserDefaultRecord]):
    record_cls = UserDefaultRecord
    suffix = "_default"
    label = "user default config"

    def __init__(self, root):
        super().__init__(root)
        self._refresh_lock = threading.Lock()
        self._loaded_at: Optional[float] = None

    def read(self, key: str) -> str:
        """Resolved value of ``key``, refreshing a cache older than a second."""
        with self._refresh_lock:
            now = time.monotonic()
            if self._loaded_at is None or now - self._loaded_at > Limits.USER_DEFAULT_RELOAD_SECONDS:
                self.reload()
                self._loaded_at = now
        return self.get_option(key)

    # -- resolution -----------------------------------------------------------

    def _after(self, options: Mapping[str, str], key: str) -> Optional[str]:
        overwrite, default = self.settings.pair(FAMILY_DISPLAY)
        return get_or(overwrite, options, default, key)

    def get_option(self, key: str) -> str:
        """Resolved value of ``key`` from the cached record."""
        return self._read(lambda r: self.resolve(r.options, key))

    def resolve(self, options: Mapping[str, str], key: str) -> str:
        if key == keys.OPTION_VIEW_STYLE:
            if self._root.paths.is_mobile:
                return self._get_string(options, key, "adaptive", ("original",))
            return self._get_string(options, key, "original", ("adaptive",))
        if key == keys.OPTION_SCROLL_STYLE:
            return self._get_string(options, key, "scrollauto", ("scrollbar",))
        if key == keys.OPTION_IMAGE_QUALITY:
            return self._get_string(options, key, "balanced", ("best", "low", "custom"))
        if key == keys.OPTION_CODEC_PREFERENCE:
            return self._get_string(options, key, "auto", ("vp8", "vp9", "av1", "h264", "h265"))
        if key == keys.OPTION_CUSTOM_IMAGE_QUALITY:
            return self._get_num_string(options, key, 50.0, 10.0, float(0xFFF), parse_float)
        if key == keys.OPTION_CUSTOM_FPS:
            return self._get_num_string(options, key, 30.0, 5.0, 120.0, parse_float)
        if key == keys.OPTION_ENABLE_FILE_COPY_PASTE:
            return self._get_string(options, key, "Y", ("", "N"))
        if key == keys.OPTION_TRACKPAD_SPEED:
            return self._get_num_string(options, key, 100, 10, 1000, parse_int)
        return self._after(options, key) or ""

    def _get_string(
        self,
        options: Mapping[str, str],
        key: str,
        default: str,
        others: Sequence[str],
    ) -> str:
        value = self._after(options, key)
        if value is not None and value in others:
            return value
        return default

    def _get_num_string(
        self,
        options: Mapping[str, str],
        key: str,
        default: Number,
        low: Number,
        high: Number,
        parse: Callable[[str], Optional[Number]],
    ) -> str:
        value = self._after(options, key)
        if value is None:
            return format_number(default)
        parsed = parse(value)
        if parsed is None:
            parsed = default
        if low <= parsed <= high:
            return format_number(parsed)
        return format_number(default)

    # -- writes ---------------------------------------------------------------

    def set_option(self, key: str, value: str) -> None:
        """
        Store a display default; an empty value removes the key.

        Refused when an overwrite pins the key or the value equals the
        DISPLAY default. An accepted write is always persisted.
        """
        overwrite, default = self.settings.pair(FAMILY_DISPLAY)
        if not is_option_can_save(overwrite, key, default, value):
            return

        def apply(record: UserDefaultRecord) -> bool:
            if value:
                record.options[key] = value
            else:
                record.options.pop(key, None)
            return True

        self._update(apply)


__all__ = [
    'DisplayStore',
    'format_number',
    'parse_float',
    'parse_int',
]
