"""
Layered option resolution.

Each option family (general settings, local settings, display settings) has
a DEFAULT map and an OVERWRITE map wrapped around the values the user
stored. Lookups take the first hit in the order

    OVERWRITE > stored > DEFAULT

and writes are dropped when an overwrite already pins the key or when the
value equals the default. Built-in and hard settings are compiled into a
custom client and only ever read.
"""

import logging
import threading
from typing import Dict, Mapping, MutableMapping, Optional

from . import keys
from .keys import FAMILY_DISPLAY, FAMILY_LOCAL, FAMILY_SETTINGS

logger = logging.getLogger(__name__)


class OptionMap:
    """A string map guarded by a lock."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._lock = threading.RLock()
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def update(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._data.update(values)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def copy(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._data)

    def __repr__(self) -> str:
        return f"OptionMap({self.copy()!r})"


def get_or(
    overwrite: OptionMap,
    stored: Mapping[str, str],
    default: OptionMap,
    key: str,
) -> Optional[str]:
    """First hit for ``key`` in OVERWRITE, then ``stored``, then DEFAULT."""
    value = overwrite.get(key)
    if value is not None:
        return value
    value = stored.get(key)
    if value is not None:
        return value
    return default.get(key)


def is_option_can_save(
    overwrite: OptionMap,
    key: str,
    default: OptionMap,
    value: str,
) -> bool:
    if key in overwrite:
        return False
    if default.get(key) == value:
        return False
    return True


def purify_options(
    overwrite: OptionMap,
    default: OptionMap,
    values: MutableMapping[str, str],
) -> None:
    """Drop in place every entry a single ``set_option`` would refuse."""
    for key in [k for k, v in values.items() if not is_option_can_save(overwrite, k, default, v)]:
        del values[key]


def apply_option(options: MutableMapping[str, str], key: str, value: str) -> bool:
    """
    Store ``value`` under ``key``; an empty value removes the key.

    Returns True when the map changed.
    """
    if value == "":
        if key in options:
            del options[key]
            return True
        return False
    if options.get(key) == value:
        return False
    options[key] = value
    return True


def option2bool(option: str, value: str) -> bool:
    if option.startswith("enable-"):
        return value != "N"
    if (
        option.startswith("allow-")
        or option == keys.OPTION_STOP_SERVICE
        or option == keys.OPTION_DIRECT_SERVER
        or option == keys.OPTION_FORCE_ALWAYS_RELAY
    ):
        return value == "Y"
    return value != "N"


# Seeded into DEFAULT_SETTINGS by init_default_settings
STARTUP_DEFAULT_SETTINGS = {
    keys.OPTION_TEMPORARY_PASSWORD_LENGTH: "6",
    keys.OPTION_ALLOW_NUMERNIC_ONE_TIME_PASSWORD: "Y",
    keys.OPTION_VERIFICATION_METHOD: "password,otp",
    keys.OPTION_ALLOW_REMOTE_CONFIG_MODIFICATION: "Y",
    keys.OPTION_ENABLE_CHECK_UPDATE: "N",
}


class SettingsRegistry:
    """
    The DEFAULT/OVERWRITE pairs of every family plus BUILTIN and HARD.

    A custom client fills these at startup; the stores consult them on
    every option read and write.
    """

    def __init__(self):
        self.default_settings = OptionMap()
        self.overwrite_settings = OptionMap()
        self.default_local = OptionMap()
        self.overwrite_local = OptionMap()
        self.default_display = OptionMap()
        self.overwrite_display = OptionMap()
        self.builtin = OptionMap()
        self.hard = OptionMap()

    def pair(self, family: str):
        """``(overwrite, default)`` maps for an option family."""
        if family == FAMILY_SETTINGS:
            return self.overwrite_settings, self.default_settings
        if family == FAMILY_LOCAL:
            return self.overwrite_local, self.default_local
        if family == FAMILY_DISPLAY:
            return self.overwrite_display, self.default_display
        raise KeyError(f"unknown option family: {family}")

    def clear(self) -> None:
        for m in (
            self.default_settings, self.overwrite_settings,
            self.default_local, self.overwrite_local,
            self.default_display, self.overwrite_display,
            self.builtin, self.hard,
        ):
            m.clear()

    def init_default_settings(self) -> None:
        """Seed the startup defaults of the general options."""
        self.default_settings.update(STARTUP_DEFAULT_SETTINGS)

    # -- hard settings --------------------------------------------------------

    def _is_hard_yes(self, name: str) -> bool:
        return self.hard.get(name) == "Y"

    def is_incoming_only(self) -> bool:
        return self.hard.get(keys.OPTION_CONN_TYPE) == "incoming"

    def is_outgoing_only(self) -> bool:
        return self.hard.get(keys.OPTION_CONN_TYPE) == "outgoing"

    def is_disable_tcp_listen(self) -> bool:
        return self._is_hard_yes(keys.OPTION_DISABLE_TCP_LISTEN)

    def is_disable_settings(self) -> bool:
        return self._is_hard_yes(keys.OPTION_DISABLE_SETTINGS)

    def is_disable_ab(self) -> bool:
        return self._is_hard_yes(keys.OPTION_DISABLE_AB)

    def is_disable_account(self) -> bool:
        return self._is_hard_yes(keys.OPTION_DISABLE_ACCOUNT)

    def is_disable_installation(self) -> bool:
        return self._is_hard_yes(keys.OPTION_DISABLE_INSTALLATION)

    def hard_password(self) -> Optional[str]:
        return self.hard.get(keys.OPTION_PASSWORD)

    # -- built-in settings ----------------------------------------------------

    def get_builtin_option(self, key: str) -> str:
        return self.builtin.get(key) or ""

    def builtin_bool(self, key: str) -> bool:
        value = self.builtin.get(key)
        return value is not None and option2bool(key, value)

    def no_register_device(self) -> bool:
        return self.builtin.get(keys.OPTION_REGISTER_DEVICE) == "N"


def check_known(key: str, family: str) -> None:
    """Log keys outside the closed namespace; they are still accepted."""
    if keys.family_of(key) is None:
        logger.debug(f"Unrecognized {family} option key: {key}")


__all__ = [
    'OptionMap',
    'SettingsRegistry',
    'STARTUP_DEFAULT_SETTINGS',
    'get_or',
    'is_option_can_save',
    'purify_options',
    'apply_option',
    'option2bool',
    'check_known',
]
