"""
Option namespace and layered resolution.
"""

from . import keys
from .keys import (
    KEYS_BUILDIN_SETTINGS,
    KEYS_DISPLAY_SETTINGS,
    KEYS_LOCAL_SETTINGS,
    KEYS_SETTINGS,
    family_of,
    is_known_option,
)
from .resolver import (
    OptionMap,
    SettingsRegistry,
    apply_option,
    get_or,
    is_option_can_save,
    option2bool,
    purify_options,
)

__all__ = [
    'keys',
    'KEYS_BUILDIN_SETTINGS',
    'KEYS_DISPLAY_SETTINGS',
    'KEYS_LOCAL_SETTINGS',
    'KEYS_SETTINGS',
    'family_of',
    'is_known_option',
    'OptionMap',
    'SettingsRegistry',
    'apply_option',
    'get_or',
    'is_option_can_save',
    'option2bool',
    'purify_options',
]
