"""
Per-peer session settings.

One file per remote peer holds window geometry, view preferences, feature
flags, port forwards and the cached peer info. Several defaults follow the
user's display preferences, so decoding takes an option reader that returns
the current user default for a key.

Boolean feature flags are described once in ``BOOL_FLAGS`` (attribute name
to serialized key); their default is ``reader(key) == "Y"``.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..codec import (
    Field,
    OptionReader,
    Record,
    decode_bool,
    decode_bytes,
    decode_int,
    decode_map_str,
    decode_size,
    decode_str,
    decode_vec_string,
    list_of,
    map_of,
    record_of,
)
from ..options import keys
from ..utils.error_handling import CodecError

Size = Tuple[int, int, int, int]
PortForward = Tuple[int, str, int]

CUSTOM_IMAGE_QUALITY_RANGE = (10, 0xFFF)
TRACKPAD_SPEED_RANGE = (10, 1000)

# attribute -> serialized key (also the user-default option key)
BOOL_FLAGS: Dict[str, str] = {
    'show_remote_cursor': keys.OPTION_SHOW_REMOTE_CURSOR,
    'lock_after_session_end': keys.OPTION_LOCK_AFTER_SESSION_END,
    'terminal_persistent': keys.OPTION_TERMINAL_PERSISTENT,
    'privacy_mode': keys.OPTION_PRIVACY_MODE,
    'allow_swap_key': "allow_swap_key",
    'disable_audio': keys.OPTION_DISABLE_AUDIO,
    'disable_clipboard': keys.OPTION_DISABLE_CLIPBOARD,
    'enable_file_copy_paste': keys.OPTION_ENABLE_FILE_COPY_PASTE,
    'show_quality_monitor': keys.OPTION_SHOW_QUALITY_MONITOR,
    'follow_remote_cursor': keys.OPTION_FOLLOW_REMOTE_CURSOR,
    'follow_remote_window': keys.OPTION_FOLLOW_REMOTE_WINDOW,
    'view_only': keys.OPTION_VIEW_ONLY,
    'show_my_cursor': "show_my_cursor",
    'sync_init_clipboard': keys.OPTION_SYNC_INIT_CLIPBOARD,
}

# Options seeded from the user defaults when a peer record is created
DEFAULT_OPTION_KEYS = (
    keys.OPTION_CODEC_PREFERENCE,
    keys.OPTION_CUSTOM_FPS,
    keys.OPTION_ZOOM_CURSOR,
    keys.OPTION_TOUCH_MODE,
    keys.OPTION_I444,
    keys.OPTION_SWAP_LEFT_RIGHT_MOUSE,
    keys.OPTION_COLLAPSE_TOOLBAR,
)


def _parse_float(text: str, default: float) -> float:
    try:
        value = float(text)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _parse_int(text: str, default: int) -> int:
    try:
        return int(text)
    except ValueError:
        return default


# -- defaults read from the user display preferences --------------------------

def _display_default(key: str):
    return lambda read: read(key)


def _flag_default(key: str):
    return lambda read: read(key) == "Y"


def default_custom_image_quality(read: OptionReader) -> List[int]:
    return [int(_parse_float(read(keys.OPTION_CUSTOM_IMAGE_QUALITY), 50.0))]


def default_trackpad_speed(read: OptionReader) -> int:
    return _parse_int(read(keys.OPTION_TRACKPAD_SPEED), 100)


def default_options(read: OptionReader) -> Dict[str, str]:
    return {key: read(key) for key in DEFAULT_OPTION_KEYS}


# -- decoders -----------------------------------------------------------------

def decode_custom_image_quality(value: Any) -> List[int]:
    v = list_of(decode_int)(value)
    low, high = CUSTOM_IMAGE_QUALITY_RANGE
    if len(v) != 1 or not low <= v[0] <= high:
        raise CodecError(f"custom_image_quality out of range: {v}")
    return v


def decode_trackpad_speed(value: Any) -> int:
    v = decode_int(value)
    low, high = TRACKPAD_SPEED_RANGE
    if not low <= v <= high:
        raise CodecError(f"trackpad-speed out of range: {v}")
    return v


def decode_port_forward(value: Any) -> PortForward:
    if isinstance(value, dict):
        value = [value.get('local_port'), value.get('host'), value.get('remote_port')]
    if not isinstance(value, list) or len(value) != 3:
        raise CodecError("port forward must be (local_port, host, remote_port)")
    return decode_int(value[0]), decode_str(value[1]), decode_int(value[2])


def encode_port_forwards(forwards: List[PortForward]) -> List[Dict[str, Any]]:
    # TOML arrays must be homogeneous, so each rule is written as a table
    return [
        {'local_port': local, 'host': host, 'remote_port': remote}
        for local, host, remote in forwards
    ]


@dataclass
class Resolution:
    w: int
    h: int


def decode_resolution(value: Any) -> Resolution:
    if not isinstance(value, dict) or 'w' not in value or 'h' not in value:
        raise CodecError("resolution needs integer w and h")
    return Resolution(w=decode_int(value['w']), h=decode_int(value['h']))


def encode_resolutions(resolutions: Dict[str, Resolution]) -> Dict[str, Dict[str, int]]:
    return {k: {'w': resolutions[k].w, 'h': resolutions[k].h} for k in sorted(resolutions)}


@dataclass
class PeerInfo(Record):
    username: str = ""
    hostname: str = ""
    platform: str = ""

    FIELDS = (
        Field('username', decode_str, ""),
        Field('hostname', decode_str, ""),
        Field('platform', decode_str, ""),
    )


@dataclass
class Transfer(Record):
    write_jobs: List[str] = field(default_factory=list)
    read_jobs: List[str] = field(default_factory=list)

    FIELDS = (
        Field('write_jobs', decode_vec_string, []),
        Field('read_jobs', decode_vec_string, []),
    )


def _display_str_field(name: str) -> Field:
    return Field(
        name,
        decode_str,
        default_factory=_display_default(name),
        skip_empty=True,
        empty_is_default=True,
    )


def _flag_field(attr: str) -> Field:
    key = BOOL_FLAGS[attr]
    return Field(attr, decode_bool, default_factory=_flag_default(key), key=key)


@dataclass
class PeerConfig(Record):
    password: bytes = b""
    size: Size = (0, 0, 0, 0)
    size_ft: Size = (0, 0, 0, 0)
    size_pf: Size = (0, 0, 0, 0)
    view_style: str = ""
    scroll_style: str = ""
    image_quality: str = ""
    custom_image_quality: List[int] = field(default_factory=lambda: [50])
    show_remote_cursor: bool = False
    lock_after_session_end: bool = False
    terminal_persistent: bool = False
    privacy_mode: bool = False
    allow_swap_key: bool = False
    port_forwards: List[PortForward] = field(default_factory=list)
    direct_failures: int = 0
    disable_audio: bool = False
    disable_clipboard: bool = False
    enable_file_copy_paste: bool = False
    show_quality_monitor: bool = False
    follow_remote_cursor: bool = False
    follow_remote_window: bool = False
    keyboard_mode: str = ""
    view_only: bool = False
    show_my_cursor: bool = False
    sync_init_clipboard: bool = False
    reverse_mouse_wheel: str = ""
    displays_as_individual_windows: str = ""
    use_all_my_displays_for_the_remote_session: str = ""
    trackpad_speed: int = 100
    custom_resolutions: Dict[str, Resolution] = field(default_factory=dict)
    options: Dict[str, str] = field(default_factory=dict)
    ui_flutter: Dict[str, str] = field(default_factory=dict)
    info: PeerInfo = field(default_factory=PeerInfo)
    transfer: Transfer = field(default_factory=Transfer)

    FIELDS = (
        Field('password', decode_bytes, b""),
        Field('size', decode_size, (0, 0, 0, 0)),
        Field('size_ft', decode_size, (0, 0, 0, 0)),
        Field('size_pf', decode_size, (0, 0, 0, 0)),
        _display_str_field(keys.OPTION_VIEW_STYLE),
        _display_str_field(keys.OPTION_SCROLL_STYLE),
        _display_str_field(keys.OPTION_IMAGE_QUALITY),
        Field(
            'custom_image_quality',
            decode_custom_image_quality,
            default_factory=default_custom_image_quality,
            skip_empty=True,
        ),
        _flag_field('show_remote_cursor'),
        _flag_field('lock_after_session_end'),
        _flag_field('terminal_persistent'),
        _flag_field('privacy_mode'),
        _flag_field('allow_swap_key'),
        Field('port_forwards', list_of(decode_port_forward), [], encoder=encode_port_forwards),
        Field('direct_failures', decode_int, 0),
        _flag_field('disable_audio'),
        _flag_field('disable_clipboard'),
        _flag_field('enable_file_copy_paste'),
        _flag_field('show_quality_monitor'),
        _flag_field('follow_remote_cursor'),
        _flag_field('follow_remote_window'),
        Field('keyboard_mode', decode_str, "", skip_empty=True),
        _flag_field('view_only'),
        _flag_field('show_my_cursor'),
        _flag_field('sync_init_clipboard'),
        _display_str_field(keys.OPTION_REVERSE_MOUSE_WHEEL),
        _display_str_field(keys.OPTION_DISPLAYS_AS_INDIVIDUAL_WINDOWS),
        _display_str_field(keys.OPTION_USE_ALL_MY_DISPLAYS_FOR_THE_REMOTE_SESSION),
        Field(
            'trackpad_speed',
            decode_trackpad_speed,
            default_factory=default_trackpad_speed,
            key=keys.OPTION_TRACKPAD_SPEED,
        ),
        Field(
            'custom_resolutions',
            map_of(decode_resolution),
            {},
            skip_empty=True,
            encoder=encode_resolutions,
        ),
        Field('options', decode_map_str, {}, skip_empty=True, initial_factory=default_options),
        Field('ui_flutter', decode_map_str, {}),
        Field('info', record_of(PeerInfo), PeerInfo()),
        Field('transfer', record_of(Transfer), Transfer()),
    )
