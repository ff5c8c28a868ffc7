"""
The closed namespace of option keys.

Every key below appears in persisted files and in messages exchanged with
other components, so the strings must never change. The ``KEYS_*`` tuples
tag each key with the family whose DEFAULT/OVERWRITE maps govern it.
"""

from typing import Optional

OPTION_VIEW_ONLY = "view_only"
OPTION_SHOW_MONITORS_TOOLBAR = "show_monitors_toolbar"
OPTION_COLLAPSE_TOOLBAR = "collapse_toolbar"
OPTION_SHOW_REMOTE_CURSOR = "show_remote_cursor"
OPTION_FOLLOW_REMOTE_CURSOR = "follow_remote_cursor"
OPTION_FOLLOW_REMOTE_WINDOW = "follow_remote_window"
OPTION_ZOOM_CURSOR = "zoom-cursor"
OPTION_SHOW_QUALITY_MONITOR = "show_quality_monitor"
OPTION_DISABLE_AUDIO = "disable_audio"
OPTION_ENABLE_REMOTE_PRINTER = "enable-remote-printer"
OPTION_ENABLE_FILE_COPY_PASTE = "enable-file-copy-paste"
OPTION_DISABLE_CLIPBOARD = "disable_clipboard"
OPTION_LOCK_AFTER_SESSION_END = "lock_after_session_end"
OPTION_PRIVACY_MODE = "privacy_mode"
OPTION_TOUCH_MODE = "touch-mode"
OPTION_I444 = "i444"
OPTION_REVERSE_MOUSE_WHEEL = "reverse_mouse_wheel"
OPTION_SWAP_LEFT_RIGHT_MOUSE = "swap-left-right-mouse"
OPTION_DISPLAYS_AS_INDIVIDUAL_WINDOWS = "displays_as_individual_windows"
OPTION_USE_ALL_MY_DISPLAYS_FOR_THE_REMOTE_SESSION = "use_all_my_displays_for_the_remote_session"
OPTION_VIEW_STYLE = "view_style"
OPTION_SCROLL_STYLE = "scroll_style"
OPTION_IMAGE_QUALITY = "image_quality"
OPTION_CUSTOM_IMAGE_QUALITY = "custom_image_quality"
OPTION_CUSTOM_FPS = "custom-fps"
OPTION_CODEC_PREFERENCE = "codec-preference"
OPTION_SYNC_INIT_CLIPBOARD = "sync-init-clipboard"
OPTION_THEME = "theme"
OPTION_LANGUAGE = "lang"
OPTION_REMOTE_MENUBAR_DRAG_LEFT = "remote-menubar-drag-left"
OPTION_REMOTE_MENUBAR_DRAG_RIGHT = "remote-menubar-drag-right"
OPTION_HIDE_AB_TAGS_PANEL = "hideAbTagsPanel"
OPTION_ENABLE_CONFIRM_CLOSING_TABS = "enable-confirm-closing-tabs"
OPTION_ENABLE_OPEN_NEW_CONNECTIONS_IN_TABS = "enable-open-new-connections-in-tabs"
OPTION_TEXTURE_RENDER = "use-texture-render"
OPTION_ALLOW_D3D_RENDER = "allow-d3d-render"
OPTION_ENABLE_CHECK_UPDATE = "enable-check-update"
OPTION_ALLOW_AUTO_UPDATE = "allow-auto-update"
OPTION_SYNC_AB_WITH_RECENT_SESSIONS = "sync-ab-with-recent-sessions"
OPTION_SYNC_AB_TAGS = "sync-ab-tags"
OPTION_FILTER_AB_BY_INTERSECTION = "filter-ab-by-intersection"
OPTION_ACCESS_MODE = "access-mode"
OPTION_ENABLE_KEYBOARD = "enable-keyboard"
OPTION_ENABLE_CLIPBOARD = "enable-clipboard"
OPTION_ENABLE_FILE_TRANSFER = "enable-file-transfer"
OPTION_ENABLE_CAMERA = "enable-camera"
OPTION_ENABLE_TERMINAL = "enable-terminal"
OPTION_TERMINAL_PERSISTENT = "terminal-persistent"
OPTION_ENABLE_AUDIO = "enable-audio"
OPTION_ENABLE_TUNNEL = "enable-tunnel"
OPTION_ENABLE_REMOTE_RESTART = "enable-remote-restart"
OPTION_ENABLE_RECORD_SESSION = "enable-record-session"
OPTION_ENABLE_BLOCK_INPUT = "enable-block-input"
OPTION_ALLOW_REMOTE_CONFIG_MODIFICATION = "allow-remote-config-modification"
OPTION_ALLOW_NUMERNIC_ONE_TIME_PASSWORD = "allow-numeric-one-time-password"
OPTION_ENABLE_LAN_DISCOVERY = "enable-lan-discovery"
OPTION_DIRECT_SERVER = "direct-server"
OPTION_DIRECT_ACCESS_PORT = "direct-access-port"
OPTION_WHITELIST = "whitelist"
OPTION_ALLOW_AUTO_DISCONNECT = "allow-auto-disconnect"
OPTION_AUTO_DISCONNECT_TIMEOUT = "auto-disconnect-timeout"
OPTION_ALLOW_ONLY_CONN_WINDOW_OPEN = "allow-only-conn-window-open"
OPTION_ALLOW_AUTO_RECORD_INCOMING = "allow-auto-record-incoming"
OPTION_ALLOW_AUTO_RECORD_OUTGOING = "allow-auto-record-outgoing"
OPTION_VIDEO_SAVE_DIRECTORY = "video-save-directory"
OPTION_ENABLE_ABR = "enable-abr"
OPTION_ALLOW_REMOVE_WALLPAPER = "allow-remove-wallpaper"
OPTION_ALLOW_ALWAYS_SOFTWARE_RENDER = "allow-always-software-render"
OPTION_ALLOW_LINUX_HEADLESS = "allow-linux-headless"
OPTION_ENABLE_HWCODEC = "enable-hwcodec"
OPTION_APPROVE_MODE = "approve-mode"
OPTION_VERIFICATION_METHOD = "verification-method"
OPTION_TEMPORARY_PASSWORD_LENGTH = "temporary-password-length"
OPTION_CUSTOM_RENDEZVOUS_SERVER = "custom-rendezvous-server"
OPTION_API_SERVER = "api-server"
OPTION_KEY = "key"
OPTION_ALLOW_WEBSOCKET = "allow-websocket"
OPTION_PRESET_ADDRESS_BOOK_NAME = "preset-address-book-name"
OPTION_PRESET_ADDRESS_BOOK_TAG = "preset-address-book-tag"
OPTION_ENABLE_DIRECTX_CAPTURE = "enable-directx-capture"
OPTION_ENABLE_ANDROID_SOFTWARE_ENCODING_HALF_SCALE = "enable-android-software-encoding-half-scale"
OPTION_ENABLE_TRUSTED_DEVICES = "enable-trusted-devices"
OPTION_AV1_TEST = "av1-test"
OPTION_TRACKPAD_SPEED = "trackpad-speed"
OPTION_REGISTER_DEVICE = "register-device"

# built-in options
OPTION_DISPLAY_NAME = "display-name"
OPTION_DISABLE_UDP = "disable-udp"
OPTION_PRESET_DEVICE_GROUP_NAME = "preset-device-group-name"
OPTION_PRESET_USERNAME = "preset-user-name"
OPTION_PRESET_STRATEGY_NAME = "preset-strategy-name"

OPTION_REMOVE_PRESET_PASSWORD_WARNING = "remove-preset-password-warning"
OPTION_HIDE_SECURITY_SETTINGS = "hide-security-settings"
OPTION_HIDE_NETWORK_SETTINGS = "hide-network-settings"
OPTION_HIDE_SERVER_SETTINGS = "hide-server-settings"
OPTION_HIDE_PROXY_SETTINGS = "hide-proxy-settings"
OPTION_HIDE_REMOTE_PRINTER_SETTINGS = "hide-remote-printer-settings"
OPTION_HIDE_WEBSOCKET_SETTINGS = "hide-websocket-settings"

# connection punch-through options
OPTION_ENABLE_UDP_PUNCH = "enable-udp-punch"
OPTION_ENABLE_IPV6_PUNCH = "enable-ipv6-punch"
OPTION_HIDE_USERNAME_ON_CARD = "hide-username-on-card"
OPTION_HIDE_HELP_CARDS = "hide-help-cards"
OPTION_DEFAULT_CONNECT_PASSWORD = "default-connect-password"

OPTION_HIDE_TRAY = "hide-tray"
OPTION_ONE_WAY_CLIPBOARD_REDIRECTION = "one-way-clipboard-redirection"
OPTION_ALLOW_LOGON_SCREEN_PASSWORD = "allow-logon-screen-password"
OPTION_ONE_WAY_FILE_TRANSFER = "one-way-file-transfer"
OPTION_ALLOW_HTTPS_21114 = "allow-https-2114"
OPTION_ALLOW_HOSTNAME_AS_ID = "allow-hostname-as-id"
OPTION_HIDE_POWERED_BY_ME = "hide-powered-by-me"
OPTION_MAIN_WINDOW_ALWAYS_ON_TOP = "main-window-always-on-top"

# UI-state options kept in the local record
OPTION_FLUTTER_REMOTE_MENUBAR_STATE = "remoteMenubarState"
OPTION_FLUTTER_PEER_SORTING = "peer-sorting"
OPTION_FLUTTER_PEER_TAB_INDEX = "peer-tab-index"
OPTION_FLUTTER_PEER_TAB_ORDER = "peer-tab-order"
OPTION_FLUTTER_PEER_TAB_VISIBLE = "peer-tab-visible"

OPTION_FLUTTER_PEER_CARD_UI_TYLE = "peer-card-ui-type"
OPTION_FLUTTER_CURRENT_AB_NAME = "current-ab-name"
OPTION_ALLOW_REMOTE_CM_MODIFICATION = "allow-remote-cm-modification"

OPTION_PRINTER_INCOMING_JOB_ACTION = "printer-incomming-job-action"
OPTION_PRINTER_ALLOW_AUTO_PRINT = "allow-printer-auto-print"
OPTION_PRINTER_SELECTED_NAME = "printer-selected-name"

# android floating window
OPTION_DISABLE_FLOATING_WINDOW = "disable-floating-window"
OPTION_FLOATING_WINDOW_SIZE = "floating-window-size"
OPTION_FLOATING_WINDOW_UNTOUCHABLE = "floating-window-untouchable"
OPTION_FLOATING_WINDOW_TRANSPARENCY = "floating-window-transparency"
OPTION_FLOATING_WINDOW_SVG = "floating-window-svg"
OPTION_KEEP_SCREEN_ON = "keep-screen-on"
OPTION_DISABLE_GROUP_PANEL = "disable-group-panel"
OPTION_DISABLE_DISCOVERY_PANEL = "disable-discovery-panel"
OPTION_PRE_ELEVATE_SERVICE = "pre-elevate-service"

# Proxy settings for custom client builds; the stored values live in the
# network record's socks table.
OPTION_PROXY_URL = "proxy-url"
OPTION_PROXY_USERNAME = "proxy-username"
OPTION_PROXY_PASSWORD = "proxy-password"

# Keys read by the resolver that belong to no family
OPTION_STOP_SERVICE = "stop-service"
OPTION_FORCE_ALWAYS_RELAY = "force-always-relay"
OPTION_CONN_TYPE = "conn-type"
OPTION_DISABLE_TCP_LISTEN = "disable-tcp-listen"
OPTION_DISABLE_SETTINGS = "disable-settings"
OPTION_DISABLE_AB = "disable-ab"
OPTION_DISABLE_ACCOUNT = "disable-account"
OPTION_DISABLE_INSTALLATION = "disable-installation"
OPTION_PASSWORD = "password"
OPTION_RENDEZVOUS_SERVERS = "rendezvous-servers"


# DEFAULT_DISPLAY_SETTINGS / OVERWRITE_DISPLAY_SETTINGS
KEYS_DISPLAY_SETTINGS = (
    OPTION_VIEW_ONLY,
    OPTION_SHOW_MONITORS_TOOLBAR,
    OPTION_COLLAPSE_TOOLBAR,
    OPTION_SHOW_REMOTE_CURSOR,
    OPTION_FOLLOW_REMOTE_CURSOR,
    OPTION_FOLLOW_REMOTE_WINDOW,
    OPTION_ZOOM_CURSOR,
    OPTION_SHOW_QUALITY_MONITOR,
    OPTION_DISABLE_AUDIO,
    OPTION_ENABLE_FILE_COPY_PASTE,
    OPTION_DISABLE_CLIPBOARD,
    OPTION_LOCK_AFTER_SESSION_END,
    OPTION_PRIVACY_MODE,
    OPTION_TOUCH_MODE,
    OPTION_I444,
    OPTION_REVERSE_MOUSE_WHEEL,
    OPTION_SWAP_LEFT_RIGHT_MOUSE,
    OPTION_DISPLAYS_AS_INDIVIDUAL_WINDOWS,
    OPTION_USE_ALL_MY_DISPLAYS_FOR_THE_REMOTE_SESSION,
    OPTION_VIEW_STYLE,
    OPTION_TERMINAL_PERSISTENT,
    OPTION_SCROLL_STYLE,
    OPTION_IMAGE_QUALITY,
    OPTION_CUSTOM_IMAGE_QUALITY,
    OPTION_CUSTOM_FPS,
    OPTION_CODEC_PREFERENCE,
    OPTION_SYNC_INIT_CLIPBOARD,
    OPTION_TRACKPAD_SPEED,
)

# DEFAULT_LOCAL_SETTINGS / OVERWRITE_LOCAL_SETTINGS
KEYS_LOCAL_SETTINGS = (
    OPTION_THEME,
    OPTION_LANGUAGE,
    OPTION_ENABLE_CONFIRM_CLOSING_TABS,
    OPTION_ENABLE_OPEN_NEW_CONNECTIONS_IN_TABS,
    OPTION_TEXTURE_RENDER,
    OPTION_ALLOW_D3D_RENDER,
    OPTION_SYNC_AB_WITH_RECENT_SESSIONS,
    OPTION_SYNC_AB_TAGS,
    OPTION_FILTER_AB_BY_INTERSECTION,
    OPTION_REMOTE_MENUBAR_DRAG_LEFT,
    OPTION_REMOTE_MENUBAR_DRAG_RIGHT,
    OPTION_HIDE_AB_TAGS_PANEL,
    OPTION_FLUTTER_REMOTE_MENUBAR_STATE,
    OPTION_FLUTTER_PEER_SORTING,
    OPTION_FLUTTER_PEER_TAB_INDEX,
    OPTION_FLUTTER_PEER_TAB_ORDER,
    OPTION_FLUTTER_PEER_TAB_VISIBLE,
    OPTION_FLUTTER_PEER_CARD_UI_TYLE,
    OPTION_FLUTTER_CURRENT_AB_NAME,
    OPTION_DISABLE_FLOATING_WINDOW,
    OPTION_FLOATING_WINDOW_SIZE,
    OPTION_FLOATING_WINDOW_UNTOUCHABLE,
    OPTION_FLOATING_WINDOW_TRANSPARENCY,
    OPTION_FLOATING_WINDOW_SVG,
    OPTION_KEEP_SCREEN_ON,
    OPTION_DISABLE_GROUP_PANEL,
    OPTION_DISABLE_DISCOVERY_PANEL,
    OPTION_PRE_ELEVATE_SERVICE,
    OPTION_ALLOW_REMOTE_CM_MODIFICATION,
    OPTION_ALLOW_AUTO_RECORD_OUTGOING,
    OPTION_VIDEO_SAVE_DIRECTORY,
    OPTION_ENABLE_UDP_PUNCH,
    OPTION_ENABLE_IPV6_PUNCH,
)

# DEFAULT_SETTINGS / OVERWRITE_SETTINGS
KEYS_SETTINGS = (
    OPTION_ACCESS_MODE,
    OPTION_ENABLE_KEYBOARD,
    OPTION_ENABLE_CLIPBOARD,
    OPTION_ENABLE_FILE_TRANSFER,
    OPTION_ENABLE_CAMERA,
    OPTION_ENABLE_TERMINAL,
    OPTION_ENABLE_REMOTE_PRINTER,
    OPTION_ENABLE_AUDIO,
    OPTION_ENABLE_TUNNEL,
    OPTION_ENABLE_REMOTE_RESTART,
    OPTION_ENABLE_RECORD_SESSION,
    OPTION_ENABLE_BLOCK_INPUT,
    OPTION_ALLOW_REMOTE_CONFIG_MODIFICATION,
    OPTION_ALLOW_NUMERNIC_ONE_TIME_PASSWORD,
    OPTION_ENABLE_LAN_DISCOVERY,
    OPTION_DIRECT_SERVER,
    OPTION_DIRECT_ACCESS_PORT,
    OPTION_WHITELIST,
    OPTION_ALLOW_AUTO_DISCONNECT,
    OPTION_AUTO_DISCONNECT_TIMEOUT,
    OPTION_ALLOW_ONLY_CONN_WINDOW_OPEN,
    OPTION_ALLOW_AUTO_RECORD_INCOMING,
    OPTION_ENABLE_ABR,
    OPTION_ALLOW_REMOVE_WALLPAPER,
    OPTION_ALLOW_ALWAYS_SOFTWARE_RENDER,
    OPTION_ALLOW_LINUX_HEADLESS,
    OPTION_ENABLE_HWCODEC,
    OPTION_APPROVE_MODE,
    OPTION_VERIFICATION_METHOD,
    OPTION_TEMPORARY_PASSWORD_LENGTH,
    OPTION_PROXY_URL,
    OPTION_PROXY_USERNAME,
    OPTION_PROXY_PASSWORD,
    OPTION_CUSTOM_RENDEZVOUS_SERVER,
    OPTION_API_SERVER,
    OPTION_KEY,
    OPTION_ALLOW_WEBSOCKET,
    OPTION_PRESET_ADDRESS_BOOK_NAME,
    OPTION_PRESET_ADDRESS_BOOK_TAG,
    OPTION_ENABLE_DIRECTX_CAPTURE,
    OPTION_ENABLE_ANDROID_SOFTWARE_ENCODING_HALF_SCALE,
    OPTION_ENABLE_TRUSTED_DEVICES,
)

# BUILTIN_SETTINGS
KEYS_BUILDIN_SETTINGS = (
    OPTION_DISPLAY_NAME,
    OPTION_DISABLE_UDP,
    OPTION_PRESET_DEVICE_GROUP_NAME,
    OPTION_PRESET_USERNAME,
    OPTION_PRESET_STRATEGY_NAME,
    OPTION_REMOVE_PRESET_PASSWORD_WARNING,
    OPTION_HIDE_SECURITY_SETTINGS,
    OPTION_HIDE_NETWORK_SETTINGS,
    OPTION_HIDE_SERVER_SETTINGS,
    OPTION_HIDE_PROXY_SETTINGS,
    OPTION_HIDE_REMOTE_PRINTER_SETTINGS,
    OPTION_HIDE_WEBSOCKET_SETTINGS,
    OPTION_HIDE_USERNAME_ON_CARD,
    OPTION_HIDE_HELP_CARDS,
    OPTION_DEFAULT_CONNECT_PASSWORD,
    OPTION_HIDE_TRAY,
    OPTION_ONE_WAY_CLIPBOARD_REDIRECTION,
    OPTION_ALLOW_LOGON_SCREEN_PASSWORD,
    OPTION_ONE_WAY_FILE_TRANSFER,
    OPTION_ALLOW_HTTPS_21114,
    OPTION_ALLOW_HOSTNAME_AS_ID,
    OPTION_REGISTER_DEVICE,
    OPTION_HIDE_POWERED_BY_ME,
    OPTION_MAIN_WINDOW_ALWAYS_ON_TOP,
)

FAMILY_SETTINGS = "settings"
FAMILY_LOCAL = "local"
FAMILY_DISPLAY = "display"
FAMILY_BUILTIN = "builtin"

_FAMILIES = {}
for _family, _keys in (
    (FAMILY_DISPLAY, KEYS_DISPLAY_SETTINGS),
    (FAMILY_LOCAL, KEYS_LOCAL_SETTINGS),
    (FAMILY_SETTINGS, KEYS_SETTINGS),
    (FAMILY_BUILTIN, KEYS_BUILDIN_SETTINGS),
):
    for _key in _keys:
        _FAMILIES.setdefault(_key, _family)
del _family, _keys, _key


def family_of(key: str) -> Optional[str]:
    """Return the option family a key belongs to, or None for unknown keys."""
    return _FAMILIES.get(key)


def is_known_option(key: str) -> bool:
    return key in _FAMILIES
