"""
Centralized Constants Module for the configuration store.

This module consolidates the compile-time values shared by every layer:
rendezvous endpoints, timeouts, encryption bounds, file permissions and the
limits applied to persisted records.

Usage:
    from rdconfig.constants import Timeouts, Permissions, Limits

    os.chmod(path, Permissions.CONFIG_FILE)
"""

import sys
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == 'win32'


def detect_platform() -> str:
    """Map ``sys.platform`` onto the platform names used by the path layer."""
    if sys.platform == 'win32':
        return 'windows'
    if sys.platform == 'darwin':
        return 'macos'
    if hasattr(sys, 'getandroidapilevel'):
        return 'android'
    if sys.platform == 'ios':
        return 'ios'
    return 'linux'


PLATFORM = detect_platform()
MOBILE_PLATFORMS = frozenset({'android', 'ios'})


# =============================================================================
# RENDEZVOUS / RELAY ENDPOINTS
# =============================================================================

RENDEZVOUS_SERVERS: Tuple[str, ...] = ("rs-ny.rustdesk.com",)
RS_PUB_KEY = "OeVuKk5nlHiXp+APNn0Y3pC1Iwpwn44JGqrQCsWqmBw="

RENDEZVOUS_PORT = 21116
RELAY_PORT = 21117
WS_RENDEZVOUS_PORT = 21118
WS_RELAY_PORT = 21119

DEFAULT_APP_NAME = "RustDesk"
DEFAULT_MACOS_ORG = "com.carriez"

LINK_DOCS_HOME = "https://rustdesk.com/docs/en/"
LINK_DOCS_X11_REQUIRED = "https://rustdesk.com/docs/en/manual/linux/#x11-required"
LINK_HEADLESS_LINUX_SUPPORT = "https://github.com/rustdesk/rustdesk/wiki/Headless-Linux-Support"

HELPER_URL: Dict[str, str] = {
    "rustdesk docs home": LINK_DOCS_HOME,
    "rustdesk docs x11-required": LINK_DOCS_X11_REQUIRED,
    "rustdesk x11 headless": LINK_HEADLESS_LINUX_SUPPORT,
}


# =============================================================================
# TIMEOUT CONSTANTS
# =============================================================================

@dataclass(frozen=True)
class Timeouts:
    """
    Network timeouts in milliseconds.

    The keepalive interval follows the QUIC recommendation of 15 seconds
    for NAT bindings.
    """
    RENDEZVOUS: int = 12_000
    CONNECT: int = 18_000
    READ: int = 18_000
    REG_INTERVAL: int = 15_000


# Module-level aliases matching the names used on the wire protocol side
RENDEZVOUS_TIMEOUT = Timeouts.RENDEZVOUS
CONNECT_TIMEOUT = Timeouts.CONNECT
READ_TIMEOUT = Timeouts.READ
REG_INTERVAL = Timeouts.REG_INTERVAL


# =============================================================================
# ENCRYPTION / SERIALIZATION
# =============================================================================

COMPRESS_LEVEL = 3
SERIAL = 3
PASSWORD_ENC_VERSION = "00"
ENCRYPT_MAX_LEN = 128

CONFIG_EXTENSION = "toml"
PEERS_DIR = "peers"
PEER_ID_BASE64_PREFIX = "base64_"

# Sensitive option keys inside a peer record
PEER_ENCRYPTED_OPTIONS: Tuple[str, ...] = ("rdp_password", "os-username", "os-password")


@dataclass(frozen=True)
class Limits:
    """Size and count limits applied before a record is persisted."""
    TRUSTED_DEVICES_MAX_LEN: int = 1024 * 1024
    BLOB_MAX_LEN: int = 64 * 1024 * 1024
    TRUSTED_DEVICE_TTL_MS: int = 90 * 24 * 60 * 60 * 1000
    BATCH_LOADING_COUNT: int = 100
    PRELOAD_FAST_BATCH_MS: float = 10.0
    USER_DEFAULT_RELOAD_SECONDS: float = 1.0
    MIN_WINDOW_SIZE: int = 300
    ID_GENERATION_ATTEMPTS: int = 3
    MAC_ID_MASK: int = 0x1FFFFFFF
    MOBILE_ID_RANGE: Tuple[int, int] = (1_000_000_000, 2_000_000_000)
    AUTO_SALT_LENGTH: int = 6


# =============================================================================
# FILE PERMISSION CONSTANTS
# =============================================================================

class Permissions(IntEnum):
    """File permission modes applied by the store on non-Windows platforms."""
    CONFIG_FILE = 0o600                 # rw------- every persisted record
    CONFIG_DIR = 0o700                  # rwx------ freshly created config dirs
    IPC_DIR = 0o777                     # shared by service and desktop user


# =============================================================================
# PASSWORD ALPHABETS
# =============================================================================

NUM_CHARS = "0123456789"
# Lower-case alphabet without look-alike characters (0/o, 1/l)
CHARS = "23456789abcdefghijkmnpqrstuvwxyz"


__all__ = [
    'IS_WINDOWS',
    'PLATFORM',
    'MOBILE_PLATFORMS',
    'detect_platform',
    'RENDEZVOUS_SERVERS',
    'RS_PUB_KEY',
    'RENDEZVOUS_PORT',
    'RELAY_PORT',
    'WS_RENDEZVOUS_PORT',
    'WS_RELAY_PORT',
    'DEFAULT_APP_NAME',
    'DEFAULT_MACOS_ORG',
    'HELPER_URL',
    'Timeouts',
    'RENDEZVOUS_TIMEOUT',
    'CONNECT_TIMEOUT',
    'READ_TIMEOUT',
    'REG_INTERVAL',
    'COMPRESS_LEVEL',
    'SERIAL',
    'PASSWORD_ENC_VERSION',
    'ENCRYPT_MAX_LEN',
    'CONFIG_EXTENSION',
    'PEERS_DIR',
    'PEER_ID_BASE64_PREFIX',
    'PEER_ENCRYPTED_OPTIONS',
    'Limits',
    'Permissions',
    'NUM_CHARS',
    'CHARS',
]
