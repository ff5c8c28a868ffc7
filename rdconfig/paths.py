"""
On-disk locations for every config file.

All files live under one per-user config directory:

    <config_dir>/<App><suffix>.toml       records ("", "2", "_local", ...)
    <config_dir>/peers/<id>.toml          one file per remote peer
    <config_dir>/<App>_ab, <App>_group    encrypted blobs

The base directory comes from platformdirs and is then rewritten for a few
platform quirks: a Windows service runs with the LocalService profile, macOS
keeps settings under Preferences, and a Linux process started with sudo
resolves the invoking user's home rather than /root.
"""

import base64
import binascii
import logging
import os
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from platformdirs import user_config_dir

from .constants import (
    CONFIG_EXTENSION,
    DEFAULT_APP_NAME,
    DEFAULT_MACOS_ORG,
    MOBILE_PLATFORMS,
    PEER_ID_BASE64_PREFIX,
    PEERS_DIR,
    PLATFORM,
    Permissions,
)
from .utils.error_handling import ErrorCategory, with_error_handling

logger = logging.getLogger(__name__)

_FORBIDDEN_PEER_ID = re.compile(r"[<>:/\\|?*]")


# =============================================================================
# PLATFORM REWRITES
# =============================================================================

@with_error_handling(category=ErrorCategory.PLATFORM, default_return=None)
def _run_trimmed(args) -> Optional[str]:
    result = subprocess.run(args, capture_output=True, text=True, timeout=5, check=True)
    return result.stdout.strip()


def lookup_home(user: str) -> Optional[str]:
    """Home directory of ``user`` from the local user database."""
    output = _run_trimmed(["getent", "passwd", user])
    if not output:
        return None
    fields = output.splitlines()[0].split(":")
    if len(fields) < 6 or not fields[5]:
        return None
    return fields[5]


def patch_path(path: Path, platform: str = PLATFORM) -> Path:
    """Apply the platform-specific rewrite to a resolved base directory."""
    text = str(path)
    if platform == 'windows':
        return Path(text.replace(
            "system32\\config\\systemprofile",
            "ServiceProfiles\\LocalService",
        ))
    if platform == 'macos':
        return Path(text.replace("Application Support", "Preferences"))
    if platform == 'linux' and text == "/root":
        user = _run_trimmed(["whoami"])
        if user and user != "root":
            home = lookup_home(user)
            if home:
                return Path(home)
            return Path(f"/home/{user}")
    return path


# =============================================================================
# PEER FILE NAMES
# =============================================================================

def encode_peer_id(peer_id: str) -> str:
    """File stem for a peer id; ids with forbidden characters are base64ed."""
    if _FORBIDDEN_PEER_ID.search(peer_id):
        return PEER_ID_BASE64_PREFIX + base64.b64encode(peer_id.encode('utf-8')).decode('ascii')
    return peer_id


def decode_peer_stem(stem: str) -> str:
    """Recover the peer id from a file stem written by ``encode_peer_id``."""
    if stem.startswith(PEER_ID_BASE64_PREFIX) and len(stem) != len(PEER_ID_BASE64_PREFIX):
        try:
            raw = base64.b64decode(stem[len(PEER_ID_BASE64_PREFIX):])
        except (binascii.Error, ValueError):
            raw = b""
        return raw.decode('utf-8', errors='replace')
    return stem


def with_extension(path: Path) -> Path:
    """Append the config extension, keeping any dots already in the name."""
    path = Path(path)
    return path.with_name(f"{path.name}.{CONFIG_EXTENSION}")


def get_any_listen_addr(is_ipv4: bool) -> Tuple[str, int]:
    return ("0.0.0.0", 0) if is_ipv4 else ("::", 0)


# =============================================================================
# RESOLVER
# =============================================================================

class PathResolver:
    """
    Resolves config, log, icon and IPC locations for one application.

    Args:
        app_name: Application name, used for file names and directories
        org: Organization used for the macOS bundle directory
        platform: One of windows, macos, linux, android, ios
        config_dir: Explicit config directory; skips discovery when set
        app_dir: Mobile data directory supplied by the host application
        app_home_dir: Mobile home directory supplied by the host application
    """

    def __init__(
        self,
        app_name: str = DEFAULT_APP_NAME,
        org: str = "",
        platform: str = PLATFORM,
        config_dir: Optional[Path] = None,
        app_dir: str = "",
        app_home_dir: str = "",
    ):
        self.app_name = app_name
        self.org = org or (DEFAULT_MACOS_ORG if platform == 'macos' else "")
        self.platform = platform
        self.app_dir = app_dir
        self.app_home_dir = app_home_dir
        self._config_dir = Path(config_dir) if config_dir is not None else None

    @property
    def is_mobile(self) -> bool:
        return self.platform in MOBILE_PLATFORMS

    def get_home(self) -> Path:
        if self.is_mobile:
            return Path(self.app_home_dir)
        try:
            return patch_path(Path.home(), self.platform)
        except RuntimeError:
            try:
                return Path.cwd()
            except OSError:
                return Path(tempfile.gettempdir())

    def config_dir(self) -> Path:
        if self._config_dir is not None:
            return self._config_dir
        if self.is_mobile:
            return Path(self.app_dir)
        if self.platform == 'windows':
            base = Path(user_config_dir(self.app_name, appauthor=False, roaming=True)) / "config"
        elif self.platform == 'macos':
            bundle = f"{self.org}.{self.app_name}" if self.org else self.app_name
            base = Path(user_config_dir(bundle, appauthor=False))
        else:
            base = Path(user_config_dir(self.app_name.lower().replace(" ", ""), appauthor=False))
        return patch_path(base, self.platform)

    def path(self, name) -> Path:
        return self.config_dir() / name

    def file(self, suffix: str) -> Path:
        """``<config_dir>/<App><suffix>.toml``"""
        return with_extension(self.path(f"{self.app_name}{suffix}"))

    def peers_dir(self) -> Path:
        return self.path(PEERS_DIR)

    def peer_path(self, peer_id: str) -> Path:
        return with_extension(self.peers_dir() / encode_peer_id(peer_id))

    def blob_path(self, suffix: str) -> Path:
        """Extension-less blob file such as ``<App>_ab``."""
        return self.path(f"{self.app_name}{suffix}")

    def log_path(self) -> Path:
        if self.platform == 'macos':
            return Path.home() / "Library" / "Logs" / self.app_name
        if self.platform == 'linux':
            path = self.get_home() / ".local" / "share" / "logs" / self.app_name
            path.mkdir(parents=True, exist_ok=True)
            return path
        if self.platform == 'android':
            path = self.get_home() / self.app_name / "Logs"
            path.mkdir(parents=True, exist_ok=True)
            return path
        return self.config_dir().parent / "log"

    def icon_path(self) -> Path:
        path = self.path("icons")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError:
            path = Path(tempfile.gettempdir())
        return path

    def ipc_path(self, postfix: str = "") -> str:
        if self.platform == 'windows':
            return f"\\\\.\\pipe\\{self.app_name}\\query{postfix}"
        if self.platform == 'android':
            base = Path(self.app_dir) / self.app_name
        else:
            base = Path("/tmp") / self.app_name
        try:
            base.mkdir(exist_ok=True)
            os.chmod(base, Permissions.IPC_DIR)
        except OSError as e:
            logger.debug(f"Could not prepare IPC directory {base}: {e}")
        return str(base / f"ipc{postfix}")


__all__ = [
    'PathResolver',
    'patch_path',
    'lookup_home',
    'encode_peer_id',
    'decode_peer_stem',
    'with_extension',
    'get_any_listen_addr',
]
