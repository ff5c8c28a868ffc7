"""
Per-peer session files.

Each remote peer has its own file under ``<config_dir>/peers``; there is no
in-memory singleton, every call reads or writes the file. Peer ids holding
a character that is not allowed in file names are stored as
``base64_<base64(id)>``.

Listing is ordered by modification time, newest first, and loaded in
batches of 100 so a caller can show the most recent peers before the rest
are parsed. ``preload_peers`` warms the OS file cache from a background
thread and stops after one batch if that batch was already fast.
"""

import dataclasses
import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Set, Tuple

from ..codec import load_path
from ..constants import CONFIG_EXTENSION, ENCRYPT_MAX_LEN, PASSWORD_ENC_VERSION, PEER_ENCRYPTED_OPTIONS, Limits
from ..logging_config import get_logger
from ..models.peer import PeerConfig
from ..paths import decode_peer_stem
from ..utils.error_handling import ErrorCategory, safe_execute
from .base import write_record

if TYPE_CHECKING:
    from ..config_store import ConfigStore

logger = get_logger(__name__)

# (peer id, modification time in seconds, file path)
PeerEntry = Tuple[str, float, Path]
# (peer id, modification time in seconds, loaded record)
LoadedPeer = Tuple[str, float, PeerConfig]


class PeerStore:
    """
    Load, store and enumerate per-peer records.

    Args:
        root: The owning ConfigStore (paths, cipher, display defaults)
    """

    def __init__(self, root: 'ConfigStore'):
        self._root = root
        self._new_stored_lock = threading.Lock()
        self._new_stored: Set[str] = set()
        self.preload_thread: Optional[threading.Thread] = None

    def path(self, peer_id: str) -> Path:
        return self._root.paths.peer_path(peer_id)

    def exists(self, peer_id: str) -> bool:
        return self.path(peer_id).exists()

    # -- single records -------------------------------------------------------

    def load(self, peer_id: str) -> PeerConfig:
        """
        Load a peer, decrypting its secrets.

        A file that still holds plaintext secrets is rewritten encrypted.
        """
        cipher = self._root.cipher
        record = load_path(self.path(peer_id), PeerConfig, self._root.display.read)

        record.password, _, rewrite = cipher.decrypt_vec_or_original(
            record.password, PASSWORD_ENC_VERSION)
        for key in PEER_ENCRYPTED_OPTIONS:
            if key in record.options:
                record.options[key], _, opt_rewrite = cipher.decrypt_str_or_original(
                    record.options[key], PASSWORD_ENC_VERSION)
                rewrite = rewrite or opt_rewrite

        if rewrite:
            logger.debug(f"Upgrading peer config '{peer_id}'")
            self.store(record, peer_id)
        return record

    def store(self, record: PeerConfig, peer_id: str) -> None:
        cipher = self._root.cipher
        options = dict(record.options)
        for key in PEER_ENCRYPTED_OPTIONS:
            if key in options:
                options[key] = cipher.encrypt_str_or_original(
                    options[key], PASSWORD_ENC_VERSION, ENCRYPT_MAX_LEN)
        on_disk = dataclasses.replace(
            record,
            password=cipher.encrypt_vec_or_original(
                record.password, PASSWORD_ENC_VERSION, ENCRYPT_MAX_LEN),
            options=options,
        )
        write_record(self.path(peer_id), on_disk.to_dict(), f"peer config '{peer_id}'")
        with self._new_stored_lock:
            self._new_stored.add(peer_id)

    def remove(self, peer_id: str) -> None:
        try:
            self.path(peer_id).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove peer config '{peer_id}': {e}")

    def take_new_stored(self) -> Set[str]:
        """Ids stored since the previous call."""
        with self._new_stored_lock:
            ids, self._new_stored = self._new_stored, set()
        return ids

    # -- listing --------------------------------------------------------------

    def get_vec_id_modified_time_path(
        self,
        id_filters: Optional[Iterable[str]] = None,
    ) -> List[PeerEntry]:
        """Peer files, newest first, optionally restricted to ``id_filters``."""
        peers_dir = self._root.paths.peers_dir()
        try:
            children = list(peers_dir.iterdir())
        except OSError:
            return []

        filters = set(id_filters) if id_filters is not None else None
        entries: List[PeerEntry] = []
        for path in children:
            if path.suffix != f".{CONFIG_EXTENSION}" or not path.is_file():
                continue
            peer_id = decode_peer_stem(path.stem)
            if filters is not None and peer_id not in filters:
                continue
            try:
                mtime = path.stat().st_mtime
            except OSError:
                mtime = 0.0
            entries.append((peer_id, mtime, path))

        entries.sort(key=lambda e: e[1], reverse=True)
        return entries

    def batch_peers(
        self,
        entries: List[PeerEntry],
        start: int,
        end: Optional[int] = None,
    ) -> Tuple[List[LoadedPeer], int]:
        """
        Load ``entries[start:end]``; ``end`` defaults to one batch.

        Returns the loaded peers and the index to continue from. A peer whose
        info carries no platform is incomplete: its file is deleted and it is
        left out of the result.
        """
        if start >= len(entries):
            return [], 0

        if end is None:
            end = start + Limits.BATCH_LOADING_COUNT
        end = min(end, len(entries))
        if end <= start:
            return [], start

        loaded: List[LoadedPeer] = []
        for peer_id, mtime, path in entries[start:end]:
            record = self.load(peer_id)
            if not record.info.platform:
                with safe_execute(f"remove incomplete peer '{peer_id}'", ErrorCategory.FILESYSTEM):
                    path.unlink()
                continue
            loaded.append((peer_id, mtime, record))
        return loaded, end

    def peers(self, id_filters: Optional[Iterable[str]] = None) -> List[LoadedPeer]:
        entries = self.get_vec_id_modified_time_path(id_filters)
        return self.batch_peers(entries, 0, len(entries))[0]

    # -- preload --------------------------------------------------------------

    def preload_peers(self) -> threading.Thread:
        """Start the background cache warm-up and return its thread."""
        self.preload_thread = threading.Thread(
            target=self._preload,
            name="rdconfig-preload-peers",
            daemon=True,
        )
        self.preload_thread.start()
        return self.preload_thread

    def _preload(self) -> int:
        """Open every peer file once; returns how many were opened."""
        started = time.monotonic()
        entries = self.get_vec_id_modified_time_path()
        opened = 0
        batch_started = time.monotonic()
        for index, (_, _, path) in enumerate(entries, 1):
            try:
                with open(path, 'rb'):
                    pass
            except OSError:
                pass
            opened += 1
            if index % Limits.BATCH_LOADING_COUNT == 0:
                elapsed_ms = (time.monotonic() - batch_started) * 1000
                if elapsed_ms < Limits.PRELOAD_FAST_BATCH_MS:
                    # Cache is already warm
                    return opened
                batch_started = time.monotonic()

        logger.log_with_data(logging.INFO, "Preload peers done", {
            'elapsed_s': round(time.monotonic() - started, 3),
            'batch_count': Limits.BATCH_LOADING_COUNT,
            'total': len(entries),
        })
        return opened


__all__ = [
    'PeerStore',
    'PeerEntry',
    'LoadedPeer',
]
