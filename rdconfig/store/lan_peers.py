"""
Peers found by the last LAN discovery scan.

Unlike the other records this one has no in-memory singleton: the scanner
writes the whole list and readers load it from disk.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from ..codec import from_toml
from ..models.lan_peers import DiscoveryPeer, LanPeersRecord
from ..utils.error_handling import CodecError
from .base import write_record

if TYPE_CHECKING:
    from ..config_store import ConfigStore

logger = logging.getLogger(__name__)


class LanPeersStore:

    suffix = "_lan_peers"

    def __init__(self, root: 'ConfigStore'):
        self._root = root

    def path(self) -> Path:
        return self._root.paths.file(self.suffix)

    def load(self) -> LanPeersRecord:
        try:
            data = from_toml(self.path().read_text(encoding='utf-8'))
        except FileNotFoundError:
            return LanPeersRecord()
        except (OSError, UnicodeDecodeError, CodecError) as e:
            logger.error(f"Failed to load lan peers: {e}")
            return LanPeersRecord()
        return LanPeersRecord.from_dict(data)

    def store(self, peers: Sequence[DiscoveryPeer]) -> None:
        record = LanPeersRecord(peers=list(peers))
        write_record(self.path(), record.to_dict(), "lan peers")

    def modify_time(self) -> Optional[int]:
        """Modification time of the file in milliseconds, None if absent."""
        try:
            return int(self.path().stat().st_mtime * 1000)
        except OSError:
            return None


__all__ = ['LanPeersStore']
