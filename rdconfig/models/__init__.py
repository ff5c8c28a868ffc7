"""
Persisted record types.

Each record is a dataclass with a tolerant TOML (or JSON) schema; see
``rdconfig.codec`` for the decoding rules.
"""

from .books import Ab, AbEntry, AbPeer, DeviceGroup, Group, GroupPeer, GroupUser
from .identity import IdentityRecord, KeyPair
from .lan_peers import DiscoveryPeer, LanPeersRecord
from .local import LocalRecord
from .network import NetworkRecord, Socks5Server
from .peer import BOOL_FLAGS, PeerConfig, PeerInfo, Resolution, Transfer
from .status import StatusRecord
from .trusted_device import TrustedDevice, dump_trusted_devices, now_ms, parse_trusted_devices
from .user_default import UserDefaultRecord

__all__ = [
    # Identity and network
    'IdentityRecord',
    'KeyPair',
    'NetworkRecord',
    'Socks5Server',
    'TrustedDevice',
    'parse_trusted_devices',
    'dump_trusted_devices',
    'now_ms',

    # Peers
    'PeerConfig',
    'PeerInfo',
    'Resolution',
    'Transfer',
    'BOOL_FLAGS',
    'DiscoveryPeer',
    'LanPeersRecord',

    # Local state
    'LocalRecord',
    'StatusRecord',
    'UserDefaultRecord',

    # Books
    'Ab',
    'AbEntry',
    'AbPeer',
    'Group',
    'GroupPeer',
    'GroupUser',
    'DeviceGroup',
]
