"""
Peers discovered on the local network by the last scan.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from ..codec import Field, Record, decode_bool, decode_map_str, decode_str, list_of, record_of


@dataclass
class DiscoveryPeer(Record):
    id: str = ""
    username: str = ""
    hostname: str = ""
    platform: str = ""
    online: bool = False
    ip_mac: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field('id', decode_str, ""),
        Field('username', decode_str, ""),
        Field('hostname', decode_str, ""),
        Field('platform', decode_str, ""),
        Field('online', decode_bool, False),
        Field('ip_mac', decode_map_str, {}),
    )

    def is_same_peer(self, other: 'DiscoveryPeer') -> bool:
        return self.id == other.id and self.username == other.username


@dataclass
class LanPeersRecord(Record):
    peers: List[DiscoveryPeer] = field(default_factory=list)

    FIELDS = (
        Field('peers', list_of(record_of(DiscoveryPeer)), []),
    )
