"""
Network record: rendezvous choice, NAT type, proxy and general options.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..codec import Field, Record, decode_int, decode_map_str, decode_str, record_of


@dataclass
class Socks5Server(Record):
    proxy: str = ""
    username: str = ""
    password: str = ""

    FIELDS = (
        Field('proxy', decode_str, ""),
        Field('username', decode_str, ""),
        Field('password', decode_str, ""),
    )


@dataclass
class NetworkRecord(Record):
    rendezvous_server: str = ""
    nat_type: int = 0
    serial: int = 0
    unlock_pin: str = ""
    trusted_devices: str = ""
    socks: Optional[Socks5Server] = None
    options: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field('rendezvous_server', decode_str, ""),
        Field('nat_type', decode_int, 0),
        Field('serial', decode_int, 0),
        Field('unlock_pin', decode_str, ""),
        Field('trusted_devices', decode_str, ""),
        Field('socks', record_of(Socks5Server), None),
        Field('options', decode_map_str, {}),
    )
