"""
Per-entity stores.

Each store owns the in-memory singleton of one persisted record (or, for
peers, lan peers and books, the files themselves) and applies the
load/decrypt and encrypt/store steps for it.
"""

from .base import EntityStore, write_record
from .books import BlobStore, address_book_store, group_store
from .display import DisplayStore
from .identity import IdentityStore
from .lan_peers import LanPeersStore
from .local import LocalStore
from .network import NetworkStore, NetworkType
from .peers import PeerStore
from .rendezvous import RendezvousStore
from .status import StatusStore

__all__ = [
    'EntityStore',
    'write_record',
    'IdentityStore',
    'NetworkStore',
    'NetworkType',
    'PeerStore',
    'LocalStore',
    'DisplayStore',
    'StatusStore',
    'LanPeersStore',
    'BlobStore',
    'address_book_store',
    'group_store',
    'RendezvousStore',
]
