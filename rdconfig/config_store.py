"""
ConfigStore - the context object that owns every configuration entity.

One instance holds the path resolver, the field cipher, the layered option
maps and one store per entity. Independent instances may coexist, each
bound to its own config directory; ``rdconfig.get_store()`` returns a
lazily-created process-wide default.

Usage:
    from rdconfig import ConfigStore

    store = ConfigStore(app_name="RustDesk")
    store.identity.bootstrap()
    store.network.set_option("custom-rendezvous-server", "rs.example.com")
    server = store.rendezvous.get_rendezvous_server()
"""

import logging
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_APP_NAME, PLATFORM
from .crypto.password_security import FieldCipher, get_default_cipher
from .models.books import Ab, Group
from .options.resolver import SettingsRegistry
from .paths import PathResolver
from .store.books import BlobStore, address_book_store, group_store
from .store.display import DisplayStore
from .store.identity import IdentityStore
from .store.lan_peers import LanPeersStore
from .store.local import LocalStore
from .store.network import NetworkStore
from .store.peers import PeerStore
from .store.rendezvous import RendezvousStore
from .store.status import StatusStore

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    Configuration store for one application.

    Args:
        app_name: Application name used in file names
        org: Organization for the macOS bundle directory
        config_dir: Explicit config directory (skips platform discovery)
        platform: Platform name; detected when omitted
        cipher: Field cipher; the machine-keyed cipher when omitted
        settings: DEFAULT/OVERWRITE/BUILTIN/HARD maps; empty when omitted
        app_dir: Data directory supplied by a mobile host application
        app_home_dir: Home directory supplied by a mobile host application
    """

    def __init__(
        self,
        app_name: str = DEFAULT_APP_NAME,
        org: str = "",
        config_dir: Optional[Path] = None,
        platform: Optional[str] = None,
        cipher: Optional[FieldCipher] = None,
        settings: Optional[SettingsRegistry] = None,
        app_dir: str = "",
        app_home_dir: str = "",
    ):
        self.paths = PathResolver(
            app_name=app_name,
            org=org,
            platform=platform or PLATFORM,
            config_dir=config_dir,
            app_dir=app_dir,
            app_home_dir=app_home_dir,
        )
        self.cipher = cipher or get_default_cipher()
        self.settings = settings or SettingsRegistry()

        self.identity = IdentityStore(self)
        self.network = NetworkStore(self)
        self.local = LocalStore(self)
        self.display = DisplayStore(self)
        self.status = StatusStore(self)
        self.peers = PeerStore(self)
        self.lan_peers = LanPeersStore(self)
        self.address_book: BlobStore[Ab] = address_book_store(self)
        self.group: BlobStore[Group] = group_store(self)
        self.rendezvous = RendezvousStore(self)

        logger.debug(f"Config store for {app_name} at {self.paths.config_dir()}")

    @property
    def app_name(self) -> str:
        return self.paths.app_name

    @property
    def config_dir(self) -> Path:
        return self.paths.config_dir()

    def default_log_path(self) -> Path:
        return self.paths.log_path()

    def bootstrap(self) -> None:
        """Create the identity (id, salt, keypair) if this is a first run."""
        self.identity.bootstrap()
