"""
Rendezvous server selection.

Lookup order for the server to contact:

    1. executable override (set in memory by the host process)
    2. ``custom-rendezvous-server`` option
    3. compiled-in production server
    4. lowest-latency host recorded in the network record
    5. first entry of the server list

A result without a port gets the default rendezvous port appended.

Latency measurements live in an in-memory map (host -> ms). Each update
re-elects the host with the smallest positive latency and records it in
the network record when it changed.
"""

import logging
import threading
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ..constants import RENDEZVOUS_PORT, RENDEZVOUS_SERVERS, SERIAL
from ..logging_config import get_logger
from ..options import keys

if TYPE_CHECKING:
    from ..config_store import ConfigStore

logger = get_logger(__name__)


class RendezvousStore:

    def __init__(
        self,
        root: 'ConfigStore',
        servers: Tuple[str, ...] = RENDEZVOUS_SERVERS,
    ):
        self._root = root
        self._servers = tuple(servers)
        self._lock = threading.Lock()
        self._exe_server = ""
        self._prod_server = ""
        self._online_lock = threading.Lock()
        self._online: Dict[str, int] = {}

    # -- overrides ------------------------------------------------------------

    def set_exe_rendezvous_server(self, server: str) -> None:
        with self._lock:
            self._exe_server = server

    def set_prod_rendezvous_server(self, server: str) -> None:
        with self._lock:
            self._prod_server = server

    def _overrides(self) -> Tuple[str, str]:
        with self._lock:
            return self._exe_server, self._prod_server

    # -- lookup ---------------------------------------------------------------

    def get_rendezvous_servers(self) -> List[str]:
        network = self._root.network
        exe_server, prod_server = self._overrides()
        if exe_server:
            return [exe_server]
        custom = network.get_option(keys.OPTION_CUSTOM_RENDEZVOUS_SERVER)
        if custom:
            return [custom]
        if prod_server:
            return [prod_server]

        # A newer serial means the server list was pushed through the option
        if network.get_stored_serial() > SERIAL:
            pushed = [
                s for s in network.get_option(keys.OPTION_RENDEZVOUS_SERVERS).split(',')
                if '.' in s
            ]
            if pushed:
                return pushed
        return list(self._servers)

    def get_rendezvous_server(self) -> str:
        network = self._root.network
        exe_server, prod_server = self._overrides()
        server = exe_server
        if not server:
            server = network.get_option(keys.OPTION_CUSTOM_RENDEZVOUS_SERVER)
        if not server:
            server = prod_server
        if not server:
            server = network.get_rendezvous_server()
        if not server:
            servers = self.get_rendezvous_servers()
            server = servers[0] if servers else ""
        if ':' not in server:
            server = f"{server}:{RENDEZVOUS_PORT}"
        return server

    # -- latency --------------------------------------------------------------

    def update_latency(self, host: str, latency: int) -> None:
        with self._online_lock:
            self._online[host] = latency
            best: Optional[str] = None
            best_delay = 0
            for candidate, delay in self._online.items():
                if delay > 0 and (best is None or delay < best_delay):
                    best, best_delay = candidate, delay
            online = dict(self._online)

        if best and self._root.network.set_rendezvous_server(best):
            logger.log_with_data(logging.DEBUG, f"Update rendezvous_server in config to {best}", online)

    def reset_online(self) -> None:
        with self._online_lock:
            self._online = {}

    def get_online_state(self) -> int:
        with self._online_lock:
            return max(self._online.values(), default=0)


__all__ = ['RendezvousStore']
