"""
Identity store: device id, permanent password, salt and signing keypair.

The id is persisted only in encrypted form (``enc_id``). A legacy file that
still carries a plaintext ``id`` and no ``enc_id`` is trusted as-is and
rewritten on load so the next file holds ``enc_id`` instead.

The signing keypair has its own slot behind a plain lock. Its first access
reads the identity file directly rather than through the identity
singleton, and a freshly generated pair is written back from a separate
thread, so key generation never re-enters the identity loader.
"""

import dataclasses
import logging
import secrets
import socket
import threading
from typing import Any, Dict, Optional

import psutil

from ..codec import load_path
from ..constants import ENCRYPT_MAX_LEN, PASSWORD_ENC_VERSION, Limits
from ..crypto.password_security import generate_keypair, random_password
from ..models.identity import IdentityRecord, KeyPair
from ..options import keys
from ..utils.error_handling import ErrorCategory, with_error_handling
from .base import EntityStore

logger = logging.getLogger(__name__)

_ZERO_MAC = "00:00:00:00:00:00"


# =============================================================================
# PLATFORM QUERIES
# =============================================================================

@with_error_handling(category=ErrorCategory.PLATFORM, default_return=None)
def hostname() -> Optional[str]:
    return socket.gethostname() or None


@with_error_handling(category=ErrorCategory.PLATFORM, default_return=None)
def primary_mac() -> Optional[bytes]:
    """Hardware address of the first active non-loopback interface."""
    net_if_addrs = psutil.net_if_addrs()
    net_if_stats = psutil.net_if_stats()

    candidates = []
    for iface in sorted(net_if_addrs):
        if iface == 'lo' or iface.startswith('lo'):
            continue
        for addr in net_if_addrs[iface]:
            if addr.family != psutil.AF_LINK or not addr.address:
                continue
            mac = addr.address.replace('-', ':').lower()
            if mac == _ZERO_MAC:
                continue
            is_up = iface in net_if_stats and net_if_stats[iface].isup
            candidates.append((not is_up, iface, mac))

    if not candidates:
        return None
    _, _, mac = min(candidates)
    return bytes(int(part, 16) for part in mac.split(':'))


def mac_to_id(mac: bytes) -> str:
    """29-bit decimal id from the last four bytes of a hardware address."""
    value = 0
    for b in mac[2:]:
        value = ((value << 8) | b) & 0xFFFFFFFF
    return str(value & Limits.MAC_ID_MASK)


# =============================================================================
# STORE
# =============================================================================

class IdentityStore(EntityStore[IdentityRecord]):
    record_cls = IdentityRecord
    suffix = ""
    label = "identity"

    def __init__(self, root):
        super().__init__(root)
        self._key_pair_lock = threading.Lock()
        self._key_pair: Optional[KeyPair] = None
        self.writeback_thread: Optional[threading.Thread] = None

    def _decrypt(self, value: str):
        return self.cipher.decrypt_str_or_original(value, PASSWORD_ENC_VERSION)

    def _encrypt(self, value: str) -> str:
        return self.cipher.encrypt_str_or_original(value, PASSWORD_ENC_VERSION, ENCRYPT_MAX_LEN)

    def load(self) -> IdentityRecord:
        record = load_path(self.path(), IdentityRecord)

        record.password, _, rewrite = self._decrypt(record.password)

        id_valid = False
        plain_id, decrypted, id_rewrite = self._decrypt(record.enc_id)
        if decrypted:
            record.id = plain_id
            id_valid = True
            rewrite = rewrite or id_rewrite
        elif record.id and not record.enc_id and not self._decrypt(record.id)[1]:
            # Legacy plaintext id, moved into enc_id by the store below
            id_valid = True
            rewrite = True

        if not id_valid:
            for _ in range(Limits.ID_GENERATION_ATTEMPTS):
                new_id = self.gen_id()
                if new_id:
                    record.id = new_id
                    rewrite = True
                    break
                logger.error("Failed to generate new id")

        if rewrite:
            self.write(record)
        return record

    def encode(self, record: IdentityRecord) -> Dict[str, Any]:
        on_disk = dataclasses.replace(
            record,
            password=self._encrypt(record.password),
            enc_id=self._encrypt(record.id),
            id="",
        )
        return on_disk.to_dict()

    # -- id -------------------------------------------------------------------

    def gen_id(self) -> Optional[str]:
        if self.settings.builtin_bool(keys.OPTION_ALLOW_HOSTNAME_AS_ID):
            name = hostname()
            if not name:
                logger.warning("Failed to get hostname for the device id")
                return None
            return name.replace(" ", "-")
        return self.get_auto_id()

    def get_auto_id(self) -> Optional[str]:
        if self._root.paths.is_mobile:
            low, high = Limits.MOBILE_ID_RANGE
            return str(low + secrets.randbelow(high - low))
        mac = primary_mac()
        if mac is None or len(mac) < 6:
            return None
        return mac_to_id(mac)

    def get_id(self) -> str:
        current = self._read(lambda r: r.id)
        if not current:
            new_id = self.gen_id()
            if new_id:
                current = new_id
                self.set_id(current)
        return current

    def get_id_or(self, fallback: str) -> str:
        current = self._read(lambda r: r.id)
        return current or fallback

    def set_id(self, new_id: str) -> None:
        def apply(record: IdentityRecord) -> bool:
            if record.id == new_id:
                return False
            record.id = new_id
            return True
        self._update(apply)

    def update_id(self) -> None:
        """Replace the id by a random one from the mobile id range."""
        old_id = self._read(lambda r: r.id)
        low, high = Limits.MOBILE_ID_RANGE
        new_id = str(low + secrets.randbelow(high - low))
        self.set_id(new_id)
        logger.info(f"id updated from {old_id} to {new_id}")

    def is_empty(self) -> bool:
        return self._read(lambda r: r.is_empty())

    # -- passwords ------------------------------------------------------------

    def get_permanent_password(self) -> str:
        password = self._read(lambda r: r.password)
        if not password:
            password = self.settings.hard_password() or ""
        return password

    def set_permanent_password(self, password: str) -> None:
        """
        Change the permanent password; a change clears every trusted device.

        A value equal to the compiled-in hard password is never stored.
        """
        if self.settings.hard_password() == password:
            return

        def apply(record: IdentityRecord) -> bool:
            if record.password == password:
                return False
            record.password = password
            return True

        if self._update(apply):
            self._root.network.clear_trusted_devices()

    def get_salt(self) -> str:
        salt = self._read(lambda r: r.salt)
        if not salt:
            salt = self.get_auto_password(Limits.AUTO_SALT_LENGTH)
            self.set_salt(salt)
        return salt

    def set_salt(self, salt: str) -> None:
        def apply(record: IdentityRecord) -> bool:
            if record.salt == salt:
                return False
            record.salt = salt
            return True
        self._update(apply)

    @staticmethod
    def get_auto_password(length: int) -> str:
        return random_password(length)

    @staticmethod
    def get_auto_numeric_password(length: int) -> str:
        return random_password(length, numeric=True)

    # -- key confirmation -----------------------------------------------------

    def get_key_confirmed(self) -> bool:
        return self._read(lambda r: r.key_confirmed)

    def set_key_confirmed(self, confirmed: bool) -> None:
        def apply(record: IdentityRecord) -> bool:
            if record.key_confirmed == confirmed:
                return False
            record.key_confirmed = confirmed
            if not confirmed:
                record.keys_confirmed = {}
            return True
        self._update(apply)

    def get_host_key_confirmed(self, host: str) -> bool:
        return self._read(lambda r: r.keys_confirmed.get(host) is True)

    def set_host_key_confirmed(self, host: str, confirmed: bool) -> None:
        def apply(record: IdentityRecord) -> bool:
            if (record.keys_confirmed.get(host) is True) == confirmed:
                return False
            record.keys_confirmed[host] = confirmed
            return True
        self._update(apply)

    # -- signing keypair ------------------------------------------------------

    def get_key_pair(self) -> KeyPair:
        """
        The signing keypair ``(sk, pk)``, generated on first use.

        A new pair is cached immediately and persisted by a background
        thread (``writeback_thread``).
        """
        with self._key_pair_lock:
            if self._key_pair is not None:
                return self._key_pair

            record = load_path(self.path(), IdentityRecord)
            key_pair = record.key_pair
            if not key_pair[0]:
                key_pair = generate_keypair()
                logger.info(f"Generated new keypair for id: {record.id}")
                self.writeback_thread = threading.Thread(
                    target=self._write_back_key_pair,
                    args=(key_pair,),
                    name="rdconfig-keypair",
                    daemon=True,
                )
                self.writeback_thread.start()

            self._key_pair = key_pair
            return key_pair

    def _write_back_key_pair(self, key_pair: KeyPair) -> None:
        def apply(record: IdentityRecord) -> bool:
            if record.key_pair == key_pair:
                return False
            record.key_pair = key_pair
            return True
        self._update(apply)

    # -- startup --------------------------------------------------------------

    def bootstrap(self, wait: bool = True) -> IdentityRecord:
        """
        Make sure the id, salt and signing keypair exist.

        With ``wait`` the keypair write-back is joined before returning.
        """
        self.get_id()
        self.get_salt()
        self.get_key_pair()
        thread = self.writeback_thread
        if wait and thread is not None:
            thread.join()
        return self.get()


__all__ = [
    'IdentityStore',
    'hostname',
    'primary_mac',
    'mac_to_id',
]
