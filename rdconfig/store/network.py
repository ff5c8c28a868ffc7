"""
Network store: general options, NAT type, proxy, unlock PIN and the
trusted-device list.

General options resolve through the SETTINGS family:

    OVERWRITE_SETTINGS > stored options > DEFAULT_SETTINGS

The socks password and the unlock PIN are encrypted on disk. Trusted
devices are a JSON list kept inside one encrypted string; the decrypted
list is cached and marked synchronized after the first successful read.
"""

import dataclasses
import logging
import threading
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..constants import ENCRYPT_MAX_LEN, PASSWORD_ENC_VERSION, SERIAL, Limits
from ..models.network import NetworkRecord, Socks5Server
from ..models.trusted_device import TrustedDevice, dump_trusted_devices, parse_trusted_devices
from ..options import keys
from ..options.keys import FAMILY_SETTINGS
from ..options.resolver import (
    apply_option,
    check_known,
    get_or,
    is_option_can_save,
    option2bool,
    purify_options,
)
from .base import EntityStore

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    DIRECT = "direct"
    PROXY_SOCKS = "proxy_socks"


def socks_from_settings(settings) -> Optional[Socks5Server]:
    """Proxy triple from a custom-client settings map, if it names a proxy."""
    url = settings.get(keys.OPTION_PROXY_URL)
    if url is None:
        return None
    return Socks5Server(
        proxy=url,
        username=settings.get(keys.OPTION_PROXY_USERNAME) or "",
        password=settings.get(keys.OPTION_PROXY_PASSWORD) or "",
    )


class NetworkStore(EntityStore[NetworkRecord]):
    record_cls = NetworkRecord
    suffix = "2"
    label = "network"

    def __init__(self, root):
        super().__init__(root)
        self._trusted_lock = threading.Lock()
        self._trusted: Tuple[List[TrustedDevice], bool] = ([], False)

    def load(self) -> NetworkRecord:
        record = super().load()
        cipher = self.cipher
        rewrite = False
        if record.socks is not None:
            record.socks.password, _, rewrite = cipher.decrypt_str_or_original(
                record.socks.password, PASSWORD_ENC_VERSION)
        record.unlock_pin, _, pin_rewrite = cipher.decrypt_str_or_original(
            record.unlock_pin, PASSWORD_ENC_VERSION)
        if rewrite or pin_rewrite:
            self.write(record)
        return record

    def encode(self, record: NetworkRecord) -> Dict[str, Any]:
        cipher = self.cipher
        socks = record.socks
        if socks is not None:
            socks = dataclasses.replace(
                socks,
                password=cipher.encrypt_str_or_original(
                    socks.password, PASSWORD_ENC_VERSION, ENCRYPT_MAX_LEN),
            )
        on_disk = dataclasses.replace(
            record,
            socks=socks,
            unlock_pin=cipher.encrypt_str_or_original(
                record.unlock_pin, PASSWORD_ENC_VERSION, ENCRYPT_MAX_LEN),
        )
        return on_disk.to_dict()

    # -- general options ------------------------------------------------------

    def get_option(self, key: str) -> str:
        overwrite, default = self.settings.pair(FAMILY_SETTINGS)
        return self._read(lambda r: get_or(overwrite, r.options, default, key)) or ""

    def get_bool_option(self, key: str) -> bool:
        return option2bool(key, self.get_option(key))

    def get_options(self) -> Dict[str, str]:
        """DEFAULT, then stored options, then OVERWRITE, later layers winning."""
        overwrite, default = self.settings.pair(FAMILY_SETTINGS)
        merged = default.copy()
        merged.update(self._read(lambda r: dict(r.options)))
        merged.update(overwrite.copy())
        return merged

    def set_option(self, key: str, value: str) -> None:
        overwrite, default = self.settings.pair(FAMILY_SETTINGS)
        if not is_option_can_save(overwrite, key, default, value):
            return
        check_known(key, FAMILY_SETTINGS)
        self._update(lambda r: apply_option(r.options, key, value))

    def set_options(self, values: Dict[str, str]) -> None:
        """Replace every stored option, dropping entries a single write would refuse."""
        overwrite, default = self.settings.pair(FAMILY_SETTINGS)
        values = dict(values)
        purify_options(overwrite, default, values)

        def apply(record: NetworkRecord) -> bool:
            if record.options == values:
                return False
            record.options = values
            return True

        self._update(apply)

    # -- scalars --------------------------------------------------------------

    def get_nat_type(self) -> int:
        return self._read(lambda r: r.nat_type)

    def set_nat_type(self, nat_type: int) -> None:
        self._set_field('nat_type', nat_type)

    def get_serial(self) -> int:
        return max(self.get_stored_serial(), SERIAL)

    def get_stored_serial(self) -> int:
        return self._read(lambda r: r.serial)

    def set_serial(self, serial: int) -> None:
        self._set_field('serial', serial)

    def get_unlock_pin(self) -> str:
        return self._read(lambda r: r.unlock_pin)

    def set_unlock_pin(self, pin: str) -> None:
        self._set_field('unlock_pin', pin)

    def get_rendezvous_server(self) -> str:
        """The latency-chosen host recorded by rendezvous selection."""
        return self._read(lambda r: r.rendezvous_server)

    def set_rendezvous_server(self, host: str) -> bool:
        return self._set_field('rendezvous_server', host)

    def _set_field(self, name: str, value: Any) -> bool:
        def apply(record: NetworkRecord) -> bool:
            if getattr(record, name) == value:
                return False
            setattr(record, name, value)
            return True
        return self._update(apply)

    # -- proxy ----------------------------------------------------------------

    def get_socks(self) -> Optional[Socks5Server]:
        socks = socks_from_settings(self.settings.overwrite_settings)
        if socks is None:
            socks = self._read(lambda r: dataclasses.replace(r.socks) if r.socks else None)
        if socks is None:
            socks = socks_from_settings(self.settings.default_settings)
        return socks

    def set_socks(self, socks: Optional[Socks5Server]) -> None:
        """
        Store the proxy; ignored when an overwrite pins ``proxy-url``, or
        when nothing is stored yet and the value equals the default proxy.
        """
        settings = self.settings
        if keys.OPTION_PROXY_URL in settings.overwrite_settings:
            return

        default = settings.default_settings
        candidate = socks or Socks5Server()

        def equal_to_default(key: str, value: str) -> bool:
            return default.get(key) == value

        def apply(record: NetworkRecord) -> bool:
            if record.socks == socks:
                return False
            if record.socks is None and (
                keys.OPTION_PROXY_URL in default
                and equal_to_default(keys.OPTION_PROXY_URL, candidate.proxy)
                and equal_to_default(keys.OPTION_PROXY_USERNAME, candidate.username)
                and equal_to_default(keys.OPTION_PROXY_PASSWORD, candidate.password)
            ):
                return False
            record.socks = dataclasses.replace(socks) if socks is not None else None
            return True

        self._update(apply)

    def get_network_type(self) -> NetworkType:
        settings = self.settings
        if keys.OPTION_PROXY_URL in settings.overwrite_settings:
            return NetworkType.PROXY_SOCKS
        if self._read(lambda r: r.socks is not None):
            return NetworkType.PROXY_SOCKS
        if keys.OPTION_PROXY_URL in settings.default_settings:
            return NetworkType.PROXY_SOCKS
        return NetworkType.DIRECT

    def is_proxy(self) -> bool:
        return self.get_network_type() != NetworkType.DIRECT

    def use_ws(self) -> bool:
        return self.get_bool_option(keys.OPTION_ALLOW_WEBSOCKET)

    # -- trusted devices ------------------------------------------------------

    def get_trusted_devices(self) -> List[TrustedDevice]:
        with self._trusted_lock:
            devices, synced = self._trusted
            if synced:
                return list(devices)

        stored = self._read(lambda r: r.trusted_devices)
        text, decrypted, rewrite = self.cipher.decrypt_str_or_original(stored, PASSWORD_ENC_VERSION)
        if not decrypted:
            return []

        devices = parse_trusted_devices(text)
        count = len(devices)
        devices = [d for d in devices if not d.outdate()]
        if rewrite or len(devices) != count:
            self._set_trusted_devices(list(devices))
        with self._trusted_lock:
            self._trusted = (list(devices), True)
        return devices

    def get_trusted_devices_json(self) -> str:
        return dump_trusted_devices(self.get_trusted_devices())

    def _set_trusted_devices(self, devices: List[TrustedDevice]) -> None:
        devices = [d for d in devices if not d.outdate()]
        text = dump_trusted_devices(devices)
        size = len(text.encode('utf-8'))
        if size > Limits.TRUSTED_DEVICES_MAX_LEN:
            logger.error(f"Trusted devices too large: {size}")
            return
        encrypted = self.cipher.encrypt_str_or_original(
            text, PASSWORD_ENC_VERSION, Limits.TRUSTED_DEVICES_MAX_LEN)

        def apply(record: NetworkRecord) -> bool:
            record.trusted_devices = encrypted
            return True

        self._update(apply)
        with self._trusted_lock:
            self._trusted = (devices, True)

    def add_trusted_device(self, device: TrustedDevice) -> None:
        """Add ``device``, replacing any entry with the same hardware id."""
        devices = [d for d in self.get_trusted_devices() if d.hwid != device.hwid]
        devices.append(device)
        self._set_trusted_devices(devices)

    def remove_trusted_devices(self, hwids: Iterable[bytes]) -> None:
        hwids = {bytes(h) for h in hwids}
        devices = [d for d in self.get_trusted_devices() if d.hwid not in hwids]
        self._set_trusted_devices(devices)

    def clear_trusted_devices(self) -> None:
        self._set_trusted_devices([])


__all__ = [
    'NetworkStore',
    'NetworkType',
    'socks_from_settings',
]
