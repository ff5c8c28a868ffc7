"""
Trusted devices: remote machines that recently passed authentication.

The list is kept as JSON inside one encrypted string of the network
record. Entries expire 90 days after they were added.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..constants import Limits
from ..utils.error_handling import CodecError

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class TrustedDevice:
    hwid: bytes
    time: int
    id: str
    name: str
    platform: str

    def outdate(self, now: Optional[int] = None) -> bool:
        now = now_ms() if now is None else now
        return self.time + Limits.TRUSTED_DEVICE_TTL_MS < now

    def to_json(self) -> Dict[str, Any]:
        return {
            'hwid': list(self.hwid),
            'time': self.time,
            'id': self.id,
            'name': self.name,
            'platform': self.platform,
        }

    @classmethod
    def from_json(cls, data: Any) -> 'TrustedDevice':
        """Strict decode; every field is required."""
        if not isinstance(data, dict):
            raise CodecError("trusted device must be an object")
        try:
            hwid = data['hwid']
            if not isinstance(hwid, list) or not all(
                isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in hwid
            ):
                raise CodecError("hwid must be a byte array")
            when = data['time']
            if not isinstance(when, int) or isinstance(when, bool):
                raise CodecError("time must be an integer")
            text = {k: data[k] for k in ('id', 'name', 'platform')}
        except KeyError as e:
            raise CodecError(f"trusted device is missing {e}") from e
        if not all(isinstance(v, str) for v in text.values()):
            raise CodecError("trusted device text fields must be strings")
        return cls(hwid=bytes(hwid), time=when, **text)


def parse_trusted_devices(text: str) -> List[TrustedDevice]:
    """Decode the JSON list; a malformed document yields an empty list."""
    try:
        items = json.loads(text)
        if not isinstance(items, list):
            raise CodecError("trusted devices must be a list")
        return [TrustedDevice.from_json(item) for item in items]
    except (ValueError, CodecError) as e:
        logger.debug(f"Discarding unreadable trusted devices: {e}")
        return []


def dump_trusted_devices(devices: List[TrustedDevice]) -> str:
    return json.dumps([d.to_json() for d in devices], separators=(',', ':'))
