"""
Identity record: device id, permanent password, salt and signing keys.

On disk the plaintext ``id`` is always empty; the encrypted id lives in
``enc_id``. The in-memory record holds plaintext for both ``id`` and
``password``.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from ..codec import (
    Field,
    Record,
    decode_bool,
    decode_keypair,
    decode_map_bool,
    decode_str,
)

KeyPair = Tuple[bytes, bytes]


@dataclass
class IdentityRecord(Record):
    id: str = ""
    enc_id: str = ""
    password: str = ""
    salt: str = ""
    key_pair: KeyPair = (b"", b"")
    key_confirmed: bool = False
    keys_confirmed: Dict[str, bool] = field(default_factory=dict)

    FIELDS = (
        Field('id', decode_str, "", skip_empty=True),
        Field('enc_id', decode_str, ""),
        Field('password', decode_str, ""),
        Field('salt', decode_str, ""),
        Field('key_pair', decode_keypair, (b"", b""), skip_empty=True),
        Field('key_confirmed', decode_bool, False),
        Field('keys_confirmed', decode_map_bool, {}),
    )

    def is_empty(self) -> bool:
        return (not self.id and not self.enc_id) or not self.key_pair[0]
