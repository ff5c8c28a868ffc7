"""
Address book and device group caches.

Both are JSON documents fetched from the account server and cached locally
as encrypted, compressed blobs. Every string field is omitted from the JSON
when empty, and a field of the wrong type falls back to its default.
"""

import json
from dataclasses import dataclass, field
from typing import List

from ..codec import Field, Record, decode_str, decode_vec_string, list_of, record_of
from ..utils.error_handling import CodecError

PERSONAL_BOOK_NAMES = ("My address book", "Legacy address book")


def _text(name: str) -> Field:
    return Field(name, decode_str, "", skip_empty=True)


class JsonRecord(Record):
    """Record whose serialized form is a JSON object."""

    @classmethod
    def from_json(cls, text: str):
        """
        Raises:
            CodecError: if ``text`` is not a JSON object
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise CodecError(f"invalid JSON document: {e}") from e
        if not isinstance(data, dict):
            raise CodecError(f"expected JSON object for {cls.__name__}")
        return cls.from_dict(data)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(',', ':'))


# =============================================================================
# ADDRESS BOOK
# =============================================================================

@dataclass
class AbPeer(JsonRecord):
    id: str = ""
    hash: str = ""
    username: str = ""
    hostname: str = ""
    platform: str = ""
    alias: str = ""
    tags: List[str] = field(default_factory=list)

    FIELDS = (
        _text('id'),
        _text('hash'),
        _text('username'),
        _text('hostname'),
        _text('platform'),
        _text('alias'),
        Field('tags', decode_vec_string, []),
    )


@dataclass
class AbEntry(JsonRecord):
    guid: str = ""
    name: str = ""
    peers: List[AbPeer] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    tag_colors: str = ""

    FIELDS = (
        _text('guid'),
        _text('name'),
        Field('peers', list_of(record_of(AbPeer)), []),
        Field('tags', decode_vec_string, []),
        _text('tag_colors'),
    )

    def personal(self) -> bool:
        return self.name in PERSONAL_BOOK_NAMES


@dataclass
class Ab(JsonRecord):
    access_token: str = ""
    ab_entries: List[AbEntry] = field(default_factory=list)

    FIELDS = (
        _text('access_token'),
        Field('ab_entries', list_of(record_of(AbEntry)), []),
    )


# =============================================================================
# DEVICE GROUP
# =============================================================================

@dataclass
class GroupPeer(JsonRecord):
    id: str = ""
    username: str = ""
    hostname: str = ""
    platform: str = ""
    login_name: str = ""

    FIELDS = (
        _text('id'),
        _text('username'),
        _text('hostname'),
        _text('platform'),
        _text('login_name'),
    )


@dataclass
class GroupUser(JsonRecord):
    name: str = ""

    FIELDS = (_text('name'),)


@dataclass
class DeviceGroup(JsonRecord):
    name: str = ""

    FIELDS = (_text('name'),)


@dataclass
class Group(JsonRecord):
    access_token: str = ""
    users: List[GroupUser] = field(default_factory=list)
    peers: List[GroupPeer] = field(default_factory=list)
    device_groups: List[DeviceGroup] = field(default_factory=list)

    FIELDS = (
        _text('access_token'),
        Field('users', list_of(record_of(GroupUser)), []),
        Field('peers', list_of(record_of(GroupPeer)), []),
        Field('device_groups', list_of(record_of(DeviceGroup)), []),
    )
