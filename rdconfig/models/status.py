from dataclasses import dataclass, field
from typing import Dict

from ..codec import Field, Record, decode_map_str


@dataclass
class StatusRecord(Record):
    """Transient key/value pairs kept across restarts."""
    values: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field('values', decode_map_str, {}),
    )
