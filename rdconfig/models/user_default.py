from dataclasses import dataclass, field
from typing import Dict

from ..codec import Field, Record, decode_map_str


@dataclass
class UserDefaultRecord(Record):
    """Display settings the user chose as defaults for new sessions."""
    options: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field('options', decode_map_str, {}),
    )
