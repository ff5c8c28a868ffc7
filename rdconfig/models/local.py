"""
Local record: per-installation UI state.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..codec import Field, Record, decode_map_str, decode_size, decode_str, decode_vec_string

Size = Tuple[int, int, int, int]


@dataclass
class LocalRecord(Record):
    remote_id: str = ""
    kb_layout_type: str = ""
    size: Size = (0, 0, 0, 0)
    fav: List[str] = field(default_factory=list)
    options: Dict[str, str] = field(default_factory=dict)
    ui_flutter: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field('remote_id', decode_str, ""),
        Field('kb_layout_type', decode_str, ""),
        Field('size', decode_size, (0, 0, 0, 0)),
        Field('fav', decode_vec_string, []),
        Field('options', decode_map_str, {}),
        Field('ui_flutter', decode_map_str, {}),
    )
