"""
Tolerant TOML codec for persisted records.

Every record is a dataclass that declares its on-disk schema as a tuple of
``Field`` descriptors. Each field carries a strict decoder and a default;
when the decoder rejects a value the field falls back to its default while
the rest of the document is kept. Unknown keys are ignored, so files written
by newer versions still load.

Defaults may depend on the user's display preferences, so default factories
receive an option reader (``reader(key) -> str``) supplied by the caller.

Usage:
    from rdconfig.codec import load_path, store_path

    cfg = load_path(path, NetworkRecord)
    store_path(path, cfg.to_dict())
"""

import copy
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

import tomli
import tomli_w

from .constants import IS_WINDOWS, Permissions
from .logging_config import get_logger
from .utils.error_handling import CodecError, ErrorCategory, handle_error

logger = get_logger(__name__)

OptionReader = Callable[[str], str]
Decoder = Callable[[Any], Any]
R = TypeVar('R', bound='Record')

_MISSING = object()


def empty_reader(key: str) -> str:
    return ""


# =============================================================================
# DECODERS
# =============================================================================

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def decode_str(value: Any) -> str:
    if not isinstance(value, str):
        raise CodecError(f"expected string, got {type(value).__name__}")
    return value


def decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise CodecError(f"expected boolean, got {type(value).__name__}")
    return value


def decode_int(value: Any) -> int:
    if not _is_int(value):
        raise CodecError(f"expected integer, got {type(value).__name__}")
    return value


def decode_bytes(value: Any) -> bytes:
    if not isinstance(value, list):
        raise CodecError(f"expected byte array, got {type(value).__name__}")
    if not all(_is_int(b) and 0 <= b <= 255 for b in value):
        raise CodecError("byte array holds a value outside 0..255")
    return bytes(value)


def decode_size(value: Any) -> Tuple[int, int, int, int]:
    if not isinstance(value, list) or len(value) != 4 or not all(_is_int(v) for v in value):
        raise CodecError("size must be four integers")
    return tuple(value)


def decode_keypair(value: Any) -> Tuple[bytes, bytes]:
    if not isinstance(value, list) or len(value) != 2:
        raise CodecError("key pair must be two byte arrays")
    return decode_bytes(value[0]), decode_bytes(value[1])


def list_of(item: Decoder) -> Decoder:
    """Decoder for a homogeneous array; one bad item rejects the array."""
    def decode(value: Any) -> list:
        if not isinstance(value, list):
            raise CodecError(f"expected array, got {type(value).__name__}")
        return [item(v) for v in value]
    return decode


def map_of(item: Decoder) -> Decoder:
    """Decoder for a string-keyed table; one bad value rejects the table."""
    def decode(value: Any) -> dict:
        if not isinstance(value, dict):
            raise CodecError(f"expected table, got {type(value).__name__}")
        return {str(k): item(v) for k, v in value.items()}
    return decode


decode_vec_string = list_of(decode_str)
decode_map_str = map_of(decode_str)
decode_map_bool = map_of(decode_bool)


def record_of(cls: Type['Record']) -> Decoder:
    """Decoder for a nested record; its own fields decode tolerantly."""
    def decode(value: Any) -> 'Record':
        if not isinstance(value, dict):
            raise CodecError(f"expected table for {cls.__name__}")
        return cls.from_dict(value)
    return decode


# =============================================================================
# FIELDS AND RECORDS
# =============================================================================

def is_empty(value: Any) -> bool:
    if isinstance(value, tuple):
        return all(is_empty(v) for v in value)
    if isinstance(value, (str, bytes, list, dict)):
        return len(value) == 0
    return False


def encode_value(value: Any) -> Any:
    """Convert an in-memory value to its TOML-serializable form."""
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    if isinstance(value, dict):
        # Sorted keys keep repeated stores byte-identical
        return {k: encode_value(value[k]) for k in sorted(value)}
    return value


class Field:
    """
    Schema entry for one persisted field.

    Args:
        name: Attribute name on the record
        decoder: Strict decoder raising CodecError on a malformed value
        default: Constant default (deep-copied per use)
        default_factory: ``factory(reader)`` used instead of ``default``
        key: Serialized key when it differs from ``name``
        skip_empty: Omit the key on store when the value is empty
        empty_is_default: Replace a decoded empty string by the default
        initial_factory: ``factory(reader)`` for freshly created records,
            when it differs from the value used for a missing key
        encoder: Custom encoder for the serialized form
    """

    def __init__(
        self,
        name: str,
        decoder: Decoder,
        default: Any = _MISSING,
        default_factory: Optional[Callable[[OptionReader], Any]] = None,
        key: Optional[str] = None,
        skip_empty: bool = False,
        empty_is_default: bool = False,
        initial_factory: Optional[Callable[[OptionReader], Any]] = None,
        encoder: Optional[Callable[[Any], Any]] = None,
    ):
        if default is _MISSING and default_factory is None:
            raise ValueError(f"field {name} needs a default")
        self.name = name
        self.decoder = decoder
        self.key = key or name
        self.skip_empty = skip_empty
        self.empty_is_default = empty_is_default
        self.encoder = encoder or encode_value
        self._default = default
        self._default_factory = default_factory
        self._initial_factory = initial_factory

    def default(self, reader: OptionReader) -> Any:
        if self._default_factory is not None:
            return self._default_factory(reader)
        return copy.deepcopy(self._default)

    def initial(self, reader: OptionReader) -> Any:
        if self._initial_factory is not None:
            return self._initial_factory(reader)
        return self.default(reader)

    def decode(self, data: Dict[str, Any], reader: OptionReader) -> Any:
        if self.key not in data:
            return self.default(reader)
        try:
            value = self.decoder(data[self.key])
        except CodecError as e:
            logger.trace(f"Field '{self.key}' replaced by default: {e}")
            return self.default(reader)
        if self.empty_is_default and value == "":
            return self.default(reader)
        return value

    def __repr__(self) -> str:
        return f"Field({self.key!r})"


class Record:
    """
    Base class for persisted records.

    Subclasses are dataclasses whose attributes match ``FIELDS`` one to one.
    """

    FIELDS: Tuple[Field, ...] = ()

    @classmethod
    def new(cls: Type[R], reader: Optional[OptionReader] = None) -> R:
        """A freshly created record, as used when no file exists yet."""
        reader = reader or empty_reader
        return cls(**{f.name: f.initial(reader) for f in cls.FIELDS})

    @classmethod
    def from_dict(cls: Type[R], data: Dict[str, Any], reader: Optional[OptionReader] = None) -> R:
        reader = reader or empty_reader
        return cls(**{f.name: f.decode(data, reader) for f in cls.FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in self.FIELDS:
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.skip_empty and is_empty(value):
                continue
            out[f.key] = f.encoder(value)
        return out


# =============================================================================
# TEXT AND FILES
# =============================================================================

def from_toml(text: str) -> Dict[str, Any]:
    try:
        return tomli.loads(text)
    except (tomli.TOMLDecodeError, TypeError) as e:
        raise CodecError(f"invalid TOML document: {e}") from e


def to_toml(data: Dict[str, Any]) -> str:
    return tomli_w.dumps(data)


def load_path(
    path: Path,
    record_cls: Type[R],
    reader: Optional[OptionReader] = None,
) -> R:
    """
    Load a record from ``path``.

    A missing file silently yields a new record; an unreadable or
    unparsable file is logged and also yields a new record.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
        data = from_toml(text)
    except FileNotFoundError:
        return record_cls.new(reader)
    except (OSError, UnicodeDecodeError, CodecError) as e:
        handle_error(
            e,
            f"load config '{path}'",
            category=ErrorCategory.CODEC if isinstance(e, CodecError) else ErrorCategory.FILESYSTEM,
        )
        return record_cls.new(reader)
    return record_cls.from_dict(data, reader)


def atomic_write(path: Path, content: bytes, mode: int = Permissions.CONFIG_FILE) -> None:
    """Write file atomically with owner-only permissions on non-Windows."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )

    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        if not IS_WINDOWS:
            os.chmod(temp_path, mode)

        os.replace(temp_path, path)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def store_path(path: Path, data: Dict[str, Any]) -> None:
    """Serialize ``data`` to TOML and replace ``path`` with it."""
    atomic_write(Path(path), to_toml(data).encode('utf-8'))


__all__ = [
    'OptionReader',
    'empty_reader',
    'decode_str',
    'decode_bool',
    'decode_int',
    'decode_bytes',
    'decode_size',
    'decode_keypair',
    'decode_vec_string',
    'decode_map_str',
    'decode_map_bool',
    'list_of',
    'map_of',
    'record_of',
    'is_empty',
    'encode_value',
    'Field',
    'Record',
    'from_toml',
    'to_toml',
    'load_path',
    'atomic_write',
    'store_path',
]
