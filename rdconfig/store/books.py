"""
Address book and device group caches.

On disk each is ``symmetric_crypt(compress(json))`` in an extension-less
file (``<App>_ab``, ``<App>_group``). Loading runs the chain in reverse;
a failure at any step deletes the file and yields an empty book.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Generic, Type, TypeVar

from ..codec import atomic_write
from ..constants import Limits
from ..crypto.compress import compress, decompress
from ..models.books import Ab, Group, JsonRecord
from ..utils.error_handling import CodecError, ErrorCategory, SecretError, safe_execute

if TYPE_CHECKING:
    from ..config_store import ConfigStore

logger = logging.getLogger(__name__)

B = TypeVar('B', bound=JsonRecord)


class BlobStore(Generic[B]):
    """
    Encrypted JSON blob store.

    Args:
        root: The owning ConfigStore
        suffix: File name suffix after the app name (``_ab``, ``_group``)
        record_cls: Record type decoded from the JSON document
    """

    def __init__(self, root: 'ConfigStore', suffix: str, record_cls: Type[B]):
        self._root = root
        self.suffix = suffix
        self.record_cls = record_cls

    def path(self) -> Path:
        return self._root.paths.blob_path(self.suffix)

    def store(self, json_text: str) -> bool:
        """
        Compress, encrypt and write ``json_text``.

        Refused (returns False) when the compressed data exceeds 64 MiB.
        """
        data = compress(json_text.encode('utf-8'))
        if len(data) > Limits.BLOB_MAX_LEN:
            logger.error(f"{self.suffix} data too large, {len(data)} > {Limits.BLOB_MAX_LEN}")
            return False

        with safe_execute(
            f"store {self.suffix} blob",
            ErrorCategory.FILESYSTEM,
            additional_context={'path': str(self.path())},
        ) as result:
            atomic_write(self.path(), self._root.cipher.symmetric_crypt(data, True))
        return result.success

    def load(self) -> B:
        path = self.path()
        try:
            raw = path.read_bytes()
            text = decompress(self._root.cipher.symmetric_crypt(raw, False))
            return self.record_cls.from_json(text.decode('utf-8', errors='replace'))
        except FileNotFoundError:
            pass
        except (OSError, SecretError, CodecError) as e:
            logger.warning(f"Discarding unreadable {self.suffix} blob: {e}")
        self.remove()
        return self.record_cls()

    def remove(self) -> None:
        try:
            self.path().unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove {self.path()}: {e}")


def address_book_store(root: 'ConfigStore') -> BlobStore[Ab]:
    return BlobStore(root, "_ab", Ab)


def group_store(root: 'ConfigStore') -> BlobStore[Group]:
    return BlobStore(root, "_group", Group)


__all__ = [
    'BlobStore',
    'address_book_store',
    'group_store',
]
