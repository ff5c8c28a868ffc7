"""
Compression for address-book and group blobs.

Blobs are compressed before encryption; ``decompress`` hands back an empty
byte string for anything that is not a valid frame so callers can treat a
damaged blob like an absent one.
"""

import logging

import zstandard

from ..constants import COMPRESS_LEVEL

logger = logging.getLogger(__name__)


def compress(data: bytes, level: int = COMPRESS_LEVEL) -> bytes:
    return zstandard.ZstdCompressor(level=level).compress(data)


def decompress(data: bytes) -> bytes:
    try:
        # Frames written by streaming encoders may omit the content size
        with zstandard.ZstdDecompressor().stream_reader(data) as reader:
            return reader.read()
    except zstandard.ZstdError as e:
        logger.debug(f"Decompression failed: {e}")
        return b""
