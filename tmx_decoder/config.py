"""Decode limits and format constants"""

from dataclasses import dataclass

# Largest value a TMX unsigned attribute or GID may take (u32)
U32_MAX = 0xFFFFFFFF

# Bytes per tile in a layer payload (little-endian uint32)
TILE_WORD_SIZE = 4

SUPPORTED_ENCODING = "base64"
SUPPORTED_COMPRESSIONS = ("zlib", "gzip")

DEFAULT_MAX_DOCUMENT_BYTES = 64 * 1024 * 1024
DEFAULT_MAX_LAYER_TILES = 16 * 1024 * 1024


@dataclass(frozen=True)
class DecodeLimits:
    """
    Upper bounds applied before any work proportional to the input is done.

    A decode of a bounded document finishes in bounded time, so these are the
    only knobs a caller needs to protect itself from hostile files.

    max_document_bytes : int
        Inputs longer than this are rejected without being parsed
    max_layer_tiles : int
        Largest width * height a layer may declare
    """
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
    max_layer_tiles: int = DEFAULT_MAX_LAYER_TILES


DEFAULT_LIMITS = DecodeLimits()
