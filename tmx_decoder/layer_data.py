"""
Layer payload codec.

=============================================================================
PAYLOAD FORMAT
=============================================================================

The text of a <data encoding="base64"> element is the base64 form of a
packed array of little-endian uint32 GIDs, one per cell, row-major:

    <data encoding="base64">
        AQAAAAIAAAADAAAABAAAAA==
    </data>

    -> bytes 01 00 00 00 02 00 00 00 03 00 00 00 04 00 00 00
    -> GIDs  [1, 2, 3, 4]

Optionally the bytes are compressed before base64 encoding
(compression="zlib" or "gzip").

This is the only binary-format-sensitive part of the decoder, so all the
size checks live here:

- the decoded byte count must be a multiple of 4
- the word count must equal the declared width * height
- decompression never produces more than width * height * 4 (+1) bytes,
  so a small compressed payload cannot expand into a huge allocation

=============================================================================
"""

import base64
import binascii
import zlib
from typing import Iterable, List, Optional

import numpy as np

from .config import (DEFAULT_LIMITS, SUPPORTED_COMPRESSIONS, SUPPORTED_ENCODING,
                     TILE_WORD_SIZE, U32_MAX, DecodeLimits)
from .errors import (LimitExceededError, PayloadDecodeError, SizeMismatchError,
                     UnsupportedEncodingError)

# zlib window bits: 15 = zlib container, 31 = gzip container
_WBITS = {"zlib": 15, "gzip": 31}

_LITTLE_ENDIAN_U32 = np.dtype("<u4")


def check_tile_count(width: int, height: int,
                     limits: DecodeLimits = DEFAULT_LIMITS) -> int:
    """
    Compute width * height, refusing grids above the configured limit.

    Python integers do not overflow, but the product is still checked before
    anything is allocated for it.
    """
    count = width * height
    if count > limits.max_layer_tiles:
        raise LimitExceededError(
            f"layer grid {width}x{height} ({count} tiles) exceeds the limit "
            f"of {limits.max_layer_tiles} tiles", "layer")
    return count


def _decompress(raw: bytes, compression: str, max_size: int) -> bytes:
    decompressor = zlib.decompressobj(_WBITS[compression])
    try:
        out = decompressor.decompress(raw, max_size)
    except zlib.error as e:
        raise PayloadDecodeError(f"{compression} decompression failed: {e}", "data")
    if decompressor.unconsumed_tail or len(out) >= max_size:
        raise PayloadDecodeError(
            f"{compression} layer data inflates past the declared grid size", "data")
    if not decompressor.eof:
        raise PayloadDecodeError(f"truncated {compression} stream", "data")
    return out


def decode_layer_payload(text: Optional[str], encoding: Optional[str],
                         expected_count: int,
                         compression: Optional[str] = None) -> List[int]:
    """
    Decode the text of a <data> element into a list of GIDs.

    Parameters:
    -----------
    text : str
        Element text; surrounding and embedded whitespace is ignored
    encoding : str
        Value of the data element's encoding attribute (must be "base64")
    expected_count : int
        width * height of the map
    compression : str, optional
        None, "zlib" or "gzip"

    Returns:
    --------
    List[int] : exactly expected_count GIDs, row-major

    Raises:
    -------
    UnsupportedEncodingError : encoding is not base64, or unknown compression
    PayloadDecodeError : invalid base64, bad compressed stream, or a byte
                         count that is not a multiple of 4
    SizeMismatchError : number of GIDs != expected_count
    """
    if encoding != SUPPORTED_ENCODING:
        raise UnsupportedEncodingError(encoding)
    if compression is not None and compression not in SUPPORTED_COMPRESSIONS:
        raise UnsupportedEncodingError(compression, "compression")
    if expected_count < 0:
        raise ValueError(f"expected_count must be >= 0, got {expected_count}")

    compact = "".join((text or "").split())
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadDecodeError(f"invalid base64 layer data: {e}", "data")

    if compression is not None:
        raw = _decompress(raw, compression, expected_count * TILE_WORD_SIZE + 1)

    if len(raw) % TILE_WORD_SIZE:
        raise PayloadDecodeError(
            f"layer data is {len(raw)} bytes, not a whole number of "
            f"{TILE_WORD_SIZE}-byte tiles", "data")

    actual = len(raw) // TILE_WORD_SIZE
    if actual != expected_count:
        raise SizeMismatchError(expected_count, actual)

    return np.frombuffer(raw, dtype=_LITTLE_ENDIAN_U32).tolist()


def encode_layer_payload(tiles: Iterable[int],
                         compression: Optional[str] = None) -> str:
    """
    Inverse of decode_layer_payload(): GIDs to base64 text.

    Useful for writing test fixtures and for tools that patch layer data.
    """
    if compression is not None and compression not in SUPPORTED_COMPRESSIONS:
        raise UnsupportedEncodingError(compression, "compression")

    values = list(tiles)
    if any(gid < 0 or gid > U32_MAX for gid in values):
        raise ValueError("tile GIDs must fit in an unsigned 32-bit integer")
    raw = np.array(values, dtype=_LITTLE_ENDIAN_U32).tobytes()

    if compression is not None:
        compressor = zlib.compressobj(wbits=_WBITS[compression])
        raw = compressor.compress(raw) + compressor.flush()

    return base64.b64encode(raw).decode("ascii")
