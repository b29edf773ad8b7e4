"""
TMX Decoder - Tiled map (TMX) and tileset (TSX) documents to Python models

Requisitos:
    pip install numpy pillow
"""

from .config import DecodeLimits, DEFAULT_LIMITS
from .errors import (
    DecodeError, StructuralError, MissingFieldError, AttributeTypeError,
    UnsupportedEncodingError, PayloadDecodeError, SizeMismatchError,
    LimitExceededError
)
from .layer_data import decode_layer_payload, encode_layer_payload
from .map_decoder import decode_map
from .model import Map, Layer, TilesetRef, Tileset, TilesetImage
from .tileset_decoder import decode_tileset
from .loader import TiledMapLoader, LoadedMap

__version__ = "0.1.0"
__all__ = [
    "decode_map",
    "decode_tileset",
    "decode_layer_payload",
    "encode_layer_payload",
    "Map",
    "Layer",
    "TilesetRef",
    "Tileset",
    "TilesetImage",
    "DecodeLimits",
    "DEFAULT_LIMITS",
    "DecodeError",
    "StructuralError",
    "MissingFieldError",
    "AttributeTypeError",
    "UnsupportedEncodingError",
    "PayloadDecodeError",
    "SizeMismatchError",
    "LimitExceededError",
    "TiledMapLoader",
    "LoadedMap",
]
