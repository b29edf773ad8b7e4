"""
TSX tileset decoder.

    <tileset name="terrain" tilewidth="32" tileheight="32" tilecount="64" columns="8">
        <image source="terrain.png" width="256" height="256"/>
    </tileset>

Image collection tilesets put one image inside each <tile>; those are
collected too, in document order.
"""

from typing import List, Optional

from .attributes import AttributeKind, read_attribute
from .config import DEFAULT_LIMITS, DecodeLimits
from .errors import MissingFieldError, StructuralError
from .events import EventKind, iter_events
from .model import Tileset, TilesetImage


def _read_image(attrib) -> TilesetImage:
    return TilesetImage(
        source=read_attribute(attrib, "source", AttributeKind.STR, "image", required=True),
        width=read_attribute(attrib, "width", AttributeKind.UINT, "image", required=True),
        height=read_attribute(attrib, "height", AttributeKind.UINT, "image", required=True),
    )


def decode_tileset(data: bytes, limits: Optional[DecodeLimits] = None) -> Tileset:
    """
    Decode a TSX tileset document.

    tilewidth and tileheight are read as floats, tilecount as an unsigned
    integer; all three are required by the end of the document.

    Raises:
    -------
    DecodeError : any subclass, see tmx_decoder.errors
    """
    tile_width = tile_height = tile_count = None
    images: List[TilesetImage] = []

    for event in iter_events(data, limits or DEFAULT_LIMITS):
        if event.kind is not EventKind.START:
            continue

        attrib = event.element.attrib
        if event.depth == 0:
            if event.tag != "tileset":
                raise StructuralError(f"expected <tileset> root element, found <{event.tag}>")
            tile_width = read_attribute(attrib, "tilewidth", AttributeKind.FLOAT, "tileset")
            tile_height = read_attribute(attrib, "tileheight", AttributeKind.FLOAT, "tileset")
            tile_count = read_attribute(attrib, "tilecount", AttributeKind.UINT, "tileset")
        elif event.tag == "image":
            images.append(_read_image(attrib))

    for name, value in (("tilewidth", tile_width), ("tileheight", tile_height),
                        ("tilecount", tile_count)):
        if value is None:
            raise MissingFieldError(name, "tileset")

    return Tileset(tile_width=tile_width, tile_height=tile_height,
                   tile_count=tile_count, images=images)
