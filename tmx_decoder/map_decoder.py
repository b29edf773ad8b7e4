"""
TMX map decoder.

=============================================================================
DOCUMENT SHAPE
=============================================================================

    <map width="2" height="2" tilewidth="32" tileheight="32">
        <tileset firstgid="1" source="terrain.tsx"/>
        <layer name="Ground" visible="1">
            <data encoding="base64">AQAAAAIAAAADAAAABAAAAA==</data>
        </layer>
    </map>

Everything else Tiled writes (properties, object groups, image layers) is
skipped. Layers nested in <group> elements are flattened in document order.

=============================================================================
PARSING STATE
=============================================================================

The document is read in a single forward pass. Which element we are inside
matters only for tile layers, so that part is an explicit state machine:

    OUTSIDE --<layer>--> IN_LAYER --<data>--> IN_LAYER_DATA
       ^                   |   ^                  |
       +-----</layer>------+   +-----</data>------+

Anything that does not fit these transitions (a layer inside a layer, two
data blocks, elements inside base64 data, text loose in a layer) is a
StructuralError rather than something quietly ignored.

=============================================================================
"""

from enum import Enum
from typing import List, Optional

from .attributes import AttributeKind, read_attribute
from .config import DEFAULT_LIMITS, SUPPORTED_ENCODING, DecodeLimits
from .errors import (AttributeTypeError, MissingFieldError, StructuralError,
                     UnsupportedEncodingError)
from .events import DocumentEvent, EventKind, iter_events
from .layer_data import check_tile_count, decode_layer_payload
from .model import Layer, Map, TilesetRef

# Map attributes, in the order they are reported when missing
_MAP_DIMENSIONS = (
    ("width", "width"),
    ("height", "height"),
    ("tilewidth", "tile_width"),
    ("tileheight", "tile_height"),
)


class LayerState(Enum):
    OUTSIDE = 0
    IN_LAYER = 1
    IN_LAYER_DATA = 2


class _PendingLayer:
    """Fields of the layer being read, until its closing tag."""

    def __init__(self, name: str, visible: bool, expected_count: int):
        self.name = name
        self.visible = visible
        self.expected_count = expected_count
        self.encoding: Optional[str] = None
        self.compression: Optional[str] = None
        self.tiles: Optional[List[int]] = None


class MapDecoder:
    """
    Single-use decoder for one TMX document.

    Holds the state of one pass; decode_map() creates a fresh instance per
    call so no state is shared between decodes.
    """

    def __init__(self, limits: DecodeLimits = DEFAULT_LIMITS):
        self.limits = limits
        self.dimensions = {attr: None for attr, _ in _MAP_DIMENSIONS}
        self.layers: List[Layer] = []
        self.tilesets: List[TilesetRef] = []
        self.state = LayerState.OUTSIDE
        self.pending: Optional[_PendingLayer] = None

    def decode(self, data: bytes) -> Map:
        for event in iter_events(data, self.limits):
            if event.kind is EventKind.START:
                self._on_start(event)
            else:
                self._on_end(event)
        return self._finish()

    # =========================================================================
    # ELEMENT OPEN
    # =========================================================================

    def _on_start(self, event: DocumentEvent):
        tag = event.tag

        if event.depth == 0:
            if tag != "map":
                raise StructuralError(f"expected <map> root element, found <{tag}>")
            self._read_map(event.element.attrib)
            return
        if tag == "map":
            raise StructuralError("nested <map> element", event.parent)

        if self.state is LayerState.IN_LAYER_DATA:
            # Children of <data> are the XML tile encoding or infinite-map chunks
            if self.pending.encoding != SUPPORTED_ENCODING:
                raise UnsupportedEncodingError(self.pending.encoding)
            raise StructuralError(f"unexpected <{tag}> inside layer data", "data")

        if self.state is LayerState.IN_LAYER:
            if tag == "layer":
                raise StructuralError("nested <layer> element", "layer")
            if tag == "data":
                self._enter_data(event.element.attrib)
            return

        if tag == "tileset" and event.parent == "map":
            self._read_tileset_ref(event.element.attrib)
        elif tag == "layer":
            self._enter_layer(event.element.attrib)

    def _read_map(self, attrib):
        for attr, _ in _MAP_DIMENSIONS:
            value = read_attribute(attrib, attr, AttributeKind.UINT, "map")
            if value == 0:
                raise AttributeTypeError(attr, attrib[attr], "positive unsigned integer", "map")
            self.dimensions[attr] = value

    def _read_tileset_ref(self, attrib):
        first_gid = read_attribute(attrib, "firstgid", AttributeKind.UINT, "tileset", required=True)
        source = read_attribute(attrib, "source", AttributeKind.STR, "tileset", required=True)
        self.tilesets.append(TilesetRef(first_gid=first_gid, source=source))

    def _enter_layer(self, attrib):
        name = read_attribute(attrib, "name", AttributeKind.STR, "layer", required=True)
        visible = read_attribute(attrib, "visible", AttributeKind.BOOL, "layer", default=True)

        # Dimensions only come from <map>, but a broken document may not
        # have declared them yet
        width = self.dimensions["width"]
        height = self.dimensions["height"]
        if width is None:
            raise MissingFieldError("width", "map")
        if height is None:
            raise MissingFieldError("height", "map")

        self.pending = _PendingLayer(name, visible, check_tile_count(width, height, self.limits))
        self.state = LayerState.IN_LAYER

    def _enter_data(self, attrib):
        if self.pending.tiles is not None:
            raise StructuralError(f"layer '{self.pending.name}' has more than one <data> element",
                                  "layer")
        self.pending.encoding = read_attribute(attrib, "encoding", AttributeKind.STR, "data")
        self.pending.compression = read_attribute(attrib, "compression", AttributeKind.STR, "data")
        self.state = LayerState.IN_LAYER_DATA

    # =========================================================================
    # ELEMENT CLOSE
    # =========================================================================

    def _on_end(self, event: DocumentEvent):
        if self.state is LayerState.IN_LAYER_DATA:
            # Children of <data> are rejected on open, so this closes <data>
            pending = self.pending
            pending.tiles = decode_layer_payload(
                event.element.text, pending.encoding, pending.expected_count,
                pending.compression)
            self.state = LayerState.IN_LAYER

        elif self.state is LayerState.IN_LAYER and event.tag == "layer":
            self._finish_layer(event)
            self.state = LayerState.OUTSIDE

    def _finish_layer(self, event: DocumentEvent):
        element = event.element
        loose_text = [element.text] + [child.tail for child in element]
        if any(text and text.strip() for text in loose_text):
            raise StructuralError(
                f"text outside <data> in layer '{self.pending.name}'", "layer")

        pending = self.pending
        if pending.tiles is None:
            raise MissingFieldError("data", "layer")

        self.layers.append(Layer(name=pending.name, visible=pending.visible, tiles=pending.tiles))
        self.pending = None

    # =========================================================================
    # END OF DOCUMENT
    # =========================================================================

    def _finish(self) -> Map:
        values = {}
        for attr, field_name in _MAP_DIMENSIONS:
            if self.dimensions[attr] is None:
                raise MissingFieldError(attr, "map")
            values[field_name] = self.dimensions[attr]
        return Map(layers=self.layers, tilesets=self.tilesets, **values)


def decode_map(data: bytes, limits: Optional[DecodeLimits] = None) -> Map:
    """
    Decode a TMX map document.

    Parameters:
    -----------
    data : bytes
        Complete document contents; the decoder keeps no reference to them
    limits : DecodeLimits, optional
        Size limits (DEFAULT_LIMITS if omitted)

    Returns:
    --------
    Map : fully validated map

    Raises:
    -------
    DecodeError : any subclass, see tmx_decoder.errors. No partial map is
                  ever returned.
    """
    return MapDecoder(limits or DEFAULT_LIMITS).decode(data)
