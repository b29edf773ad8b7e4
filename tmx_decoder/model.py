"""
In-memory model of decoded TMX maps and TSX tilesets.

=============================================================================
OWNERSHIP
=============================================================================

These are plain value types. The decoders build them in one go at the end
of a successful decode, so a model never exists half-filled and never keeps
a reference into the document bytes it was read from.

Equality is field-wise (dataclass default), which is what makes two decodes
of the same bytes compare equal.

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Layer cells hold global tile IDs:

    Tileset A (firstgid=1):   tiles 1-100
    Tileset B (firstgid=101): tiles 101-200

    GID 0   = empty cell
    GID 150 = local tile 49 of tileset B (150 - 101)

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


# =============================================================================
# TILESET DOCUMENT (TSX)
# =============================================================================

@dataclass
class TilesetImage:
    """
    Image referenced by a tileset.

    source: Path to the image file (relative to the TSX file)
    width:  Image width in pixels
    height: Image height in pixels
    """
    source: str
    width: int
    height: int


@dataclass
class Tileset:
    """
    Decoded tileset document.

    Spritesheet tilesets carry a single image; image-collection tilesets
    carry one image per tile. Either way `images` lists them in the order
    they appear in the document.
    """
    tile_width: float
    tile_height: float
    tile_count: int
    images: List[TilesetImage] = field(default_factory=list)


# =============================================================================
# MAP DOCUMENT (TMX)
# =============================================================================

@dataclass
class TilesetRef:
    """
    Reference from a map to an external tileset document.

    first_gid is the first global tile ID the tileset supplies. Refs keep
    document order; ascending first_gid is expected but not enforced.
    """
    first_gid: int
    source: str


@dataclass
class Layer:
    """
    Tile layer: a dense, row-major grid of GIDs.

    The grid dimensions are the map's, so the helpers that need them take
    the width (and height) as arguments.

    Index calculation: tiles[y * width + x]
    """
    name: str
    visible: bool = True
    tiles: List[int] = field(default_factory=list)

    def get_tile_gid(self, x: int, y: int, width: int) -> int:
        """
        Get the GID at column x, row y.

        Out-of-bounds coordinates return 0 (empty), like reading past the
        edge of the map.
        """
        if width <= 0 or not 0 <= x < width:
            return 0
        index = y * width + x
        if 0 <= index < len(self.tiles):
            return self.tiles[index]
        return 0

    def as_grid(self, width: int, height: int) -> np.ndarray:
        """
        Return the tiles as a (height, width) uint32 array.

        The array is a copy; modifying it does not touch the layer.
        """
        grid = np.array(self.tiles, dtype=np.uint32)
        return grid.reshape((height, width))


@dataclass
class Map:
    """
    Decoded map document.

    width, height:            map size in cells
    tile_width, tile_height:  cell size in pixels
    layers:                   tile layers, in document order
    tilesets:                 tileset references, in document order
    """
    width: int
    height: int
    tile_width: int
    tile_height: int
    layers: List[Layer] = field(default_factory=list)
    tilesets: List[TilesetRef] = field(default_factory=list)

    @property
    def pixel_size(self) -> Tuple[int, int]:
        """Map size in pixels as (width, height)."""
        return self.width * self.tile_width, self.height * self.tile_height

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def tileset_for_gid(self, gid: int) -> Optional[TilesetRef]:
        """
        Find the tileset that supplies a GID.

        A GID belongs to the tileset with the largest first_gid <= gid.
        The decoder keeps tilesets in document order without sorting them,
        so every ref is considered rather than stopping at the first match
        from the end.

        Returns None for GID 0 and for GIDs below every first_gid.
        """
        if gid <= 0:
            return None
        owner = None
        for ref in self.tilesets:
            if ref.first_gid <= gid and (owner is None or ref.first_gid > owner.first_gid):
                owner = ref
        return owner
