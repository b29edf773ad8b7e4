"""
Asset loader adapter.

The decoders are pure functions over bytes. TiledMapLoader is the thin
layer a host (game engine, asset pipeline, tool) registers for ".tmx"
files: it reads the file, decodes the map, then follows each tileset
reference to its TSX file.

=============================================================================
PATH RESOLUTION
=============================================================================

    maps/level1.tmx
        <tileset firstgid="1" source="../tilesets/terrain.tsx"/>

    -> maps/../tilesets/terrain.tsx

Tileset sources are relative to the map file; image sources inside a TSX
are relative to the TSX file.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ..config import DecodeLimits
from ..errors import DecodeError
from ..map_decoder import decode_map
from ..model import Map, Tileset, TilesetRef
from ..tileset_decoder import decode_tileset
from .image_check import check_tileset_images

logger = logging.getLogger(__name__)


@dataclass
class LoadedMap:
    """A decoded map together with the tilesets it references, keyed by source."""
    path: Path
    map: Map
    tilesets: Dict[str, Tileset] = field(default_factory=dict)

    def tileset_for_gid(self, gid: int) -> Optional[Tuple[TilesetRef, Tileset]]:
        ref = self.map.tileset_for_gid(gid)
        if ref is None:
            return None
        return ref, self.tilesets[ref.source]


class TiledMapLoader:
    """
    Loads TMX files and their external tilesets.

    Parameters:
    -----------
    limits : DecodeLimits, optional
        Passed through to both decoders
    check_images : bool
        Compare tileset image sizes with the files on disk and log a warning
        for each mismatch
    """

    extensions = ("tmx",)

    def __init__(self, limits: Optional[DecodeLimits] = None, check_images: bool = False):
        self.limits = limits
        self.check_images = check_images

    def load_bytes(self, data: bytes) -> Map:
        """Decode map bytes already read by the host."""
        return decode_map(data, self.limits)

    def load(self, path: Union[str, Path]) -> LoadedMap:
        """
        Load a map file and every tileset it references.

        Raises:
        -------
        OSError : the map or a tileset file cannot be read
        DecodeError : the map or a tileset is invalid
        """
        path = Path(path)
        tiled_map = self.load_bytes(path.read_bytes())
        logger.debug("Decoded map %s: %dx%d, %d layers, %d tilesets", path,
                     tiled_map.width, tiled_map.height,
                     len(tiled_map.layers), len(tiled_map.tilesets))

        loaded = LoadedMap(path=path, map=tiled_map)
        for ref in tiled_map.tilesets:
            if ref.source not in loaded.tilesets:
                loaded.tilesets[ref.source] = self.load_tileset(path.parent / ref.source)
        return loaded

    def load_tileset(self, tsx_path: Union[str, Path]) -> Tileset:
        tsx_path = Path(tsx_path)
        try:
            tileset = decode_tileset(tsx_path.read_bytes(), self.limits)
        except DecodeError as e:
            logger.error("Invalid tileset %s: %s", tsx_path, e)
            raise
        logger.debug("Decoded tileset %s: %d tiles, %d images", tsx_path,
                     tileset.tile_count, len(tileset.images))

        if self.check_images:
            for problem in check_tileset_images(tileset, tsx_path.parent):
                logger.warning(problem)
        return tileset
