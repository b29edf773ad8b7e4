"""Host-facing adapter: file loading and external tileset resolution"""

from .asset_loader import LoadedMap, TiledMapLoader
from .image_check import check_tileset_images, read_image_size

__all__ = ["LoadedMap", "TiledMapLoader", "check_tileset_images", "read_image_size"]
