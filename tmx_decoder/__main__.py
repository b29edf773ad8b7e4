#!/usr/bin/env python3

"""
TMX Decoder - print a summary of a Tiled map or tileset

Usage:
    python -m tmx_decoder <map.tmx | tileset.tsx> [--check-images]

For a map, every referenced TSX file is decoded as well. With
--check-images the declared size of each tileset image is compared with
the file on disk.
"""

import logging
import sys
from pathlib import Path

from .errors import DecodeError
from .loader import TiledMapLoader, check_tileset_images
from .tileset_decoder import decode_tileset

OPTIONS = ("--check-images",)


def print_map(loaded):
    tiled_map = loaded.map
    pixel_w, pixel_h = tiled_map.pixel_size
    print(f"Map: {loaded.path}")
    print(f"  Size: {tiled_map.width}x{tiled_map.height} tiles "
          f"({tiled_map.tile_width}x{tiled_map.tile_height} px each, {pixel_w}x{pixel_h} px)")

    print(f"  Tilesets: {len(tiled_map.tilesets)}")
    for ref in tiled_map.tilesets:
        tileset = loaded.tilesets[ref.source]
        print(f"    firstgid={ref.first_gid} {ref.source} "
              f"({tileset.tile_count} tiles, {len(tileset.images)} images)")

    print(f"  Layers: {len(tiled_map.layers)}")
    for layer in tiled_map.layers:
        used = sum(1 for gid in layer.tiles if gid)
        hidden = "" if layer.visible else " [hidden]"
        print(f"    {layer.name}{hidden}: {used}/{len(layer.tiles)} cells used")


def print_tileset(path, tileset, check_images):
    print(f"Tileset: {path}")
    print(f"  Tile size: {tileset.tile_width:g}x{tileset.tile_height:g}")
    print(f"  Tile count: {tileset.tile_count}")
    for image in tileset.images:
        print(f"    {image.source} ({image.width}x{image.height})")
    if check_images:
        for problem in check_tileset_images(tileset, path.parent):
            print(f"  Warning: {problem}")


def main():
    args = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    options = [arg for arg in sys.argv[1:] if arg.startswith("--")]
    check_images = "--check-images" in options

    if len(args) != 1 or any(option not in OPTIONS for option in options):
        print(__doc__)
        sys.exit(1)

    source_path = Path(args[0])
    if not source_path.exists():
        print(f"Error: File '{source_path}' not found", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        if source_path.suffix.lower() == ".tsx":
            tileset = decode_tileset(source_path.read_bytes())
            print_tileset(source_path, tileset, check_images)
        else:
            loader = TiledMapLoader(check_images=check_images)
            print_map(loader.load(source_path))
    except (DecodeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
