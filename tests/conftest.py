"""Shared pytest fixtures for building TMX/TSX documents."""

import base64
import struct

import pytest


def pack_tiles(tiles):
    """base64 of little-endian uint32 GIDs, written independently of the decoder."""
    return base64.b64encode(struct.pack(f"<{len(tiles)}I", *tiles)).decode("ascii")


def build_layer(name="Ground", tiles=(1, 2, 3, 4), encoding="base64", visible=None,
                payload=None, extra=""):
    """XML for one <layer>; payload overrides the packed tiles."""
    attrs = f' name="{name}"' if name is not None else ""
    if visible is not None:
        attrs += f' visible="{visible}"'
    enc = f' encoding="{encoding}"' if encoding is not None else ""
    text = pack_tiles(tiles) if payload is None else payload
    return (f"<layer{attrs}>{extra}\n"
            f"  <data{enc}>\n   {text}\n  </data>\n"
            f"</layer>")


def build_map(body=None, width=2, height=2, tilewidth=32, tileheight=32, **extra):
    """Complete TMX document as bytes. Pass None for a dimension to omit it."""
    attrs = {"version": "1.10", "orientation": "orthogonal", "width": width,
             "height": height, "tilewidth": tilewidth, "tileheight": tileheight}
    attrs.update(extra)
    attr_text = " ".join(f'{key}="{value}"' for key, value in attrs.items()
                         if value is not None)
    if body is None:
        body = '<tileset firstgid="1" source="terrain.tsx"/>\n' + build_layer()
    doc = f'<?xml version="1.0" encoding="UTF-8"?>\n<map {attr_text}>\n{body}\n</map>\n'
    return doc.encode("utf-8")


def build_tileset(body=None, tilewidth="32", tileheight="32", tilecount="64"):
    attrs = {"name": "terrain", "tilewidth": tilewidth, "tileheight": tileheight,
             "tilecount": tilecount, "columns": "8"}
    attr_text = " ".join(f'{key}="{value}"' for key, value in attrs.items()
                         if value is not None)
    if body is None:
        body = '<image source="terrain.png" width="256" height="256"/>'
    doc = f'<?xml version="1.0" encoding="UTF-8"?>\n<tileset {attr_text}>\n{body}\n</tileset>\n'
    return doc.encode("utf-8")


@pytest.fixture
def make_map():
    """Factory for TMX documents (see build_map)."""
    return build_map


@pytest.fixture
def make_layer():
    """Factory for <layer> XML fragments (see build_layer)."""
    return build_layer


@pytest.fixture
def make_tileset():
    """Factory for TSX documents (see build_tileset)."""
    return build_tileset


@pytest.fixture
def packed():
    """Function packing GIDs into base64 text."""
    return pack_tiles


@pytest.fixture
def sample_map_bytes():
    """Two tilesets and two layers, one hidden."""
    body = "\n".join([
        '<tileset firstgid="1" source="terrain.tsx"/>',
        '<tileset firstgid="65" source="props.tsx"/>',
        build_layer("Ground", (1, 2, 3, 4)),
        build_layer("Props", (0, 65, 0, 66), visible="0"),
    ])
    return build_map(body)
