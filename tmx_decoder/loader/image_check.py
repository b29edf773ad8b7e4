"""
Tileset image sanity check.

A TSX file records the pixel size of each image it uses. When the image on
disk is replaced by one of a different size, tile coordinates computed from
the TSX no longer line up. This module compares the declared size with the
file, without decoding pixel data: PIL.Image.open only reads the header.
"""

from pathlib import Path
from typing import List, Tuple, Union

from PIL import Image

from ..model import Tileset


def read_image_size(path: Union[str, Path]) -> Tuple[int, int]:
    """Return (width, height) of an image file."""
    with Image.open(str(path)) as image:
        return image.size


def check_tileset_images(tileset: Tileset, base_dir: Union[str, Path]) -> List[str]:
    """
    Compare each tileset image's declared size with the file on disk.

    Parameters:
    -----------
    tileset : Tileset
        Decoded tileset
    base_dir : str or Path
        Directory image sources are relative to (the TSX file's directory)

    Returns:
    --------
    List[str] : one message per unreadable, oversized or mismatched image,
                empty if everything matches
    """
    problems = []
    for image in tileset.images:
        image_path = Path(base_dir) / image.source
        try:
            size = read_image_size(image_path)
        except (OSError, Image.DecompressionBombError) as e:
            problems.append(f"cannot read image {image_path}: {e}")
            continue

        declared = (image.width, image.height)
        if size != declared:
            problems.append(
                f"image {image_path} is {size[0]}x{size[1]}, "
                f"tileset declares {declared[0]}x{declared[1]}")
    return problems
