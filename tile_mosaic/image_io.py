"""Image loading, source bounding and saving."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from tile_mosaic.errors import (
    EmptyLibraryError,
    PersistenceError,
    SourceDecodeError,
    TileDecodeError,
)

# Everything Pillow may raise on a corrupt, truncated or oversized file.
_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)


def walk_tile_paths(root: str | Path) -> list[Path]:
    """Every file below *root*, recursively, in a stable (sorted) order."""
    root = Path(root)
    if not root.is_dir():
        raise EmptyLibraryError(f"tile directory {root} does not exist")
    return sorted(p for p in root.rglob("*") if p.is_file())


def load_tile_pixels(path: str | Path, part_size: int) -> np.ndarray:
    """Decode a tile and resize it to exactly part_size x part_size.

    Returns:
        (part_size, part_size, 3) uint8 array.

    Raises:
        TileDecodeError: the file is not a readable image.
    """
    try:
        with Image.open(path) as img:
            tile = img.convert("RGB").resize((part_size, part_size), Image.LANCZOS)
    except _DECODE_ERRORS as exc:
        raise TileDecodeError(path, str(exc) or type(exc).__name__) from exc
    return np.array(tile, dtype=np.uint8)


def load_source(path: str | Path) -> np.ndarray:
    """Decode the source photograph at full resolution.

    Returns:
        (H, W, 3) uint8 array.

    Raises:
        SourceDecodeError: the file is missing or not a readable image.
    """
    try:
        with Image.open(path) as img:
            rgb = img.convert("RGB")
    except _DECODE_ERRORS as exc:
        raise SourceDecodeError(path, str(exc) or type(exc).__name__) from exc
    return np.array(rgb, dtype=np.uint8)


def _derived_side(old_side: int, old_ref: int, new_ref: int) -> int:
    # Proportional side with a +0.7 bias before truncation, minimum 1.
    return max(1, int(0.7 + old_side / (old_ref / new_ref)))


def capped_sizes(width: int, height: int, max_side: int) -> list[tuple[int, int]]:
    """Resize steps that bound a *width* x *height* image to *max_side*.

    Width and height are capped as two separate, conditional resizes, both
    tested against the original dimensions:

    1. ``width > max_side``: resize to width *max_side*, height proportional.
    2. ``height > max_side``: resize the (possibly already resized) image to
       height *max_side*, width proportional to its current shape.

    When both sides exceed the cap the second step can widen the image again
    (600x400 -> 300x200 -> 450x300); this is the intended behaviour, not a
    single combined scale factor.

    Returns:
        The ``(w, h)`` target of every resize to apply, in order (possibly empty).
    """
    steps: list[tuple[int, int]] = []
    w, h = width, height
    if width > max_side:
        w, h = max_side, _derived_side(h, w, max_side)
        steps.append((w, h))
    if height > max_side:
        w, h = _derived_side(w, h, max_side), max_side
        steps.append((w, h))
    return steps


def bound_source(pixels: np.ndarray, max_side: int = 300) -> np.ndarray:
    """Apply :func:`capped_sizes` to an (H, W, 3) image with Lanczos resampling."""
    h, w = pixels.shape[:2]
    steps = capped_sizes(w, h, max_side)
    if not steps:
        return pixels

    img = Image.fromarray(pixels.astype(np.uint8))
    for size in steps:
        img = img.resize(size, Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def save_mosaic(array: np.ndarray, path: str | Path) -> None:
    """Write the finished mosaic; the format follows the file extension.

    Raises:
        PersistenceError: the file cannot be encoded or written.
    """
    try:
        Image.fromarray(array.astype(np.uint8)).save(path)
    except (OSError, ValueError, KeyError) as exc:
        raise PersistenceError(path, str(exc) or type(exc).__name__) from exc
