"""Mosaic composition: one tile per source pixel."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from tile_mosaic.image_io import bound_source
from tile_mosaic.library import Tile, TileIndex
from tile_mosaic.matcher import ColorMatcher

logger = logging.getLogger(__name__)


def blit(out: np.ndarray, tile: Tile, x: int, y: int) -> None:
    """Copy *tile* verbatim into the block of *out* owned by source pixel (x, y)."""
    p = tile.size
    out[y * p:(y + 1) * p, x * p:(x + 1) * p] = tile.pixels


def _compose_row(
    out: np.ndarray,
    row: np.ndarray,
    y: int,
    matcher: ColorMatcher,
) -> None:
    for x, sample in enumerate(row):
        blit(out, matcher.nearest(sample), x, y)


def compose(
    source: np.ndarray,
    index: TileIndex,
    part_size: int,
    *,
    max_side: int = 300,
    matcher: ColorMatcher | None = None,
    workers: int = 1,
) -> np.ndarray:
    """Rebuild *source* out of tiles from *index*.

    The source is first bounded with :func:`tile_mosaic.image_io.bound_source`;
    each remaining pixel is then replaced by its nearest tile.

    Args:
        source:    (H, W, 3) uint8 image.
        index:     Tile library; every tile is *part_size* square.
        part_size: Side of the block each source pixel expands to.
        max_side:  Width/height cap applied before matching.
        matcher:   Reuse an existing matcher (and its cache) for *index*.
        workers:   Rows composed concurrently. Blocks never overlap, so the
                   output needs no locking; the match cache is locked.

    Returns:
        (h * part_size, w * part_size, 3) uint8, where (w, h) is the bounded
        source size.
    """
    if source.ndim != 3 or source.shape[2] < 3:
        raise ValueError(f"source must be (H, W, 3), got {source.shape}")
    if part_size != index.part_size:
        raise ValueError(
            f"part_size {part_size} does not match library tiles ({index.part_size})"
        )
    if matcher is None:
        matcher = ColorMatcher(index)
    elif matcher.index is not index:
        raise ValueError("matcher was built for a different index")

    bounded = bound_source(source[:, :, :3], max_side)
    h, w = bounded.shape[:2]
    out = np.zeros((h * part_size, w * part_size, 3), dtype=np.uint8)

    logger.info(
        "Composing %dx%d source into %dx%d mosaic …",
        w, h, w * part_size, h * part_size,
    )
    t0 = time.perf_counter()

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            list(executor.map(
                lambda y: _compose_row(out, bounded[y], y, matcher), range(h),
            ))
    else:
        for y in range(h):
            _compose_row(out, bounded[y], y, matcher)

    logger.info(
        "Mosaic ready  (%d colours matched, %.1f s)",
        matcher.cache_size, time.perf_counter() - t0,
    )
    return out
