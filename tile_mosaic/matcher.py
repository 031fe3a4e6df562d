"""Nearest-tile search with a per-colour memo."""

from __future__ import annotations

import threading
from collections.abc import Sequence

import numpy as np

from tile_mosaic.colors import Color, as_color, squared_distances
from tile_mosaic.library import Tile, TileIndex


class MatchCache:
    """Thread-safe memo of query colour → chosen tile.

    One lock guards every read and insert. :meth:`setdefault` keeps the
    first tile stored for a colour, so concurrent misses on the same colour
    all return that one tile.
    """

    def __init__(self) -> None:
        self._entries: dict[Color, Tile] = {}
        self._lock = threading.Lock()

    def get(self, color: Color) -> Tile | None:
        with self._lock:
            return self._entries.get(color)

    def setdefault(self, color: Color, tile: Tile) -> Tile:
        with self._lock:
            return self._entries.setdefault(color, tile)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, color: object) -> bool:
        with self._lock:
            return color in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def nearest(
    index: TileIndex,
    cache: MatchCache | None,
    query: Sequence[int] | np.ndarray,
    color_space: str = "rgb",
) -> Tile:
    """Return the tile whose colour is closest to *query*.

    1. A tile keyed by exactly *query* wins outright.
    2. Otherwise a cached answer for *query* is reused.
    3. Otherwise every key is scanned by squared Euclidean distance; among
       equally close keys the first in index order wins.

    The answer is stored in *cache* (when given) before returning. The cache
    only saves work: ``cache=None`` gives the same tiles.
    """
    color = as_color(query)
    tile = index.get(color)

    if tile is None:
        if cache is not None:
            cached = cache.get(color)
            if cached is not None:
                return cached
        d2 = squared_distances(color, index.points(color_space), color_space)
        tile = index.tile_at(int(np.argmin(d2)))

    if cache is not None:
        tile = cache.setdefault(color, tile)
    return tile


class ColorMatcher:
    """Binds a :class:`TileIndex` to the cache that lives exactly as long as it."""

    def __init__(
        self,
        index: TileIndex,
        use_cache: bool = True,
        color_space: str = "rgb",
    ) -> None:
        index.points(color_space)  # rejects unknown spaces early
        self.index = index
        self.color_space = color_space
        self.cache = MatchCache() if use_cache else None

    def nearest(self, query: Sequence[int] | np.ndarray) -> Tile:
        return nearest(self.index, self.cache, query, self.color_space)

    @property
    def cache_size(self) -> int:
        return len(self.cache) if self.cache is not None else 0
