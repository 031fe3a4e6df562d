"""Tile library: decoding, representative colours and the colour → tile index."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from tile_mosaic.colors import Color, mean_color, to_color_space
from tile_mosaic.config import COLOR_SPACES
from tile_mosaic.errors import EmptyLibraryError, TileDecodeError
from tile_mosaic.image_io import load_tile_pixels

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Tile:
    """A normalised square tile and its representative (mean) colour."""

    pixels: np.ndarray = field(repr=False)
    color: Color
    path: Path | None = None

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[0] != self.pixels.shape[1]:
            raise ValueError(f"tile must be square (P, P, 3), got {self.pixels.shape}")
        self.pixels.setflags(write=False)

    @property
    def size(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def from_pixels(cls, pixels: np.ndarray, path: Path | None = None) -> Tile:
        """Wrap *pixels* (copied) and derive the colour from them."""
        pixels = np.array(pixels, dtype=np.uint8)
        return cls(pixels=pixels, color=mean_color(pixels), path=path)


class TileIndex(Mapping[Color, Tile]):
    """Read-only, insertion-ordered mapping from representative colour to tile.

    Iteration order is the order in which colours were first inserted by
    :func:`build_index`; nearest-colour ties are broken by it.
    """

    def __init__(self, entries: Mapping[Color, Tile]) -> None:
        if not entries:
            raise ValueError("a TileIndex needs at least one tile")
        self._entries: dict[Color, Tile] = dict(entries)
        self._tiles = list(self._entries.values())
        self._colors = np.array(list(self._entries), dtype=np.uint8)
        self._points = {
            space: to_color_space(self._colors, space) for space in COLOR_SPACES
        }

        sizes = {tile.size for tile in self._tiles}
        if len(sizes) != 1:
            raise ValueError(f"tiles in one index must share a size, got {sorted(sizes)}")
        self.part_size = sizes.pop()

    def __getitem__(self, color: Color) -> Tile:
        return self._entries[color]

    def __iter__(self) -> Iterator[Color]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TileIndex({len(self)} colours, part_size={self.part_size})"

    @property
    def colors(self) -> np.ndarray:
        """(N, 3) uint8 keys in iteration order."""
        return self._colors

    def tile_at(self, position: int) -> Tile:
        return self._tiles[position]

    def points(self, color_space: str = "rgb") -> np.ndarray:
        """Keys projected into *color_space* (float64, precomputed)."""
        try:
            return self._points[color_space]
        except KeyError:
            raise ValueError(f"Unknown color_space {color_space!r}") from None


def load_tile(path: str | Path, part_size: int) -> Tile:
    """Decode, resize and colour one tile. Raises ``TileDecodeError``."""
    path = Path(path)
    return Tile.from_pixels(load_tile_pixels(path, part_size), path=path)


def build_index(tiles: Iterable[Tile]) -> TileIndex:
    """Index *tiles* by colour; a later tile replaces an earlier one of the same colour.

    Raises:
        EmptyLibraryError: *tiles* is empty.
    """
    entries: dict[Color, Tile] = {}
    for tile in tiles:
        previous = entries.get(tile.color)
        if previous is not None:
            logger.debug(
                "Colour %s: %s replaces %s", tile.color, tile.path, previous.path,
            )
        entries[tile.color] = tile

    if not entries:
        raise EmptyLibraryError("no tile could be decoded")
    return TileIndex(entries)


def _try_load(path: Path, part_size: int) -> Tile | None:
    try:
        return load_tile(path, part_size)
    except TileDecodeError as exc:
        logger.warning("Skipping tile: %s", exc)
        return None


def load_library(
    paths: Iterable[str | Path],
    part_size: int,
    workers: int = 1,
) -> TileIndex:
    """Load every tile in *paths* and index it by representative colour.

    Undecodable files are logged and skipped. With ``workers > 1`` tiles are
    decoded concurrently, but merged in the order of *paths*, so the index
    is the same as for a sequential load.

    Raises:
        EmptyLibraryError: none of *paths* decoded.
    """
    paths = [Path(p) for p in paths]
    logger.info("Loading %d tile candidates at %dx%d …", len(paths), part_size, part_size)
    t0 = time.perf_counter()

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            loaded = list(executor.map(lambda p: _try_load(p, part_size), paths))
    else:
        loaded = [_try_load(p, part_size) for p in paths]

    tiles = [tile for tile in loaded if tile is not None]
    index = build_index(tiles)
    logger.info(
        "Library ready: %d tiles decoded, %d distinct colours  (%.1f s)",
        len(tiles), len(index), time.perf_counter() - t0,
    )
    return index
