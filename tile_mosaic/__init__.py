"""
Tile Mosaic
===========

Rebuild a photograph out of a library of small tile images: every pixel
of the (downscaled) source becomes the tile whose mean colour is closest.

- **Library**: tiles normalised to a fixed square size, indexed by mean colour
- **Matcher**: nearest-colour search, memoised per exact colour
- **Compositor**: one tile block per source pixel
"""

__version__ = "1.0.0"

from tile_mosaic.builder import BuildResult, MosaicBuilder
from tile_mosaic.colors import Color, mean_color
from tile_mosaic.compositor import blit, compose
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import (
    EmptyLibraryError,
    MosaicError,
    PersistenceError,
    SourceDecodeError,
    TileDecodeError,
)
from tile_mosaic.image_io import (
    bound_source,
    capped_sizes,
    load_source,
    save_mosaic,
    walk_tile_paths,
)
from tile_mosaic.library import Tile, TileIndex, build_index, load_library, load_tile
from tile_mosaic.matcher import ColorMatcher, MatchCache, nearest

__all__ = [
    "BuildResult",
    "Color",
    "ColorMatcher",
    "EmptyLibraryError",
    "MatchCache",
    "MosaicBuilder",
    "MosaicConfig",
    "MosaicError",
    "PersistenceError",
    "SourceDecodeError",
    "Tile",
    "TileDecodeError",
    "TileIndex",
    "blit",
    "bound_source",
    "build_index",
    "capped_sizes",
    "compose",
    "load_library",
    "load_source",
    "load_tile",
    "mean_color",
    "nearest",
    "save_mosaic",
    "walk_tile_paths",
]
