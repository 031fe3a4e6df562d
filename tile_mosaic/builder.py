"""End-to-end mosaic run: tiles + source in, image file out."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from tile_mosaic.compositor import compose
from tile_mosaic.config import MosaicConfig
from tile_mosaic.image_io import load_source, save_mosaic, walk_tile_paths
from tile_mosaic.library import load_library
from tile_mosaic.matcher import ColorMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Summary of a finished build."""

    output_path: Path
    source_size: tuple[int, int]  # bounded (w, h)
    mosaic_size: tuple[int, int]  # (w, h) in pixels
    tiles: int
    cached_colors: int
    elapsed: float


class MosaicBuilder:
    """Runs the build stages in order, logging each one.

    Any :class:`~tile_mosaic.errors.MosaicError` other than a per-tile decode
    failure aborts the run and propagates to the caller.
    """

    def __init__(self, config: MosaicConfig) -> None:
        self.config = config

    def compute(self) -> tuple[np.ndarray, ColorMatcher]:
        """Everything except saving: returns the mosaic and the matcher used."""
        cfg = self.config

        logger.info("Load parts paths …")
        paths = walk_tile_paths(cfg.tiles_dir)
        logger.debug("%d files under %s", len(paths), cfg.tiles_dir)

        # Decoded before the tiles so a bad source fails fast.
        logger.info("Open source image …")
        source = load_source(cfg.source)
        logger.debug("Source %s is %dx%d", cfg.source, source.shape[1], source.shape[0])

        logger.info("Load parts map …")
        index = load_library(paths, cfg.part_size, workers=cfg.workers)

        logger.info("Calculate …")
        matcher = ColorMatcher(
            index, use_cache=cfg.use_cache, color_space=cfg.color_space,
        )
        mosaic = compose(
            source, index, cfg.part_size,
            max_side=cfg.max_side,
            matcher=matcher,
            workers=cfg.workers,
        )
        return mosaic, matcher

    def build(self) -> BuildResult:
        cfg = self.config
        t0 = time.perf_counter()

        mosaic, matcher = self.compute()

        logger.info("Save result to %s …", cfg.output)
        save_mosaic(mosaic, cfg.output)

        h, w = mosaic.shape[:2]
        result = BuildResult(
            output_path=cfg.output,
            source_size=(w // cfg.part_size, h // cfg.part_size),
            mosaic_size=(w, h),
            tiles=len(matcher.index),
            cached_colors=matcher.cache_size,
            elapsed=time.perf_counter() - t0,
        )
        logger.info("Done!  (%.1f s)", result.elapsed)
        return result
