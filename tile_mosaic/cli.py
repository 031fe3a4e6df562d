"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from tile_mosaic.builder import MosaicBuilder
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import MosaicError, TileDecodeError
from tile_mosaic.image_io import walk_tile_paths
from tile_mosaic.library import build_index, load_tile

app = typer.Typer(
    name="tile-mosaic",
    help="Rebuild a photograph out of a library of small tile images.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- build command -----------------------------------------------------

@app.command()
def build(
    source: Path = typer.Argument(_DEFAULTS.source, help="Photograph to rebuild"),
    tiles_dir: Path = typer.Option(
        _DEFAULTS.tiles_dir, "--tiles", "-t", help="Folder of tile images (recursive)",
    ),
    output: Path = typer.Option(
        _DEFAULTS.output, "--output", "-o", help="Where to write the mosaic",
    ),
    part_size: int = typer.Option(
        _DEFAULTS.part_size, "--part-size", "-p",
        help="Tile side in pixels; each source pixel becomes one tile",
    ),
    max_side: int = typer.Option(
        _DEFAULTS.max_side, "--max-side", "-m",
        help="Cap on source width and height before matching",
    ),
    color_space: str = typer.Option(
        _DEFAULTS.color_space, "--color-space", help="'rgb' or 'lab'",
    ),
    cache: bool = typer.Option(
        _DEFAULTS.use_cache, "--cache/--no-cache", help="Memoise per-colour matches",
    ),
    workers: int = typer.Option(
        _DEFAULTS.workers, "--workers", "-w", help="Threads for loading and composing",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Build a photomosaic of SOURCE from the tiles in TILES."""
    _setup_logging(verbose)
    logger = logging.getLogger("tile_mosaic")

    try:
        cfg = MosaicConfig(
            tiles_dir=tiles_dir,
            source=source,
            output=output,
            part_size=part_size,
            max_side=max_side,
            color_space=color_space,
            use_cache=cache,
            workers=workers,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(Panel.fit(
        f"[bold]TILE MOSAIC[/bold]\n"
        f"Source: {cfg.source}  |  Tiles: {cfg.tiles_dir}/\n"
        f"Part size: {cfg.part_size}  |  Max side: {cfg.max_side}\n"
        f"Colour space: {cfg.color_space}  |  Cache: {cfg.use_cache}"
        f"  |  Workers: {cfg.workers}",
        border_style="cyan",
    ))

    cfg.output.parent.mkdir(parents=True, exist_ok=True)
    try:
        result = MosaicBuilder(cfg).build()
    except MosaicError as exc:
        logger.error("Build failed: %s", exc)
        raise typer.Exit(1) from exc

    w, h = result.source_size
    mw, mh = result.mosaic_size
    console.print(Panel.fit(
        f"[bold green]DONE[/bold green] - {result.output_path}\n"
        f"[dim]{w}x{h} source px -> {mw}x{mh} mosaic  |  "
        f"{result.tiles} tile colours  |  {result.cached_colors} colours matched  |  "
        f"time={result.elapsed:.1f}s[/dim]",
        border_style="green",
    ))


# -- library command ---------------------------------------------------

@app.command()
def library(
    tiles_dir: Path = typer.Argument(_DEFAULTS.tiles_dir, help="Folder of tile images"),
    part_size: int = typer.Option(_DEFAULTS.part_size, "--part-size", "-p"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Report how a tile folder indexes: decoded tiles, colours, collisions."""
    _setup_logging(verbose)
    logger = logging.getLogger("tile_mosaic")
    t0 = time.perf_counter()

    try:
        paths = walk_tile_paths(tiles_dir)
    except MosaicError as exc:
        logger.error("%s", exc)
        raise typer.Exit(1) from exc

    tiles = []
    skipped = 0
    for path in paths:
        try:
            tiles.append(load_tile(path, part_size))
        except TileDecodeError as exc:
            logger.warning("Skipping tile: %s", exc)
            skipped += 1

    try:
        index = build_index(tiles)
    except MosaicError as exc:
        logger.error("%s", exc)
        raise typer.Exit(1) from exc

    shared = Counter(tile.color for tile in tiles)
    collisions = sum(n - 1 for n in shared.values() if n > 1)
    console.print(
        f"[green]✓[/green] {tiles_dir}  "
        f"[dim]files={len(paths)}  decoded={len(tiles)}  skipped={skipped}  "
        f"colours={len(index)}  replaced={collisions}  "
        f"time={time.perf_counter() - t0:.1f}s[/dim]"
    )


if __name__ == "__main__":
    app()
