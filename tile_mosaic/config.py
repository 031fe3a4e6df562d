"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

COLOR_SPACES = frozenset({"rgb", "lab"})


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        tiles_dir:   Folder walked recursively for tile images.
        source:      Photograph to rebuild out of tiles.
        output:      Where the finished mosaic is written.
        part_size:   Side length every tile is resized to; each source
                     pixel becomes a part_size x part_size block.
        max_side:    Cap applied independently to source width and height.
        color_space: Distance metric for nearest-tile search - "rgb" or "lab".
        use_cache:   Memoise nearest-tile lookups per exact colour.
        workers:     Threads used for tile loading and composition.
    """

    # Paths
    tiles_dir: Path = field(default_factory=lambda: Path("img"))
    source: Path = field(default_factory=lambda: Path("img/img-1.jpg"))
    output: Path = field(default_factory=lambda: Path("res.png"))

    # Geometry
    part_size: int = 5
    max_side: int = 300  # width and height are capped one after the other

    # Matching
    color_space: str = "rgb"
    use_cache: bool = True

    # Execution
    workers: int = 1

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tga", ".tiff", ".tif", ".webp", ".gif"}
    )

    def __post_init__(self) -> None:
        if self.part_size < 1:
            raise ValueError(f"part_size must be >= 1, got {self.part_size}")
        if self.max_side < 1:
            raise ValueError(f"max_side must be >= 1, got {self.max_side}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.color_space not in COLOR_SPACES:
            raise ValueError(
                f"Unknown color_space {self.color_space!r}. "
                f"Choose from: {', '.join(sorted(COLOR_SPACES))}"
            )
