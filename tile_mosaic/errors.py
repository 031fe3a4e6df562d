"""Exception hierarchy for mosaic builds."""

from __future__ import annotations

from pathlib import Path


class MosaicError(Exception):
    """Base class for every error raised by a mosaic build."""


class TileDecodeError(MosaicError):
    """A single tile could not be decoded or resized.

    Non-fatal: :func:`tile_mosaic.library.load_library` logs and skips it.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"cannot load tile {path}: {reason}")
        self.path = Path(path)


class EmptyLibraryError(MosaicError):
    """No tile in the library decoded successfully."""


class SourceDecodeError(MosaicError):
    """The source image could not be opened or decoded."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"cannot read source image {path}: {reason}")
        self.path = Path(path)


class PersistenceError(MosaicError):
    """The finished mosaic could not be written to disk."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"cannot save mosaic to {path}: {reason}")
        self.path = Path(path)
