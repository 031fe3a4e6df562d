"""Colour type, representative colours and distance computation."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy.spatial.distance import cdist
from skimage.color import rgb2lab

Color = tuple[int, int, int]


def as_color(value: Sequence[int] | np.ndarray) -> Color:
    """Normalise any 3-channel sample (tuple, list, numpy row) to a ``Color``."""
    r, g, b = (int(c) for c in value[:3])
    return (r, g, b)


def mean_color(pixels: np.ndarray) -> Color:
    """Per-channel arithmetic mean of an (H, W, 3) image, truncated to int.

    Integer floor division on non-negative sums truncates exactly like
    casting the true mean down; no rounding takes place.
    """
    flat = pixels.reshape(-1, pixels.shape[-1])[:, :3].astype(np.int64)
    if len(flat) == 0:
        raise ValueError("cannot compute the mean colour of an empty image")
    totals = flat.sum(axis=0) // len(flat)
    return as_color(totals)


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3) uint8 RGB → (N, 3) float64 CIELAB."""
    return rgb2lab(rgb.astype(np.float64).reshape(1, -1, 3) / 255.0).reshape(-1, 3)


def to_color_space(colors: np.ndarray, color_space: str = "rgb") -> np.ndarray:
    """Project (N, 3) RGB colours into the space distances are measured in."""
    if color_space == "lab":
        return rgb_to_lab(colors)
    if color_space == "rgb":
        return colors.astype(np.float64)
    raise ValueError(f"Unknown color_space {color_space!r}")


def squared_distances(
    query: Color,
    points: np.ndarray,
    color_space: str = "rgb",
) -> np.ndarray:
    """Squared Euclidean distance from *query* to every row of *points*.

    Args:
        query:       RGB colour being matched.
        points:      (N, 3) float64, already in *color_space*
                     (see :func:`to_color_space`).
        color_space: ``"rgb"`` or ``"lab"``.

    Returns:
        (N,) float64. In RGB every value is an exact integer, so ties
        compare equal and the ordering matches true Euclidean distance.
    """
    q = to_color_space(np.array([query], dtype=np.uint8), color_space)
    return cdist(q, points, metric="sqeuclidean")[0]
