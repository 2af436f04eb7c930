"""Average brightness of a raster or a rectangular part of it.

Brightness is the plain channel average ``(R + G + B) // 3`` per pixel,
averaged with integer division over the region.  No perceptual weighting.
"""

from __future__ import annotations

import numpy as np


def luma(raster: np.ndarray) -> np.ndarray:
    """Per-pixel unweighted channel average as a (H, W) uint8 array.

    Alpha channels are ignored; greyscale input is returned as a copy.
    """
    if raster.ndim == 2:
        return raster.astype(np.uint8, copy=True)
    rgb = raster[..., :3].astype(np.int64)
    return (rgb.sum(axis=2) // 3).astype(np.uint8)


def brightness(
    raster: np.ndarray,
    x0: int = 0,
    y0: int = 0,
    x1: int | None = None,
    y1: int | None = None,
) -> int:
    """Average brightness of the half-open region [x0, x1) x [y0, y1).

    Args:
        raster: (H, W) greyscale or (H, W, C) colour uint8 array.
        x0, y0: Top-left corner (inclusive).
        x1, y1: Bottom-right corner (exclusive); default to the raster edge.

    Returns:
        Integer brightness in [0, 255].

    Raises:
        ValueError: if the region is empty or reaches outside the raster.
    """
    h, w = raster.shape[:2]
    x1 = w if x1 is None else x1
    y1 = h if y1 is None else y1
    if x1 <= x0 or y1 <= y0:
        raise ValueError(f"Empty brightness region [{x0}, {x1}) x [{y0}, {y1})")
    if x0 < 0 or y0 < 0 or x1 > w or y1 > h:
        raise ValueError(
            f"Region [{x0}, {x1}) x [{y0}, {y1}) exceeds {w}x{h} raster"
        )

    region = raster[y0:y1, x0:x1]
    if region.ndim == 2:
        values = region.astype(np.int64)
    else:
        values = region[..., :3].astype(np.int64).sum(axis=2) // 3
    return int(values.sum() // values.size)
