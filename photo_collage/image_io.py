"""Image loading, saving, and the raster operations the collage needs.

Rasters are plain numpy ``uint8`` arrays: ``(H, W)`` for greyscale,
``(H, W, 3)`` for RGB.  Pillow is only touched at the file boundary and
for resampling.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from photo_collage.brightness import luma


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    """
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_raster(path: str | Path) -> np.ndarray:
    """Load an image file.

    Greyscale files stay single-channel, everything else is converted
    to RGB.

    Returns:
        (H, W) or (H, W, 3) uint8 array.
    """
    with Image.open(path) as img:
        mode = "L" if img.mode in ("L", "LA", "I", "I;16", "1") else "RGB"
        return np.array(img.convert(mode), dtype=np.uint8)


def save_raster(path: str | Path, raster: np.ndarray) -> None:
    """Write *raster* to *path*, creating parent folders as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(raster.astype(np.uint8)).save(path)


def resize(raster: np.ndarray, longest_side: int) -> np.ndarray:
    """Resize so the longest side equals *longest_side*, keeping proportions."""
    h, w = raster.shape[:2]
    size = compute_target_size(w, h, longest_side)
    img = Image.fromarray(raster.astype(np.uint8)).resize(size, Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def crop(raster: np.ndarray, x: int, y: int, width: int, height: int) -> np.ndarray:
    h, w = raster.shape[:2]
    if x < 0 or y < 0 or width <= 0 or height <= 0 or x + width > w or y + height > h:
        raise ValueError(
            f"Crop {width}x{height}+{x}+{y} does not fit a {w}x{h} raster"
        )
    return raster[y:y + height, x:x + width].copy()


def to_greyscale(raster: np.ndarray) -> np.ndarray:
    """Greyscale copy using the unweighted channel average."""
    return luma(raster)


def new_canvas(width: int, height: int) -> np.ndarray:
    """Blank (black) greyscale canvas."""
    return np.zeros((height, width), dtype=np.uint8)


def composite_at(canvas: np.ndarray, raster: np.ndarray, x: int, y: int) -> None:
    """Paint *raster* onto *canvas* with its top-left corner at (x, y).

    Destination pixels are overwritten; whatever falls outside the
    canvas is clipped.
    """
    ch, cw = canvas.shape[:2]
    if x >= cw or y >= ch:
        return
    src = raster
    if canvas.ndim == 2 and src.ndim == 3:
        src = luma(src)
    h = min(src.shape[0], ch - y)
    w = min(src.shape[1], cw - x)
    canvas[y:y + h, x:x + w] = src[:h, :w]


def list_files(directory: str | Path, extensions: frozenset[str]) -> list[Path]:
    """Image files directly inside *directory*, sorted by name."""
    folder = Path(directory)
    if not folder.exists():
        raise FileNotFoundError(f"Photo folder not found: {folder}")
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def exists(path: str | Path) -> bool:
    return Path(path).exists()
