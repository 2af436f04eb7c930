"""Photo catalog: derived greyscale tiles and their brightness.

Deriving tiles is slow for large photo sets, so every derived raster is
cached next to the sources and reused on later runs.  The cache is keyed
purely by file name; a changed source photo is not detected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from photo_collage import image_io
from photo_collage.brightness import brightness
from photo_collage.config import CollageConfig

logger = logging.getLogger(__name__)

_DEFAULTS = CollageConfig()


@dataclass(frozen=True, eq=False)
class PhotoRecord:
    """One candidate tile.

    Equality is identity: the two crops of a non-square photo share a
    source but are separate tiles.
    """

    source: Path
    derived_path: Path
    avg_brightness: int
    raster: np.ndarray | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        assert 0 <= self.avg_brightness <= 255, (
            f"Brightness can't be {self.avg_brightness}"
        )

    def load(self) -> np.ndarray:
        """The derived raster, read from the cache file if not held in memory."""
        if self.raster is not None:
            return self.raster
        return image_io.load_raster(self.derived_path)


def _derive(
    image: np.ndarray,
    tile_size: int,
    source: Path,
    derived_path: Path,
) -> PhotoRecord:
    tile = image_io.resize(image_io.to_greyscale(image), tile_size)
    image_io.save_raster(derived_path, tile)
    logger.info("Converted and wrote %s", derived_path)
    return PhotoRecord(source, derived_path, brightness(tile), tile)


def _from_cache(source: Path, derived_path: Path) -> PhotoRecord:
    tile = image_io.load_raster(derived_path)
    logger.debug("Reusing cached %s", derived_path)
    return PhotoRecord(source, derived_path, brightness(tile), tile)


def square_crops(image: np.ndarray) -> list[np.ndarray]:
    """Split a photo into the square regions used as tiles.

    Square photos are used whole.  Otherwise two squares of the short
    side's length are cut: one at the origin and one flush with the far
    end of the long axis.
    """
    h, w = image.shape[:2]
    if h == w:
        return [image]
    dim = min(h, w)
    if w > h:
        far = image_io.crop(image, w - dim, 0, dim, dim)
    else:
        far = image_io.crop(image, 0, h - dim, dim, dim)
    return [image_io.crop(image, 0, 0, dim, dim), far]


def prepare_catalog(
    directory: str | Path,
    tile_size: int,
    cache_dir: str | Path | None = None,
    grey_suffix: str = _DEFAULTS.grey_suffix,
    alt_suffix: str = _DEFAULTS.grey_alt_suffix,
    extensions: frozenset[str] = _DEFAULTS.SUPPORTED_EXTENSIONS,
) -> list[PhotoRecord]:
    """Build the list of candidate tiles for every photo in *directory*.

    Args:
        directory:  Folder with the source photos.
        tile_size:  Longest side of a derived tile in pixels.
        cache_dir:  Where derived tiles live (default ``<directory>/tmp``).
        grey_suffix: File suffix of the first (or only) derived tile.
        alt_suffix:  File suffix of the second crop of a non-square photo.
        extensions:  File suffixes treated as photos.

    Returns:
        Records in file-name order, the origin crop before the far crop.
    """
    directory = Path(directory)
    cache = Path(cache_dir) if cache_dir is not None else directory / "tmp"

    records: list[PhotoRecord] = []
    for path in image_io.list_files(directory, extensions):
        if grey_suffix in path.name or alt_suffix in path.name:
            continue
        primary = cache / f"{path.stem}{grey_suffix}"
        alternate = cache / f"{path.stem}{alt_suffix}"

        if image_io.exists(primary):
            records.append(_from_cache(path, primary))
            if image_io.exists(alternate):
                records.append(_from_cache(path, alternate))
            continue

        crops = square_crops(image_io.load_raster(path))
        for crop, derived_path in zip(crops, (primary, alternate), strict=False):
            records.append(_derive(crop, tile_size, path, derived_path))

    logger.info("Catalog holds %d tiles from %s", len(records), directory)
    return records


def brightness_histogram(records: list[PhotoRecord]) -> np.ndarray:
    """Number of tiles per brightness value, shape (256,)."""
    counts = np.zeros(256, dtype=np.int64)
    for rec in records:
        assert 0 <= rec.avg_brightness < 256, (
            f"Brightness can't be {rec.avg_brightness}"
        )
        counts[rec.avg_brightness] += 1
    return counts


def missing_brightness_ranges(histogram: np.ndarray) -> list[tuple[int, int]]:
    """Inclusive (low, high) runs of brightness values with no tile at all."""
    gaps: list[tuple[int, int]] = []
    start = None
    for value, count in enumerate(histogram):
        if count == 0 and start is None:
            start = value
        elif count != 0 and start is not None:
            gaps.append((start, value - 1))
            start = None
    if start is not None:
        gaps.append((start, len(histogram) - 1))
    return gaps
