"""Grid scan that turns a motive and a catalog into the collage canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from photo_collage import image_io
from photo_collage.brightness import brightness
from photo_collage.catalog import PhotoRecord
from photo_collage.matcher import EmptyCandidatePoolError, best_match
from photo_collage.usage import UsageTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridPlan:
    """Geometry of one collage run."""

    columns: int
    rows: int
    tile_size_source: int  # cell edge measured on the motive
    tile_size_target: int  # cell edge measured on the canvas
    canvas_width: int
    canvas_height: int


@dataclass
class MosaicStats:
    """Match quality counters accumulated during :func:`assemble`."""

    cells: int = 0
    hits: int = 0
    misses: int = 0
    big_misses: int = 0
    relaxed: int = 0
    refills: int = 0
    big_miss_threshold: int = 5


def plan_grid(
    motive_width: int,
    motive_height: int,
    target_width: int,
    tiles_per_row: int,
) -> GridPlan:
    """Derive canvas size and cell sizes from the motive's proportions.

    Raises:
        ValueError: if the motive or canvas is too small for *tiles_per_row*.
    """
    if tiles_per_row <= 0:
        raise ValueError(f"tiles_per_row must be positive, got {tiles_per_row}")
    tile_size_target = target_width // tiles_per_row
    tile_size_source = motive_width // tiles_per_row
    if tile_size_target == 0:
        raise ValueError(
            f"Canvas width {target_width} is narrower than {tiles_per_row} tiles"
        )
    if tile_size_source == 0:
        raise ValueError(
            f"Motive width {motive_width} is narrower than {tiles_per_row} tiles"
        )
    canvas_height = target_width * motive_height // motive_width
    # Both tile sizes are rounded down independently; never scan past the motive
    rows = min(canvas_height // tile_size_target, motive_height // tile_size_source)
    if rows == 0:
        raise ValueError("Motive is too flat to fit a single row of tiles")
    return GridPlan(
        columns=tiles_per_row,
        rows=rows,
        tile_size_source=tile_size_source,
        tile_size_target=tile_size_target,
        canvas_width=target_width,
        canvas_height=canvas_height,
    )


def assemble(
    motive: np.ndarray,
    catalog: list[PhotoRecord],
    grid_columns: int,
    grid_rows: int,
    tile_size_source: int,
    tile_size_target: int,
    proximity_radius: int = 4,
    reuse_allowed: bool = True,
    big_miss_threshold: int = 5,
    canvas: np.ndarray | None = None,
    refill_pool: bool = False,
) -> tuple[np.ndarray, MosaicStats]:
    """Fill every grid cell with the best matching photo.

    Cells are visited column by column (x outer, y inner); the order
    decides which cell gets first pick and therefore shapes the output.

    Args:
        motive:            Greyscale or RGB blueprint raster.
        catalog:           Candidate tiles.
        grid_columns:      Cells per row.
        grid_rows:         Cells per column.
        tile_size_source:  Cell edge on the motive in pixels.
        tile_size_target:  Cell edge on the canvas in pixels.
        proximity_radius:  Chebyshev radius in which a photo may not repeat.
        reuse_allowed:     If False, a photo is placed at most once.
        big_miss_threshold: Brightness delta counted as a big miss.
        canvas:            Optional pre-allocated canvas; a black one sized
                           to the grid is created otherwise.
        refill_pool:       Without reuse, start over with the full catalog
                           once every photo has been placed instead of failing.

    Returns:
        The canvas and the accumulated :class:`MosaicStats`.

    Raises:
        EmptyCandidatePoolError: if the catalog is empty, or if reuse is
            disallowed and the grid has more cells than the catalog has photos.
    """
    if not catalog:
        raise EmptyCandidatePoolError("The photo catalog is empty")
    if canvas is None:
        canvas = image_io.new_canvas(
            grid_columns * tile_size_target, grid_rows * tile_size_target,
        )

    usage = UsageTracker()
    stats = MosaicStats(big_miss_threshold=big_miss_threshold)
    remaining = list(catalog)
    tiles: dict[int, np.ndarray] = {}

    logger.info(
        "Creating %dx%d collage using %d photos", grid_columns, grid_rows, len(catalog),
    )
    for x in range(grid_columns):
        for y in range(grid_rows):
            if not remaining and refill_pool:
                logger.warning(
                    "All %d photos placed once; starting over at (%d, %d)",
                    len(catalog), x, y,
                )
                remaining = list(catalog)
                stats.refills += 1

            target = brightness(
                motive,
                x * tile_size_source,
                y * tile_size_source,
                (x + 1) * tile_size_source,
                (y + 1) * tile_size_source,
            )
            record = best_match(remaining, target, usage, proximity_radius, x, y)
            if usage.is_used_nearby(proximity_radius, x, y, record):
                stats.relaxed += 1
            if not reuse_allowed:
                remaining = [r for r in remaining if r is not record]

            found = record.avg_brightness
            logger.debug("Searching brightness %d\tfound %d", target, found)
            stats.cells += 1
            if found == target:
                stats.hits += 1
            else:
                stats.misses += 1
            if abs(target - found) > big_miss_threshold:
                stats.big_misses += 1
                logger.info("Big miss: %d found %d", target, found)

            if id(record) not in tiles:
                tiles[id(record)] = record.load()
            image_io.composite_at(
                canvas, tiles[id(record)], x * tile_size_target, y * tile_size_target,
            )
            usage.assign(x, y, record)

    return canvas, stats
