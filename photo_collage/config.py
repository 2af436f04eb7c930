"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class CollageConfig:
    """All tuneable parameters for a collage run.

    Attributes:
        motive_path:        Blueprint image the collage should look like.
        motive_grey_path:   Where to persist the greyscale motive (None = skip).
        canvas_path:        Output file for the finished collage.
        photo_dir:          Folder scanned for candidate photos.
        cache_dir_name:     Sub-folder of *photo_dir* holding derived tiles.
        grey_suffix:        Cache file suffix for the primary derived tile.
        grey_alt_suffix:    Cache file suffix for the second crop of non-square photos.
        target_width:       Width of the output canvas in pixels.
        tiles_per_row:      Number of photos across the canvas.
        reuse_photos:       Allow a photo to appear more than once.
        refill_pool:        Without reuse, start over with all photos once each was placed.
        search_radius:      Cells around a tile in which the same photo may not reappear.
        big_miss_threshold: Brightness delta above which a match counts as a big miss.
    """

    # Paths
    motive_path: Path = field(default_factory=lambda: Path("photos/motive.jpg"))
    motive_grey_path: Path | None = field(
        default_factory=lambda: Path("photos/motive_grey.png"),
    )
    canvas_path: Path = field(default_factory=lambda: Path("photos/canvas.png"))
    photo_dir: Path = field(default_factory=lambda: Path("photos/inputphotos"))

    # Derived tile cache
    cache_dir_name: str = "tmp"
    grey_suffix: str = "_grey.png"
    grey_alt_suffix: str = "_grey_alt.png"

    # Canvas geometry
    target_width: int = 8192 * 2
    tiles_per_row: int = 100

    # Matching
    reuse_photos: bool = True
    refill_pool: bool = False
    search_radius: int = 4
    big_miss_threshold: int = 5

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    @property
    def tile_size(self) -> int:
        """Edge length in pixels of one tile on the canvas."""
        return self.target_width // self.tiles_per_row

    @property
    def cache_dir(self) -> Path:
        return self.photo_dir / self.cache_dir_name
