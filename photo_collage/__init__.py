"""
Photo Collage Generator
=======================

Rebuild a motive image out of many small greyscale photos. Each grid
cell receives the photo whose average brightness is closest to the
motive's brightness there, while the same photo is kept from repeating
within a configurable neighbourhood.
"""

__version__ = "1.0.0"

from photo_collage.assembler import GridPlan, MosaicStats, assemble, plan_grid
from photo_collage.brightness import brightness
from photo_collage.catalog import (
    PhotoRecord,
    brightness_histogram,
    missing_brightness_ranges,
    prepare_catalog,
)
from photo_collage.config import CollageConfig
from photo_collage.matcher import EmptyCandidatePoolError, best_match
from photo_collage.usage import DuplicateAssignmentError, UsageTracker

__all__ = [
    "CollageConfig",
    "DuplicateAssignmentError",
    "EmptyCandidatePoolError",
    "GridPlan",
    "MosaicStats",
    "PhotoRecord",
    "UsageTracker",
    "assemble",
    "best_match",
    "brightness",
    "brightness_histogram",
    "missing_brightness_ranges",
    "plan_grid",
    "prepare_catalog",
]
