"""Greedy brightness matching with a no-reuse-nearby constraint."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from photo_collage.catalog import PhotoRecord
from photo_collage.usage import UsageTracker

logger = logging.getLogger(__name__)


class EmptyCandidatePoolError(ValueError):
    """Matching was requested against an empty list of photos."""


def _closest(candidates: Iterable[PhotoRecord], target: int) -> PhotoRecord | None:
    """Smallest brightness distance; the earlier candidate wins a tie."""
    best = None
    best_dist = 0
    for cand in candidates:
        dist = abs(cand.avg_brightness - target)
        if best is None or dist < best_dist:
            best, best_dist = cand, dist
    return best


def best_match(
    candidates: Sequence[PhotoRecord],
    target: int,
    usage: UsageTracker,
    radius: int,
    x: int,
    y: int,
) -> PhotoRecord:
    """Pick the photo whose brightness is closest to *target* for cell (x, y).

    Photos already placed within *radius* cells of (x, y) are skipped.
    If that rules out every candidate the constraint is dropped and the
    whole list is searched again, so a small pool never stalls the scan.

    Raises:
        EmptyCandidatePoolError: if *candidates* is empty.
    """
    if not candidates:
        raise EmptyCandidatePoolError(f"No photos to match cell ({x}, {y}) against")

    best = _closest(
        (c for c in candidates if not usage.is_used_nearby(radius, x, y, c)),
        target,
    )
    if best is None:
        logger.debug(
            "All %d photos used near (%d, %d); relaxing radius %d",
            len(candidates), x, y, radius,
        )
        best = _closest(candidates, target)
    return best
