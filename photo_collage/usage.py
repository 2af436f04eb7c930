"""Bookkeeping of which photo sits in which grid cell."""

from __future__ import annotations

from collections.abc import ItemsView
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photo_collage.catalog import PhotoRecord


class DuplicateAssignmentError(RuntimeError):
    """A grid cell was given a second, different photo."""


class UsageTracker:
    """Mapping of grid cell (x, y) to the photo placed there.

    Records are compared by identity: two distinct records with the same
    brightness are different photos.
    """

    def __init__(self) -> None:
        self._cells: dict[tuple[int, int], PhotoRecord] = {}

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def items(self) -> ItemsView[tuple[int, int], PhotoRecord]:
        return self._cells.items()

    def record(self, x: int, y: int) -> PhotoRecord | None:
        return self._cells.get((x, y))

    def assign(self, x: int, y: int, record: PhotoRecord) -> None:
        current = self._cells.get((x, y))
        if current is not None and current is not record:
            raise DuplicateAssignmentError(
                f"Cell ({x}, {y}) already holds {current.source}, "
                f"refusing {record.source}"
            )
        self._cells[(x, y)] = record

    def is_used_nearby(self, radius: int, x: int, y: int, record: PhotoRecord) -> bool:
        """True if *record* occupies any cell within Chebyshev distance *radius*."""
        for i in range(x - radius, x + radius + 1):
            for j in range(y - radius, y + radius + 1):
                if self._cells.get((i, j)) is record:
                    return True
        return False
