"""Occupancy grid: the walkable/wall view of a level that pathfinding reads.

Level files have used more than one encoding for walls over time (the
string ``"1"``, the integer ``1``, or "anything that isn't ``"0"``"). That
choice lives entirely in :class:`MarkerSet`; everything downstream only asks
"is this cell walkable?".
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from dinnerlady import config
from dinnerlady.types import CellMarker, GridCell


@dataclass(frozen=True)
class MarkerSet:
    """Classifies raw cell markers as wall or not-wall.

    Exactly one of the two modes applies:

    - ``wall_markers``: listed values are walls, everything else walkable.
    - ``walkable_markers``: listed values are walkable, everything else wall.
      Useful for encodings where ``"0"`` is floor and any other token blocks.

    Semantic markers (start, exit, spawn, hiding spot) are opaque here; in
    the default mode they are walkable because they are not wall markers.
    """

    wall_markers: frozenset[CellMarker] = field(
        default_factory=lambda: config.DEFAULT_WALL_MARKERS
    )
    walkable_markers: frozenset[CellMarker] | None = None

    def is_wall(self, marker: CellMarker) -> bool:
        if self.walkable_markers is not None:
            return marker not in self.walkable_markers
        return marker in self.wall_markers

    @classmethod
    def walls(cls, *markers: CellMarker) -> MarkerSet:
        return cls(wall_markers=frozenset(markers))

    @classmethod
    def floors(cls, *markers: CellMarker) -> MarkerSet:
        return cls(walkable_markers=frozenset(markers))


def split_rows(rows: Sequence[str | Sequence[CellMarker]]) -> list[list[CellMarker]]:
    """Normalize level rows to lists of markers.

    A row given as a single string is split into one marker per character.
    """
    return [list(row) for row in rows]


class OccupancyGrid:
    """Immutable 2D walkability map indexed ``[row, col]``.

    Rows run along the world Z axis and columns along X. Anything outside
    ``[0, height) x [0, width)`` is reported as a wall, never as an error.
    """

    def __init__(self, walkable: np.ndarray) -> None:
        if walkable.ndim != 2 or walkable.size == 0:
            raise ValueError("Occupancy grid must be a non-empty 2D array")
        self._walkable = np.array(walkable, dtype=np.bool_)
        self._walkable.flags.writeable = False
        self.height, self.width = self._walkable.shape

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[str | Sequence[CellMarker]],
        markers: MarkerSet | None = None,
    ) -> OccupancyGrid:
        """Build a grid from raw level rows.

        Raises:
            ValueError: If there are no rows, a row is empty, or rows differ
                in length.
        """
        markers = markers or MarkerSet()
        cells = split_rows(rows)
        if not cells or not cells[0]:
            raise ValueError("Occupancy grid must have at least one cell")
        width = len(cells[0])
        for row_index, row in enumerate(cells):
            if len(row) != width:
                raise ValueError(
                    f"Ragged grid: row {row_index} has {len(row)} cells, "
                    f"expected {width}"
                )

        walkable = np.array(
            [[not markers.is_wall(marker) for marker in row] for row in cells],
            dtype=np.bool_,
        )
        return cls(walkable)

    @classmethod
    def from_walkable(
        cls, walkable: np.ndarray | Iterable[Iterable[bool]]
    ) -> OccupancyGrid:
        """Build a grid directly from a boolean mask (True = walkable)."""
        return cls(np.asarray(walkable, dtype=np.bool_))

    @property
    def walkable(self) -> np.ndarray:
        """Read-only boolean array of shape ``(height, width)``."""
        return self._walkable

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def is_walkable(self, row: int, col: int) -> bool:
        if not self.in_bounds(row, col):
            return False
        return bool(self._walkable[row, col])

    def is_wall(self, row: int, col: int) -> bool:
        return not self.is_walkable(row, col)

    def walkable_cells(self) -> list[GridCell]:
        """All walkable cells in row-major order."""
        rows, cols = np.nonzero(self._walkable)
        return [(int(r), int(c)) for r, c in zip(rows, cols, strict=True)]

    def iter_neighbors(self, row: int, col: int) -> Iterator[GridCell]:
        """Walkable 4-connected neighbours of a cell. No diagonal moves."""
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nr, nc = row + dr, col + dc
            if self.is_walkable(nr, nc):
                yield nr, nc

    def __repr__(self) -> str:
        return f"OccupancyGrid({self.width}x{self.height})"


def as_occupancy_grid(
    grid: OccupancyGrid | np.ndarray | Sequence[str | Sequence[CellMarker]],
    markers: MarkerSet | None = None,
) -> OccupancyGrid:
    """Coerce level data into an :class:`OccupancyGrid`.

    Boolean arrays are taken as walkability masks; anything else is treated
    as raw marker rows and classified with ``markers``.
    """
    if isinstance(grid, OccupancyGrid):
        return grid
    if isinstance(grid, np.ndarray) and grid.dtype == np.bool_:
        return OccupancyGrid.from_walkable(grid)
    if isinstance(grid, np.ndarray):
        return OccupancyGrid.from_rows(grid.tolist(), markers)
    return OccupancyGrid.from_rows(grid, markers)
