from __future__ import annotations

import numpy as np

from dinnerlady.environment.grid import OccupancyGrid
from dinnerlady.environment.levels import LevelData, parse_level
from dinnerlady.types import GridCell, Path


def make_grid(*rows: str) -> OccupancyGrid:
    """Grid from ``"1"`` (wall) / ``"0"`` (floor) row strings."""
    return OccupancyGrid.from_rows(list(rows))


def open_grid(width: int, height: int) -> OccupancyGrid:
    return OccupancyGrid.from_walkable(np.ones((height, width), dtype=np.bool_))


def wall_column_grid(
    size: int = 10, wall_col: int = 5, gap_row: int = 5
) -> OccupancyGrid:
    """Open square grid split by a one-cell wall column with a single gap."""
    walkable = np.ones((size, size), dtype=np.bool_)
    walkable[:, wall_col] = False
    walkable[gap_row, wall_col] = True
    return OccupancyGrid.from_walkable(walkable)


def make_level(*rows: str, name: str = "test") -> LevelData:
    return parse_level({"name": name, "grid": list(rows)})


def to_cells(path: Path, grid_scale: float = 1.0) -> list[GridCell]:
    """Convert world waypoints back to ``(row, col)`` cells."""
    return [(round(z / grid_scale), round(x / grid_scale)) for x, z in path]
