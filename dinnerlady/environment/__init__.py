"""Level data: occupancy grids and level file loading."""

from .grid import MarkerSet, OccupancyGrid, as_occupancy_grid
from .levels import (
    LevelData,
    LevelFormatError,
    LevelIndexEntry,
    SpecialTiles,
    load_level,
    load_level_index,
    load_levels,
    parse_level,
)

__all__ = [
    "LevelData",
    "LevelFormatError",
    "LevelIndexEntry",
    "MarkerSet",
    "OccupancyGrid",
    "SpecialTiles",
    "as_occupancy_grid",
    "load_level",
    "load_level_index",
    "load_levels",
    "parse_level",
]
