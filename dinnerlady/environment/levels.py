"""Level file loading.

A level file is JSON of the form::

    {
        "name": "Canteen",
        "width": 10,
        "height": 8,
        "grid": ["1111111111", "1S00000D01", ...]
    }

Rows may also be lists of markers (``[["1", "0", "S"], ...]``), which is
needed for multi-character markers. A level index lists the level files::

    {"levels": [{"id": 1, "name": "Canteen", "file": "canteen.json"}]}

Besides walls and floor, four semantic markers are recognised:
``S`` (player start), ``E`` (exit), ``D`` (dinner lady spawn) and ``H``
(hiding spot). They are floor as far as pathfinding is concerned.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dinnerlady.environment.grid import MarkerSet, OccupancyGrid, split_rows
from dinnerlady.types import CellMarker, GridCell

logger = logging.getLogger(__name__)

START_MARKER = "S"
EXIT_MARKER = "E"
CHASER_SPAWN_MARKER = "D"
HIDING_SPOT_MARKER = "H"


class LevelFormatError(ValueError):
    """Raised when a level file is structurally invalid."""


@dataclass
class SpecialTiles:
    """Semantic cells picked out of a level's raw rows."""

    start: GridCell | None = None
    exit: GridCell | None = None
    chaser_spawn: GridCell | None = None
    hiding_spots: list[GridCell] = field(default_factory=list)

    @classmethod
    def from_rows(cls, rows: list[list[CellMarker]]) -> SpecialTiles:
        tiles = cls()
        for row_index, row in enumerate(rows):
            for col_index, marker in enumerate(row):
                cell = (row_index, col_index)
                if marker == START_MARKER:
                    tiles.start = cell
                elif marker == EXIT_MARKER:
                    tiles.exit = cell
                elif marker == CHASER_SPAWN_MARKER:
                    tiles.chaser_spawn = cell
                elif marker == HIDING_SPOT_MARKER:
                    tiles.hiding_spots.append(cell)
        return tiles


@dataclass
class LevelData:
    """A loaded level: raw rows, their occupancy grid, and special tiles."""

    level_id: int | str | None
    name: str
    rows: list[list[CellMarker]]
    grid: OccupancyGrid
    special_tiles: SpecialTiles

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


@dataclass(frozen=True)
class LevelIndexEntry:
    level_id: int | str
    name: str
    file: str


def parse_level(
    data: dict[str, Any],
    *,
    level_id: int | str | None = None,
    markers: MarkerSet | None = None,
) -> LevelData:
    """Build a :class:`LevelData` from already-decoded level JSON.

    Raises:
        LevelFormatError: If the grid is missing, ragged, or disagrees with
            the declared width/height.
    """
    raw_grid = data.get("grid")
    if not isinstance(raw_grid, list) or not raw_grid:
        raise LevelFormatError("Level is missing a non-empty 'grid' list")

    try:
        rows = split_rows(raw_grid)
        grid = OccupancyGrid.from_rows(rows, markers)
    except (TypeError, ValueError) as exc:
        raise LevelFormatError(str(exc)) from exc

    declared_width = data.get("width", grid.width)
    declared_height = data.get("height", grid.height)
    if (declared_width, declared_height) != (grid.width, grid.height):
        raise LevelFormatError(
            f"Level declares {declared_width}x{declared_height} but grid is "
            f"{grid.width}x{grid.height}"
        )

    return LevelData(
        level_id=data.get("id", level_id),
        name=str(data.get("name", level_id if level_id is not None else "")),
        rows=rows,
        grid=grid,
        special_tiles=SpecialTiles.from_rows(rows),
    )


def load_level(
    path: Path | str,
    *,
    level_id: int | str | None = None,
    markers: MarkerSet | None = None,
) -> LevelData:
    """Load a single level file.

    Raises:
        OSError: If the file cannot be read.
        LevelFormatError: If the contents are not a valid level.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LevelFormatError(f"Level file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise LevelFormatError(f"Level file {path} must contain a JSON object")

    level = parse_level(data, level_id=level_id, markers=markers)
    logger.info(
        f"Loaded level {level.name!r} from {path} ({level.width}x{level.height})"
    )
    return level


def load_level_index(path: Path | str) -> list[LevelIndexEntry]:
    """Read a level index file listing level ids, names and files.

    Raises:
        OSError: If the file cannot be read.
        LevelFormatError: If the index is malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LevelFormatError(f"Level index {path} is not valid JSON: {exc}") from exc

    levels = data.get("levels") if isinstance(data, dict) else None
    if not isinstance(levels, list):
        raise LevelFormatError(f"Level index {path} has no 'levels' list")

    entries: list[LevelIndexEntry] = []
    for raw in levels:
        try:
            entries.append(
                LevelIndexEntry(
                    level_id=raw["id"], name=str(raw["name"]), file=str(raw["file"])
                )
            )
        except (KeyError, TypeError) as exc:
            raise LevelFormatError(f"Bad level index entry {raw!r}") from exc
    return entries


def load_levels(
    index_path: Path | str, *, markers: MarkerSet | None = None
) -> dict[int | str, LevelData]:
    """Load every level listed in an index, keyed by level id.

    Level files are resolved relative to the index. A level that fails to
    load is logged and skipped so one broken file does not take the whole
    game down.
    """
    index_path = Path(index_path)
    levels: dict[int | str, LevelData] = {}
    for entry in load_level_index(index_path):
        level_path = index_path.parent / entry.file
        try:
            level = load_level(level_path, level_id=entry.level_id, markers=markers)
        except (OSError, LevelFormatError) as e:
            logger.warning(f"Skipping level {entry.level_id} ({level_path}): {e}")
            continue
        level.level_id = entry.level_id
        level.name = entry.name
        levels[entry.level_id] = level

    logger.info(f"Loaded {len(levels)} of the levels listed in {index_path}")
    return levels
