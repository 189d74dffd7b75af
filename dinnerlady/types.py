from __future__ import annotations

from typing import TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

GridCoord: TypeAlias = int  # Always integer cell index

# Grid cells are addressed row-first: row follows the world Z axis and
# column follows the world X axis, matching ``grid[row][col]``.
GridCell: TypeAlias = tuple[GridCoord, GridCoord]  # Example: (5, 3) = row 5, col 3

# World coordinates - continuous positions on the floor plane
WorldCoord: TypeAlias = float  # Example: x=10.0
WorldPos: TypeAlias = tuple[WorldCoord, WorldCoord]  # Example: (10.0, 6.0) = (x, z)

# A route through the level, in world units, start and end inclusive.
Path: TypeAlias = list[WorldPos]

# A route through the level, in grid cells, start and end inclusive.
GridPath: TypeAlias = list[GridCell]

# Grid cell markers as they appear in level files ("1", "0", "S", 1, 0...).
CellMarker: TypeAlias = str | int

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Random seed for deterministic streams. Can be an int or a descriptive string.
RandomSeed: TypeAlias = int | str | None
