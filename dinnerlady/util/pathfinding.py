from __future__ import annotations

import heapq
import itertools
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np

from dinnerlady import config
from dinnerlady.environment.grid import OccupancyGrid, as_occupancy_grid
from dinnerlady.types import CellMarker, GridCell, GridPath, Path, WorldPos

logger = logging.getLogger(__name__)

GridLike: TypeAlias = OccupancyGrid | np.ndarray | Sequence[str | Sequence[CellMarker]]


@dataclass(frozen=True)
class WallAvoidanceSettings:
    """Tuning for the wall-proximity penalty added to every step.

    Attributes:
        enabled: When False every step costs exactly 1.
        base_cost: Multiplier applied to the accumulated wall weight.
        max_cost: Upper clamp for the penalty of a single cell.
        check_radius: Half-size of the square scanned around a cell.
            1 scans the 8 surrounding cells.
        corner_avoidance: Add ``corner_extra_cost`` per orthogonal wall
            when a cell has at least two orthogonal walls.
        corner_extra_cost: Flat penalty per orthogonal wall at a corner.
    """

    enabled: bool = config.WALL_AVOIDANCE_ENABLED
    base_cost: float = config.WALL_AVOIDANCE_BASE_COST
    max_cost: float = config.WALL_AVOIDANCE_MAX_COST
    check_radius: int = config.WALL_AVOIDANCE_CHECK_RADIUS
    corner_avoidance: bool = config.CORNER_AVOIDANCE_ENABLED
    corner_extra_cost: float = config.CORNER_AVOIDANCE_EXTRA_COST

    def __post_init__(self) -> None:
        if self.base_cost < 0:
            msg = "base_cost must be non-negative"
            raise ValueError(msg)
        if self.max_cost < 0:
            msg = "max_cost must be non-negative"
            raise ValueError(msg)
        if self.check_radius < 1:
            msg = "check_radius must be at least 1"
            raise ValueError(msg)
        if self.corner_extra_cost < 0:
            msg = "corner_extra_cost must be non-negative"
            raise ValueError(msg)


# =============================================================================
# Coordinate conversion
# =============================================================================


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 2.5 must go to 3 here.
    return math.floor(value + 0.5)


def world_to_grid(x: float, z: float, grid_scale: float = 1.0) -> GridCell:
    """Convert a world position to the ``(row, col)`` of the nearest cell.

    Raises:
        ValueError: If a coordinate is not finite, ``grid_scale`` is not
            positive, or the scaled position is too large to index a cell.
    """
    if not (math.isfinite(x) and math.isfinite(z)):
        raise ValueError(f"World coordinates must be finite, got ({x}, {z})")
    if not grid_scale > 0:
        raise ValueError(f"grid_scale must be positive, got {grid_scale}")
    row, col = z / grid_scale, x / grid_scale
    if not (math.isfinite(row) and math.isfinite(col)):
        raise ValueError(
            f"World position ({x}, {z}) overflows the grid at scale {grid_scale}"
        )
    return _round_half_up(row), _round_half_up(col)


def grid_to_world(row: int, col: int, grid_scale: float = 1.0) -> WorldPos:
    """Inverse of :func:`world_to_grid` for cell origins."""
    return float(col * grid_scale), float(row * grid_scale)


def path_length(path: Sequence[object]) -> int:
    """Number of steps in a path (waypoints minus one)."""
    return max(0, len(path) - 1)


# =============================================================================
# Cost model
# =============================================================================


def wall_proximity_cost(
    grid: OccupancyGrid,
    row: int,
    col: int,
    settings: WallAvoidanceSettings | None = None,
) -> float:
    """Penalty for stepping onto ``(row, col)``, higher near walls.

    Every wall within ``check_radius`` contributes ``1 / distance`` to a
    wall weight, which is scaled by ``base_cost``. Cells outside the grid
    count as walls. With corner avoidance on, a cell touching two or more
    walls orthogonally gets ``corner_extra_cost`` per orthogonal wall. The
    total is clamped to ``max_cost``.
    """
    settings = settings or WallAvoidanceSettings()
    if not settings.enabled:
        return 0.0

    radius = settings.check_radius
    wall_weight = 0.0
    orthogonal_walls = 0
    for dr in range(-radius, radius + 1):
        for dc in range(-radius, radius + 1):
            if dr == 0 and dc == 0:
                continue
            if not grid.is_wall(row + dr, col + dc):
                continue
            wall_weight += 1.0 / math.hypot(dr, dc)
            if abs(dr) + abs(dc) == 1:
                orthogonal_walls += 1

    cost = wall_weight * settings.base_cost
    if settings.corner_avoidance and orthogonal_walls >= 2:
        cost += settings.corner_extra_cost * orthogonal_walls
    return min(cost, settings.max_cost)


def compute_cost_field(
    grid: OccupancyGrid, settings: WallAvoidanceSettings | None = None
) -> np.ndarray:
    """Wall-proximity cost for every cell at once.

    Same values as :func:`wall_proximity_cost` evaluated per cell, computed
    with shifted copies of a padded wall mask. Wall cells are reported as
    0.0 since they are never stepped on.

    Returns:
        Float array of shape ``(height, width)``.
    """
    settings = settings or WallAvoidanceSettings()
    field = np.zeros(grid.shape, dtype=np.float64)
    if not settings.enabled:
        return field

    radius = settings.check_radius
    # Pad with walls so out-of-bounds neighbours count, matching is_wall().
    walls = np.pad(~grid.walkable, radius, mode="constant", constant_values=True)
    height, width = grid.shape
    orthogonal = np.zeros(grid.shape, dtype=np.int32)

    for dr in range(-radius, radius + 1):
        for dc in range(-radius, radius + 1):
            if dr == 0 and dc == 0:
                continue
            shifted = walls[
                radius + dr : radius + dr + height, radius + dc : radius + dc + width
            ]
            field += np.where(shifted, 1.0 / math.hypot(dr, dc), 0.0)
            if abs(dr) + abs(dc) == 1:
                orthogonal += shifted

    field *= settings.base_cost
    if settings.corner_avoidance:
        field += np.where(
            orthogonal >= 2, settings.corner_extra_cost * orthogonal, 0.0
        )
    np.minimum(field, settings.max_cost, out=field)
    field[~grid.walkable] = 0.0
    return field


# =============================================================================
# Snapping
# =============================================================================


def snap_to_walkable(
    grid: OccupancyGrid, cell: GridCell, max_radius: int = config.MAX_SNAP_RADIUS
) -> GridCell | None:
    """Return ``cell`` if walkable, else the nearest walkable cell nearby.

    Searches square rings of growing radius (1, 2, ... ``max_radius``).
    Within the first ring that has any walkable cell, the one with the
    smallest Euclidean distance wins; ties go to the lower row, then column.

    Returns:
        The effective cell, or None if no walkable cell lies within
        ``max_radius``.
    """
    row, col = cell
    if grid.is_walkable(row, col):
        return cell

    for radius in range(1, max_radius + 1):
        candidates: list[GridCell] = []
        for dr in range(-radius, radius + 1):
            for dc in range(-radius, radius + 1):
                if max(abs(dr), abs(dc)) != radius:
                    continue
                if grid.is_walkable(row + dr, col + dc):
                    candidates.append((row + dr, col + dc))
        if candidates:
            return min(
                candidates,
                key=lambda c: ((c[0] - row) ** 2 + (c[1] - col) ** 2, c[0], c[1]),
            )
    return None


# =============================================================================
# Search
# =============================================================================


def _heuristic(a: GridCell, b: GridCell) -> int:
    # Manhattan distance; admissible since every step costs at least 1.
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _reconstruct(came_from: dict[GridCell, GridCell], current: GridCell) -> GridPath:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def astar(
    grid: OccupancyGrid,
    start: GridCell,
    goal: GridCell,
    settings: WallAvoidanceSettings | None = None,
) -> GridPath | None:
    """A* over walkable cells with wall-proximity step costs.

    Both endpoints must already be walkable; use :func:`snap_to_walkable`
    first when they might not be. The open set is a binary heap with lazy
    deletion: stale entries are skipped when popped, so the search is
    O(V log V).

    Args:
        grid: The occupancy grid.
        start: ``(row, col)`` start cell.
        goal: ``(row, col)`` goal cell.
        settings: Wall avoidance tuning. Defaults apply when None.

    Returns:
        Cells from start to goal inclusive, or None if the goal cannot be
        reached.
    """
    settings = settings or WallAvoidanceSettings()
    if not (grid.is_walkable(*start) and grid.is_walkable(*goal)):
        return None
    if start == goal:
        return [start]

    # All working state is local to this call.
    tie_breaker = itertools.count()
    open_heap: list[tuple[float, int, GridCell]] = [
        (_heuristic(start, goal), next(tie_breaker), start)
    ]
    g_score: dict[GridCell, float] = {start: 0.0}
    came_from: dict[GridCell, GridCell] = {}
    closed: set[GridCell] = set()
    step_costs: dict[GridCell, float] = {}

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, current)
        closed.add(current)

        current_g = g_score[current]
        for neighbor in grid.iter_neighbors(*current):
            if neighbor in closed:
                continue

            penalty = step_costs.get(neighbor)
            if penalty is None:
                penalty = wall_proximity_cost(grid, neighbor[0], neighbor[1], settings)
                step_costs[neighbor] = penalty

            tentative_g = current_g + 1.0 + penalty
            if tentative_g < g_score.get(neighbor, math.inf):
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                heapq.heappush(
                    open_heap,
                    (
                        tentative_g + _heuristic(neighbor, goal),
                        next(tie_breaker),
                        neighbor,
                    ),
                )

    return None


class GridPathfinder:
    """Finds wall-shy routes across an occupancy grid.

    One instance per game session is enough: it holds only configuration,
    never search state, so several agents can share it as long as calls do
    not overlap.
    """

    def __init__(
        self,
        wall_avoidance: WallAvoidanceSettings | None = None,
        *,
        max_snap_radius: int = config.MAX_SNAP_RADIUS,
    ) -> None:
        if max_snap_radius < 0:
            msg = "max_snap_radius must be non-negative"
            raise ValueError(msg)
        self.wall_avoidance = wall_avoidance or WallAvoidanceSettings()
        self.max_snap_radius = max_snap_radius

    def find_grid_path(
        self, grid: GridLike, start: GridCell, goal: GridCell
    ) -> GridPath | None:
        """Route between two cells, snapping blocked endpoints first.

        Returns:
            Cells from the effective start to the effective goal inclusive,
            or None if an endpoint cannot be snapped or the goal is
            unreachable.
        """
        occupancy = as_occupancy_grid(grid)

        effective_start = snap_to_walkable(occupancy, start, self.max_snap_radius)
        if effective_start is None:
            logger.debug(f"No walkable cell within reach of start {start}")
            return None
        effective_goal = snap_to_walkable(occupancy, goal, self.max_snap_radius)
        if effective_goal is None:
            logger.debug(f"No walkable cell within reach of goal {goal}")
            return None

        if effective_start != start or effective_goal != goal:
            logger.debug(
                f"Snapped endpoints {start}->{effective_start}, "
                f"{goal}->{effective_goal}"
            )

        cells = astar(occupancy, effective_start, effective_goal, self.wall_avoidance)
        if cells is None:
            logger.debug(f"No route from {effective_start} to {effective_goal}")
            return None

        logger.debug(
            f"Route {effective_start}->{effective_goal}: {path_length(cells)} steps"
        )
        return cells

    def find_path(
        self,
        grid: GridLike,
        start_x: float,
        start_z: float,
        end_x: float,
        end_z: float,
        grid_scale: float = 1.0,
    ) -> Path | None:
        """Route between two world positions.

        World positions are divided by ``grid_scale`` and rounded to the
        nearest cell; the resulting cells are multiplied back by
        ``grid_scale``, so waypoints sit on cell origins.

        Args:
            grid: Occupancy grid, boolean walkable mask, or raw marker rows.
            start_x: World X of the start.
            start_z: World Z of the start.
            end_x: World X of the destination.
            end_z: World Z of the destination.
            grid_scale: World units per cell.

        Returns:
            ``(x, z)`` waypoints from start to end inclusive, or None when no
            route exists. Failing to find a route is an expected outcome;
            callers decide whether to log it.

        Raises:
            ValueError: For a malformed grid, non-finite coordinates, or a
                non-positive ``grid_scale``.
        """
        start = world_to_grid(start_x, start_z, grid_scale)
        goal = world_to_grid(end_x, end_z, grid_scale)
        cells = self.find_grid_path(grid, start, goal)
        if cells is None:
            return None
        return [grid_to_world(row, col, grid_scale) for row, col in cells]

    def cost_field(self, grid: GridLike) -> np.ndarray:
        """Full wall-proximity cost field under this pathfinder's settings."""
        return compute_cost_field(as_occupancy_grid(grid), self.wall_avoidance)
