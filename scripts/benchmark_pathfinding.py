#!/usr/bin/env python3
"""Benchmark the wall-shy A* against tcod's C implementation.

Runs both on identical walkability maps and prints a timing table, followed
by correctness checks. tcod searches plain unit costs, so it is the lower
bound on both time and route length.

Usage:
    python scripts/benchmark_pathfinding.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import sys
import timeit
from pathlib import Path

import numpy as np
import tcod.path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from dinnerlady.environment.grid import OccupancyGrid
from dinnerlady.util.pathfinding import (
    GridPathfinder,
    WallAvoidanceSettings,
    compute_cost_field,
)

# ---------------------------------------------------------------------------
# Map generators
# ---------------------------------------------------------------------------


def _make_open_field(width: int, height: int) -> OccupancyGrid:
    """All-walkable map (worst case - maximum search space)."""
    return OccupancyGrid.from_walkable(np.ones((height, width), dtype=np.bool_))


def _make_canteen(
    width: int,
    height: int,
    wall_fraction: float,
    seed: int,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> OccupancyGrid:
    """Random tables and pillars scattered across a hall.

    Start and goal cells are forced walkable so the benchmark actually
    measures pathfinding work rather than an instant "no path" return.
    """
    rng = np.random.default_rng(seed)
    walkable = rng.random((height, width)) > wall_fraction
    walkable[start] = True
    walkable[goal] = True
    return OccupancyGrid.from_walkable(walkable)


def _make_corridors(width: int, height: int) -> OccupancyGrid:
    """Parallel wall strips with alternating gaps: a long serpentine route."""
    walkable = np.ones((height, width), dtype=np.bool_)
    for i, col in enumerate(range(2, width - 1, 3)):
        walkable[:, col] = False
        gap_row = height - 1 if i % 2 == 0 else 0
        walkable[gap_row, col] = True
    return OccupancyGrid.from_walkable(walkable)


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------


def _run_tcod(
    grid: OccupancyGrid,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> list[tuple[int, int]]:
    """Run tcod A* and return the path (excluding start)."""
    astar = tcod.path.AStar(cost=grid.walkable.astype(np.int16), diagonal=0)
    return astar.get_path(start[0], start[1], goal[0], goal[1])


def _run_ours(
    pathfinder: GridPathfinder,
    grid: OccupancyGrid,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> list[tuple[int, int]]:
    """Run our A* and return the path (excluding start)."""
    cells = pathfinder.find_grid_path(grid, start, goal)
    return cells[1:] if cells else []


def _bench(fn: object, *args: object) -> float:
    """Time *fn(*args)* and return average ms per call."""
    # Warm up
    fn(*args)  # type: ignore[operator]
    timer = timeit.Timer(lambda: fn(*args))  # type: ignore[operator]
    number, total = timer.autorange()
    return (total / number) * 1000


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    scenarios: list[tuple[str, OccupancyGrid, tuple[int, int], tuple[int, int]]] = [
        ("Open 40x30", _make_open_field(40, 30), (2, 2), (27, 37)),
        (
            "Canteen 40x30 (25%)",
            _make_canteen(40, 30, 0.25, seed=42, start=(2, 2), goal=(27, 37)),
            (2, 2),
            (27, 37),
        ),
        ("Corridors 40x30", _make_corridors(40, 30), (0, 0), (29, 39)),
        ("Open 120x80", _make_open_field(120, 80), (5, 5), (75, 115)),
        (
            "Canteen 120x80 (30%)",
            _make_canteen(120, 80, 0.30, seed=99, start=(5, 5), goal=(75, 115)),
            (5, 5),
            (75, 115),
        ),
    ]

    shy = GridPathfinder()
    plain = GridPathfinder(WallAvoidanceSettings(enabled=False))

    print("A* Benchmark: wall-shy / plain (Python) vs tcod (C)")
    print("=" * 78)
    print(
        f"{'Scenario':<24} {'tcod':>10} {'plain':>11} "
        f"{'wall-shy':>11} {'shy/tcod':>10}"
    )
    print("-" * 78)

    for name, grid, start, goal in scenarios:
        tcod_ms = _bench(_run_tcod, grid, start, goal)
        plain_ms = _bench(_run_ours, plain, grid, start, goal)
        shy_ms = _bench(_run_ours, shy, grid, start, goal)
        ratio = shy_ms / tcod_ms if tcod_ms > 0 else float("inf")
        print(
            f"{name:<24} {tcod_ms:>8.3f}ms {plain_ms:>9.3f}ms "
            f"{shy_ms:>9.3f}ms {ratio:>9.1f}x"
        )

    print("-" * 78)
    field_ms = _bench(compute_cost_field, scenarios[-1][1], shy.wall_avoidance)
    print(f"Full cost field for {scenarios[-1][0]}: {field_ms:.3f}ms")
    print()

    # ------------------------------------------------------------------
    # Correctness checks
    # ------------------------------------------------------------------
    print("Correctness checks...")
    start, goal = (5, 5), (75, 115)
    grid = _make_canteen(120, 80, 0.20, seed=42, start=start, goal=goal)

    tcod_route = _run_tcod(grid, start, goal)
    plain_route = _run_ours(plain, grid, start, goal)
    shy_route = _run_ours(shy, grid, start, goal)

    if not tcod_route and not plain_route:
        print("  Both agree: no path exists.")
    elif not tcod_route or not plain_route:
        print(
            f"  MISMATCH: tcod found {'a' if tcod_route else 'no'} path, "
            f"plain found {'a' if plain_route else 'no'} path."
        )
    else:
        print(f"  tcod path length:     {len(tcod_route)}")
        print(f"  plain path length:    {len(plain_route)}")
        print(f"  wall-shy path length: {len(shy_route)}")
        if len(plain_route) != len(tcod_route):
            print("  Plain length MISMATCH: both should be shortest routes.")

    # Straightness check: a route down the middle of an open hall stays put.
    open_grid = _make_open_field(120, 80)
    straight = _run_ours(shy, open_grid, (40, 5), (40, 115))
    rows = {row for row, _ in straight}
    if rows == {40}:
        print("  Straightness check: horizontal path stays on row 40. OK!")
    else:
        print(f"  Straightness FAIL: rows deviated to {rows}")

    # Edge check: wall avoidance pulls a route along the border inwards.
    edge = _run_ours(shy, open_grid, (0, 5), (0, 115))
    if edge and all(row > 0 for row, _ in edge[:-1]):
        print("  Edge check: route keeps off the border row. OK!")
    else:
        print("  Edge check FAIL: route hugs the border.")

    # No-path check.
    blocked = np.zeros((10, 10), dtype=np.bool_)
    blocked[0, 0] = True
    blocked[9, 9] = True
    blocked_grid = OccupancyGrid.from_walkable(blocked)
    tcod_none = _run_tcod(blocked_grid, (0, 0), (9, 9))
    ours_none = _run_ours(shy, blocked_grid, (0, 0), (9, 9))
    if not tcod_none and not ours_none:
        print("  Blocked-map check: both correctly return empty path.")
    else:
        print(f"  Blocked-map MISMATCH: tcod={len(tcod_none)}, ours={len(ours_none)}")


if __name__ == "__main__":
    main()
