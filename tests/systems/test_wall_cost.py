from __future__ import annotations

import math

import numpy as np
import pytest

from dinnerlady.environment.grid import OccupancyGrid
from dinnerlady.util.pathfinding import (
    GridPathfinder,
    WallAvoidanceSettings,
    compute_cost_field,
    wall_proximity_cost,
)
from tests.helpers import make_grid, open_grid


def test_open_cell_has_no_penalty() -> None:
    assert wall_proximity_cost(open_grid(5, 5), 2, 2) == 0.0


def test_orthogonal_wall_counts_full_weight() -> None:
    grid = make_grid("00000", "00100", "00000", "00000", "00000")
    assert wall_proximity_cost(grid, 2, 2) == pytest.approx(2.0)


def test_diagonal_wall_is_weighted_by_distance() -> None:
    grid = make_grid("00000", "01000", "00000", "00000", "00000")
    assert wall_proximity_cost(grid, 2, 2) == pytest.approx(2.0 / math.sqrt(2))


def test_penalty_is_clamped_to_max_cost() -> None:
    grid = make_grid("111", "101", "111")
    assert wall_proximity_cost(grid, 1, 1) == pytest.approx(5.0)

    generous = WallAvoidanceSettings(max_cost=100.0)
    expected = 2.0 * (4 + 4 / math.sqrt(2))
    assert wall_proximity_cost(grid, 1, 1, generous) == pytest.approx(expected)


def test_outside_of_grid_counts_as_wall() -> None:
    grid = open_grid(5, 5)
    # Two orthogonal and three diagonal out-of-bounds neighbours.
    assert wall_proximity_cost(grid, 0, 0) == pytest.approx(5.0)
    # Three out-of-bounds cells above an edge cell.
    assert wall_proximity_cost(grid, 0, 2) == pytest.approx(2.0 * (1 + math.sqrt(2)))


def test_disabled_settings_cost_nothing() -> None:
    grid = make_grid("111", "101", "111")
    settings = WallAvoidanceSettings(enabled=False)
    assert wall_proximity_cost(grid, 1, 1, settings) == 0.0
    assert not compute_cost_field(grid, settings).any()


def test_corner_avoidance_adds_per_orthogonal_wall() -> None:
    grid = make_grid("010", "100", "000")
    plain = WallAvoidanceSettings(max_cost=100.0)
    corners = WallAvoidanceSettings(
        max_cost=100.0, corner_avoidance=True, corner_extra_cost=3.0
    )

    assert wall_proximity_cost(grid, 1, 1, plain) == pytest.approx(4.0)
    assert wall_proximity_cost(grid, 1, 1, corners) == pytest.approx(10.0)


def test_corner_avoidance_ignores_single_wall() -> None:
    grid = make_grid("010", "000", "000")
    corners = WallAvoidanceSettings(corner_avoidance=True)
    assert wall_proximity_cost(grid, 1, 1, corners) == pytest.approx(2.0)


def test_larger_radius_sees_further_walls() -> None:
    grid = make_grid("00100", "00000", "00000", "00000", "00000")
    assert wall_proximity_cost(grid, 2, 2) == 0.0

    wide = WallAvoidanceSettings(check_radius=2)
    assert wall_proximity_cost(grid, 2, 2, wide) == pytest.approx(1.0)


@pytest.mark.parametrize("corner_avoidance", [False, True])
@pytest.mark.parametrize("new_wall", [(0, 0), (1, 2), (2, 1), (3, 3), (4, 0)])
def test_adding_a_wall_never_lowers_neighbouring_costs(
    new_wall: tuple[int, int], corner_avoidance: bool
) -> None:
    before = make_grid("00000", "00010", "00000", "01000", "00000")
    walkable = before.walkable.copy()
    walkable[new_wall] = False
    after = OccupancyGrid.from_walkable(walkable)
    settings = WallAvoidanceSettings(corner_avoidance=corner_avoidance)

    for row, col in after.walkable_cells():
        old = wall_proximity_cost(before, row, col, settings)
        new = wall_proximity_cost(after, row, col, settings)
        assert new >= old, f"cost at {(row, col)} dropped from {old} to {new}"


@pytest.mark.parametrize(
    "settings",
    [
        WallAvoidanceSettings(),
        WallAvoidanceSettings(check_radius=2),
        WallAvoidanceSettings(corner_avoidance=True, max_cost=50.0),
    ],
)
def test_cost_field_matches_per_cell_cost(settings: WallAvoidanceSettings) -> None:
    generator = np.random.default_rng(3)
    grid = OccupancyGrid.from_walkable(generator.random((12, 9)) > 0.25)

    field = compute_cost_field(grid, settings)

    assert field.shape == (12, 9)
    for row, col in grid.walkable_cells():
        expected = wall_proximity_cost(grid, row, col, settings)
        assert field[row, col] == pytest.approx(expected)
    assert not field[~grid.walkable].any()


def test_pathfinder_exposes_cost_field() -> None:
    pathfinder = GridPathfinder(WallAvoidanceSettings(base_cost=1.0))
    field = pathfinder.cost_field(["000", "000", "000"])
    assert field[1, 1] == 0.0
    assert field[0, 1] == pytest.approx(1 + math.sqrt(2))


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"base_cost": -1.0}, "base_cost"),
        ({"max_cost": -0.5}, "max_cost"),
        ({"check_radius": 0}, "check_radius"),
        ({"corner_extra_cost": -3.0}, "corner_extra_cost"),
    ],
)
def test_invalid_settings_are_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        WallAvoidanceSettings(**kwargs)
