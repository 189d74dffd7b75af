"""The dinner lady's body: walks routes handed to it by the pursuit AI."""

from __future__ import annotations

import logging
import math

from dinnerlady import config
from dinnerlady.environment.grid import OccupancyGrid
from dinnerlady.types import Path, WorldPos
from dinnerlady.util.pathfinding import GridPathfinder

logger = logging.getLogger(__name__)

# Headings are only updated for moves longer than this, so the chaser does
# not spin in place while settling onto a waypoint.
_MIN_TURN_DISTANCE = 0.01


class Chaser:
    """Path-following motion for one pursuing agent.

    ``move_to`` plans a route with the injected pathfinder and replaces the
    current one; ``update`` advances along it at a fixed speed. A failed
    plan leaves the previous route in place so the chaser keeps moving.

    Attributes:
        speed: World units per second.
        heading: Facing angle in radians, ``atan2(dx, dz)`` of the last move.
    """

    def __init__(
        self,
        pathfinder: GridPathfinder,
        grid: OccupancyGrid,
        *,
        x: float = 0.0,
        z: float = 0.0,
        speed: float = config.CHASER_MOVE_SPEED,
        grid_scale: float = config.GRID_SCALE,
    ) -> None:
        if speed <= 0:
            msg = "speed must be positive"
            raise ValueError(msg)
        self.pathfinder = pathfinder
        self.grid = grid
        self.grid_scale = grid_scale
        self.speed = speed
        self.heading = 0.0
        self.x = x
        self.z = z

        self._path: Path = []
        self._path_index = 0

    def get_position(self) -> WorldPos:
        return self.x, self.z

    def set_position(self, x: float, z: float) -> None:
        """Teleport, dropping any route in progress."""
        self.x = x
        self.z = z
        self.stop()

    @property
    def current_path(self) -> Path:
        return list(self._path)

    @property
    def current_waypoint(self) -> WorldPos | None:
        if self._path_index < len(self._path):
            return self._path[self._path_index]
        return None

    @property
    def is_moving(self) -> bool:
        return self.current_waypoint is not None

    def stop(self) -> None:
        self._path = []
        self._path_index = 0

    def move_to(self, target: WorldPos) -> bool:
        """Plan a route to ``target`` and start walking it.

        Returns:
            True if a route was found and adopted, False otherwise.
        """
        target_x, target_z = target
        path = self.pathfinder.find_path(
            self.grid, self.x, self.z, target_x, target_z, self.grid_scale
        )
        if path is None:
            logger.warning(
                f"No valid path found to destination: from ({self.x:.2f}, "
                f"{self.z:.2f}) to ({target_x:.2f}, {target_z:.2f})"
            )
            return False

        self._path = path
        self._path_index = 0
        return True

    def update(self, delta_time: float) -> None:
        """Advance along the current route by ``speed * delta_time``.

        A waypoint within one step is reached: the chaser lands on it
        and the leftover distance is not carried over to the next one.
        """
        waypoint = self.current_waypoint
        if waypoint is None:
            return

        target_x, target_z = waypoint
        dx = target_x - self.x
        dz = target_z - self.z
        if abs(dx) > _MIN_TURN_DISTANCE or abs(dz) > _MIN_TURN_DISTANCE:
            self.heading = math.atan2(dx, dz)

        step = self.speed * delta_time
        distance = math.hypot(dx, dz)
        if distance <= step:
            self.x, self.z = target_x, target_z
            self._path_index += 1
            if self._path_index >= len(self._path):
                self.stop()
            return

        ratio = step / distance
        self.x += dx * ratio
        self.z += dz * ratio
