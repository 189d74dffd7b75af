from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

from dinnerlady.types import WorldPos


@runtime_checkable
class Positioned(Protocol):
    """Anything with a position on the floor plane."""

    def get_position(self) -> WorldPos: ...


class PlayerProxy:
    """Position holder for the player.

    Input handling and rendering live elsewhere; the AI only ever needs to
    know where the player is standing.
    """

    def __init__(self, x: float = 0.0, z: float = 0.0) -> None:
        self.x = x
        self.z = z

    def set_position(self, x: float, z: float) -> None:
        self.x = x
        self.z = z

    def get_position(self) -> WorldPos:
        return self.x, self.z


def distance_between(a: WorldPos, b: WorldPos) -> float:
    """Euclidean distance between two world positions."""
    return math.hypot(a[0] - b[0], a[1] - b[1])
