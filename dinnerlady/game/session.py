"""Per-level wiring of the chase: one pathfinder, one chaser, one AI.

A :class:`GameSession` is created for each level played and owns every
collaborator the pursuit needs, passing them to each other explicitly.
Nothing here is global, so two sessions (or two tests) never share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dinnerlady import config
from dinnerlady.environment.levels import LevelData
from dinnerlady.game.actors.chaser import Chaser
from dinnerlady.game.actors.positioned import PlayerProxy, distance_between
from dinnerlady.game.ai.proximity import BehaviorDecision, ProximityBehaviorEngine
from dinnerlady.game.ai.settings import AISettings
from dinnerlady.game.ai.tiers import BehaviorTier
from dinnerlady.types import RandomSeed
from dinnerlady.util.pathfinding import GridPathfinder, grid_to_world, world_to_grid
from dinnerlady.util.rng import RNGProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Snapshot returned by :meth:`GameSession.tick`."""

    elapsed: float
    tier: BehaviorTier
    distance: float
    caught: bool
    decision: BehaviorDecision | None = None


class GameSession:
    """Runs the chase for one level.

    Args:
        level: The loaded level. Must have a start (``S``) and a dinner lady
            spawn (``D``).
        settings: AI tuning; defaults when None.
        grid_scale: World units per cell.
        rng_seed: Seed for this session's roaming choices. None shares the
            global ``ai.random_target`` stream.
        catch_distance: Chaser-to-player distance that ends the chase.

    Raises:
        ValueError: If the level lacks a start or a chaser spawn.
    """

    def __init__(
        self,
        level: LevelData,
        *,
        settings: AISettings | None = None,
        grid_scale: float = config.GRID_SCALE,
        rng_seed: RandomSeed = None,
        catch_distance: float = config.CATCH_DISTANCE,
    ) -> None:
        tiles = level.special_tiles
        if tiles.start is None:
            raise ValueError(f"Level {level.name!r} has no player start ('S')")
        if tiles.chaser_spawn is None:
            raise ValueError(f"Level {level.name!r} has no dinner lady spawn ('D')")

        self.level = level
        self.grid_scale = grid_scale
        self.catch_distance = catch_distance
        self.settings = settings or AISettings.defaults()
        self.elapsed = 0.0

        self.pathfinder = GridPathfinder(self.settings.wall_avoidance)
        self.player = PlayerProxy(*grid_to_world(*tiles.start, grid_scale))
        spawn_x, spawn_z = grid_to_world(*tiles.chaser_spawn, grid_scale)
        self.chaser = Chaser(
            self.pathfinder, level.grid, x=spawn_x, z=spawn_z, grid_scale=grid_scale
        )

        rng_stream = (
            RNGProvider(rng_seed).get("ai.random_target")
            if rng_seed is not None
            else None
        )
        self.ai = ProximityBehaviorEngine(
            self.chaser,
            level.grid,
            self.chaser.move_to,
            target=self.player,
            settings=self.settings,
            grid_scale=grid_scale,
            rng_stream=rng_stream,
        )
        logger.info(
            f"Session started on {level.name!r}: player at "
            f"{self.player.get_position()}, dinner lady at {self.chaser.get_position()}"
        )

    def move_player(self, x: float, z: float) -> None:
        self.player.set_position(x, z)

    def chaser_distance(self) -> float:
        return distance_between(self.chaser.get_position(), self.player.get_position())

    def player_on_hiding_spot(self) -> bool:
        x, z = self.player.get_position()
        cell = world_to_grid(x, z, self.grid_scale)
        return cell in self.level.special_tiles.hiding_spots

    def tick(self, delta_time: float) -> SessionStatus:
        """Advance the session clock, run the AI, then move the chaser.

        Raises:
            ValueError: If ``delta_time`` is negative.
        """
        if delta_time < 0:
            msg = f"delta_time must be non-negative, got {delta_time}"
            raise ValueError(msg)

        self.elapsed += delta_time
        decision = self.ai.update(self.elapsed)
        self.chaser.update(delta_time)

        distance = self.chaser_distance()
        caught = distance <= self.catch_distance
        if caught:
            logger.info(f"Caught by the dinner lady at t={self.elapsed:.2f}")
        return SessionStatus(
            elapsed=self.elapsed,
            tier=self.ai.current_tier,
            distance=distance,
            caught=caught,
            decision=decision,
        )
