"""Proximity-driven pursuit: the dinner lady's decision loop.

The engine samples the distance between the chaser and the player, buckets
it into a :class:`BehaviorTier`, and at a tier-dependent cadence hands a new
movement target to whoever moves the chaser. Close tiers chase the player
directly; the far tier roams to random cells well away from the player so
the dinner lady patrols instead of homing in from across the map.

Cadence runs on session time, not frames: ``update`` may be called every
frame but only acts once ``current_update_interval`` seconds have passed
since the last act-cycle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from dinnerlady import config
from dinnerlady.environment.grid import OccupancyGrid
from dinnerlady.game.actors.positioned import Positioned, distance_between
from dinnerlady.game.ai.settings import AISettings
from dinnerlady.game.ai.tiers import BehaviorTier, TargetMode, classify_distance
from dinnerlady.types import WorldPos
from dinnerlady.util import rng
from dinnerlady.util.pathfinding import grid_to_world
from dinnerlady.util.rng import RNG

logger = logging.getLogger(__name__)

_rng = rng.get("ai.random_target")

MoveTargetConsumer: TypeAlias = Callable[[WorldPos], object]
TierChangeListener: TypeAlias = Callable[[BehaviorTier, BehaviorTier], object]


@dataclass(frozen=True, slots=True)
class BehaviorDecision:
    """The outcome of one act-cycle that produced a movement target.

    Attributes:
        tier: Tier in effect for this cycle.
        mode: How the target was chosen.
        distance: Chaser-to-player distance sampled this cycle.
        target: World position handed to the movement consumer.
        timestamp: Session time of the cycle.
    """

    tier: BehaviorTier
    mode: TargetMode
    distance: float
    target: WorldPos
    timestamp: float


def pick_random_target(
    grid: OccupancyGrid,
    grid_scale: float,
    avoid_pos: WorldPos,
    min_distance: float,
    *,
    rng_stream: RNG | None = None,
    max_attempts: int = config.RANDOM_POINT_MAX_ATTEMPTS,
) -> WorldPos | None:
    """Pick a random walkable cell at least ``min_distance`` from ``avoid_pos``.

    Cells are drawn uniformly from the walkable cells and rejected while
    too close, up to ``max_attempts`` draws.

    Returns:
        World position of the chosen cell origin, or None if the budget ran
        out or the grid has no walkable cells.
    """
    stream = rng_stream if rng_stream is not None else _rng
    cells = grid.walkable_cells()
    if not cells:
        return None

    for _ in range(max_attempts):
        row, col = stream.choice(cells)
        candidate = grid_to_world(row, col, grid_scale)
        if distance_between(candidate, avoid_pos) >= min_distance:
            return candidate
    return None


class ProximityBehaviorEngine:
    """Drives one chaser's target selection from its distance to the player.

    The engine owns only its own schedule and tier; it never moves the
    chaser itself. Each act-cycle's target goes to ``on_move_target``,
    which is expected to plan a path and walk it.

    Args:
        agent: The chaser whose position is sampled.
        grid: Occupancy grid used when roaming to random cells.
        on_move_target: Receives each new movement target.
        target: The tracked actor (the player). May be None until spawned.
        settings: AI tuning. Built-in defaults when None.
        grid_scale: World units per grid cell.
        rng_stream: Randomness for roaming; the shared ``ai.random_target``
            stream when None.
        start_time: Session time the schedule counts from.
        on_tier_change: Optional ``(old, new)`` listener.
    """

    def __init__(
        self,
        agent: Positioned,
        grid: OccupancyGrid,
        on_move_target: MoveTargetConsumer,
        *,
        target: Positioned | None = None,
        settings: AISettings | None = None,
        grid_scale: float = config.GRID_SCALE,
        rng_stream: RNG | None = None,
        start_time: float = 0.0,
        on_tier_change: TierChangeListener | None = None,
    ) -> None:
        if not grid_scale > 0:
            msg = f"grid_scale must be positive, got {grid_scale}"
            raise ValueError(msg)
        self.agent = agent
        self.grid = grid
        self.grid_scale = grid_scale
        self.settings = settings or AISettings.defaults()
        self._target = target
        self._on_move_target = on_move_target
        self._on_tier_change = on_tier_change
        self._rng = rng_stream if rng_stream is not None else _rng

        self._tier = BehaviorTier.FAR
        self._update_interval = self.settings.behavior_for(self._tier).update_interval
        self._last_update_timestamp = start_time

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_tier(self) -> BehaviorTier:
        return self._tier

    @property
    def current_update_interval(self) -> float:
        return self._update_interval

    @property
    def last_update_timestamp(self) -> float:
        return self._last_update_timestamp

    @property
    def target(self) -> Positioned | None:
        return self._target

    def set_target(self, target: Positioned | None) -> None:
        """Start (or stop, with None) tracking an actor."""
        self._target = target

    def reset(self, now: float = 0.0) -> None:
        """Return to the initial far tier with the schedule starting at ``now``."""
        self._tier = BehaviorTier.FAR
        self._update_interval = self.settings.behavior_for(self._tier).update_interval
        self._last_update_timestamp = now

    def is_due(self, now: float) -> bool:
        return now - self._last_update_timestamp >= self._update_interval

    # ------------------------------------------------------------------
    # Update loop
    # ------------------------------------------------------------------

    def update(self, now: float) -> BehaviorDecision | None:
        """Run an act-cycle if one is due.

        Returns:
            The decision when a movement target was chosen and handed to the
            consumer; None when no cycle was due, the tracked target is not
            available yet, or no roaming point could be found.
        """
        if not self.is_due(now):
            return None

        if self._target is None:
            # Player not spawned yet; try again on the next call.
            return None

        agent_pos = self.agent.get_position()
        target_pos = self._target.get_position()
        distance = distance_between(agent_pos, target_pos)

        tier = classify_distance(distance, self.settings.thresholds)
        if tier != self._tier:
            self._change_tier(tier)

        behavior = self.settings.behavior_for(self._tier)
        self._last_update_timestamp = now

        if behavior.target_mode is TargetMode.TRACK_TARGET:
            movement_target: WorldPos | None = target_pos
        else:
            movement_target = pick_random_target(
                self.grid,
                self.grid_scale,
                target_pos,
                behavior.min_distance_from_target,
                rng_stream=self._rng,
                max_attempts=self.settings.random_point_attempts,
            )
            if movement_target is None:
                logger.warning(
                    f"No roaming point at least {behavior.min_distance_from_target} "
                    f"from the player after {self.settings.random_point_attempts} "
                    "attempts; keeping current course"
                )
                return None

        logger.debug(
            f"Act-cycle at t={now:.2f}: tier={self._tier.value} "
            f"distance={distance:.2f} target={movement_target}"
        )
        self._on_move_target(movement_target)
        return BehaviorDecision(
            tier=self._tier,
            mode=behavior.target_mode,
            distance=distance,
            target=movement_target,
            timestamp=now,
        )

    def _change_tier(self, tier: BehaviorTier) -> None:
        previous = self._tier
        self._tier = tier
        self._update_interval = self.settings.behavior_for(tier).update_interval
        logger.debug(
            f"Behavior changed {previous.value} -> {tier.value}, "
            f"interval {self._update_interval}s"
        )
        if self._on_tier_change is not None:
            self._on_tier_change(previous, tier)
