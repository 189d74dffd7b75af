"""Proximity tiers and how each one behaves."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class BehaviorTier(Enum):
    """How close the chaser is to the player, nearest first.

    The value is the key used for the tier in JSON configuration.
    """

    VERY_CLOSE = "veryClose"
    CLOSE = "close"
    MEDIUM = "medium"
    FAR = "far"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BehaviorTier):
            return NotImplemented
        return self.rank < other.rank


_TIER_ORDER: tuple[BehaviorTier, ...] = (
    BehaviorTier.VERY_CLOSE,
    BehaviorTier.CLOSE,
    BehaviorTier.MEDIUM,
    BehaviorTier.FAR,
)


class TargetMode(Enum):
    """Where the chaser heads during an act-cycle."""

    TRACK_TARGET = "player"  # Head straight for the tracked target
    RANDOM_POINT = "random"  # Roam to a random cell away from the target


@dataclass(frozen=True)
class TierThresholds:
    """Upper distance bounds (inclusive) for the three bounded tiers.

    There is no bound for ``FAR``: any distance past ``medium`` is far.
    """

    very_close: float
    close: float
    medium: float

    def __post_init__(self) -> None:
        values = (self.very_close, self.close, self.medium)
        if not all(math.isfinite(v) and v >= 0 for v in values):
            msg = "tier thresholds must be finite and non-negative"
            raise ValueError(msg)
        if not self.very_close < self.close < self.medium:
            msg = (
                "tier thresholds must satisfy very_close < close < medium, got "
                f"{self.very_close}, {self.close}, {self.medium}"
            )
            raise ValueError(msg)


@dataclass(frozen=True)
class TierBehavior:
    """What the chaser does while in a tier.

    Attributes:
        target_mode: Track the target or roam to a random point.
        update_interval: Seconds between act-cycles while in this tier.
        min_distance_from_target: For ``RANDOM_POINT`` only, the minimum
            world distance between a roaming point and the target.
    """

    target_mode: TargetMode
    update_interval: float
    min_distance_from_target: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.update_interval) and self.update_interval > 0):
            msg = f"update_interval must be positive, got {self.update_interval}"
            raise ValueError(msg)
        if self.min_distance_from_target < 0:
            msg = "min_distance_from_target must be non-negative"
            raise ValueError(msg)


def classify_distance(distance: float, thresholds: TierThresholds) -> BehaviorTier:
    """Map a distance to its tier. Boundaries belong to the nearer tier."""
    if distance <= thresholds.very_close:
        return BehaviorTier.VERY_CLOSE
    if distance <= thresholds.close:
        return BehaviorTier.CLOSE
    if distance <= thresholds.medium:
        return BehaviorTier.MEDIUM
    return BehaviorTier.FAR
