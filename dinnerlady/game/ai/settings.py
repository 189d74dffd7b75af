"""Loading the dinner lady AI configuration.

The configuration file is optional. Whatever it leaves out, or gets wrong,
is filled from :mod:`dinnerlady.config`, so the game always gets a complete
:class:`AISettings` back and never has to handle a load failure.

Accepted JSON (every key optional)::

    {
        "distances": {"veryClose": 5, "close": 10, "medium": 20},
        "behavior": {
            "veryClose": {"targetType": "player", "updateInterval": 1},
            "far": {"targetType": "random", "updateInterval": 12,
                    "minDistanceFromPlayer": 15}
        },
        "wallAvoidance": {
            "enabled": true, "baseCost": 2.0, "maxCost": 5.0, "checkRadius": 1,
            "cornerAvoidance": {"enabled": false, "extraCost": 3.0}
        },
        "randomPointAttempts": 50
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dinnerlady import config
from dinnerlady.game.ai.tiers import (
    BehaviorTier,
    TargetMode,
    TierBehavior,
    TierThresholds,
)
from dinnerlady.util.misc import to_bool, to_float, to_int
from dinnerlady.util.pathfinding import WallAvoidanceSettings

logger = logging.getLogger(__name__)


def default_thresholds() -> TierThresholds:
    return TierThresholds(
        very_close=config.TIER_VERY_CLOSE_DISTANCE,
        close=config.TIER_CLOSE_DISTANCE,
        medium=config.TIER_MEDIUM_DISTANCE,
    )


def default_tier_behaviors() -> dict[BehaviorTier, TierBehavior]:
    return {
        BehaviorTier.VERY_CLOSE: TierBehavior(
            TargetMode.TRACK_TARGET, config.TIER_VERY_CLOSE_INTERVAL
        ),
        BehaviorTier.CLOSE: TierBehavior(
            TargetMode.TRACK_TARGET, config.TIER_CLOSE_INTERVAL
        ),
        BehaviorTier.MEDIUM: TierBehavior(
            TargetMode.TRACK_TARGET, config.TIER_MEDIUM_INTERVAL
        ),
        BehaviorTier.FAR: TierBehavior(
            TargetMode.RANDOM_POINT,
            config.TIER_FAR_INTERVAL,
            min_distance_from_target=config.FAR_MIN_DISTANCE_FROM_TARGET,
        ),
    }


@dataclass(frozen=True)
class AISettings:
    """Everything the pursuit AI and its pathfinder are tuned by."""

    thresholds: TierThresholds = field(default_factory=default_thresholds)
    behaviors: dict[BehaviorTier, TierBehavior] = field(
        default_factory=default_tier_behaviors
    )
    wall_avoidance: WallAvoidanceSettings = field(
        default_factory=WallAvoidanceSettings
    )
    random_point_attempts: int = config.RANDOM_POINT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        missing = [tier for tier in BehaviorTier if tier not in self.behaviors]
        if missing:
            msg = f"missing behavior for tiers: {[t.value for t in missing]}"
            raise ValueError(msg)
        if self.random_point_attempts < 1:
            msg = "random_point_attempts must be at least 1"
            raise ValueError(msg)

    @classmethod
    def defaults(cls) -> AISettings:
        return cls()

    def behavior_for(self, tier: BehaviorTier) -> TierBehavior:
        return self.behaviors[tier]


# =============================================================================
# Parsing
# =============================================================================


def _parse_thresholds(raw: dict[str, Any]) -> TierThresholds:
    base = default_thresholds()
    return TierThresholds(
        very_close=to_float(raw.get("veryClose", base.very_close)),
        close=to_float(raw.get("close", base.close)),
        medium=to_float(raw.get("medium", base.medium)),
    )


def _parse_target_mode(value: Any) -> TargetMode:
    try:
        return TargetMode(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"unknown targetType {value!r}") from exc


def _parse_behaviors(raw: dict[str, Any]) -> dict[BehaviorTier, TierBehavior]:
    behaviors = default_tier_behaviors()
    for tier in BehaviorTier:
        entry = raw.get(tier.value)
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise ValueError(f"behavior.{tier.value} must be an object")
        base = behaviors[tier]
        mode = (
            _parse_target_mode(entry["targetType"])
            if "targetType" in entry
            else base.target_mode
        )
        behaviors[tier] = TierBehavior(
            target_mode=mode,
            update_interval=to_float(
                entry.get("updateInterval", base.update_interval)
            ),
            min_distance_from_target=to_float(
                entry.get("minDistanceFromPlayer", base.min_distance_from_target)
            ),
        )
    return behaviors


def _parse_wall_avoidance(raw: dict[str, Any]) -> WallAvoidanceSettings:
    base = WallAvoidanceSettings()
    corner = raw.get("cornerAvoidance", {})
    if not isinstance(corner, dict):
        raise ValueError("wallAvoidance.cornerAvoidance must be an object")
    return WallAvoidanceSettings(
        enabled=to_bool(raw.get("enabled", base.enabled)),
        base_cost=to_float(raw.get("baseCost", base.base_cost)),
        max_cost=to_float(raw.get("maxCost", base.max_cost)),
        check_radius=to_int(raw.get("checkRadius", base.check_radius)),
        corner_avoidance=to_bool(corner.get("enabled", base.corner_avoidance)),
        corner_extra_cost=to_float(corner.get("extraCost", base.corner_extra_cost)),
    )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be an object")
    return value


def parse_ai_settings(data: dict[str, Any]) -> AISettings:
    """Build settings from decoded JSON, filling gaps with defaults.

    Raises:
        ValueError: If a present value is malformed or out of range.
    """
    if not isinstance(data, dict):
        raise ValueError("AI configuration must be a JSON object")
    return AISettings(
        thresholds=_parse_thresholds(_section(data, "distances")),
        behaviors=_parse_behaviors(_section(data, "behavior")),
        wall_avoidance=_parse_wall_avoidance(_section(data, "wallAvoidance")),
        random_point_attempts=to_int(
            data.get("randomPointAttempts", config.RANDOM_POINT_MAX_ATTEMPTS)
        ),
    )


def load_ai_settings(
    path: Path | str | None = config.DEFAULT_AI_CONFIG_PATH,
) -> AISettings:
    """Load AI settings from a JSON file, falling back to built-in defaults.

    Never raises: a missing file, unreadable JSON, or invalid values are
    logged and the full default settings are returned instead.

    Args:
        path: JSON file to read. Defaults to the file shipped in
            ``config/``; None skips the file and uses built-in defaults.
    """
    if path is None:
        return AISettings.defaults()

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning(f"AI config {path} not found, using defaults")
        return AISettings.defaults()
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load AI config {path}: {e}")
        return AISettings.defaults()

    try:
        settings = parse_ai_settings(data)
    except (ValueError, TypeError, KeyError) as e:
        logger.error(f"Invalid AI config {path}: {e}; using defaults")
        return AISettings.defaults()

    logger.info(f"Loaded dinner lady AI config from {path}")
    return settings
