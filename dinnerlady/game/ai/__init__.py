"""
Pursuit AI for the dinner lady.

Package structure:
    tiers      - BehaviorTier, TargetMode, per-tier behavior, classification.
    settings   - AISettings and the JSON loader that fills in defaults.
    proximity  - ProximityBehaviorEngine, the act-cycle state machine.
"""

from .proximity import BehaviorDecision, ProximityBehaviorEngine, pick_random_target
from .settings import AISettings, load_ai_settings, parse_ai_settings
from .tiers import (
    BehaviorTier,
    TargetMode,
    TierBehavior,
    TierThresholds,
    classify_distance,
)

__all__ = [
    "AISettings",
    "BehaviorDecision",
    "BehaviorTier",
    "ProximityBehaviorEngine",
    "TargetMode",
    "TierBehavior",
    "TierThresholds",
    "classify_distance",
    "load_ai_settings",
    "parse_ai_settings",
    "pick_random_target",
]
