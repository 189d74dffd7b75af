"""
Configuration constants.

Built-in defaults for the pursuit AI and pathfinding. These are the values the
game falls back to whenever an external configuration file is missing or
unreadable, so every call site reads them from here instead of repeating
literals.
"""

from pathlib import Path

# =============================================================================
# GENERAL
# =============================================================================

PROJECT_ROOT_PATH = Path(__file__).resolve().parent.parent

# Optional JSON file overriding the AI defaults below.
DEFAULT_AI_CONFIG_PATH = PROJECT_ROOT_PATH / "config" / "dinner_lady_ai.json"

# =============================================================================
# GRID & PATHFINDING
# =============================================================================

# World units per grid cell. Levels are authored in cells and laid out at
# twice their size in the world.
GRID_SCALE = 2

# Largest ring searched when an endpoint lands on a wall or off the map.
MAX_SNAP_RADIUS = 5

# Raw cell values treated as walls when no marker set is supplied.
DEFAULT_WALL_MARKERS: frozenset[str | int] = frozenset({"1", 1})

# --- Wall avoidance cost model ---
WALL_AVOIDANCE_ENABLED = True
WALL_AVOIDANCE_BASE_COST = 2.0
WALL_AVOIDANCE_MAX_COST = 5.0
WALL_AVOIDANCE_CHECK_RADIUS = 1  # 1 = the 8 surrounding cells
CORNER_AVOIDANCE_ENABLED = False
CORNER_AVOIDANCE_EXTRA_COST = 3.0

# =============================================================================
# PURSUIT AI
# =============================================================================

# Distance thresholds (world units). Anything beyond MEDIUM is "far".
TIER_VERY_CLOSE_DISTANCE = 5.0
TIER_CLOSE_DISTANCE = 10.0
TIER_MEDIUM_DISTANCE = 20.0

# Seconds between act-cycles for each tier.
TIER_VERY_CLOSE_INTERVAL = 1.0
TIER_CLOSE_INTERVAL = 5.0
TIER_MEDIUM_INTERVAL = 8.0
TIER_FAR_INTERVAL = 12.0

# Random roaming in the far tier keeps at least this far from the player.
FAR_MIN_DISTANCE_FROM_TARGET = 15.0

# Sampling budget when picking a random roaming point.
RANDOM_POINT_MAX_ATTEMPTS = 50

# =============================================================================
# CHASER MOTION
# =============================================================================

CHASER_MOVE_SPEED = 4.0  # World units per second, slightly slower than player

# The chaser catches the player inside this radius (world units).
CATCH_DISTANCE = 1.0
