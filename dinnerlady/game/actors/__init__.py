from .chaser import Chaser
from .positioned import PlayerProxy, Positioned, distance_between

__all__ = ["Chaser", "PlayerProxy", "Positioned", "distance_between"]
