"""Players."""

from .ai_gravity_player import AIGravityPlayer
from .gravity_player import GravityPlayer
from .human_gravity_player import HumanGravityPlayer

__all__ = ["GravityPlayer", "HumanGravityPlayer", "AIGravityPlayer"]
