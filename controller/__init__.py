"""Controller module for Gravity Cube.

Contains the game session and the turn-loop controller.
"""

from controller.game_controller import GravityGameController
from controller.game_session import GameSession

__all__ = ["GravityGameController", "GameSession"]
