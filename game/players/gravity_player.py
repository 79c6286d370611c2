from __future__ import annotations

from game.actions import Action
from game.gravity_game import GravityGame


class GravityPlayer:
    """Base player with shared state and lifecycle hooks."""

    is_ai = False

    def __init__(self, game: GravityGame, n):
        self.game = game
        self.n = n
        self.name = f"Player {n}"

    def get_action(self) -> Action | None:
        """Next action for this player, or None to stop the game loop."""
        raise NotImplementedError

    #
    # Lifecycle hooks
    #
    def on_turn_start(self) -> None:
        """Inform the player that its turn has begun."""
        return None

    def clear_context(self) -> None:
        """Signal that the current turn is complete."""
        return None
