from __future__ import annotations

import logging
import time

import numpy as np

from game.actions import Action, action_to_str
from game.constants import DEFAULT_AI_TIME_LIMIT
from game.errors import NoLegalMovesError
from game.game_config import GameConfig
from game.gravity_game import GravityGame
from game.players.gravity_player import GravityPlayer
from game.stateless_logic import BoardState, legal_placements
from learner.minimax_search import SearchTimeout, best_move

logger = logging.getLogger(__name__)


class AIGravityPlayer(GravityPlayer):
    """Computer opponent backed by heuristic minimax.

    Searches on immutable snapshots only, so it can run on a worker thread
    while the live game is rendered.
    """

    is_ai = True

    def __init__(self, game: GravityGame, n, difficulty="medium", depth=None,
                 time_limit=DEFAULT_AI_TIME_LIMIT, rng_seed=None):
        """Initialize AI player.

        Args:
            game: GravityGame instance
            n: Player number (1 or 2)
            difficulty: 'easy', 'medium' or 'hard'
            depth: Search depth override (None = difficulty default)
            time_limit: Max search time per move in seconds
            rng_seed: Optional integer seed for reproducible easy-mode choices
        """
        super().__init__(game, n)
        self.difficulty = difficulty
        self.depth = depth
        self.time_limit = time_limit
        self.rng_seed = rng_seed
        self.rng = np.random.default_rng(rng_seed)
        self.name = f"AI {n} ({difficulty})"

    def choose_move(self, state: BoardState, config: GameConfig) -> Action:
        """Pick a move for ``state`` within the time limit.

        On timeout the first legal placement is returned instead.

        Raises:
            NoLegalMovesError: If this player has no legal action at all
        """
        start = time.monotonic()
        deadline = start + self.time_limit
        try:
            action = best_move(
                state,
                config,
                self.n,
                difficulty=self.difficulty,
                depth=self.depth,
                rng=self.rng,
                deadline=deadline,
            )
        except SearchTimeout:
            action = fallback_move(state)
            logger.warning(
                "%s exceeded its %.1fs budget, falling back to %s",
                self.name, self.time_limit, action_to_str(action) if action else None,
            )

        if action is None:
            raise NoLegalMovesError(self.n)
        logger.info("%s chose %s in %.2fs", self.name, action_to_str(action), time.monotonic() - start)
        return action

    def get_action(self) -> Action:
        return self.choose_move(self.game.state, self.game.config)


def fallback_move(state: BoardState):
    """First legal placement under the current gravity, or None."""
    placements = legal_placements(state.board, *state.gravity_axis())
    return placements[0] if placements else None
