"""Depth-bounded minimax over Gravity Cube states.

The search never touches a live game. Each node is a BoardState built by
the same pure transitions the rules engine uses, so every simulated branch
carries its own board, orientation (hence gravity) and shift budget.

Scores are fixed to the AI's perspective at every depth: the AI maximizes,
its opponent minimizes the AI's score.
"""

from __future__ import annotations

import logging
import math
import time

import numpy as np

from game.actions import Action, Placement
from game.game_config import GameConfig
from game.stateless_logic import BoardState, apply_action, legal_actions, legal_placements
from learner.evaluation import score_board

logger = logging.getLogger(__name__)

SEARCH_DEPTHS = {"medium": 1, "hard": 2}


class SearchTimeout(Exception):
    """Raised when a search passes its deadline."""


def _check_deadline(deadline: float | None) -> None:
    if deadline is not None and time.monotonic() > deadline:
        raise SearchTimeout()


def opening_move(state: BoardState) -> Placement | None:
    """Legal placement closest to the cube centre (first one wins ties)."""
    placements = legal_placements(state.board, *state.gravity_axis())
    if not placements:
        return None
    center = (state.board.shape[0] - 1) / 2
    best = placements[0]
    best_distance = math.inf
    for placement in placements:
        distance = math.dist(placement.position, (center, center, center))
        if distance < best_distance:
            best_distance = distance
            best = placement
    return best


def minimax(
    state: BoardState,
    depth: int,
    maximizing: bool,
    config: GameConfig,
    ai_player: int,
    deadline: float | None = None,
) -> float:
    """Value of ``state`` for ``ai_player`` looking ``depth`` plies ahead.

    The side to move is ``state.current_player``; ``maximizing`` says whether
    that is the AI. Leaves are depth 0, decided positions (score +-inf) and
    nodes without legal actions, which all return the static score.

    Raises:
        SearchTimeout: If ``deadline`` (a time.monotonic() value) has passed
    """
    _check_deadline(deadline)
    static_score = score_board(state.board, ai_player, config.win_length)
    if depth == 0 or math.isinf(static_score):
        return static_score

    mover = state.current_player
    actions = legal_actions(state, mover, config)
    if not actions:
        return static_score

    # Next mover comes from the child state: an expert-mode shift keeps the turn
    if maximizing:
        best = -math.inf
        for action in actions:
            child = apply_action(state, action, mover, config)
            best = max(best, minimax(child, depth - 1, child.current_player == ai_player, config, ai_player, deadline))
        return best

    best = math.inf
    for action in actions:
        child = apply_action(state, action, mover, config)
        best = min(best, minimax(child, depth - 1, child.current_player == ai_player, config, ai_player, deadline))
    return best


def best_move(
    state: BoardState,
    config: GameConfig,
    player: int,
    difficulty: str = "medium",
    depth: int | None = None,
    rng: np.random.Generator | None = None,
    deadline: float | None = None,
) -> Action | None:
    """Choose a move for ``player`` in ``state``.

    Args:
        state: Position to move from (not modified)
        config: Game rules
        player: The AI's player number
        difficulty: 'easy' picks uniformly at random; 'medium' and 'hard'
            search 1 and 2 plies
        depth: Override the difficulty's search depth
        rng: Generator for 'easy' (default: fresh unseeded generator)
        deadline: time.monotonic() value after which the search gives up

    Returns:
        The chosen action, or None when ``player`` has no legal action

    Raises:
        SearchTimeout: If ``deadline`` passes during the search
    """
    actions = legal_actions(state, player, config)
    if not actions:
        return None

    if difficulty == "easy":
        rng = rng if rng is not None else np.random.default_rng()
        return actions[int(rng.integers(len(actions)))]

    if state.piece_count() < 2:
        opening = opening_move(state)
        if opening is not None:
            return opening

    if depth is None:
        try:
            depth = SEARCH_DEPTHS[difficulty]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {difficulty}") from None

    best_action = None
    best_score = -math.inf
    for action in actions:
        child = apply_action(state, action, player, config)
        score = minimax(child, depth - 1, child.current_player == player, config, player, deadline)
        logger.debug("Candidate %s scored %s", action, score)
        if score > best_score:
            best_score = score
            best_action = action

    # Every move loses: play the first one
    if best_action is None:
        best_action = actions[0]
    logger.debug("Best move %s (score %s, depth %d)", best_action, best_score, depth)
    return best_action
