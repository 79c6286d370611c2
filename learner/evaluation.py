"""Static evaluation of Gravity Cube positions.

Scores are always from the point of view of ``player``: +inf when it owns a
complete line, -inf when the opponent does, otherwise a weighted threat count
plus a small bonus for central pieces.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import NamedTuple

import numpy as np

from game.constants import DIRECTIONS, EMPTY, other_player
from game.win_detector import has_win

MAJOR_THREAT_WEIGHT = 100
MINOR_THREAT_WEIGHT = 10
OPPONENT_MAJOR_THREAT_WEIGHT = 90
OPPONENT_MINOR_THREAT_WEIGHT = 5
CENTER_CONTROL_WEIGHT = 0.01


class ThreatCounts(NamedTuple):
    major: int
    minor: int


@lru_cache(maxsize=None)
def ray_table(grid_size: int, win_length: int) -> tuple[np.ndarray, np.ndarray]:
    """Flat indices of every in-bounds ray and of the cell just behind it.

    Returns:
        (rays, behind): ``rays`` has shape (R, win_length); ``behind`` has
        shape (R,) and holds -1 where the cell behind the start is off the board
    """
    n = grid_size
    rays = []
    behind = []
    for x in range(n):
        for y in range(n):
            for z in range(n):
                for dx, dy, dz in DIRECTIONS:
                    cells = [(x + dx * i, y + dy * i, z + dz * i) for i in range(win_length)]
                    if not all(0 <= c < n for cell in cells for c in cell):
                        continue
                    rays.append([np.ravel_multi_index(cell, (n, n, n)) for cell in cells])
                    prev = (x - dx, y - dy, z - dz)
                    if all(0 <= c < n for c in prev):
                        behind.append(np.ravel_multi_index(prev, (n, n, n)))
                    else:
                        behind.append(-1)
    rays = np.array(rays, dtype=np.intp).reshape(-1, win_length)
    behind = np.array(behind, dtype=np.intp)
    rays.flags.writeable = False
    behind.flags.writeable = False
    return rays, behind


def count_threats(board: np.ndarray, player: int, win_length: int) -> ThreatCounts:
    """Count open near-complete lines for ``player``.

    Every cell (empty or not) is tried as the start of a ray in each of the 13
    directions. A start is skipped when the cell just behind it along the ray
    already holds one of the player's pieces, so a run is not recounted from
    its interior. A ray of ``win_length`` in-bounds cells counts when it holds
    no opponent piece and at least one empty cell:

    - major: ``win_length - 1`` of the player's pieces
    - minor: ``win_length - 2`` of the player's pieces and two or more empty cells
    """
    rays, behind = ray_table(board.shape[0], win_length)
    if rays.size == 0:
        return ThreatCounts(0, 0)

    flat = board.ravel()
    values = flat[rays]
    own = np.count_nonzero(values == player, axis=1)
    empty = np.count_nonzero(values == EMPTY, axis=1)
    blocked = own + empty < win_length

    # Index -1 reads the last cell; the mask discards those reads
    continues_run = (behind >= 0) & (flat[behind] == player)
    open_rays = ~blocked & ~continues_run & (empty > 0)

    major = np.count_nonzero(open_rays & (own == win_length - 1))
    minor = np.count_nonzero(open_rays & (own == win_length - 2) & (empty >= 2))
    return ThreatCounts(int(major), int(minor))


def center_control_score(board: np.ndarray, player: int) -> float:
    """Sum of (max distance - distance) from the cube centre over the player's pieces, scaled."""
    n = board.shape[0]
    center = (n - 1) / 2
    max_distance = math.sqrt(3 * center**2)
    cells = np.argwhere(board == player)
    if cells.size == 0:
        return 0.0
    distances = np.sqrt(((cells - center) ** 2).sum(axis=1))
    return float((max_distance - distances).sum() * CENTER_CONTROL_WEIGHT)


def score_board(board: np.ndarray, player: int, win_length: int) -> float:
    """Heuristic value of ``board`` for ``player``."""
    opponent = other_player(player)
    if has_win(board, player, win_length):
        return math.inf
    if has_win(board, opponent, win_length):
        return -math.inf

    own = count_threats(board, player, win_length)
    theirs = count_threats(board, opponent, win_length)

    score = 0.0
    score += own.major * MAJOR_THREAT_WEIGHT
    score += own.minor * MINOR_THREAT_WEIGHT
    score -= theirs.major * OPPONENT_MAJOR_THREAT_WEIGHT
    score -= theirs.minor * OPPONENT_MINOR_THREAT_WEIGHT
    score += center_control_score(board, player)
    return score
