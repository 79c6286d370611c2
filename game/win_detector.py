"""Line detection for Gravity Cube.

Scans a board for runs of ``win_length`` same-player pieces along the 13
direction families (axes, face diagonals, space diagonals).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from game.constants import DIRECTIONS, DRAW, EMPTY, PLAYER_1, PLAYER_2

Coord = tuple[int, int, int]
Line = tuple[Coord, ...]


@dataclass(frozen=True)
class WinResult:
    """Result of a full board scan.

    Attributes:
        player1_lines: Winning lines of player 1, each a tuple of coordinates
        player2_lines: Winning lines of player 2
        is_draw: True when the cube is full and neither player has a line
    """

    player1_lines: tuple[Line, ...]
    player2_lines: tuple[Line, ...]
    is_draw: bool

    def lines_for(self, player: int) -> tuple[Line, ...]:
        return self.player1_lines if player == PLAYER_1 else self.player2_lines

    @property
    def is_terminal(self) -> bool:
        return bool(self.player1_lines or self.player2_lines or self.is_draw)

    @property
    def winner(self) -> int | None:
        """Winning player, DRAW, or None when the game goes on.

        The player with strictly more lines wins; equal non-zero counts and a
        full cube without lines are both draws.
        """
        count1, count2 = len(self.player1_lines), len(self.player2_lines)
        if count1 > count2:
            return PLAYER_1
        if count2 > count1:
            return PLAYER_2
        if count1 > 0 or self.is_draw:
            return DRAW
        return None


def _run_from(board: np.ndarray, start, direction, win_length: int):
    """Coordinates of the in-bounds run of ``win_length`` cells from ``start``, or None."""
    n = board.shape[0]
    x, y, z = start
    dx, dy, dz = direction
    end_x, end_y, end_z = x + dx * (win_length - 1), y + dy * (win_length - 1), z + dz * (win_length - 1)
    if not (0 <= end_x < n and 0 <= end_y < n and 0 <= end_z < n):
        return None
    return [(x + dx * i, y + dy * i, z + dz * i) for i in range(win_length)]


def find_wins(board: np.ndarray, win_length: int) -> WinResult:
    """Scan the whole board for winning lines.

    Every occupied cell is tried as the start of a run in each direction. A
    physical line is keyed by its sorted coordinates so it is credited once,
    whichever end triggered it. The scan never stops early.
    """
    seen: set[Line] = set()
    lines: dict[int, list[Line]] = {PLAYER_1: [], PLAYER_2: []}

    for start in np.argwhere(board != EMPTY):
        start = tuple(int(c) for c in start)
        player = int(board[start])
        for direction in DIRECTIONS:
            run = _run_from(board, start, direction, win_length)
            if run is None:
                continue
            if any(board[cell] != player for cell in run):
                continue
            key = tuple(sorted(run))
            if key in seen:
                continue
            seen.add(key)
            lines[player].append(tuple(run))

    is_full = not np.any(board == EMPTY)
    has_lines = bool(lines[PLAYER_1] or lines[PLAYER_2])
    return WinResult(
        player1_lines=tuple(lines[PLAYER_1]),
        player2_lines=tuple(lines[PLAYER_2]),
        is_draw=is_full and not has_lines,
    )


def has_win(board: np.ndarray, player: int, win_length: int) -> bool:
    """Return True as soon as ``player`` owns any complete line."""
    for start in np.argwhere(board == player):
        start = tuple(int(c) for c in start)
        for direction in DIRECTIONS:
            run = _run_from(board, start, direction, win_length)
            if run is not None and all(board[cell] == player for cell in run):
                return True
    return False
