"""Result value objects for game actions.

These classes encapsulate everything a presentation layer needs after a
move: the new board, the current gravity, and the terminal outcome with its
winning lines. The presentation layer diffs old and new boards to animate;
the engine itself never waits on it.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from game.constants import DRAW, PLAYER_1, PLAYER_2
from game.win_detector import Line, WinResult


@dataclass(frozen=True)
class GameOutcome:
    """Terminal result of a game, computed once and never mutated.

    Attributes:
        winner: PLAYER_1, PLAYER_2 or DRAW
        player1_lines: Winning lines of player 1
        player2_lines: Winning lines of player 2
        reason: Human-readable description of how the game ended
    """

    winner: int
    player1_lines: tuple[Line, ...] = ()
    player2_lines: tuple[Line, ...] = ()
    reason: str = ""

    @classmethod
    def from_win_result(cls, result: WinResult) -> GameOutcome | None:
        winner = result.winner
        if winner is None:
            return None
        count1, count2 = len(result.player1_lines), len(result.player2_lines)
        if winner == PLAYER_1:
            reason = f"Player 1 wins with {count1} line(s)"
        elif winner == PLAYER_2:
            reason = f"Player 2 wins with {count2} line(s)"
        elif count1 > 0:
            reason = f"Draw: both players have {count1} line(s)"
        else:
            reason = "Draw: the cube is full"
        return cls(winner, result.player1_lines, result.player2_lines, reason)

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW

    @property
    def winning_lines(self) -> tuple[Line, ...]:
        return self.player1_lines + self.player2_lines

    def __str__(self) -> str:
        return self.reason


class ActionResult:
    """Encapsulates the result of a game action.

    Attributes:
        action: The action that was applied
        player: Player who acted
        board: Copy of the board after the action (and any compaction)
        gravity: Local gravity vector after the action
        current_player: Player to move next
        outcome: GameOutcome if the action ended the game, else None
    """

    def __init__(self, action, player, board: np.ndarray, gravity, current_player, outcome: GameOutcome | None = None):
        self.action = action
        self.player = player
        self.board = board
        self.gravity = gravity
        self.current_player = current_player
        self.outcome = outcome

    def __repr__(self):
        return (
            f"ActionResult(action={self.action!r}, player={self.player}, "
            f"gravity={self.gravity}, outcome={self.outcome!r})"
        )

    def is_terminal(self):
        return self.outcome is not None

    @property
    def winning_lines(self):
        if self.outcome is None:
            return ()
        return self.outcome.winning_lines

    @property
    def winner(self):
        return None if self.outcome is None else self.outcome.winner


