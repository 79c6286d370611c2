"""Plain-text diagrams of a Gravity Cube board.

The cube is drawn as a row of horizontal layers, top layer (highest y) on
the left. Inside each layer columns are x and rows are z:

    y=3      y=2      y=1      y=0
    . . . .  . . . .  . . . .  X . . .
    . . . .  . . . .  . . . .  O . . .
    ...
"""

import numpy as np

from game.constants import EMPTY, PLAYER_1, PLAYER_2

SYMBOLS = {EMPTY: ".", PLAYER_1: "X", PLAYER_2: "O"}
LAYER_GAP = "  "


def format_player_name(player_num: int, player_name: str | None = None) -> str:
    """Format a player display name, e.g. 'Player 1 (X)' or 'Player 1 (X, Alice)'."""
    symbol = SYMBOLS.get(player_num, "?")
    if player_name:
        return f"Player {player_num} ({symbol}, {player_name})"
    return f"Player {player_num} ({symbol})"


def render_layer(board: np.ndarray, y: int) -> list[str]:
    n = board.shape[0]
    return [" ".join(SYMBOLS.get(int(board[x, y, z]), "?") for x in range(n)) for z in range(n)]


def render_board(board: np.ndarray, gravity=None) -> str:
    """Render every y-layer side by side, optionally with a gravity caption."""
    n = board.shape[0]
    width = 2 * n - 1
    layers = [render_layer(board, y) for y in range(n - 1, -1, -1)]

    lines = [LAYER_GAP.join(f"y={y}".ljust(width) for y in range(n - 1, -1, -1)).rstrip()]
    for row in range(n):
        lines.append(LAYER_GAP.join(layer[row] for layer in layers))
    if gravity is not None:
        lines.append(f"gravity: ({gravity[0]}, {gravity[1]}, {gravity[2]})")
    return "\n".join(lines)
