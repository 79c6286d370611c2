"""Game constants shared across modules.

This module contains cell values, outcome constants and the line directions
used by both the stateful engine (GravityGame) and the stateless logic.
"""

# Cell values
EMPTY = 0
PLAYER_1 = 1
PLAYER_2 = 2
PLAYERS = (PLAYER_1, PLAYER_2)

# Game outcome constants (winner field of GameOutcome)
PLAYER_1_WIN = PLAYER_1
PLAYER_2_WIN = PLAYER_2
DRAW = 0

# Axis indices into board[x, y, z]
AXIS_X = 0
AXIS_Y = 1
AXIS_Z = 2
AXIS_NAMES = ("x", "y", "z")

# "Down" in the world frame; the cube starts unrotated so local gravity matches
WORLD_DOWN = (0, -1, 0)

# The 13 line directions in 3D: 3 axes, 6 face diagonals, 4 space diagonals.
# Each physical direction appears once (its negation is never listed).
DIRECTIONS = (
    (1, 0, 0), (0, 1, 0), (0, 0, 1),
    (1, 1, 0), (1, -1, 0), (1, 0, 1), (1, 0, -1), (0, 1, 1), (0, 1, -1),
    (1, 1, 1), (1, 1, -1), (1, -1, 1), (-1, 1, 1),
)

# AI difficulty levels
DIFFICULTIES = ("easy", "medium", "hard")

# Default wall-clock budget for one AI decision, in seconds
DEFAULT_AI_TIME_LIMIT = 10.0


def other_player(player):
    """Return the opponent of ``player`` (1 <-> 2)."""
    return 3 - player
