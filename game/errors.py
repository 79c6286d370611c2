"""Typed errors raised by the Gravity Cube rules engine.

Every error is raised before any state is touched, so callers can catch it,
report the message and carry on with the game unchanged.
"""


class GravityGameError(Exception):
    """Base class for all rules-engine errors."""


class InvalidMoveError(GravityGameError, ValueError):
    """An attempted placement or rotation is not legal in the current state."""


class OutOfBoundsError(InvalidMoveError):
    def __init__(self, x, y, z, grid_size):
        super().__init__(
            f"Invalid placement: ({x}, {y}, {z}) is outside the {grid_size}x{grid_size}x{grid_size} cube"
        )
        self.position = (x, y, z)


class CellOccupiedError(InvalidMoveError):
    def __init__(self, x, y, z):
        super().__init__(f"Invalid placement: cell ({x}, {y}, {z}) is already occupied")
        self.position = (x, y, z)


class UnsupportedCellError(InvalidMoveError):
    """The cell is empty but is not the landing cell of its column."""

    def __init__(self, x, y, z, landing):
        super().__init__(
            f"Invalid placement: ({x}, {y}, {z}) is not supported under the current gravity "
            f"(pieces in this column land at {landing})"
        )
        self.position = (x, y, z)
        self.landing = landing


class NoShiftsRemainingError(InvalidMoveError):
    def __init__(self, player):
        super().__init__(f"Player {player} has no gravity shifts left")
        self.player = player


class ShiftOnCooldownError(InvalidMoveError):
    def __init__(self, player, turns):
        super().__init__(
            f"Player {player} must wait {turns} more turn(s) to shift gravity again"
        )
        self.player = player
        self.turns = turns


class GameAlreadyOverError(InvalidMoveError):
    def __init__(self):
        super().__init__("The game is already over")


class AiMoveInProgressError(InvalidMoveError):
    def __init__(self):
        super().__init__("The AI is still choosing its move")


class NoHistoryToUndoError(GravityGameError):
    def __init__(self):
        super().__init__("There are no moves to undo")


class NoLegalMovesError(GravityGameError):
    """Raised when a non-terminal position offers no legal move (engine invariant violation)."""

    def __init__(self, player):
        super().__init__(
            f"Player {player} has no legal moves but the game is not over"
        )
        self.player = player
