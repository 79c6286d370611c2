import logging

import numpy as np

from .action_result import ActionResult, GameOutcome
from .actions import Action, Placement, Rotation, action_to_str, get_rotation
from .constants import AXIS_NAMES
from .errors import GameAlreadyOverError, NoHistoryToUndoError
from .game_config import GameConfig
from .orientation import orientation_matrix
from .stateless_logic import (
    BoardState,
    initial_state,
    legal_actions,
    legal_placements,
    legal_rotations,
    place_piece,
    rotated_state,
    ShiftState,
    switch_player,
    validate_placement,
    validate_rotation,
)
from .win_detector import find_wins
from .utils.board_diagram import render_board

logger = logging.getLogger(__name__)


class GravityGame:
    """Rules engine for one game of Gravity Cube.

    Owns the live BoardState, the undo history and the terminal outcome.
    Every public mutator either completes fully or raises before touching
    anything, so a rejected move leaves state and history unchanged.
    """

    def __init__(self, config=None, clone=None):
        if clone is not None:
            # Snapshots are immutable so sharing them with the clone is safe
            self.config = clone.config
            self.state = clone.state
            self.history = list(clone.history)
            self.outcome = clone.outcome
        else:
            self.config = config if config is not None else GameConfig.classic()
            self.reset()

    def __deepcopy__(self, memo):
        return GravityGame(clone=self)

    def reset(self):
        self.state = initial_state(self.config)
        self.history: list[BoardState] = []
        self.outcome: GameOutcome | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def grid_size(self):
        return self.config.grid_size

    @property
    def current_player(self):
        return self.state.current_player

    def get_board_snapshot(self):
        """Writable copy of the board, indexed [x, y, z]."""
        return np.copy(self.state.board)

    def get_gravity_vector(self):
        return self.state.gravity()

    def get_cube_orientation(self):
        """3x3 world-from-local rotation matrix of the cube (for rendering)."""
        return orientation_matrix(self.state.orientation)

    def get_shift_state(self, player) -> ShiftState:
        return self.state.shift_state(player)

    def is_game_over(self):
        return self.outcome is not None

    def get_game_ended(self):
        """Returns the winner (PLAYER_1, PLAYER_2 or DRAW), or None if the game goes on."""
        return None if self.outcome is None else self.outcome.winner

    def can_undo(self):
        return len(self.history) > 0

    def legal_placements(self):
        if self.is_game_over():
            return []
        return legal_placements(self.state.board, *self.state.gravity_axis())

    def legal_rotations(self, player=None):
        if self.is_game_over():
            return []
        player = self.current_player if player is None else player
        return legal_rotations(self.state.shift_state(player), self.config)

    def legal_actions(self):
        """All actions for the current player: placements first, then rotations."""
        if self.is_game_over():
            return []
        return legal_actions(self.state, self.current_player, self.config)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def place(self, x, y, z) -> ActionResult:
        """Drop the current player's piece into cell (x, y, z).

        Raises:
            GameAlreadyOverError, OutOfBoundsError, CellOccupiedError,
            UnsupportedCellError
        """
        if self.is_game_over():
            raise GameAlreadyOverError()
        validate_placement(self.state, x, y, z)

        player = self.current_player
        board = place_piece(self.state.board, x, y, z, player)
        return self._commit(Placement(x, y, z), player, self.state._replace(board=board), end_turn=True)

    def rotate(self, rotation=None, axis=None, angle=None) -> ActionResult:
        """Turn the cube with one of the canonical rotations.

        ``rotation`` may be a Rotation or a catalog name; alternatively pass
        ``axis`` and ``angle``, by keyword or positionally as ``rotate("z", 90)``.

        Raises:
            GameAlreadyOverError, NoShiftsRemainingError, ShiftOnCooldownError,
            ValueError for a rotation outside the catalog
        """
        if rotation in AXIS_NAMES and angle is None:
            rotation, axis, angle = None, rotation, axis
        if isinstance(rotation, Rotation):
            rotation = get_rotation(rotation.name)
        else:
            rotation = get_rotation(rotation, axis, angle)
        if self.is_game_over():
            raise GameAlreadyOverError()
        player = self.current_player
        validate_rotation(self.state, player, self.config)

        new_state = rotated_state(self.state, rotation, player, self.config)
        return self._commit(rotation, player, new_state, end_turn=self.config.shift_ends_turn)

    def take_action(self, action: Action) -> ActionResult:
        if isinstance(action, Placement):
            return self.place(action.x, action.y, action.z)
        if isinstance(action, Rotation):
            return self.rotate(action)
        raise TypeError(f"Not an action: {action!r}")

    def undo(self, skip_players=()):
        """Restore the state before the last action.

        If the restored position has a player from ``skip_players`` to move
        (an AI seat) and more history exists, pop once more so control goes
        back to a human.

        Raises:
            NoHistoryToUndoError: If there is nothing to undo
        """
        if not self.history:
            raise NoHistoryToUndoError()
        self.state = self.history.pop()
        if self.state.current_player in skip_players and self.history:
            self.state = self.history.pop()
        self.outcome = None
        logger.debug("Undo: player %d to move, %d snapshot(s) left", self.current_player, len(self.history))
        return self.state

    def _commit(self, action, player, new_state, end_turn) -> ActionResult:
        """Push history, install the new state, and resolve wins or the turn change."""
        result = find_wins(new_state.board, self.config.win_length)
        outcome = GameOutcome.from_win_result(result)
        if outcome is None and end_turn:
            new_state = switch_player(new_state)

        self.history.append(self.state)
        self.state = new_state
        self.outcome = outcome

        logger.debug("Player %d: %s (gravity %s)", player, action_to_str(action), self.get_gravity_vector())
        if outcome is not None:
            logger.info("Game over: %s", outcome)

        return ActionResult(
            action=action,
            player=player,
            board=self.get_board_snapshot(),
            gravity=self.get_gravity_vector(),
            current_player=self.current_player,
            outcome=outcome,
        )

    def print_state(self, reporter=None):
        """Emit the board diagram and shift counters via provided reporter."""
        if reporter is None:
            reporter = print

        reporter("---------------")
        reporter(render_board(self.state.board, self.get_gravity_vector()))
        reporter("---------------")
        for player in (1, 2):
            shift = self.get_shift_state(player)
            reporter(
                f"Player {player}: {shift.shifts_remaining} shift(s) left, cooldown {shift.cooldown_turns}"
            )
        reporter("---------------")
