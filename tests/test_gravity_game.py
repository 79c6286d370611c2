"""
Tests for the GravityGame rules engine.

Covers placements, rotations with shift bookkeeping, terminal outcomes,
rejected moves leaving state untouched, and undo.
"""

import copy
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from game.action_result import ActionResult
from game.actions import Placement, get_rotation
from game.constants import DRAW, EMPTY, PLAYER_1, PLAYER_2
from game.errors import (
    CellOccupiedError,
    GameAlreadyOverError,
    InvalidMoveError,
    NoHistoryToUndoError,
    NoShiftsRemainingError,
    OutOfBoundsError,
    ShiftOnCooldownError,
    UnsupportedCellError,
)
from game.game_config import GameConfig
from game.gravity_game import GravityGame
from game.stateless_logic import freeze


# ============================================================================
# Fixtures and helpers
# ============================================================================


@pytest.fixture
def game():
    """Create a fresh classic game for each test."""
    return GravityGame(GameConfig.classic())


def play(game, *cells):
    result = None
    for cell in cells:
        result = game.place(*cell)
    return result


def assert_same_state(game, state, history_len):
    assert game.state is state
    assert len(game.history) == history_len


def line_free_full_board():
    h = np.array([[0, 1, 0, 0], [1, 1, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]])
    g = np.array([0, 0, 1, 1])
    return ((h[:, :, None] ^ g[None, None, :]) + 1).astype(np.int8)


# ============================================================================
# Placement
# ============================================================================


class TestPlacement:
    def test_initial_game(self, game):
        assert game.current_player == PLAYER_1
        assert game.get_gravity_vector() == (0, -1, 0)
        assert np.array_equal(game.get_cube_orientation(), np.eye(3, dtype=np.int8))
        assert not game.is_game_over()
        assert game.get_game_ended() is None
        assert not game.can_undo()

    def test_place_returns_result_and_switches(self, game):
        result = game.place(1, 0, 2)

        assert isinstance(result, ActionResult)
        assert result.action == Placement(1, 0, 2)
        assert result.player == PLAYER_1
        assert result.current_player == PLAYER_2
        assert result.board[1, 0, 2] == PLAYER_1
        assert result.gravity == (0, -1, 0)
        assert not result.is_terminal()
        assert result.winning_lines == ()
        assert game.current_player == PLAYER_2
        assert len(game.history) == 1

    def test_board_snapshot_is_independent_copy(self, game):
        game.place(0, 0, 0)
        snapshot = game.get_board_snapshot()
        snapshot[0, 0, 0] = PLAYER_2
        assert game.get_board_snapshot()[0, 0, 0] == PLAYER_1

    def test_pieces_stack(self, game):
        play(game, (0, 0, 0), (0, 1, 0))
        assert game.get_board_snapshot()[0, 1, 0] == PLAYER_2
        assert Placement(0, 2, 0) in game.legal_placements()

    @pytest.mark.parametrize(
        "cell,error",
        [
            ((4, 0, 0), OutOfBoundsError),
            ((0, -1, 0), OutOfBoundsError),
            ((1, 2, 1), UnsupportedCellError),
        ],
    )
    def test_invalid_placement_leaves_state(self, game, cell, error):
        game.place(3, 0, 3)
        state = game.state
        with pytest.raises(error):
            game.place(*cell)
        assert_same_state(game, state, 1)

    def test_occupied_cell(self, game):
        game.place(2, 0, 2)
        state = game.state
        with pytest.raises(CellOccupiedError):
            game.place(2, 0, 2)
        assert_same_state(game, state, 1)

    def test_errors_are_invalid_moves(self, game):
        with pytest.raises(InvalidMoveError):
            game.place(9, 9, 9)
        with pytest.raises(ValueError):
            game.place(9, 9, 9)


# ============================================================================
# Terminal outcomes
# ============================================================================


class TestOutcomes:
    def test_vertical_stack_wins(self, game):
        result = play(
            game,
            (0, 0, 0), (1, 0, 0),
            (0, 1, 0), (1, 1, 0),
            (0, 2, 0), (1, 2, 0),
            (0, 3, 0),
        )

        assert result.is_terminal()
        assert result.winner == PLAYER_1
        assert len(result.outcome.player1_lines) == 1
        assert set(result.outcome.player1_lines[0]) == {(0, y, 0) for y in range(4)}
        assert result.outcome.player2_lines == ()
        assert result.outcome.reason == "Player 1 wins with 1 line(s)"
        assert game.get_game_ended() == PLAYER_1
        # The winner stays on move; no turn switch after a terminal move
        assert game.current_player == PLAYER_1

    def test_no_moves_after_game_over(self, game):
        play(game, (0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0), (0, 2, 0), (1, 2, 0), (0, 3, 0))
        state = game.state
        with pytest.raises(GameAlreadyOverError):
            game.place(2, 0, 0)
        with pytest.raises(GameAlreadyOverError):
            game.rotate("flip")
        assert_same_state(game, state, 7)
        assert game.legal_actions() == []

    def test_full_cube_without_lines_is_draw(self, game):
        board = line_free_full_board()
        assert board[0, 3, 0] == PLAYER_1
        board[0, 3, 0] = EMPTY
        game.state = game.state._replace(board=freeze(board))

        result = game.place(0, 3, 0)

        assert result.winner == DRAW
        assert result.outcome.is_draw
        assert result.outcome.reason == "Draw: the cube is full"
        assert result.winning_lines == ()

    def test_rotation_can_complete_a_line(self, game):
        board = np.zeros((4, 4, 4), dtype=np.int8)
        for cell in [(1, 0, 0), (2, 0, 1), (3, 0, 2), (0, 0, 3)]:
            board[cell] = PLAYER_1
        for cell in [(3, 0, 0), (3, 0, 1), (1, 0, 3)]:
            board[cell] = PLAYER_2
        game.state = game.state._replace(board=freeze(board))

        result = game.rotate("roll_left")

        assert result.winner == PLAYER_1
        assert set(result.outcome.player1_lines[0]) == {(0, 0, z) for z in range(4)}
        assert game.get_gravity_vector() == (-1, 0, 0)


# ============================================================================
# Rotation
# ============================================================================


class TestRotation:
    def test_rotate_compacts_and_spends_shift(self, game):
        game.place(0, 0, 0)
        result = game.rotate("flip")

        assert result.action == get_rotation("flip")
        assert result.player == PLAYER_2
        assert result.gravity == (0, 1, 0)
        assert game.get_board_snapshot()[0, 3, 0] == PLAYER_1
        assert game.get_shift_state(PLAYER_2).shifts_remaining == 2
        assert game.get_shift_state(PLAYER_2).cooldown_turns == 2
        assert game.current_player == PLAYER_1
        assert Placement(0, 2, 0) in game.legal_placements()

    @pytest.mark.parametrize("args,kwargs", [((), {"axis": "z", "angle": 90}), (("z", 90), {})])
    def test_rotate_by_axis_and_angle(self, game, args, kwargs):
        game.rotate(*args, **kwargs)
        assert game.get_gravity_vector() == (-1, 0, 0)

    def test_unknown_rotation_rejected(self, game):
        with pytest.raises(ValueError):
            game.rotate("spin")
        with pytest.raises(ValueError):
            game.rotate(axis="y", angle=90)
        assert not game.can_undo()

    def test_cooldown_counts_down_on_own_turns(self, game):
        game.place(0, 0, 0)
        game.rotate("flip")  # player 2, cooldown 2
        game.place(1, 3, 0)  # player 1; player 2 cooldown -> 1

        state = game.state
        with pytest.raises(ShiftOnCooldownError) as excinfo:
            game.rotate("flip")
        assert excinfo.value.turns == 1
        assert_same_state(game, state, 3)
        assert game.legal_rotations() == []

        game.place(2, 3, 0)  # player 2
        game.place(3, 3, 0)  # player 1; player 2 cooldown -> 0
        game.rotate("flip")
        assert game.get_gravity_vector() == (0, -1, 0)

    def test_no_shifts_remaining(self):
        game = GravityGame(GameConfig(name="One shift", initial_shifts=1, shift_cooldown=0))
        game.rotate("roll_left")
        game.place(0, 0, 0)
        board = game.get_board_snapshot()
        gravity = game.get_gravity_vector()

        with pytest.raises(NoShiftsRemainingError):
            game.rotate("flip")

        assert np.array_equal(game.get_board_snapshot(), board)
        assert game.get_gravity_vector() == gravity
        assert len(game.history) == 2

    def test_no_shift_mode(self):
        game = GravityGame(GameConfig.no_shift())
        with pytest.raises(NoShiftsRemainingError):
            game.rotate("flip")
        assert game.get_gravity_vector() == (0, -1, 0)
        assert all(isinstance(a, Placement) for a in game.legal_actions())

    def test_expert_shift_then_place(self):
        game = GravityGame(GameConfig.expert())
        game.rotate("tilt_back")
        assert game.current_player == PLAYER_1
        assert game.get_gravity_vector() == (0, 0, 1)

        result = game.place(0, 0, 3)
        assert result.player == PLAYER_1
        assert game.current_player == PLAYER_2


# ============================================================================
# Undo
# ============================================================================


class TestUndo:
    def test_undo_restores_exact_state(self, game):
        game.place(1, 0, 1)
        before_board = game.get_board_snapshot()
        before_player = game.current_player
        before_shifts = game.state.shifts

        game.place(2, 0, 2)
        game.undo()

        assert np.array_equal(game.get_board_snapshot(), before_board)
        assert game.current_player == before_player
        assert game.state.shifts == before_shifts
        assert len(game.history) == 1

    def test_undo_rotation_restores_gravity_and_shifts(self, game):
        game.rotate("roll_right")
        game.undo()
        assert game.get_gravity_vector() == (0, -1, 0)
        assert game.get_shift_state(PLAYER_1).shifts_remaining == 3
        assert game.current_player == PLAYER_1

    def test_undo_with_empty_history(self, game):
        state = game.state
        with pytest.raises(NoHistoryToUndoError):
            game.undo()
        assert_same_state(game, state, 0)

    def test_undo_skips_ai_turn(self, game):
        game.place(0, 0, 0)
        game.place(1, 0, 0)
        game.undo(skip_players={PLAYER_2})
        assert game.current_player == PLAYER_1
        assert not game.can_undo()
        assert not game.get_board_snapshot().any()

    def test_undo_skip_needs_more_history(self, game):
        game.place(0, 0, 0)
        game.undo(skip_players={PLAYER_1, PLAYER_2})
        assert not game.can_undo()

    def test_undo_clears_outcome(self, game):
        play(game, (0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0), (0, 2, 0), (1, 2, 0), (0, 3, 0))
        assert game.is_game_over()
        game.undo()
        assert not game.is_game_over()
        assert game.current_player == PLAYER_1
        assert Placement(0, 3, 0) in game.legal_placements()


class TestCloneAndPrint:
    def test_deepcopy_is_independent(self, game):
        game.place(0, 0, 0)
        clone = copy.deepcopy(game)
        clone.place(1, 0, 0)
        assert len(game.history) == 1
        assert game.get_board_snapshot()[1, 0, 0] == EMPTY

    def test_print_state(self, game):
        game.place(0, 0, 0)
        lines = []
        game.print_state(lines.append)
        text = "\n".join(lines)
        assert "X" in text
        assert "gravity: (0, -1, 0)" in text
        assert "Player 2: 3 shift(s) left, cooldown 0" in text

    def test_take_action_dispatches(self, game):
        game.take_action(Placement(0, 0, 0))
        game.take_action(get_rotation("flip"))
        assert game.get_gravity_vector() == (0, 1, 0)
        assert game.get_game_ended() is None
        with pytest.raises(TypeError):
            game.take_action((0, 0, 0))
