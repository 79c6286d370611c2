"""Tests for the pure move-generation and transition functions."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from game.actions import ROTATIONS, Placement, Rotation, get_rotation
from game.constants import EMPTY, PLAYER_1, PLAYER_2
from game.errors import (
    CellOccupiedError,
    NoShiftsRemainingError,
    OutOfBoundsError,
    ShiftOnCooldownError,
    UnsupportedCellError,
)
from game.game_config import GameConfig
from game.orientation import IDENTITY, rotate_orientation
from game.stateless_logic import (
    ShiftState,
    apply_action,
    apply_placement,
    apply_rotation,
    freeze,
    initial_state,
    landing_cell,
    legal_actions,
    legal_placements,
    legal_rotations,
    rotate_board,
    switch_player,
    validate_placement,
    validate_rotation,
)


@pytest.fixture
def config():
    return GameConfig.classic()


@pytest.fixture
def state(config):
    return initial_state(config)


def state_with_board(config, board, orientation=IDENTITY, player=PLAYER_1):
    return initial_state(config)._replace(board=freeze(board), orientation=orientation, current_player=player)


class TestInitialState:
    def test_initial_state(self, state, config):
        assert state.board.shape == (4, 4, 4)
        assert state.board.dtype == np.int8
        assert state.piece_count() == 0
        assert state.current_player == PLAYER_1
        assert state.orientation == IDENTITY
        assert state.gravity() == (0, -1, 0)
        assert state.shift_state(PLAYER_1) == ShiftState(config.initial_shifts, 0)
        assert state.shift_state(PLAYER_2) == ShiftState(config.initial_shifts, 0)

    def test_board_is_read_only(self, state):
        with pytest.raises(ValueError):
            state.board[0, 0, 0] = PLAYER_1


class TestLegalPlacements:
    def test_empty_board_lands_on_floor(self, state):
        placements = legal_placements(state.board, *state.gravity_axis())
        assert len(placements) == 16
        assert all(p.y == 0 for p in placements)
        assert placements[0] == Placement(0, 0, 0)
        assert placements[1] == Placement(0, 0, 1)

    def test_stacked_column_lands_on_top(self, config):
        board = np.zeros((4, 4, 4), dtype=np.int8)
        board[2, 0, 1] = PLAYER_1
        board[2, 1, 1] = PLAYER_2
        state = state_with_board(config, board)
        placements = legal_placements(state.board, *state.gravity_axis())
        assert Placement(2, 2, 1) in placements
        assert Placement(2, 0, 1) not in placements

    def test_full_column_yields_nothing(self, config):
        board = np.zeros((4, 4, 4), dtype=np.int8)
        board[0, :, 0] = PLAYER_1
        state = state_with_board(config, board)
        placements = legal_placements(state.board, *state.gravity_axis())
        assert len(placements) == 15
        assert all((p.x, p.z) != (0, 0) for p in placements)

    @pytest.mark.parametrize(
        "rotation,axis,face",
        [
            ("roll_left", 0, 0),
            ("roll_right", 0, 3),
            ("tilt_forward", 2, 0),
            ("tilt_back", 2, 3),
            ("flip", 1, 3),
        ],
    )
    def test_landing_face_follows_gravity(self, config, rotation, axis, face):
        orientation = rotate_orientation(IDENTITY, rotation)
        state = state_with_board(config, np.zeros((4, 4, 4), dtype=np.int8), orientation=orientation)
        placements = legal_placements(state.board, *state.gravity_axis())
        assert len(placements) == 16
        assert all(p.position[axis] == face for p in placements)

    @pytest.mark.parametrize("seed", range(6))
    def test_one_empty_candidate_per_column(self, config, seed):
        rng = np.random.default_rng(seed)
        board = rng.integers(0, 3, size=(4, 4, 4)).astype(np.int8)
        for orientation in range(0, 24, 5):
            state = state_with_board(config, board.copy(), orientation=orientation)
            axis, sign = state.gravity_axis()
            placements = legal_placements(state.board, axis, sign)
            columns = set()
            for p in placements:
                assert state.board[p.position] == EMPTY
                column = list(p.position)
                del column[axis]
                columns.add(tuple(column))
            assert len(columns) == len(placements) <= 16

    def test_landing_cell_direct(self):
        board = np.zeros((3, 3, 3), dtype=np.int8)
        board[2, 1, 1] = PLAYER_1
        assert landing_cell(board, 0, 1, 1, 1) == (1, 1, 1)
        assert landing_cell(board, 0, -1, 1, 1) == (0, 1, 1)


class TestLegalRotations:
    def test_available_with_budget(self, config):
        assert legal_rotations(ShiftState(3, 0), config) == list(ROTATIONS)

    def test_blocked_by_cooldown(self, config):
        assert legal_rotations(ShiftState(3, 1), config) == []

    def test_blocked_without_shifts(self, config):
        assert legal_rotations(ShiftState(0, 0), config) == []

    def test_no_shift_mode_never_rotates(self):
        assert legal_rotations(ShiftState(5, 0), GameConfig.no_shift()) == []

    def test_actions_list_placements_first(self, state, config):
        actions = legal_actions(state, PLAYER_1, config)
        assert len(actions) == 21
        assert all(isinstance(a, Placement) for a in actions[:16])
        assert actions[16:] == list(ROTATIONS)


class TestValidation:
    def test_out_of_bounds(self, state):
        with pytest.raises(OutOfBoundsError):
            validate_placement(state, 4, 0, 0)
        with pytest.raises(OutOfBoundsError):
            validate_placement(state, 0, -1, 0)

    def test_occupied(self, config):
        board = np.zeros((4, 4, 4), dtype=np.int8)
        board[1, 0, 1] = PLAYER_2
        with pytest.raises(CellOccupiedError):
            validate_placement(state_with_board(config, board), 1, 0, 1)

    def test_floating_cell(self, state):
        with pytest.raises(UnsupportedCellError) as excinfo:
            validate_placement(state, 1, 2, 1)
        assert excinfo.value.landing == (1, 0, 1)

    def test_landing_cell_accepted(self, state):
        validate_placement(state, 3, 0, 3)

    def test_rotation_without_shifts(self, config):
        state = initial_state(config)._replace(shifts=(ShiftState(0, 0), ShiftState(3, 0)))
        with pytest.raises(NoShiftsRemainingError):
            validate_rotation(state, PLAYER_1, config)

    def test_rotation_on_cooldown(self, config):
        state = initial_state(config)._replace(shifts=(ShiftState(2, 2), ShiftState(3, 0)))
        with pytest.raises(ShiftOnCooldownError) as excinfo:
            validate_rotation(state, PLAYER_1, config)
        assert excinfo.value.turns == 2

    def test_rotation_in_no_shift_mode(self):
        config = GameConfig.no_shift()
        with pytest.raises(NoShiftsRemainingError):
            validate_rotation(initial_state(config), PLAYER_1, config)


class TestTransitions:
    def test_placement_switches_player(self, state):
        new_state = apply_placement(state, Placement(0, 0, 0), PLAYER_1)
        assert new_state.board[0, 0, 0] == PLAYER_1
        assert new_state.current_player == PLAYER_2
        assert state.board[0, 0, 0] == EMPTY
        assert not new_state.board.flags.writeable

    def test_switch_ticks_down_cooldown(self, config):
        state = initial_state(config)._replace(shifts=(ShiftState(3, 0), ShiftState(2, 2)))
        new_state = switch_player(state)
        assert new_state.current_player == PLAYER_2
        assert new_state.shift_state(PLAYER_2).cooldown_turns == 1
        assert new_state.shift_state(PLAYER_1).cooldown_turns == 0

    def test_rotation_spends_shift(self, state, config):
        new_state = apply_rotation(state, get_rotation("flip"), PLAYER_1, config)
        assert new_state.shift_state(PLAYER_1) == ShiftState(2, config.shift_cooldown)
        assert new_state.gravity() == (0, 1, 0)
        assert new_state.current_player == PLAYER_2

    def test_rotation_keeps_turn_in_expert_mode(self):
        config = GameConfig.expert()
        new_state = apply_rotation(initial_state(config), get_rotation("roll_left"), PLAYER_1, config)
        assert new_state.current_player == PLAYER_1
        assert new_state.shift_state(PLAYER_1).shifts_remaining == 0

    def test_rotation_compacts_board(self, config):
        board = np.zeros((4, 4, 4), dtype=np.int8)
        board[3, 0, 2] = PLAYER_1
        state = state_with_board(config, board)
        new_board, orientation = rotate_board(state, get_rotation("roll_left"))
        assert new_board[0, 0, 2] == PLAYER_1
        assert new_board[3, 0, 2] == EMPTY

    @pytest.mark.parametrize("rotation", ROTATIONS, ids=lambda r: r.name)
    def test_rotation_conserves_pieces(self, config, rotation):
        board = np.random.default_rng(3).integers(0, 3, size=(4, 4, 4)).astype(np.int8)
        state = state_with_board(config, board)
        new_board, _ = rotate_board(state, rotation)
        assert np.count_nonzero(new_board == PLAYER_1) == np.count_nonzero(board == PLAYER_1)
        assert np.count_nonzero(new_board == PLAYER_2) == np.count_nonzero(board == PLAYER_2)

    def test_apply_action_dispatch(self, state, config):
        placed = apply_action(state, Placement(1, 0, 1), PLAYER_1, config)
        assert placed.board[1, 0, 1] == PLAYER_1
        rotated = apply_action(state, Rotation("flip", "x", 180), PLAYER_1, config)
        assert rotated.gravity() == (0, 1, 0)
        with pytest.raises(TypeError):
            apply_action(state, ("PUT", 1), PLAYER_1, config)
