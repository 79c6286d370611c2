"""Stateless game logic for Gravity Cube.

All functions are pure: same inputs -> same outputs.
No side effects, no mutations, no hidden state.

This lets the AI simulate moves on its own copies while the live game keeps
using the exact same transition rules.

Architecture:
    GameConfig: Immutable rules (grid size, win length, shift budget)
    BoardState: Immutable snapshot (board, orientation, player, shift states)
    Pure functions: Take (state, config) -> return actions or a new state

Usage:
    config = GameConfig.classic()
    state = initial_state(config)
    placements = legal_placements(state.board, *state.gravity_axis())
    state = apply_action(state, Placement(0, 0, 0), state.current_player, config)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple

import numpy as np

from game.actions import ROTATIONS, Action, Placement, Rotation
from game.constants import EMPTY, PLAYER_1, other_player
from game.errors import (
    CellOccupiedError,
    NoShiftsRemainingError,
    OutOfBoundsError,
    ShiftOnCooldownError,
    UnsupportedCellError,
)
from game.game_config import GameConfig
from game.gravity import compact, resolve_axis
from game.orientation import IDENTITY, local_gravity, rotate_orientation


@dataclass(frozen=True)
class ShiftState:
    """Per-player gravity shift bookkeeping."""

    shifts_remaining: int
    cooldown_turns: int = 0

    def can_shift(self) -> bool:
        return self.shifts_remaining > 0 and self.cooldown_turns == 0


class BoardState(NamedTuple):
    """Immutable snapshot of everything the rules depend on.

    The board array is read-only; transitions copy it before writing.
    ``shifts`` is indexed by player - 1.
    """

    board: np.ndarray
    orientation: int
    current_player: int
    shifts: tuple[ShiftState, ShiftState]

    def gravity(self) -> tuple[int, int, int]:
        return local_gravity(self.orientation)

    def gravity_axis(self) -> tuple[int, int]:
        return resolve_axis(self.gravity())

    def shift_state(self, player: int) -> ShiftState:
        return self.shifts[player - 1]

    def piece_count(self) -> int:
        return int(np.count_nonzero(self.board))


def freeze(board: np.ndarray) -> np.ndarray:
    """Mark a board array read-only and return it."""
    board.flags.writeable = False
    return board


def empty_board(grid_size: int) -> np.ndarray:
    return np.zeros((grid_size, grid_size, grid_size), dtype=np.int8)


def initial_state(config: GameConfig) -> BoardState:
    shift = ShiftState(shifts_remaining=config.initial_shifts, cooldown_turns=0)
    return BoardState(
        board=freeze(empty_board(config.grid_size)),
        orientation=IDENTITY,
        current_player=PLAYER_1,
        shifts=(shift, shift),
    )


# ==================================================================================
# MOVE GENERATION
# ==================================================================================


def landing_cell(board: np.ndarray, axis: int, sign: int, u: int, v: int):
    """First empty cell of column (u, v), scanning from the gravity face inward.

    (u, v) are the two non-gravity coordinates in axis order. Returns None for
    a full column.
    """
    n = board.shape[axis]
    scan = range(n) if sign < 0 else range(n - 1, -1, -1)
    for w in scan:
        cell = [u, v]
        cell.insert(axis, w)
        cell = tuple(cell)
        if board[cell] == EMPTY:
            return cell
    return None


def legal_placements(board: np.ndarray, axis: int, sign: int) -> list[Placement]:
    """One placement per non-full column transverse to the gravity axis."""
    n = board.shape[0]
    placements = []
    for u in range(n):
        for v in range(n):
            cell = landing_cell(board, axis, sign, u, v)
            if cell is not None:
                placements.append(Placement(*cell))
    return placements


def legal_rotations(shift_state: ShiftState, config: GameConfig) -> list[Rotation]:
    """The rotation catalog when the player may shift, otherwise nothing."""
    if not config.shifting_enabled or not shift_state.can_shift():
        return []
    return list(ROTATIONS)


def legal_actions(state: BoardState, player: int, config: GameConfig) -> list[Action]:
    """Placements first, then rotations."""
    actions: list[Action] = list(legal_placements(state.board, *state.gravity_axis()))
    actions.extend(legal_rotations(state.shift_state(player), config))
    return actions


# ==================================================================================
# VALIDATION
# ==================================================================================


def validate_placement(state: BoardState, x: int, y: int, z: int) -> None:
    """Raise the matching InvalidMoveError if (x, y, z) cannot be played."""
    board = state.board
    n = board.shape[0]
    if not (0 <= x < n and 0 <= y < n and 0 <= z < n):
        raise OutOfBoundsError(x, y, z, n)
    if board[x, y, z] != EMPTY:
        raise CellOccupiedError(x, y, z)

    axis, sign = state.gravity_axis()
    column = [x, y, z]
    del column[axis]
    landing = landing_cell(board, axis, sign, *column)
    if landing != (x, y, z):
        raise UnsupportedCellError(x, y, z, landing)


def validate_rotation(state: BoardState, player: int, config: GameConfig) -> None:
    shift_state = state.shift_state(player)
    if not config.shifting_enabled or shift_state.shifts_remaining <= 0:
        raise NoShiftsRemainingError(player)
    if shift_state.cooldown_turns > 0:
        raise ShiftOnCooldownError(player, shift_state.cooldown_turns)


# ==================================================================================
# TRANSITIONS
# ==================================================================================


def switch_player(state: BoardState) -> BoardState:
    """Hand the turn over, ticking down the new player's cooldown."""
    next_player = other_player(state.current_player)
    shifts = list(state.shifts)
    shift = shifts[next_player - 1]
    if shift.cooldown_turns > 0:
        shifts[next_player - 1] = replace(shift, cooldown_turns=shift.cooldown_turns - 1)
    return state._replace(current_player=next_player, shifts=tuple(shifts))


def place_piece(board: np.ndarray, x: int, y: int, z: int, player: int) -> np.ndarray:
    new_board = np.copy(board)
    new_board[x, y, z] = player
    return freeze(new_board)


def rotate_board(state: BoardState, rotation: Rotation) -> tuple[np.ndarray, int]:
    """Turn the cube and let the pieces settle under the new local gravity."""
    orientation = rotate_orientation(state.orientation, rotation.name)
    axis, sign = resolve_axis(local_gravity(orientation))
    return freeze(compact(state.board, axis, sign)), orientation


def apply_placement(state: BoardState, placement: Placement, player: int) -> BoardState:
    """Write the piece and pass the turn. Does not validate or check wins."""
    board = place_piece(state.board, placement.x, placement.y, placement.z, player)
    return switch_player(state._replace(board=board, current_player=player))


def rotated_state(state: BoardState, rotation: Rotation, player: int, config: GameConfig) -> BoardState:
    """Spend one of ``player``'s shifts and rotate; the turn does not change."""
    board, orientation = rotate_board(state, rotation)
    shifts = list(state.shifts)
    shift = shifts[player - 1]
    shifts[player - 1] = ShiftState(
        shifts_remaining=shift.shifts_remaining - 1,
        cooldown_turns=config.shift_cooldown,
    )
    return BoardState(
        board=board,
        orientation=orientation,
        current_player=player,
        shifts=tuple(shifts),
    )


def apply_rotation(state: BoardState, rotation: Rotation, player: int, config: GameConfig) -> BoardState:
    """Spend a shift, rotate, compact, and pass the turn if the mode says so."""
    new_state = rotated_state(state, rotation, player, config)
    if config.shift_ends_turn:
        new_state = switch_player(new_state)
    return new_state


def apply_action(state: BoardState, action: Action, player: int, config: GameConfig) -> BoardState:
    """Apply any action for ``player`` (no validation)."""
    if isinstance(action, Placement):
        return apply_placement(state, action, player)
    if isinstance(action, Rotation):
        return apply_rotation(state, action, player, config)
    raise TypeError(f"Not an action: {action!r}")
