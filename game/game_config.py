"""Game mode configuration for Gravity Cube."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Immutable rules for one game session.

    Attributes:
        name: Display name of the mode
        grid_size: Edge length of the cube (cells per axis)
        win_length: Number of aligned pieces needed to win
        initial_shifts: Gravity shifts each player starts with (0 disables shifting)
        shift_cooldown: Turns a player must wait after shifting before shifting again
        shift_ends_turn: Whether a shift passes the turn to the opponent
    """

    name: str = "Classic (4x4, 4-to-win)"
    grid_size: int = 4
    win_length: int = 4
    initial_shifts: int = 3
    shift_cooldown: int = 2
    shift_ends_turn: bool = True

    def __post_init__(self) -> None:
        if self.grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {self.grid_size}")
        if not 2 <= self.win_length <= self.grid_size:
            raise ValueError(
                f"win_length must be between 2 and grid_size ({self.grid_size}), got {self.win_length}"
            )
        if self.initial_shifts < 0:
            raise ValueError(f"initial_shifts must be non-negative, got {self.initial_shifts}")
        if self.shift_cooldown < 0:
            raise ValueError(f"shift_cooldown must be non-negative, got {self.shift_cooldown}")

    @property
    def shifting_enabled(self) -> bool:
        return self.initial_shifts > 0

    @classmethod
    def classic(cls) -> GameConfig:
        return cls()

    @classmethod
    def tiny_cube(cls) -> GameConfig:
        return cls(
            name="Tiny Cube (3x3, 3-to-win)",
            grid_size=3,
            win_length=3,
            initial_shifts=2,
            shift_cooldown=1,
        )

    @classmethod
    def shift_mania(cls) -> GameConfig:
        return cls(name="Shift Mania", initial_shifts=10, shift_cooldown=0)

    @classmethod
    def no_shift(cls) -> GameConfig:
        return cls(name="No-Shift", initial_shifts=0, shift_cooldown=0)

    @classmethod
    def expert(cls) -> GameConfig:
        """Shift and place in the same turn."""
        return cls(
            name="Expert (Shift & Place)",
            initial_shifts=1,
            shift_cooldown=0,
            shift_ends_turn=False,
        )

    @classmethod
    def from_mode(cls, mode: str) -> GameConfig:
        """Look up a preset by its mode key (see GAME_MODES)."""
        key = mode.lower().replace("-", "_")
        if key not in GAME_MODES:
            raise ValueError(
                f"Unknown game mode: {mode}. Must be one of: {', '.join(GAME_MODES)}"
            )
        return GAME_MODES[key]()


GAME_MODES = {
    "classic": GameConfig.classic,
    "tiny_cube": GameConfig.tiny_cube,
    "shift_mania": GameConfig.shift_mania,
    "no_shift": GameConfig.no_shift,
    "expert": GameConfig.expert,
}
