"""Action types and text notation for Gravity Cube.

An action is either a placement into the landing cell of a column or one of
the five canonical cube rotations:

    PLACE x y z       e.g. "PLACE 1 0 2"
    ROTATE name       e.g. "ROTATE roll_left"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Placement:
    x: int
    y: int
    z: int

    @property
    def position(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Rotation:
    """A quarter or half turn of the cube about a fixed world axis.

    Attributes:
        name: Catalog name (roll_left, roll_right, tilt_forward, tilt_back, flip)
        axis: World axis name, 'x' or 'z'
        angle: Signed angle in degrees (90, -90 or 180)
    """

    name: str
    axis: str
    angle: int


Action = Union[Placement, Rotation]

# The rotations offered to players, in enumeration order
ROTATIONS = (
    Rotation("roll_left", "z", 90),
    Rotation("roll_right", "z", -90),
    Rotation("tilt_forward", "x", -90),
    Rotation("tilt_back", "x", 90),
    Rotation("flip", "x", 180),
)
ROTATIONS_BY_NAME = {rotation.name: rotation for rotation in ROTATIONS}


def get_rotation(name: str | None = None, axis: str | None = None, angle: int | None = None) -> Rotation:
    """Find a catalog rotation by name, or by (axis, angle).

    Raises:
        ValueError: If no catalog rotation matches
    """
    if name is not None:
        try:
            return ROTATIONS_BY_NAME[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown rotation: {name}. Must be one of: {', '.join(ROTATIONS_BY_NAME)}"
            ) from None
    for rotation in ROTATIONS:
        if rotation.axis == axis and rotation.angle == angle:
            return rotation
    raise ValueError(f"No canonical rotation about axis {axis!r} by {angle} degrees")


def str_to_action(action_str: str) -> Action:
    """Translate an action string ('PLACE 1 0 2' or 'ROTATE flip') to an action."""
    args = action_str.split()
    if not args:
        raise ValueError("Empty action string")
    verb = args[0].upper()
    if verb == "PLACE":
        if len(args) != 4:
            raise ValueError(f"PLACE expects three coordinates: {action_str!r}")
        try:
            x, y, z = (int(value) for value in args[1:])
        except ValueError:
            raise ValueError(f"Coordinates must be integers: {action_str!r}") from None
        return Placement(x, y, z)
    if verb == "ROTATE":
        if len(args) != 2:
            raise ValueError(f"ROTATE expects a rotation name: {action_str!r}")
        return get_rotation(args[1])
    raise ValueError(f"Unknown action verb: {args[0]!r}")


def action_to_str(action: Action) -> str:
    # Translate an action back to its notation string
    if isinstance(action, Placement):
        return f"PLACE {action.x} {action.y} {action.z}"
    if isinstance(action, Rotation):
        return f"ROTATE {action.name}"
    raise TypeError(f"Not an action: {action!r}")
