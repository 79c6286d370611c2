"""Finite orientation group of the cube.

The cube can only ever be turned by the five canonical rotations, so its
orientation is always one of the 24 proper rotations of a cube. Each
orientation is stored as a 3x3 signed permutation matrix (world-from-local)
and identified by a small integer index; identity is index 0.

Everything is precomputed at import time:

    ORIENTATION_COUNT            24
    rotate_orientation(i, name)  index after applying a catalog rotation
    local_gravity(i)             "down" in the cube's own frame, e.g. (0, -1, 0)

Applying rotation R to orientation M gives R @ M (the turn happens in world
space on top of the current orientation). Local gravity is M.T @ WORLD_DOWN.
All arithmetic is on integers, so transitions are exact.
"""

from __future__ import annotations

from collections import deque

import numpy as np

from game.actions import ROTATIONS
from game.constants import WORLD_DOWN

# (cos, sin) for the quarter-turn angles used by the catalog
_TRIG = {0: (1, 0), 90: (0, 1), -90: (0, -1), 180: (-1, 0), -180: (-1, 0), 270: (0, -1)}

IDENTITY = 0


def rotation_matrix(axis: str, angle: int) -> np.ndarray:
    """Integer rotation matrix for a multiple-of-90 degree turn about a world axis."""
    if angle not in _TRIG:
        raise ValueError(f"Rotation angle must be a multiple of 90 degrees, got {angle}")
    c, s = _TRIG[angle]
    if axis == "x":
        rows = ((1, 0, 0), (0, c, -s), (0, s, c))
    elif axis == "y":
        rows = ((c, 0, s), (0, 1, 0), (-s, 0, c))
    elif axis == "z":
        rows = ((c, -s, 0), (s, c, 0), (0, 0, 1))
    else:
        raise ValueError(f"Unknown rotation axis: {axis!r}")
    return np.array(rows, dtype=np.int8)


def _matrix_key(matrix: np.ndarray) -> tuple:
    return tuple(int(v) for v in matrix.flatten())


def _build_group():
    """Close the identity under the catalog rotations (breadth first)."""
    generators = {rotation.name: rotation_matrix(rotation.axis, rotation.angle) for rotation in ROTATIONS}

    identity = np.eye(3, dtype=np.int8)
    matrices = [identity]
    index_of = {_matrix_key(identity): 0}
    transitions: dict[tuple[int, str], int] = {}

    queue = deque([0])
    while queue:
        current = queue.popleft()
        for name, generator in generators.items():
            rotated = (generator @ matrices[current]).astype(np.int8)
            key = _matrix_key(rotated)
            if key not in index_of:
                index_of[key] = len(matrices)
                matrices.append(rotated)
                queue.append(index_of[key])
            transitions[(current, name)] = index_of[key]

    down = np.array(WORLD_DOWN, dtype=np.int8)
    gravities = tuple(
        tuple(int(v) for v in matrix.T @ down) for matrix in matrices
    )
    for matrix in matrices:
        matrix.flags.writeable = False
    return tuple(matrices), transitions, gravities


_MATRICES, _TRANSITIONS, _LOCAL_GRAVITY = _build_group()
ORIENTATION_COUNT = len(_MATRICES)


def orientation_matrix(index: int) -> np.ndarray:
    """Return a copy of the world-from-local matrix for an orientation."""
    return np.array(_MATRICES[index], copy=True)


def rotate_orientation(index: int, rotation_name: str) -> int:
    """Orientation index reached by applying a catalog rotation."""
    try:
        return _TRANSITIONS[(index, rotation_name)]
    except KeyError:
        raise ValueError(
            f"No transition for orientation {index} and rotation {rotation_name!r}"
        ) from None


def local_gravity(index: int) -> tuple[int, int, int]:
    """Gravity direction in the cube's local frame for an orientation."""
    return _LOCAL_GRAVITY[index]
