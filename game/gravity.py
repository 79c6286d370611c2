"""Gravity resolution and board compaction.

All functions are pure: they never modify their inputs.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from game.constants import EMPTY


def resolve_axis(vector: Sequence[float]) -> tuple[int, int]:
    """Resolve a gravity vector to its dominant (axis, sign).

    The axis with the largest absolute component wins; ties go to x, then y,
    then z.

    Args:
        vector: 3-component gravity vector (local frame)

    Returns:
        (axis, sign) with axis in {0, 1, 2} and sign in {-1, 1}

    Raises:
        ValueError: If the vector is zero or not 3-dimensional
    """
    if len(vector) != 3:
        raise ValueError(f"Gravity vector must have 3 components, got {len(vector)}")
    magnitudes = [abs(component) for component in vector]
    largest = max(magnitudes)
    if largest == 0:
        raise ValueError("Gravity vector must be non-zero")
    # list.index returns the first maximum, which gives the x > y > z tie-break
    axis = magnitudes.index(largest)
    sign = 1 if vector[axis] > 0 else -1
    return axis, sign


def axis_vector(axis: int, sign: int) -> tuple[int, int, int]:
    """Inverse of resolve_axis for axis-aligned vectors."""
    vector = [0, 0, 0]
    vector[axis] = sign
    return tuple(vector)


def compact(board: np.ndarray, axis: int, sign: int) -> np.ndarray:
    """Slide every piece along ``axis`` until it rests against the gravity face.

    With sign -1 pieces pack against index 0 of the axis, with sign +1 against
    index N-1. Order of pieces along each line is preserved, so the operation
    is stable and idempotent.

    Args:
        board: (N, N, N) cell array indexed [x, y, z]
        axis: Gravity axis (0, 1 or 2)
        sign: Gravity sign along the axis (-1 or 1)

    Returns:
        New (N, N, N) array; the input is left untouched
    """
    n = board.shape[axis]
    # View with the gravity axis last so each line is lines[u, v, :]
    lines = np.moveaxis(board, axis, -1)
    packed = np.full_like(lines, EMPTY)

    for u in range(lines.shape[0]):
        for v in range(lines.shape[1]):
            line = lines[u, v]
            pieces = line[line != EMPTY]
            if pieces.size == 0:
                continue
            if sign < 0:
                packed[u, v, : pieces.size] = pieces
            else:
                packed[u, v, n - pieces.size:] = pieces

    return np.ascontiguousarray(np.moveaxis(packed, -1, axis))
