"""
GridField: a square grid of 2D vectors with continuous-position access.

Storage is [size, size, 2] indexed [y, x]. Callers work in field space
(floating point x, y); sample() and splat() translate between continuous
positions and the four surrounding integer cells.

Boundary policy is "clamp to empty": a position outside the valid range
reads as the zero vector and writes nothing. There is no wraparound and no
extrapolation.
"""

from __future__ import annotations
import math
from typing import Iterator, Sequence

import numpy as np
from scipy.ndimage import map_coordinates


# Direction vectors for the 8-neighbourhood, (dx, dy)
DIRECTIONS_VON_NEUMANN = {
    "N": (0, -1),   # North: y decreases
    "S": (0, 1),    # South: y increases
    "E": (1, 0),    # East: x increases
    "W": (-1, 0),   # West: x decreases
}

DIRECTIONS_MOORE = {
    **DIRECTIONS_VON_NEUMANN,
    "NE": (1, -1),
    "NW": (-1, -1),
    "SE": (1, 1),
    "SW": (-1, 1),
}

# Unit vectors toward each Moore neighbour (diagonals normalized)
UNIT_DIRECTIONS = {
    name: np.array([dx, dy], dtype=np.float64) / math.hypot(dx, dy)
    for name, (dx, dy) in DIRECTIONS_MOORE.items()
}


def zero_vector() -> np.ndarray:
    return np.zeros(2, dtype=np.float64)


def clamp_magnitude(values: np.ndarray, limit: float) -> np.ndarray:
    """
    Scale vectors down so no magnitude exceeds limit.

    Works on a single (2,) vector or any [..., 2] array. Returns a new array.
    """
    mag = np.linalg.norm(values, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.where(mag > limit, limit / mag, 1.0)
    return values * scale


class GridField:
    """A dense size x size field of 2D vectors."""

    def __init__(self, size: int, values: np.ndarray | None = None):
        self.size = int(size)
        if values is None:
            self.values = np.zeros((self.size, self.size, 2), dtype=np.float64)
        else:
            values = np.asarray(values, dtype=np.float64)
            if values.shape != (self.size, self.size, 2):
                raise ValueError(
                    f"values must have shape {(self.size, self.size, 2)}, got {values.shape}"
                )
            self.values = values

    @property
    def shape(self) -> tuple[int, int]:
        """Return (size, size) grid dimensions."""
        return self.size, self.size

    def in_bounds(self, pos: Sequence[float], margin: int = 0) -> bool:
        """True if both coordinates lie in [margin, size - 1 - margin]."""
        x, y = pos
        lo, hi = margin, self.size - 1 - margin
        return lo <= x <= hi and lo <= y <= hi

    # ─── integer access ───────────────────────────────────────────────

    def get(self, x: int, y: int) -> np.ndarray:
        return self.values[y, x].copy()

    def set(self, x: int, y: int, value: Sequence[float]) -> None:
        self.values[y, x] = value

    def add(self, x: int, y: int, value: Sequence[float]) -> None:
        self.values[y, x] += value

    def iter_cells(self, margin: int = 0) -> Iterator[tuple[int, int]]:
        """Iterate over (x, y) cell coordinates, skipping a border of width margin."""
        for y in range(margin, self.size - margin):
            for x in range(margin, self.size - margin):
                yield x, y

    # ─── continuous access ────────────────────────────────────────────

    def sample(self, pos: Sequence[float], margin: int = 0) -> np.ndarray:
        """
        Bilinear interpolation among the four cells around pos.

        Args:
            pos: (x, y) in field space
            margin: Width of the border treated as out of range

        Returns:
            Interpolated (2,) vector, zero if pos is out of range
        """
        if not self.in_bounds(pos, margin):
            return zero_vector()

        x, y = float(pos[0]), float(pos[1])
        x1, y1 = math.floor(x), math.floor(y)
        x2, y2 = math.ceil(x), math.ceil(y)
        tx, ty = x - x1, y - y1

        v = self.values
        row1 = v[y1, x1] + (v[y1, x2] - v[y1, x1]) * tx
        row2 = v[y2, x1] + (v[y2, x2] - v[y2, x1]) * tx
        return row1 + (row2 - row1) * ty

    def sample_many(self, positions: np.ndarray, margin: int = 0) -> np.ndarray:
        """
        Bilinear sampling at many positions at once.

        Args:
            positions: [N, 2] array of (x, y) field-space positions
            margin: Width of the border treated as out of range

        Returns:
            [N, 2] array of vectors; rows for out-of-range positions are zero
        """
        positions = np.atleast_2d(np.asarray(positions, dtype=np.float64))
        xs, ys = positions[:, 0], positions[:, 1]
        lo, hi = margin, self.size - 1 - margin
        valid = (xs >= lo) & (xs <= hi) & (ys >= lo) & (ys <= hi)

        out = np.zeros((len(positions), 2), dtype=np.float64)
        if not np.any(valid):
            return out

        coords = np.vstack([ys[valid], xs[valid]])  # map_coordinates wants (row, col)
        for c in range(2):
            out[valid, c] = map_coordinates(
                self.values[:, :, c], coords, order=1, mode="nearest"
            )
        return out

    def splat(self, pos: Sequence[float], value: Sequence[float]) -> None:
        """
        Distribute value into the four cells around pos (adjoint of sample).

        Each corner receives value scaled by the product of its per-axis
        linear weights. Corners with zero weight are not written, so a splat
        at an integer position adds the full value to exactly one cell.
        Out-of-range positions are ignored.
        """
        if not self.in_bounds(pos):
            return

        x, y = float(pos[0]), float(pos[1])
        value = np.asarray(value, dtype=np.float64)
        xf, yf = math.floor(x), math.floor(y)
        fx, fy = x - xf, y - yf

        for cx, wx in ((xf, 1.0 - fx), (xf + 1, fx)):
            for cy, wy in ((yf, 1.0 - fy), (yf + 1, fy)):
                weight = wx * wy
                if weight > 0.0:
                    self.values[cy, cx] += value * weight

    # ─── whole-field operations ───────────────────────────────────────

    def magnitude(self) -> np.ndarray:
        """Per-cell vector magnitude, [size, size]."""
        return np.linalg.norm(self.values, axis=-1)

    def clamp_magnitude(self, limit: float) -> None:
        """Clamp every cell's magnitude to limit in place."""
        self.values = clamp_magnitude(self.values, limit)

    def clear(self) -> None:
        self.values.fill(0.0)

    def copy(self) -> GridField:
        return GridField(self.size, self.values.copy())
