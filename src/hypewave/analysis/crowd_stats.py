"""
Crowd statistics derived from the simulator's fields.

IMPORTANT: Nothing here is seen by the update rule. One-way derivation only.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

import numpy as np
from scipy import ndimage

if TYPE_CHECKING:
    from hypewave.core.simulator import FieldSimulator


def neighborhood_hype(
    simulator: "FieldSimulator",
    pos: Sequence[float],
) -> tuple[float, np.ndarray]:
    """
    Average hype over the 3x3 block of offsets around pos.

    A crowd that is loud (high mean magnitude) but pulling in all directions
    (small mean vector) is the condition for a mosh pit to break out.

    Args:
        simulator: Simulator to sample
        pos: (x, y) in field space

    Returns:
        (mean magnitude, mean vector)
    """
    x, y = float(pos[0]), float(pos[1])
    offsets = np.array([(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)], dtype=np.float64)
    samples = simulator.hype.sample_many(offsets + (x, y))
    mean_mag = float(np.linalg.norm(samples, axis=-1).mean())
    return mean_mag, samples.mean(axis=0)


def field_energy(values: np.ndarray) -> float:
    """Sum of squared vector magnitudes over a [..., 2] field."""
    return float(np.sum(values ** 2))


def region_mask(simulator: "FieldSimulator") -> np.ndarray:
    """Boolean [size, size] mask of cells currently anchored by a pit or stage."""
    return simulator.regions.anchor_mask(simulator.config.field_size)


def hype_divergence(simulator: "FieldSimulator") -> np.ndarray:
    """
    Divergence of the hype field, [size, size].

    Positive where hype flows outward (a source), negative where it converges.
    Uses Sobel derivatives so the result is smooth on small grids.
    """
    h = simulator.hype.values
    dhx_dx = ndimage.sobel(h[:, :, 0], axis=1, mode="constant") / 8.0
    dhy_dy = ndimage.sobel(h[:, :, 1], axis=0, mode="constant") / 8.0
    return dhx_dx + dhy_dy


def summarize(simulator: "FieldSimulator") -> dict:
    """Summary statistics for the current state of a simulator."""
    hype = simulator.hype.values
    move = simulator.move.values
    anchored = region_mask(simulator)
    return {
        **simulator.stats(),
        "hype_energy": field_energy(hype),
        "move_energy": field_energy(move),
        "anchored_cells": int(anchored.sum()),
        "move_in_anchors": float(np.linalg.norm(move[anchored], axis=-1).sum()),
    }
