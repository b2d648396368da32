"""
FieldProbe: records hype and movement at a fixed spot after every tick.

A probe is the simplest crowd member: it never moves and never writes. It
resamples both fields whenever the simulator reports a tick, and counts the
pits that started over its position.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from hypewave.core.simulator import FieldSimulator

from hypewave.patterns.base import Pattern, PatternConfig


@dataclass
class ProbeConfig(PatternConfig):
    """Configuration for a field probe."""

    pass  # Inherits pattern_id, x, y


class FieldProbe(Pattern):
    """
    A stationary sampler of the hype and movement fields.

    Readings are (tick, hype, move) with hype and move as (2,) arrays.
    """

    def __init__(self, config: ProbeConfig, simulator: "FieldSimulator"):
        super().__init__(config, simulator)
        self.readings: list[tuple[int, np.ndarray, np.ndarray]] = []
        self.pits_seen: int = 0

    def attach(self) -> None:
        if not self._attached:
            self.simulator.pit_started.subscribe(self._on_pit_start)
        super().attach()

    def detach(self) -> None:
        if self._attached:
            self.simulator.pit_started.unsubscribe(self._on_pit_start)
        super().detach()

    def _on_pit_start(self, x: float, y: float, radius: float, duration: float) -> None:
        if math.hypot(self.x - x, self.y - y) < radius:
            self.pits_seen += 1

    def update(self, tick: int) -> None:
        pos = self.position
        self.readings.append(
            (tick, self.simulator.get_hype(pos), self.simulator.get_move(pos))
        )

    def hype_magnitudes(self) -> np.ndarray:
        return np.array([np.linalg.norm(h) for _, h, _ in self.readings])

    def move_magnitudes(self) -> np.ndarray:
        return np.array([np.linalg.norm(m) for _, _, m in self.readings])

    def get_measurements(self) -> dict:
        """Return probe measurements."""
        return {
            "pattern_id": self.config.pattern_id,
            "position": self.position,
            "n_readings": len(self.readings),
            "pits_seen": self.pits_seen,
            "peak_hype": float(self.hype_magnitudes().max(initial=0.0)),
            "peak_move": float(self.move_magnitudes().max(initial=0.0)),
            "readings": self.readings.copy(),
        }


def create_probe(
    pattern_id: str,
    x: float,
    y: float,
    simulator: "FieldSimulator",
    attach: bool = True,
) -> FieldProbe:
    """
    Convenience factory for creating a probe.

    Args:
        pattern_id: Unique identifier for this probe
        x, y: Position in field space
        simulator: The simulator to observe
        attach: Subscribe to simulator signals immediately

    Returns:
        Configured FieldProbe
    """
    probe = FieldProbe(ProbeConfig(pattern_id=pattern_id, x=x, y=y), simulator)
    if attach:
        probe.attach()
    return probe
