"""
Base classes for patterns.

Patterns are observers placed in the crowd that:
- Resample the fields after every tick (crowd members, probes)
- React to new pits

IMPORTANT: Patterns only use the simulator's public API. They receive the
simulator at construction and never reach into its buffers.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hypewave.core.simulator import FieldSimulator


@dataclass
class PatternConfig:
    """Base configuration for patterns."""

    pattern_id: str  # Unique identifier
    x: float = 0.0   # Position in field space
    y: float = 0.0


class Pattern(ABC):
    """
    Base class for patterns that observe a FieldSimulator.

    Subscribes to tick_completed on attach() and calls update() on every tick.
    """

    def __init__(self, config: PatternConfig, simulator: "FieldSimulator"):
        self.config = config
        self.simulator = simulator
        self.x = config.x
        self.y = config.y
        self._attached = False

    @property
    def position(self) -> tuple[float, float]:
        """Current position (x, y) in field space."""
        return self.x, self.y

    def attach(self) -> None:
        """Start receiving tick notifications."""
        if not self._attached:
            self.simulator.tick_completed.subscribe(self._on_tick)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            self.simulator.tick_completed.unsubscribe(self._on_tick)
            self._attached = False

    def _on_tick(self) -> None:
        self.update(self.simulator.tick_count)

    @abstractmethod
    def update(self, tick: int) -> None:
        """
        Update the pattern after a tick.

        Args:
            tick: The simulator's tick count after the tick committed
        """
        ...

    @abstractmethod
    def get_measurements(self) -> dict:
        """Return recorded measurements from this pattern."""
        ...
