"""
SimulationClock: rate-limits simulator ticks against wall-clock time.

The host calls poll() once per frame. At most one tick runs per poll, and
only when more than `interval` seconds have passed since the last tick. If
several intervals have elapsed, the clock still runs a single tick: under load
ticks slow down instead of bursting.
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from hypewave.core.simulator import FieldSimulator


@dataclass
class SimulationClock:
    """Poll-driven tick gate for a FieldSimulator."""

    simulator: "FieldSimulator"
    interval: float | None = None     # Defaults to simulator.config.tick_interval
    start_time: float | None = None   # Defaults to time_source() at construction
    time_source: Callable[[], float] = time.monotonic

    last_tick_time: float = field(default=0.0, init=False)
    ticks: int = field(default=0, init=False)
    polls: int = field(default=0, init=False)

    def __post_init__(self):
        if self.interval is None:
            self.interval = self.simulator.config.tick_interval
        if self.interval < 0:
            raise ValueError(f"interval must be non-negative, got {self.interval!r}")
        if self.start_time is None:
            self.start_time = self.time_source()
        self.last_tick_time = self.start_time
        # Pits started before the first poll are timed from the clock's epoch
        self.simulator.advance_time(self.start_time)

    def poll(self, now: float | None = None) -> bool:
        """
        Check the time and tick if the interval has elapsed.

        Pits are expired on every poll, so a pit disappears at the first poll
        with now >= its expiry even when no tick is due.

        Args:
            now: Current time in seconds (defaults to time_source())

        Returns:
            True if a tick ran
        """
        if now is None:
            now = self.time_source()
        self.polls += 1

        self.simulator.advance_time(now)
        if now - self.last_tick_time <= self.interval:
            return False

        self.last_tick_time = now
        self.simulator.tick(now)
        self.ticks += 1
        return True

    def get_tick_rate(self) -> float:
        """Fraction of polls that ran a tick."""
        if self.polls == 0:
            return 0.0
        return self.ticks / self.polls
