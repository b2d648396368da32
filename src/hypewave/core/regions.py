"""
RegionRegistry: mosh pits and stages.

Pits are timed circles created while the simulation runs. Stages are fixed
rectangles loaded once. Both act as anchors: the simulator zeroes movement
in every cell that lies inside one.

Membership is strict everywhere. A point exactly on a pit's circle or on a
stage edge is outside.
"""

from __future__ import annotations
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np

from hypewave.core.config import StageRect
from hypewave.core.signals import Signal

logger = logging.getLogger(__name__)


@dataclass
class Pit:
    """A mosh pit: circle in field space that lives until expires_at."""

    pit_id: int
    x: float
    y: float
    radius: float
    expires_at: float
    visual: Any = None  # Opaque handle owned by the caller

    @property
    def center(self) -> tuple[float, float]:
        return self.x, self.y

    def contains(self, x: float, y: float) -> bool:
        return math.hypot(x - self.x, y - self.y) < self.radius


class RegionRegistry:
    """
    Owns the active pit list and the fixed stage list.

    Pits are not spatially indexed. Pit counts are in the single digits, so a
    list scan is fine.

    Signals:
        pit_started(x, y, radius, duration): after a pit is added
        pit_expired(pit): after a pit is removed, so its visual can be released
    """

    def __init__(self, stages: Iterable[StageRect] = (), start_time: float = 0.0):
        self._stages: tuple[StageRect, ...] = tuple(stages)
        self._pits: list[Pit] = []
        self._ids = itertools.count(1)
        self.now = float(start_time)

        self.pit_started = Signal("pit_started")
        self.pit_expired = Signal("pit_expired")

    @property
    def pits(self) -> tuple[Pit, ...]:
        """Snapshot of active pits."""
        return tuple(self._pits)

    @property
    def stages(self) -> tuple[StageRect, ...]:
        return self._stages

    def start_pit(
        self,
        center: Sequence[float],
        radius: float,
        duration: float,
        visual: Any = None,
        now: float | None = None,
    ) -> int:
        """
        Start a mosh pit.

        Args:
            center: (x, y) in field space
            radius: Pit radius in field-space units (must be positive)
            duration: Lifetime in seconds (must be non-negative)
            visual: Caller-owned handle, handed back through pit_expired
            now: Creation time (defaults to the latest observed time)

        Returns:
            Pit id
        """
        if radius <= 0:
            raise ValueError(f"Pit radius must be positive, got {radius!r}")
        if duration < 0:
            raise ValueError(f"Pit duration must be non-negative, got {duration!r}")

        if now is None:
            now = self.now
        x, y = float(center[0]), float(center[1])
        pit = Pit(
            pit_id=next(self._ids),
            x=x,
            y=y,
            radius=float(radius),
            expires_at=now + duration,
            visual=visual,
        )
        self._pits.append(pit)
        logger.debug(
            "Pit %d started at (%.2f, %.2f) r=%.2f until t=%.3f",
            pit.pit_id, x, y, pit.radius, pit.expires_at,
        )
        self.pit_started.emit(x, y, pit.radius, float(duration))
        return pit.pit_id

    def expire_pits(self, now: float) -> list[Pit]:
        """
        Remove every pit with expires_at <= now.

        Returns:
            The removed pits, in creation order
        """
        self.now = float(now)
        expired = [p for p in self._pits if p.expires_at <= now]
        if not expired:
            return expired

        self._pits = [p for p in self._pits if p.expires_at > now]
        for pit in expired:
            logger.debug("Pit %d expired at t=%.3f", pit.pit_id, now)
            self.pit_expired.emit(pit)
        return expired

    def is_in_pit(self, pos: Sequence[float]) -> bool:
        x, y = pos
        return any(pit.contains(x, y) for pit in self._pits)

    def is_on_stage(self, pos: Sequence[float]) -> bool:
        x, y = pos
        return any(stage.contains(x, y) for stage in self._stages)

    def pit_mask(self, size: int) -> np.ndarray:
        """Boolean [size, size] mask ([y, x]) of integer cells inside any pit."""
        yy, xx = np.ogrid[:size, :size]
        mask = np.zeros((size, size), dtype=bool)
        for pit in self._pits:
            mask |= np.hypot(xx - pit.x, yy - pit.y) < pit.radius
        return mask

    def stage_mask(self, size: int) -> np.ndarray:
        """Boolean [size, size] mask ([y, x]) of integer cells on any stage."""
        yy, xx = np.ogrid[:size, :size]
        mask = np.zeros((size, size), dtype=bool)
        for s in self._stages:
            mask |= (xx > s.x1) & (xx < s.x2) & (yy > s.y1) & (yy < s.y2)
        return mask

    def anchor_mask(self, size: int) -> np.ndarray:
        """Cells where movement is absorbed: inside a pit or on a stage."""
        return self.pit_mask(size) | self.stage_mask(size)
