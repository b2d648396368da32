"""
FieldSimulator: the crowd's hype and movement fields and their update rule.

Each tick:
1. Expire pits whose time is up
2. Seed fresh buffers from the pre-tick fields, decayed per cell
3. Every interior cell transmits to its 8 neighbours along its own direction:
   - movement with squared alignment falloff, partly deflected by the
     destination's hype
   - hype with linear alignment falloff, undeflected
4. Zero movement inside pits and on stages (anchors)
5. Clamp hype to max_hype
6. Swap the new buffers in
7. Emit tick_completed

All neighbour contributions are read from the pre-tick snapshot, so the
result does not depend on iteration order.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from hypewave.core.config import SimulationConfig, ConfigError
from hypewave.core.grid_field import (
    DIRECTIONS_MOORE,
    UNIT_DIRECTIONS,
    GridField,
    clamp_magnitude,
)
from hypewave.core.regions import RegionRegistry
from hypewave.core.signals import Signal

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class FieldSimulator:
    """
    Owns the hype and movement fields and the region registry.

    This is the single entry point collaborators use. Pass it to them at
    construction; there is no global instance.

    An injected `regions` registry supplies the stages. If `config.stages`
    is also non-empty it must match the registry's stages.

    Signals:
        tick_completed(): after every committed tick
        pit_started(x, y, radius, duration): forwarded from the registry
        pit_expired(pit): forwarded from the registry
    """

    config: SimulationConfig = field(default_factory=SimulationConfig)
    regions: RegionRegistry | None = None

    tick_count: int = field(default=0, init=False)
    hype: GridField = field(default=None, init=False)
    move: GridField = field(default=None, init=False)
    tick_completed: Signal = field(default=None, init=False)

    def __post_init__(self):
        if isinstance(self.config, Mapping):
            self.config = SimulationConfig.from_dict(self.config)
        elif not isinstance(self.config, SimulationConfig):
            raise ConfigError(
                f"config must be a SimulationConfig, got {type(self.config).__name__}"
            )

        n = self.config.field_size
        self.hype = GridField(n)
        self.move = GridField(n)
        if self.regions is None:
            self.regions = RegionRegistry(self.config.stages)
        elif self.config.stages and tuple(self.regions.stages) != self.config.stages:
            raise ConfigError(
                "Injected region registry stages do not match config.stages"
            )
        self.tick_completed = Signal("tick_completed")

    # ═══════════════════════════════════════════════════════════════
    # PUBLIC QUERY / MUTATE API (callable at any time)
    # ═══════════════════════════════════════════════════════════════

    @property
    def now(self) -> float:
        """Latest time observed by the simulator."""
        return self.regions.now

    @property
    def pit_started(self) -> Signal:
        return self.regions.pit_started

    @property
    def pit_expired(self) -> Signal:
        return self.regions.pit_expired

    @property
    def hype_field(self) -> np.ndarray:
        """Copy of the hype field, [size, size, 2] indexed [y, x]."""
        return self.hype.values.copy()

    @property
    def move_field(self) -> np.ndarray:
        """Copy of the movement field, [size, size, 2] indexed [y, x]."""
        return self.move.values.copy()

    def to_field_space(self, world_x: float, world_z: float) -> tuple[float, float]:
        """Convert a world-space ground position (x, z) to field space."""
        scale = self.config.world_scale
        return world_x / scale, world_z / scale

    def add_hype(self, pos: Sequence[float], hype: Sequence[float]) -> None:
        """Splat a hype vector into the field at pos (no-op out of range)."""
        self.hype.splat(pos, hype)

    def get_hype(self, pos: Sequence[float]) -> np.ndarray:
        """Bilinear sample of the hype field (zero out of range)."""
        return self.hype.sample(pos)

    def add_move(
        self,
        pos: Sequence[float],
        amount: float,
        bias: Sequence[float] | None = None,
    ) -> None:
        """
        Start a movement wave: push outward into the 8 cells around pos.

        pos is rounded to the nearest cell. Each neighbour gets amount times
        the unit vector pointing at it, added to its current value. Nothing
        happens unless the rounded cell and all 8 neighbours are within
        [1, field_size - 2].

        Args:
            pos: (x, y) in field space
            amount: Pulse strength
            bias: Optional vector; each direction d is scaled by
                  max(0, 1 + d·bias), so the wave leans toward bias
        """
        if not self.move.in_bounds(pos, margin=1):
            return

        n = self.config.field_size
        xi, yi = round(float(pos[0])), round(float(pos[1]))
        if not (2 <= xi <= n - 3 and 2 <= yi <= n - 3):
            return

        bias_vec = None if bias is None else np.asarray(bias, dtype=np.float64)
        for name, (dx, dy) in DIRECTIONS_MOORE.items():
            d = UNIT_DIRECTIONS[name]
            scale = amount
            if bias_vec is not None:
                scale *= max(0.0, 1.0 + float(d @ bias_vec))
            self.move.add(xi + dx, yi + dy, d * scale)

    def get_move(self, pos: Sequence[float]) -> np.ndarray:
        """Bilinear sample of the movement field (zero outside [1, field_size-2])."""
        return self.move.sample(pos, margin=1)

    def start_pit(
        self,
        center: Sequence[float],
        radius: float,
        duration: float,
        visual: Any = None,
        now: float | None = None,
    ) -> int:
        """
        Start a mosh pit. Returns its id.

        The pit expires at `now + duration`; `now` defaults to the last time
        the simulator observed (via a tick, a clock poll or advance_time).
        """
        return self.regions.start_pit(center, radius, duration, visual=visual, now=now)

    def is_in_pit(self, pos: Sequence[float]) -> bool:
        return self.regions.is_in_pit(pos)

    def is_on_stage(self, pos: Sequence[float]) -> bool:
        return self.regions.is_on_stage(pos)

    def advance_time(self, now: float) -> None:
        """Observe the current time without ticking (expires pits)."""
        self.regions.expire_pits(now)

    # ═══════════════════════════════════════════════════════════════
    # TICK
    # ═══════════════════════════════════════════════════════════════

    def tick(self, now: float | None = None) -> dict:
        """
        Advance the fields by one step.

        Normally called by SimulationClock. Returns summary statistics.
        """
        if now is None:
            now = self.now
        self._tick(now)
        self.tick_count += 1

        stats = self.stats()
        logger.debug(
            "Tick %d at t=%.3f: max_hype=%.3f max_move=%.3f pits=%d",
            self.tick_count, now, stats["max_hype"], stats["max_move"],
            stats["active_pits"],
        )
        self.tick_completed.emit()
        return stats

    def run(self, n_ticks: int, dt: float | None = None) -> dict:
        """
        Run n_ticks ticks back to back, advancing time by dt each tick.

        Args:
            n_ticks: Number of ticks to run
            dt: Time step (defaults to config.tick_interval)

        Returns:
            Statistics dictionary for the last tick
        """
        if dt is None:
            dt = self.config.tick_interval

        stats = self.stats()
        for _ in range(n_ticks):
            stats = self.tick(self.now + dt)

        return {"n_ticks": n_ticks, **stats}

    def stats(self) -> dict:
        hype_mag = self.hype.magnitude()
        move_mag = self.move.magnitude()
        return {
            "tick": self.tick_count,
            "active_pits": len(self.regions.pits),
            "max_hype": float(hype_mag.max()),
            "mean_hype": float(hype_mag.mean()),
            "max_move": float(move_mag.max()),
            "mean_move": float(move_mag.mean()),
        }

    def _tick(self, now: float) -> None:
        """Execute one simulation tick."""
        cfg = self.config
        n = cfg.field_size

        self.regions.expire_pits(now)

        old_h = self.hype.values
        old_m = self.move.values

        # Fresh buffers seeded from the decayed pre-tick state
        new_h = clamp_magnitude(old_h * (1.0 - cfg.hype_decay), cfg.max_hype)
        new_m = old_m * (1.0 - cfg.move_decay)

        # Sources: interior cells only
        src_m = old_m[1:n - 1, 1:n - 1]
        src_h = old_h[1:n - 1, 1:n - 1]
        src_m_mag = np.linalg.norm(src_m, axis=-1)
        src_h_mag = np.linalg.norm(src_h, axis=-1)
        ys, xs = np.mgrid[1:n - 1, 1:n - 1]

        # Destination hype deflects incoming waves
        hype_mag = np.linalg.norm(old_h, axis=-1)
        deflect = np.clip(hype_mag / cfg.max_hype, 0.0, 1.0)
        with np.errstate(divide="ignore", invalid="ignore"):
            hype_dir = np.where(hype_mag[..., None] > 0, old_h / hype_mag[..., None], 0.0)
        hype_sign = np.sign(old_h).astype(np.intp)

        for name, (dx, dy) in DIRECTIONS_MOORE.items():
            d = UNIT_DIRECTIONS[name]
            dest = (slice(1 + dy, n - 1 + dy), slice(1 + dx, n - 1 + dx))

            # Movement: squared alignment falloff, deflected by hype
            dot = src_m @ d
            sending = dot > 0
            if np.any(sending):
                align = np.zeros_like(dot)
                align[sending] = np.minimum(dot[sending] / src_m_mag[sending], 1.0)
                wave = src_m * (cfg.wave_decay * align ** 2)[..., None]

                frac = deflect[dest]
                new_m[dest] += wave * (1.0 - frac)[..., None]

                strength = np.linalg.norm(wave, axis=-1) * frac
                hit = sending & (strength > 0)
                if np.any(hit):
                    sign = hype_sign[dest][hit]
                    deflected = hype_dir[dest][hit] * strength[hit][:, None]
                    # Deflected energy lands next to the source, toward the hype
                    np.add.at(
                        new_m,
                        (ys[hit] + sign[:, 1], xs[hit] + sign[:, 0]),
                        deflected,
                    )

            # Hype: linear alignment falloff, no deflection
            hdot = src_h @ d
            hsending = hdot > 0
            if np.any(hsending):
                halign = np.zeros_like(hdot)
                halign[hsending] = np.minimum(hdot[hsending] / src_h_mag[hsending], 1.0)
                new_h[dest] += src_h * (cfg.hype_transmission_decay * halign)[..., None]

        # Pits and stages anchor against movement (interior cells)
        anchors = self.regions.anchor_mask(n)
        anchors[0, :] = anchors[-1, :] = False
        anchors[:, 0] = anchors[:, -1] = False
        new_m[anchors] = 0.0

        new_h = clamp_magnitude(new_h, cfg.max_hype)

        # Commit
        self.hype.values = new_h
        self.move.values = new_m
