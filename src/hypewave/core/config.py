"""
Simulation configuration.

Everything here is fixed at construction. A FieldSimulator built from a
config that fails validation never exists: the constructor raises
ConfigError and there is no recovery path.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Sequence


class ConfigError(ValueError):
    """Raised when a simulation parameter is out of range."""


@dataclass(frozen=True)
class StageRect:
    """A stage rectangle in field space, (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self):
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ConfigError(
                f"Stage corners must be ordered (x1<=x2, y1<=y2), got {self}"
            )

    def contains(self, x: float, y: float) -> bool:
        """Strict containment: points on an edge are not on the stage."""
        return self.x1 < x < self.x2 and self.y1 < y < self.y2

    @property
    def center(self) -> tuple[float, float]:
        return (self.x1 + self.x2) / 2.0, (self.y1 + self.y2) / 2.0

    @property
    def size(self) -> tuple[float, float]:
        return self.x2 - self.x1, self.y2 - self.y1


def _as_stage(stage: StageRect | Sequence[float] | Mapping[str, float]) -> StageRect:
    if isinstance(stage, StageRect):
        return stage
    if isinstance(stage, Mapping):
        return StageRect(**stage)
    x1, y1, x2, y2 = stage
    return StageRect(x1, y1, x2, y2)


_DECAY_RATES = ("hype_decay", "hype_transmission_decay", "move_decay", "wave_decay")


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for a crowd field simulation."""

    field_size: int = 64                   # Cells per side (square grid)
    max_hype: float = 5.0                  # Hype magnitude never exceeds this after a tick
    hype_decay: float = 0.1                # Fraction of hype lost per cell per tick
    hype_transmission_decay: float = 0.2   # Fraction of hype passed forward per tick
    move_decay: float = 0.8                # Fraction of movement lost per cell per tick
    wave_decay: float = 0.5                # Fraction of movement passed forward per tick
    tick_interval: float = 0.05            # Seconds between simulation ticks

    # Stages are loaded once and never change during a run
    stages: tuple[StageRect, ...] = field(default_factory=tuple)

    # World units per field cell (world → field space scale)
    world_scale: float = 1.0

    def __post_init__(self):
        # Normalize stage input so callers can pass plain tuples or dicts
        object.__setattr__(self, "stages", tuple(_as_stage(s) for s in self.stages))

        if (
            isinstance(self.field_size, bool)
            or int(self.field_size) != self.field_size
            or self.field_size < 3
        ):
            raise ConfigError(
                f"field_size must be an integer >= 3, got {self.field_size!r}"
            )
        # Integral floats (e.g. 10.0 from JSON) are used as slice bounds
        object.__setattr__(self, "field_size", int(self.field_size))
        if self.max_hype <= 0:
            raise ConfigError(f"max_hype must be positive, got {self.max_hype!r}")
        for name in _DECAY_RATES:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be in [0, 1], got {value!r}")
        if self.tick_interval < 0:
            raise ConfigError(
                f"tick_interval must be non-negative, got {self.tick_interval!r}"
            )
        if self.world_scale <= 0:
            raise ConfigError(f"world_scale must be positive, got {self.world_scale!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationConfig:
        """Build a config from plain data, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        kwargs = dict(data)
        if "stages" in kwargs:
            kwargs["stages"] = tuple(kwargs["stages"])
        return cls(**kwargs)
