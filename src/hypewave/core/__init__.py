"""
Core simulation primitives.

This layer knows nothing about sprites, players, or rendering. It only knows:
- Two vector fields on a square grid (hype, movement)
- Bilinear sampling and splatting into those fields
- Timed circular pits and fixed rectangular stages
- The per-tick decay / transmission / anchoring rule
- When to tick (SimulationClock)
"""

from hypewave.core.config import SimulationConfig, StageRect, ConfigError
from hypewave.core.grid_field import GridField, clamp_magnitude
from hypewave.core.signals import Signal
from hypewave.core.regions import Pit, RegionRegistry
from hypewave.core.simulator import FieldSimulator
from hypewave.core.clock import SimulationClock

__all__ = [
    "SimulationConfig",
    "StageRect",
    "ConfigError",
    "GridField",
    "clamp_magnitude",
    "Signal",
    "Pit",
    "RegionRegistry",
    "FieldSimulator",
    "SimulationClock",
]
