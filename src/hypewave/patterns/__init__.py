"""
Patterns: observers that live in the crowd.

Patterns read the fields through the simulator's public API only.
- FieldProbe: resamples hype and movement at a fixed spot on every tick
"""

from hypewave.patterns.base import Pattern, PatternConfig
from hypewave.patterns.probe import FieldProbe, ProbeConfig, create_probe

__all__ = [
    "Pattern",
    "PatternConfig",
    "FieldProbe",
    "ProbeConfig",
    "create_probe",
]
