"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def small_config():
    """Configuration for a small 10x10 crowd."""
    from hypewave.core import SimulationConfig
    return SimulationConfig(
        field_size=10,
        max_hype=5.0,
        hype_decay=0.1,
        hype_transmission_decay=0.2,
        move_decay=0.8,
        wave_decay=0.5,
        tick_interval=0.1,
    )


@pytest.fixture
def sim(small_config):
    """A fresh simulator on the small grid."""
    from hypewave.core import FieldSimulator
    return FieldSimulator(small_config)


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
