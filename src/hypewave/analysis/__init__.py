"""
Analysis layer: derived quantities for visualization and diagnostics.

IMPORTANT: This is NOT seen by the update rule. One-way derivation only.

- neighborhood_hype: loudness and coherence of the crowd around a point
- field_energy / summarize: whole-field diagnostics
- region_mask: cells absorbed by pits and stages
- hype_divergence: where hype is spreading from or piling into
"""

from hypewave.analysis.crowd_stats import (
    neighborhood_hype,
    field_energy,
    region_mask,
    hype_divergence,
    summarize,
)

__all__ = [
    "neighborhood_hype",
    "field_energy",
    "region_mask",
    "hype_divergence",
    "summarize",
]
