"""
Visualization utilities.

- Vector field heatmaps with quiver arrows (hype, movement)
- Pit and stage outlines
- Side-by-side crowd summary
"""

from hypewave.viz.fields import (
    plot_vector_field,
    plot_hype_field,
    plot_move_field,
    draw_regions,
    plot_crowd_summary,
    save_figure,
)

__all__ = [
    "plot_vector_field",
    "plot_hype_field",
    "plot_move_field",
    "draw_regions",
    "plot_crowd_summary",
    "save_figure",
]
