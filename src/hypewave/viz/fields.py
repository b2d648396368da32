"""
2D visualization of the crowd fields.

Provides heatmaps with quiver overlays for:
- hype field (enthusiasm)
- movement field (wave impulses)
- pits and stages drawn on top

All plots use matplotlib with sensible defaults.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Rectangle

if TYPE_CHECKING:
    from hypewave.core.simulator import FieldSimulator


def _create_hype_cmap():
    """Create a colormap from dark crowd to stage-light warm white."""
    from matplotlib.colors import LinearSegmentedColormap

    colors = [
        (0.05, 0.02, 0.08),     # Near black (quiet)
        (0.290, 0.063, 0.345),  # Deep purple
        (0.612, 0.090, 0.400),  # Magenta
        (0.894, 0.255, 0.235),  # Red-orange
        (0.988, 0.620, 0.200),  # Orange
        (0.993, 0.978, 0.925),  # Warm white (maximum hype)
    ]
    return LinearSegmentedColormap.from_list("hype", colors)


CMAP_HYPE = _create_hype_cmap()
CMAP_MOVE = "viridis"

PIT_COLOR = "#ff3355"
STAGE_COLOR = "#33ccff"


def plot_vector_field(
    values: np.ndarray,
    title: str = "",
    cmap=None,
    vmin: float | None = None,
    vmax: float | None = None,
    ax: Axes | None = None,
    colorbar: bool = True,
    quiver_step: int = 1,
    figsize: tuple[float, float] = (8, 6),
) -> tuple[Figure, Axes]:
    """
    Plot a [size, size, 2] vector field as a magnitude heatmap with arrows.

    Args:
        values: Field array indexed [y, x]
        title: Plot title
        cmap: Colormap for the magnitude
        vmin, vmax: Color scale limits (auto if None)
        ax: Existing axes to plot on (creates new figure if None)
        colorbar: Whether to add a colorbar
        quiver_step: Draw one arrow every quiver_step cells (0 disables arrows)
        figsize: Figure size if creating new figure

    Returns:
        (fig, ax) tuple
    """
    if cmap is None:
        cmap = CMAP_HYPE

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    magnitude = np.linalg.norm(values, axis=-1)
    im = ax.imshow(
        magnitude,
        origin="lower",
        cmap=cmap,
        vmin=vmin,
        vmax=vmax,
        aspect="equal",
    )

    if quiver_step > 0:
        size = values.shape[0]
        ys, xs = np.mgrid[0:size:quiver_step, 0:size:quiver_step]
        sub = values[::quiver_step, ::quiver_step]
        ax.quiver(xs, ys, sub[..., 0], sub[..., 1], color="white", alpha=0.7)

    if colorbar:
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")

    return fig, ax


def plot_hype_field(
    simulator: "FieldSimulator",
    title: str = "Hype",
    ax: Axes | None = None,
    **kwargs,
) -> tuple[Figure, Axes]:
    """Plot the hype field, colour scale fixed to [0, max_hype]."""
    return plot_vector_field(
        simulator.hype.values,
        title=title,
        cmap=CMAP_HYPE,
        vmin=0,
        vmax=simulator.config.max_hype,
        ax=ax,
        **kwargs,
    )


def plot_move_field(
    simulator: "FieldSimulator",
    title: str = "Movement",
    ax: Axes | None = None,
    **kwargs,
) -> tuple[Figure, Axes]:
    """Plot the movement field."""
    return plot_vector_field(
        simulator.move.values,
        title=title,
        cmap=CMAP_MOVE,
        vmin=0,
        ax=ax,
        **kwargs,
    )


def draw_regions(simulator: "FieldSimulator", ax: Axes) -> None:
    """Outline active pits and stages on an existing axes."""
    for pit in simulator.regions.pits:
        ax.add_patch(
            Circle(pit.center, pit.radius, fill=False, edgecolor=PIT_COLOR, linewidth=2)
        )
    for stage in simulator.regions.stages:
        width, height = stage.size
        ax.add_patch(
            Rectangle(
                (stage.x1, stage.y1), width, height,
                fill=False, edgecolor=STAGE_COLOR, linewidth=2,
            )
        )


def plot_crowd_summary(
    simulator: "FieldSimulator",
    figsize: tuple[float, float] = (14, 6),
) -> Figure:
    """
    Plot hype and movement side by side with pits and stages outlined.

    Returns:
        Figure with two subplots
    """
    fig, axes = plt.subplots(1, 2, figsize=figsize)

    plot_hype_field(simulator, ax=axes[0])
    plot_move_field(simulator, ax=axes[1])
    for ax in axes:
        draw_regions(simulator, ax)

    fig.suptitle(f"Crowd at tick {simulator.tick_count}")
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
