"""
Particle visualization.

Plots a snapshot (particles sized by mass, velocity arrows, the attractor
at the origin) and trajectories recorded as a stack of snapshot arrays.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from orbsim.analysis.diagnostics import snapshot_array
from orbsim.core.particle import Particle


def plot_snapshot(
    particles: Iterable[Particle],
    title: str = "Particles",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 8),
    show_velocity: bool = True,
    extent: float | None = None,
) -> tuple[Figure, Axes]:
    """
    Plot one snapshot.

    Args:
        particles: Snapshot to draw
        title: Plot title
        ax: Existing axes (creates new if None)
        show_velocity: Draw velocity arrows
        extent: Half-width of the square view around the origin (auto if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    data = snapshot_array(particles)

    # Attractor
    ax.scatter(
        [0.0], [0.0],
        color="yellow", s=250, marker="*", zorder=4,
        edgecolors="black", linewidths=1.5, label="Attractor"
    )

    if len(data) > 0:
        x, y, vx, vy, mass = data.T
        ax.scatter(x, y, s=20 * mass, c=np.sqrt(vx**2 + vy**2), cmap="viridis", zorder=3)
        if show_velocity:
            ax.quiver(x, y, vx, vy, color="gray", alpha=0.6, zorder=2)

    if extent is not None:
        ax.set_xlim(-extent, extent)
        ax.set_ylim(-extent, extent)

    ax.set_aspect("equal")
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.legend(loc="upper right")

    return fig, ax


def plot_trajectories(
    history: np.ndarray,
    title: str = "Particle Trajectories",
    figsize: tuple[float, float] = (10, 10),
    show_start: bool = True,
    show_end: bool = True,
) -> Figure:
    """
    Plot trajectories from recorded snapshots.

    Args:
        history: Array [n_steps, n_particles, 5] of stacked snapshot arrays
            (the particle count must not change during recording)
        title: Plot title
        show_start: Mark starting positions
        show_end: Mark ending positions

    Returns:
        Figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    n_particles = history.shape[1] if history.ndim == 3 else 0
    cmap_lines = plt.get_cmap("tab10")

    for i in range(n_particles):
        color = cmap_lines(i % 10)
        x_traj, y_traj = history[:, i, 0], history[:, i, 1]
        ax.plot(x_traj, y_traj, color=color, linewidth=1.5, zorder=2)

        if show_start:
            ax.scatter([x_traj[0]], [y_traj[0]], color=color, s=40, marker="o", zorder=3)
        if show_end:
            ax.scatter([x_traj[-1]], [y_traj[-1]], color=color, s=40, marker="s", zorder=3)

    ax.scatter(
        [0.0], [0.0],
        color="yellow", s=250, marker="*", zorder=4,
        edgecolors="black", linewidths=1.5, label="Attractor"
    )

    ax.set_aspect("equal")
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.legend(loc="upper right", fontsize=8)

    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
