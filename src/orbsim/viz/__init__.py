"""
Visualization utilities.

- Snapshot scatter plots
- Trajectory plots
"""

from orbsim.viz.particles import plot_snapshot, plot_trajectories, save_figure

__all__ = [
    "plot_snapshot",
    "plot_trajectories",
    "save_figure",
]
