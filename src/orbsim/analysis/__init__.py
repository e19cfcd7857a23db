"""
Analysis layer: derived quantities computed from snapshots.

IMPORTANT: This is NOT seen by the simulation. One-way derivation only.
"""

from orbsim.analysis.diagnostics import (
    Diagnostics,
    compute_diagnostics,
    kinetic_energy,
    total_momentum,
    radial_distances,
    snapshot_array,
)

__all__ = [
    "Diagnostics",
    "compute_diagnostics",
    "kinetic_energy",
    "total_momentum",
    "radial_distances",
    "snapshot_array",
]
