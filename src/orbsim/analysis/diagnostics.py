"""
Diagnostics over a particle snapshot.

Read-only: these functions never touch the live store. They are handy for
checking the collision resolver (momentum is conserved by every impulse,
kinetic energy too when restitution = 1) and for watching orbits.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Iterable

import numpy as np

from orbsim.core.particle import Particle, N_FIELDS


@dataclass
class Diagnostics:
    """Aggregate quantities of one snapshot."""

    count: int
    total_mass: float
    kinetic_energy: float
    momentum: tuple[float, float]
    center_of_mass: tuple[float, float]
    mean_radius: float
    max_speed: float

    def to_dict(self) -> dict:
        return asdict(self)


def snapshot_array(particles: Iterable[Particle]) -> np.ndarray:
    """Stack a snapshot into an [n, 5] array (x, y, vx, vy, mass)."""
    rows = [p.as_row() for p in particles]
    if not rows:
        return np.empty((0, N_FIELDS), dtype=np.float64)
    return np.stack(rows)


def kinetic_energy(particles: Iterable[Particle]) -> float:
    data = snapshot_array(particles)
    speed_sq = np.sum(data[:, 2:4] ** 2, axis=1)
    return float(0.5 * np.sum(data[:, 4] * speed_sq))


def total_momentum(particles: Iterable[Particle]) -> np.ndarray:
    data = snapshot_array(particles)
    return np.sum(data[:, 4, None] * data[:, 2:4], axis=0)


def radial_distances(particles: Iterable[Particle]) -> np.ndarray:
    """Distance of every particle from the attractor at the origin."""
    data = snapshot_array(particles)
    return np.sqrt(np.sum(data[:, 0:2] ** 2, axis=1))


def compute_diagnostics(particles: Iterable[Particle]) -> Diagnostics:
    """Compute all diagnostics for a snapshot in one pass."""
    data = snapshot_array(particles)
    n = data.shape[0]
    if n == 0:
        return Diagnostics(
            count=0,
            total_mass=0.0,
            kinetic_energy=0.0,
            momentum=(0.0, 0.0),
            center_of_mass=(0.0, 0.0),
            mean_radius=0.0,
            max_speed=0.0,
        )

    positions, velocities, masses = data[:, 0:2], data[:, 2:4], data[:, 4]
    total_mass = float(masses.sum())
    speeds = np.sqrt(np.sum(velocities ** 2, axis=1))
    momentum = np.sum(masses[:, None] * velocities, axis=0)
    com = np.sum(masses[:, None] * positions, axis=0) / total_mass

    return Diagnostics(
        count=n,
        total_mass=total_mass,
        kinetic_energy=float(0.5 * np.sum(masses * speeds ** 2)),
        momentum=(float(momentum[0]), float(momentum[1])),
        center_of_mass=(float(com[0]), float(com[1])),
        mean_radius=float(np.mean(np.sqrt(np.sum(positions ** 2, axis=1)))),
        max_speed=float(speeds.max()),
    )
