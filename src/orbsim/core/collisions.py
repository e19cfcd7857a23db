"""
CollisionResolver: pairwise elastic collisions between particles.

Brute force over all unordered pairs. Two particles collide when their
centres are closer than 2·particle_radius. For each colliding pair
(ascending i < j), with unit normal n from particle i to particle j:

    v_n = (v_j - v_i) · n
    skip if v_n > 0                       (already separating)
    J   = -(1 + e) · v_n / (1/m_i + 1/m_j)
    v_i ← v_i - J·n / m_i
    v_j ← v_j + J·n / m_j

Pairs are resolved SEQUENTIALLY: each pair sees the velocities left by
earlier pairs in the same pass. This is not a simultaneous-impulse solver
and gives different results for three-or-more-way contacts; keep it that
way, downstream expectations depend on it.

Positions are never changed here, so the overlap test can be computed for
all pairs up front with scipy's pdist.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.distance import pdist

if TYPE_CHECKING:
    from orbsim.core.store import ParticleStore


@dataclass
class CollisionConfig:
    """Configuration for collision handling."""

    particle_radius: float = 1.0
    restitution: float = 1.0  # 1.0 = perfectly elastic


@dataclass
class CollisionResolver:
    """Detects overlapping pairs and applies impulse-based response."""

    config: CollisionConfig = field(default_factory=CollisionConfig)

    def find_contacts(self, positions: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Find all overlapping pairs.

        Returns:
            (i, j, distance) arrays for pairs with i < j, in ascending
            row-major order (the order pdist enumerates pairs in)
        """
        n = positions.shape[0]
        if n < 2:
            empty = np.empty(0, dtype=np.intp)
            return empty, empty, np.empty(0, dtype=np.float64)

        distances = pdist(positions)
        hits = np.flatnonzero(distances < 2 * self.config.particle_radius)
        rows, cols = np.triu_indices(n, k=1)
        return rows[hits], cols[hits], distances[hits]

    def resolve(self, store: "ParticleStore") -> int:
        """
        Run one collision pass over `store`, mutating velocities in place.

        Returns:
            Number of pairs that received an impulse
        """
        positions = store.positions
        velocities = store.velocities
        masses = store.masses
        e = self.config.restitution

        resolved = 0
        for i, j, distance in zip(*self.find_contacts(positions)):
            if distance == 0:
                # Coincident centres: no defined normal
                continue

            normal = (positions[j] - positions[i]) / distance
            v_n = float(np.dot(velocities[j] - velocities[i], normal))
            if v_n > 0:
                continue

            impulse = -(1.0 + e) * v_n / (1.0 / masses[i] + 1.0 / masses[j])
            velocities[i] -= impulse * normal / masses[i]
            velocities[j] += impulse * normal / masses[j]
            resolved += 1

        return resolved
