"""
ParticleStore: the ordered, index-addressable particle collection.

The store is the single source of truth for simulation state. Particles
live as rows of one float64 array [n, 5] (x, y, vx, vy, mass) so the
integrator and collision resolver can work on column views in place.

The store itself does no locking. Every caller that mutates it or
iterates it must hold the SimulationService lock.
"""

from __future__ import annotations
import operator
from typing import Iterable, Iterator

import numpy as np

from orbsim.core.particle import Particle, N_FIELDS


class ParticleIndexError(IndexError):
    """Raised for an index outside 0 <= index < len(store)."""

    def __init__(self, index, length: int):
        super().__init__(f"Invalid particle index: {index}")
        self.index = index
        self.length = length


class ParticleStore:
    """Ordered sequence of particles with insertion order preserved."""

    def __init__(self, particles: Iterable[Particle] = ()):
        self._data = np.empty((0, N_FIELDS), dtype=np.float64)
        self.extend(particles)

    def __len__(self) -> int:
        return self._data.shape[0]

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.snapshot())

    # ═══════════════════════════════════════════════════════════════
    # COLUMN VIEWS (mutable, used by the step)
    # ═══════════════════════════════════════════════════════════════

    @property
    def positions(self) -> np.ndarray:
        """View of positions, shape [n, 2]."""
        return self._data[:, 0:2]

    @property
    def velocities(self) -> np.ndarray:
        """View of velocities, shape [n, 2]."""
        return self._data[:, 2:4]

    @property
    def masses(self) -> np.ndarray:
        """View of masses, shape [n]."""
        return self._data[:, 4]

    # ═══════════════════════════════════════════════════════════════
    # STRUCTURAL OPERATIONS
    # ═══════════════════════════════════════════════════════════════

    def add(self, particle: Particle) -> int:
        """Append a particle; returns its index."""
        self._data = np.vstack([self._data, particle.as_row()])
        return len(self) - 1

    def extend(self, particles: Iterable[Particle]) -> None:
        rows = [p.as_row() for p in particles]
        if rows:
            self._data = np.vstack([self._data, np.stack(rows)])

    def get(self, index: int) -> Particle:
        """Return a copy of the particle at `index`."""
        i = self._check_index(index)
        return Particle.from_row(self._data[i])

    def remove(self, index: int) -> Particle:
        """Remove the particle at `index`; later particles shift down by one."""
        i = self._check_index(index)
        removed = Particle.from_row(self._data[i])
        self._data = np.delete(self._data, i, axis=0)
        return removed

    def clear(self) -> None:
        self._data = np.empty((0, N_FIELDS), dtype=np.float64)

    def snapshot(self) -> tuple[Particle, ...]:
        """Read-only copy of every particle, in order."""
        return tuple(Particle.from_row(row) for row in self._data)

    def as_array(self) -> np.ndarray:
        """Copy of the raw [n, 5] state array."""
        return self._data.copy()

    def _check_index(self, index) -> int:
        try:
            i = operator.index(index)
        except TypeError:
            raise ParticleIndexError(index, len(self)) from None
        if isinstance(index, bool) or not 0 <= i < len(self):
            raise ParticleIndexError(index, len(self))
        return i
