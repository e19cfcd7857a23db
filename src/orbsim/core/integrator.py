"""
Integrator: applies the central force and advances positions.

Semi-implicit Euler, per particle:
    v ← v + a·dt
    v ← v · damping
    x ← x + v·dt        (uses the freshly updated v)

dt is simulated time per step and is independent of the wall-clock
broadcast period.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orbsim.core.forces import ForceLaw, InverseSquareForce

if TYPE_CHECKING:
    from orbsim.core.store import ParticleStore


@dataclass
class IntegratorConfig:
    """Configuration for the integrator."""

    dt: float = 0.01  # Simulated seconds per step


@dataclass
class Integrator:
    """Moves every particle one step under the configured force law."""

    force_law: ForceLaw = field(default_factory=InverseSquareForce)
    config: IntegratorConfig = field(default_factory=IntegratorConfig)

    def step(self, store: "ParticleStore", dt: float | None = None) -> None:
        """
        Advance every particle in `store` by one step, in place.

        Args:
            store: Particle store (caller holds the simulation lock)
            dt: Override for config.dt
        """
        if len(store) == 0:
            return
        if dt is None:
            dt = self.config.dt

        positions = store.positions
        velocities = store.velocities

        accel = self.force_law.acceleration(positions, store.masses)
        velocities += accel * dt
        if self.force_law.damping != 1.0:
            velocities *= self.force_law.damping
        positions += velocities * dt
