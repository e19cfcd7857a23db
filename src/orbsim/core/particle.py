"""
Particle: a point mass moving around the attractor.

A particle is just five numbers: position (x, y), velocity (vx, vy) and
mass. It has no identity beyond its index in the ParticleStore; the store
keeps the live values, and Particle instances are immutable copies handed
in by callers or handed back out by get/snapshot.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, asdict

import numpy as np

# Column layout of a particle row inside the store
FIELDS = ("x", "y", "vx", "vy", "mass")
N_FIELDS = len(FIELDS)


class InvalidParticleError(ValueError):
    """Raised when a particle would violate the mass/finiteness rules."""


@dataclass(frozen=True)
class Particle:
    """Immutable particle record."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    mass: float = 1.0

    def __post_init__(self):
        values = (self.x, self.y, self.vx, self.vy, self.mass)
        if not all(math.isfinite(v) for v in values):
            raise InvalidParticleError(f"Particle fields must be finite: {values}")
        if self.mass <= 0:
            raise InvalidParticleError(f"Particle mass must be > 0, got {self.mass}")

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> tuple[float, float]:
        return self.vx, self.vy

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    def as_row(self) -> np.ndarray:
        """Return the particle as a store row [x, y, vx, vy, mass]."""
        return np.array([self.x, self.y, self.vx, self.vy, self.mass], dtype=np.float64)

    @classmethod
    def from_row(cls, row: np.ndarray) -> Particle:
        """
        Copy a store row out as a Particle.

        Rows are validated when they enter the store, not when they are
        read back, so a row the integrator pushed to inf/nan still reads.
        """
        particle = object.__new__(cls)
        for name, value in zip(FIELDS, row[:N_FIELDS]):
            object.__setattr__(particle, name, float(value))
        return particle

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Particle:
        try:
            return cls(**{name: float(data[name]) for name in FIELDS})
        except KeyError as exc:
            raise InvalidParticleError(f"Missing particle field: {exc.args[0]}") from exc


@dataclass
class SeedConfig:
    """Ranges used when seeding random particles (half-open intervals)."""

    position_range: tuple[float, float] = (-50.0, 50.0)
    velocity_range: tuple[float, float] = (-1.0, 1.0)
    mass_range: tuple[float, float] = (1.0, 11.0)


def create_random_particles(
    count: int,
    config: SeedConfig | None = None,
    rng: np.random.Generator | None = None,
) -> list[Particle]:
    """
    Create `count` particles with uniformly random state.

    Args:
        count: Number of particles (must be > 0)
        config: Seeding ranges (defaults to SeedConfig())
        rng: Random generator, for reproducible seeding

    Returns:
        List of new particles
    """
    if count <= 0:
        raise ValueError(f"Invalid number of particles: {count}")
    if config is None:
        config = SeedConfig()
    if rng is None:
        rng = np.random.default_rng()

    positions = rng.uniform(*config.position_range, size=(count, 2))
    velocities = rng.uniform(*config.velocity_range, size=(count, 2))
    masses = rng.uniform(*config.mass_range, size=count)

    return [
        Particle(
            x=float(positions[i, 0]),
            y=float(positions[i, 1]),
            vx=float(velocities[i, 0]),
            vy=float(velocities[i, 1]),
            mass=float(masses[i]),
        )
        for i in range(count)
    ]
