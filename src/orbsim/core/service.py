"""
SimulationService: the core-facing contract used by the request layer.

One re-entrant lock covers everything that touches shared state:
- structural changes to the ParticleStore (add/remove/reset/start)
- the Running flag (toggle)
- the scheduler's subscriber set and its step-and-broadcast sequence

Only one of these critical sections runs at a time, so a remove-by-index
can never interleave with a step iterating the same store.
"""

from __future__ import annotations
import logging
import threading
from typing import Iterable

import numpy as np

from orbsim.core.particle import Particle, SeedConfig, create_random_particles
from orbsim.core.store import ParticleStore
from orbsim.core.clock import SimulationClock
from orbsim.core.integrator import Integrator, IntegratorConfig
from orbsim.core.collisions import CollisionResolver, CollisionConfig
from orbsim.core.forces import ForceLaw, InverseSquareForce

logger = logging.getLogger(__name__)


class SimulationService:
    """Particle store plus clock, behind a single lock."""

    def __init__(
        self,
        force_law: ForceLaw | None = None,
        integrator_config: IntegratorConfig | None = None,
        collision_config: CollisionConfig | None = None,
        seed_config: SeedConfig | None = None,
        rng: np.random.Generator | None = None,
        particles: Iterable[Particle] = (),
    ):
        """
        Create a simulation service.

        Args:
            force_law: Central force strategy (defaults to InverseSquareForce)
            integrator_config: Step size settings
            collision_config: Particle radius and restitution
            seed_config: Ranges used by start()
            rng: Random generator for start(), for reproducible seeding
            particles: Initial particles
        """
        integrator = Integrator(
            force_law=force_law or InverseSquareForce(),
            config=integrator_config or IntegratorConfig(),
        )
        resolver = CollisionResolver(config=collision_config or CollisionConfig())

        self.store = ParticleStore(particles)
        self.clock = SimulationClock(integrator=integrator, resolver=resolver)
        self.seed_config = seed_config or SeedConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.lock = threading.RLock()

    @property
    def running(self) -> bool:
        return self.clock.running

    @property
    def force_law(self) -> ForceLaw:
        return self.clock.integrator.force_law

    def __len__(self) -> int:
        with self.lock:
            return len(self.store)

    def add_particle(self, particle: Particle) -> int:
        """Append a particle; returns its index."""
        with self.lock:
            index = self.store.add(particle)
        logger.debug("Added particle %d: %s", index, particle)
        return index

    def remove_particle(self, index: int) -> Particle:
        """Remove by index; raises ParticleIndexError if out of range."""
        with self.lock:
            removed = self.store.remove(index)
        logger.debug("Removed particle %d", index)
        return removed

    def get_particle(self, index: int) -> Particle:
        """Copy of the particle at `index`; raises ParticleIndexError if out of range."""
        with self.lock:
            return self.store.get(index)

    def snapshot(self) -> tuple[Particle, ...]:
        with self.lock:
            return self.store.snapshot()

    def step(self) -> tuple[Particle, ...]:
        """Run one clock step (no-op while paused) and return the snapshot."""
        with self.lock:
            return self.clock.step(self.store)

    def toggle(self) -> bool:
        """Flip Running/Paused; returns the new running flag."""
        with self.lock:
            return self.clock.toggle()

    def reset(self) -> None:
        """Remove every particle."""
        with self.lock:
            self.clock.reset(self.store)
        logger.info("Simulation reset")

    def start(self, count: int) -> int:
        """
        Replace the current particles with `count` random ones.

        Raises:
            ValueError: if count <= 0 (store left unchanged)
        """
        with self.lock:
            particles = create_random_particles(count, self.seed_config, self.rng)
            self.clock.reset(self.store)
            self.store.extend(particles)
        logger.info("Simulation started with %d particles", count)
        return count
