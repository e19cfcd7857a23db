"""
SimulationClock: one discrete simulation step, gated by Running/Paused.

    Running --toggle--> Paused --toggle--> Running

A step while Running integrates then resolves collisions, in that order.
A step while Paused leaves the store untouched. Either way the caller gets
the current snapshot back.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orbsim.core.integrator import Integrator
from orbsim.core.collisions import CollisionResolver

if TYPE_CHECKING:
    from orbsim.core.particle import Particle
    from orbsim.core.store import ParticleStore

logger = logging.getLogger(__name__)


@dataclass
class SimulationClock:
    """Composes Integrator and CollisionResolver into a single step."""

    integrator: Integrator = field(default_factory=Integrator)
    resolver: CollisionResolver = field(default_factory=CollisionResolver)
    running: bool = True

    current_step: int = field(default=0, init=False)

    @property
    def state(self) -> str:
        return "Running" if self.running else "Paused"

    def toggle(self) -> bool:
        """Flip Running/Paused; returns the new running flag."""
        self.running = not self.running
        logger.info("Simulation is now %s", self.state)
        return self.running

    def step(self, store: "ParticleStore") -> tuple["Particle", ...]:
        """Advance the store by one step if running; return its snapshot."""
        if self.running:
            self.integrator.step(store)
            self.resolver.resolve(store)
            self.current_step += 1
        return store.snapshot()

    def reset(self, store: "ParticleStore") -> None:
        """Clear the store. Running/Paused is left as it was."""
        store.clear()
