"""
Core simulation and broadcast kernel.

This layer knows nothing about HTTP, websockets or JSON beyond the
snapshot encoder handed to the scheduler. It only knows:
- Particles and their ordered store
- The central force and time stepping
- Pairwise elastic collisions
- Running/Paused gating
- Subscriber-driven periodic step-and-broadcast
"""

from orbsim.core.particle import Particle, InvalidParticleError, SeedConfig, create_random_particles
from orbsim.core.store import ParticleStore, ParticleIndexError
from orbsim.core.forces import (
    ForceLaw,
    InverseSquareForce,
    CappedInverseSquareForce,
    CappedLinearForce,
    FORCE_LAWS,
    create_force_law,
)
from orbsim.core.integrator import Integrator, IntegratorConfig
from orbsim.core.collisions import CollisionResolver, CollisionConfig
from orbsim.core.clock import SimulationClock
from orbsim.core.service import SimulationService
from orbsim.core.scheduler import BroadcastScheduler, SchedulerConfig, Subscriber

__all__ = [
    "Particle",
    "InvalidParticleError",
    "SeedConfig",
    "create_random_particles",
    "ParticleStore",
    "ParticleIndexError",
    "ForceLaw",
    "InverseSquareForce",
    "CappedInverseSquareForce",
    "CappedLinearForce",
    "FORCE_LAWS",
    "create_force_law",
    "Integrator",
    "IntegratorConfig",
    "CollisionResolver",
    "CollisionConfig",
    "SimulationClock",
    "SimulationService",
    "BroadcastScheduler",
    "SchedulerConfig",
    "Subscriber",
]
