"""
orbsim: particles orbiting a central attractor, streamed live.

A mutable set of point particles is pulled toward a fixed attractor at the
origin, bounces off itself in elastic collisions, and is advanced on a
fixed tick while at least one subscriber is watching.

Core concepts:
- ParticleStore holds the state; everything else reads or mutates it
- Integrator applies the force law (pluggable) with semi-implicit Euler
- CollisionResolver applies sequential pairwise elastic impulses
- SimulationClock gates the step on Running/Paused
- BroadcastScheduler drives the clock at ~60 Hz while subscribers exist

All shared state is guarded by one lock owned by SimulationService.
"""

__version__ = "0.1.0"
