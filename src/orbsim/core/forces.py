"""
Force laws: the central attraction toward the attractor at the origin.

Several mutually inconsistent gravity formulas have been deployed for this
simulation, so the law is a pluggable strategy selected by name. The
Integrator only asks a law for per-particle accelerations and a velocity
damping factor; it never looks at the formula.

- InverseSquareForce: F = G·M·m / r²  (canonical)
- CappedInverseSquareForce: inverse-square, capped, with short-range repulsion
- CappedLinearForce: F = G·M·m·r, capped, with short-range repulsion

The variants are NOT equivalent. Inverse-square weakens with distance,
the linear law strengthens with it (a spring toward the origin), so orbits
and collision rates differ qualitatively between them.

All laws skip particles closer than `min_distance` to the origin to avoid
the singularity at r = 0.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol

import numpy as np


class ForceLaw(Protocol):
    """Protocol for central force laws."""

    name: str
    damping: float  # Velocity multiplier applied after the force update (1.0 = none)

    def acceleration(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        """
        Compute acceleration toward the origin for every particle.

        Args:
            positions: [n, 2] particle positions
            masses: [n] particle masses (all > 0)

        Returns:
            [n, 2] accelerations
        """
        ...


def _radial(positions: np.ndarray, min_distance: float):
    """Distance to the origin, inward unit vectors and the mask of particles outside the floor."""
    r = np.sqrt(np.sum(positions ** 2, axis=1))
    active = r >= min_distance
    unit = np.zeros_like(positions)
    unit[active] = -positions[active] / r[active, None]
    return r, unit, active


@dataclass
class InverseSquareForce:
    """Standard Newtonian attraction: F = G·M·m / r²."""

    gravitational_constant: float = 0.007
    attractor_mass: float = 1000.0
    min_distance: float = 1.0
    damping: float = 1.0

    name = "inverse_square"

    def acceleration(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        r, unit, active = _radial(positions, self.min_distance)
        force = np.zeros_like(r)
        force[active] = (
            self.gravitational_constant * self.attractor_mass * masses[active] / r[active] ** 2
        )
        return unit * (force / masses)[:, None]


@dataclass
class CappedInverseSquareForce:
    """
    Inverse-square attraction with a force cap and short-range repulsion.

    F = min(G·M·m / r², max_force), minus repulsion_force when r < repulsion_distance.
    A negative F pushes the particle away from the origin.
    """

    gravitational_constant: float = 0.007
    attractor_mass: float = 1000.0
    min_distance: float = 1.0
    max_force: float = 500.0
    repulsion_distance: float = 5.0
    repulsion_force: float = 18.0
    damping: float = 1.0

    name = "capped_inverse_square"

    def _magnitude(self, r: np.ndarray, masses: np.ndarray) -> np.ndarray:
        return self.gravitational_constant * self.attractor_mass * masses / r ** 2

    def acceleration(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        r, unit, active = _radial(positions, self.min_distance)
        force = np.zeros_like(r)
        force[active] = np.minimum(self._magnitude(r[active], masses[active]), self.max_force)
        force[active & (r < self.repulsion_distance)] -= self.repulsion_force
        return unit * (force / masses)[:, None]


@dataclass
class CappedLinearForce(CappedInverseSquareForce):
    """
    Attraction growing linearly with distance: F = min(G·M·m·r, max_force).

    Shares the cap, repulsion and damping rules of CappedInverseSquareForce.
    """

    name = "capped_linear"

    def _magnitude(self, r: np.ndarray, masses: np.ndarray) -> np.ndarray:
        return self.gravitational_constant * self.attractor_mass * masses * r


FORCE_LAWS = {
    InverseSquareForce.name: InverseSquareForce,
    CappedInverseSquareForce.name: CappedInverseSquareForce,
    CappedLinearForce.name: CappedLinearForce,
}


def create_force_law(name: str = "inverse_square", **params) -> ForceLaw:
    """
    Factory for force laws by name.

    Args:
        name: One of FORCE_LAWS
        **params: Overrides for the law's parameters (e.g. damping=0.99)
    """
    try:
        cls = FORCE_LAWS[name]
    except KeyError:
        valid = ", ".join(sorted(FORCE_LAWS))
        raise ValueError(f"Unknown force law {name!r}; expected one of: {valid}") from None
    return cls(**params)
