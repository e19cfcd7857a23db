"""
Snapshot encoding for the push channel and status queries.

Wire format: a JSON array of objects with keys x, y, vx, vy, mass,
in store order.
"""

from __future__ import annotations
import json
from typing import Iterable

from orbsim.core.particle import Particle


def snapshot_to_dicts(particles: Iterable[Particle]) -> list[dict]:
    return [p.to_dict() for p in particles]


def encode_snapshot(particles: Iterable[Particle]) -> str:
    """Encode a snapshot as JSON text. Non-finite values raise ValueError."""
    return json.dumps(snapshot_to_dicts(particles), allow_nan=False, separators=(",", ":"))


def decode_snapshot(payload: str | bytes) -> list[Particle]:
    """Inverse of encode_snapshot."""
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Snapshot payload must be a JSON array")
    return [Particle.from_dict(item) for item in data]
