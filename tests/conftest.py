"""
Pytest configuration and shared fixtures.
"""

import time

import matplotlib

matplotlib.use("Agg")

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def service(rng):
    """Empty simulation with the canonical inverse-square law."""
    from orbsim.core import SimulationService
    return SimulationService(rng=rng)


@pytest.fixture
def wait_until():
    """Poll a condition until it holds or the timeout expires."""
    def _wait(condition, timeout=2.0, interval=0.005):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if condition():
                return True
            time.sleep(interval)
        return condition()
    return _wait
