"""Unit tests for ParticleStore."""

import numpy as np
import pytest

from orbsim.core.particle import Particle
from orbsim.core.store import ParticleStore, ParticleIndexError


def make_store(n: int) -> ParticleStore:
    return ParticleStore(Particle(float(i), float(-i), vx=0.1 * i, mass=1.0 + i) for i in range(n))


class TestParticleStore:
    """Tests for basic store operations."""

    def test_empty(self):
        store = ParticleStore()
        assert len(store) == 0
        assert store.snapshot() == ()
        assert store.positions.shape == (0, 2)

    def test_add_returns_index(self):
        store = ParticleStore()
        assert store.add(Particle(1.0, 1.0)) == 0
        assert store.add(Particle(2.0, 2.0)) == 1
        assert len(store) == 2

    def test_insertion_order_and_duplicates(self):
        store = ParticleStore()
        p = Particle(3.0, 3.0)
        store.add(p)
        store.add(Particle(4.0, 4.0))
        store.add(p)
        assert store.snapshot() == (p, Particle(4.0, 4.0), p)

    def test_get_returns_copy(self):
        store = make_store(3)
        p = store.get(1)
        assert p == Particle(1.0, -1.0, vx=0.1, mass=2.0)

        store.velocities[1] = [9.0, 9.0]
        assert p.velocity == (0.1, 0.0)
        assert store.get(1).velocity == (9.0, 9.0)

    def test_column_views_are_live(self):
        store = make_store(2)
        positions = store.positions
        positions += 1.0
        assert store.get(0).position == (1.0, 1.0)
        np.testing.assert_array_equal(store.masses, [1.0, 2.0])

    def test_clear(self):
        store = make_store(4)
        store.clear()
        assert len(store) == 0
        store.clear()
        assert len(store) == 0

    def test_snapshot_is_detached(self):
        store = make_store(2)
        snap = store.snapshot()
        store.positions[:] = 0.0
        assert snap[1].position == (1.0, -1.0)

    def test_iteration(self):
        store = make_store(3)
        assert [p.x for p in store] == [0.0, 1.0, 2.0]


class TestRemove:
    """Tests for index-based removal."""

    @pytest.mark.parametrize("index", [0, 1, 3, 4])
    def test_shift_down(self, index):
        store = make_store(5)
        before = store.snapshot()

        removed = store.remove(index)

        assert removed == before[index]
        assert len(store) == 4
        for i in range(len(store)):
            expected = before[i] if i < index else before[i + 1]
            assert store.get(i) == expected

    def test_remove_last_leaves_empty(self):
        store = make_store(1)
        store.remove(0)
        assert len(store) == 0


class TestInvalidIndex:
    """Out-of-range indices are reported and leave the store unchanged."""

    @pytest.mark.parametrize("index", [-1, -5, 3, 10])
    def test_get_out_of_range(self, index):
        store = make_store(3)
        with pytest.raises(ParticleIndexError) as excinfo:
            store.get(index)
        assert excinfo.value.index == index
        assert excinfo.value.length == 3
        assert str(excinfo.value) == f"Invalid particle index: {index}"
        assert len(store) == 3

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_remove_out_of_range(self, index):
        store = make_store(3)
        before = store.snapshot()
        with pytest.raises(ParticleIndexError):
            store.remove(index)
        assert store.snapshot() == before

    def test_empty_store(self):
        store = ParticleStore()
        with pytest.raises(ParticleIndexError):
            store.remove(0)
        with pytest.raises(ParticleIndexError):
            store.get(0)

    def test_is_index_error(self):
        with pytest.raises(IndexError):
            ParticleStore().get(0)

    @pytest.mark.parametrize("index", [1.0, "1", True, None])
    def test_non_integer_index(self, index):
        store = make_store(3)
        with pytest.raises(ParticleIndexError):
            store.get(index)

    def test_numpy_integer_index(self):
        store = make_store(3)
        assert store.get(np.int64(2)).x == 2.0
