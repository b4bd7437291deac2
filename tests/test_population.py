"""
Tests for particle injection and removal
"""

import pytest
import numpy as np

from picsim.config import BoundingPatch
from picsim.particles import ParticleStore
from picsim.initialization import finish_distribution
from picsim.pic.mover import push_population
from picsim.population import inject_particles, particles_inside, remove_particles


class TestInjection:
    """Test bulk injection into a patch."""

    @pytest.mark.parametrize("patch, ppc", [
        (BoundingPatch(2, 4, 2, 4), 3),
        (BoundingPatch(0, 10, 0, 1), 1),
        (BoundingPatch(5, 6, 0, 10), 0),
    ])
    def test_population_grows_by_cells_times_ppc(self, patch_store, patch, ppc):
        n_before = patch_store.n_particles

        n_injected = inject_particles(patch_store, 3, patch, ppc)

        assert n_injected == patch.n_cells * ppc
        assert patch_store.n_particles == n_before + n_injected

    def test_injected_particles_inside_patch(self, patch_store):
        patch = BoundingPatch(5, 8, 1, 3)
        n_before = patch_store.n_particles

        inject_particles(patch_store, 2, patch, 2)

        x = patch_store.x[n_before:patch_store.n_particles]
        y = patch_store.y[n_before:patch_store.n_particles]
        assert np.all((x >= patch.xleft) & (x < patch.xright))
        assert np.all((y >= patch.ybottom) & (y < patch.ytop))

    def test_injection_order_y_outer(self):
        store = ParticleStore(0)

        inject_particles(store, 0, BoundingPatch(0, 2, 0, 2), 1)

        np.testing.assert_array_equal(store.x[:4], [0.5, 1.5, 0.5, 1.5])
        np.testing.assert_array_equal(store.y[:4], [0.5, 0.5, 1.5, 1.5])

    def test_injected_provenance(self, patch_store):
        """Injected particles carry the injection step and k = m = 0"""
        n_before = patch_store.n_particles

        inject_particles(patch_store, 4, BoundingPatch(0, 2, 0, 2), 2)

        new = slice(n_before, patch_store.n_particles)
        np.testing.assert_array_equal(patch_store.init_timestamp[new], 4)
        np.testing.assert_array_equal(patch_store.k[new], 0)
        np.testing.assert_array_equal(patch_store.m[new], 0)
        np.testing.assert_array_equal(patch_store.vy[new], 0.0)

    def test_existing_particles_untouched(self, patch_store):
        n_before = patch_store.n_particles
        x_before = patch_store.x[:n_before].copy()
        q_before = patch_store.q[:n_before].copy()

        inject_particles(patch_store, 1, BoundingPatch(0, 4, 0, 4), 5)

        np.testing.assert_array_equal(patch_store.x[:n_before], x_before)
        np.testing.assert_array_equal(patch_store.q[:n_before], q_before)

    def test_negative_count(self, patch_store):
        with pytest.raises(ValueError, match="non-negative"):
            inject_particles(patch_store, 0, BoundingPatch(0, 1, 0, 1), -1)


class TestRemoval:
    """Test bulk removal from a patch."""

    def test_counts_balance(self, patch_store, grid):
        n_before = patch_store.n_particles

        n_removed, correct = remove_particles(
            patch_store, 0, BoundingPatch(2, 3, 0, 10), grid
        )

        assert n_removed == 20
        assert patch_store.n_particles + n_removed == n_before
        assert correct == 1

    def test_no_survivor_inside(self, patch_store, grid):
        patch = BoundingPatch(0, 4, 3, 10)

        remove_particles(patch_store, 0, patch, grid)

        assert not np.any(particles_inside(patch_store, patch))
        assert np.all(patch_store.y[:patch_store.n_particles] < 3)

    def test_boundary_particles_retained(self, grid):
        """Membership is strict: particles on a patch edge stay"""
        store = ParticleStore(3)
        store.append_positions([2.0, 2.5, 3.5], [2.5, 2.5, 4.0])
        finish_distribution(store, 0, 3, 0, 0, 0)

        n_removed, _ = remove_particles(store, 0, BoundingPatch(2, 4, 2, 4), grid)

        assert n_removed == 1
        np.testing.assert_array_equal(store.x[:2], [2.0, 3.5])

    def test_survivor_order(self, grid):
        store = ParticleStore(6)
        store.append_positions(np.arange(6) + 0.5, np.full(6, 0.5))
        finish_distribution(store, 0, 6, 0, 0, 0)

        remove_particles(store, 0, BoundingPatch(1, 3, 0, 1), grid)

        np.testing.assert_array_equal(store.x[:4], [0.5, 3.5, 4.5, 5.5])

    def test_removed_particles_verified(self, patch_store, grid):
        """A removed particle off its design path clears the correctness flag"""
        patch_store.x[0] += 0.25

        _, correct = remove_particles(patch_store, 0, BoundingPatch(2, 4, 2, 4), grid)

        assert correct == 0
        assert patch_store.n_particles == 0

    def test_unverified_survivor_does_not_count(self, patch_store, grid):
        """Only removed particles are folded into the flag"""
        patch_store.x[0] += 0.25  # cell (2, 2), outside the removal patch

        _, correct = remove_particles(patch_store, 0, BoundingPatch(3, 4, 2, 4), grid)

        assert correct == 1

    def test_removal_after_motion(self, patch_store, grid):
        """Removal-time verification uses the elapsed steps"""
        for _ in range(3):
            push_population(patch_store, grid)

        _, correct = remove_particles(patch_store, 3, BoundingPatch(0, 11, 0, 11), grid)

        assert correct == 1
        assert patch_store.n_particles == 0

    def test_idempotent(self, patch_store, grid):
        patch = BoundingPatch(2, 3, 2, 4)

        first, _ = remove_particles(patch_store, 0, patch, grid)
        n_after = patch_store.n_particles
        second, correct = remove_particles(patch_store, 0, patch, grid)

        assert first == 20
        assert second == 0
        assert correct == 1
        assert patch_store.n_particles == n_after


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
