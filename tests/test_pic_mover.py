"""
Tests for the PIC mover (Coulomb force, corner sum, integrator)
"""

import math

import pytest
import numpy as np

from picsim.particles import ParticleStore
from picsim.initialization import finish_distribution
from picsim.pic.mover import (
    compute_coulomb,
    compute_total_force,
    move_particle,
    push_population,
)


class TestCoulomb:
    """Test suite for the two-charge Coulomb force"""

    def test_magnitude_and_direction(self):
        """3-4-5 triangle: |F| = q1 q2 / 25 along (3, 4) / 5"""
        fx, fy = compute_coulomb(3.0, 4.0, 1.0, 1.0)

        assert fx == pytest.approx(0.024, rel=1e-14)
        assert fy == pytest.approx(0.032, rel=1e-14)

    def test_opposite_charges_attract(self):
        """Unlike charges flip the force direction"""
        fx_like, fy_like = compute_coulomb(1.0, 2.0, 2.0, 3.0)
        fx_unlike, fy_unlike = compute_coulomb(1.0, 2.0, 2.0, -3.0)

        assert fx_unlike == -fx_like
        assert fy_unlike == -fy_like

    def test_inverse_square(self):
        fx1, _ = compute_coulomb(1.0, 0.0, 1.0, 1.0)
        fx2, _ = compute_coulomb(2.0, 0.0, 1.0, 1.0)

        assert fx1 / fx2 == pytest.approx(4.0)


class TestTotalForce:
    """Test suite for the four-corner force sum"""

    def test_unit_charge_at_cell_center(self, grid):
        """Unit charge at the center of column 0: 4 sqrt(2) to the right, no vertical force"""
        fx, fy = compute_total_force(0.5, 0.5, 1.0, grid.charges)

        assert fx == pytest.approx(4.0 * math.sqrt(2.0), rel=1e-14)
        assert fy == 0.0

    @pytest.mark.parametrize("k", [0, 1, 2])
    @pytest.mark.parametrize("x", [0.5, 1.5, 6.5, 9.5])
    def test_designed_charge_gives_exact_drift_force(self, grid, k, x):
        """Designed charges feel 2(2k+1) horizontally, 0 vertically, in any column"""
        store = ParticleStore(1)
        store.append_positions([x], [3.5])
        finish_distribution(store, 0, 1, 0, k, 0)

        fx, fy = compute_total_force(store.x[0], store.y[0], store.q[0], grid.charges)

        assert fx == pytest.approx(2.0 * (2 * k + 1), rel=1e-13)
        assert fy == 0.0

    def test_symmetric_offset_cancels_vertical(self, grid):
        """Vertical components cancel whenever rel_y = 0.5"""
        _, fy = compute_total_force(4.3, 7.5, 0.7, grid.charges)
        assert fy == 0.0

    def test_off_center_vertical_component(self, grid):
        """Off both mid-lines the vertical force is nonzero"""
        _, fy = compute_total_force(4.3, 7.25, 1.0, grid.charges)
        assert fy != 0.0


class TestMoveParticle:
    """Test suite for the explicit integrator"""

    def test_constant_acceleration(self):
        x, y, vx, vy = move_particle(1.0, 2.0, 0.5, 0.25, 1.0, -0.5, 10.0)

        assert x == pytest.approx(1.0 + 0.5 + 0.5)
        assert y == pytest.approx(2.0 + 0.25 - 0.25)
        assert vx == pytest.approx(1.5)
        assert vy == pytest.approx(-0.25)

    def test_wrap_right_edge(self):
        """Positions past L re-enter from the left"""
        x, y, vx, vy = move_particle(9.5, 0.5, 0.0, 0.0, 2.0, 0.0, 10.0)

        assert x == pytest.approx(0.5)
        assert vx == 2.0

    def test_wrap_negative_displacement(self):
        """Negative displacements wrap to the top/right, never negative"""
        x, y, vx, vy = move_particle(0.5, 0.5, -1.0, -1.0, 0.0, 0.0, 10.0)

        assert x == pytest.approx(9.5)
        assert y == pytest.approx(9.5)

    def test_wrap_displacement_beyond_one_period(self):
        """Displacements below -L still land inside [0, L)"""
        x, y, _, vy = move_particle(0.5, 0.5, 0.0, -11.0, 0.0, 0.0, 10.0)

        assert x == pytest.approx(0.5)
        assert y == pytest.approx(9.5)
        assert vy == -11.0

        _, y, _, _ = move_particle(0.5, 3.5, 0.0, -25.0, 0.0, 0.0, 10.0)
        assert y == pytest.approx(8.5)

    def test_wrap_on_cell_count(self):
        """Wraparound period is L (cells), not L+1 (grid points)"""
        x, _, _, _ = move_particle(9.5, 0.5, 1.0, 0.0, 0.0, 0.0, 10.0)
        assert x == pytest.approx(0.5)


class TestPushPopulation:
    """Test suite for the population push"""

    def test_two_step_cycle(self, grid):
        """Designed particles move 2k+1 cells per step; vx alternates 2(2k+1), 0"""
        k = 1
        store = ParticleStore(2)
        store.append_positions([0.5, 3.5], [2.5, 8.5])
        finish_distribution(store, 0, 2, 0, k, 1)

        push_population(store, grid)

        np.testing.assert_allclose(store.x[:2], [3.5, 6.5], atol=1e-12)
        np.testing.assert_allclose(store.y[:2], [3.5, 9.5], atol=1e-12)
        np.testing.assert_allclose(store.vx[:2], [6.0, 6.0], atol=1e-12)

        push_population(store, grid)

        np.testing.assert_allclose(store.x[:2], [6.5, 9.5], atol=1e-12)
        np.testing.assert_allclose(store.y[:2], [4.5, 0.5], atol=1e-12)
        np.testing.assert_allclose(store.vx[:2], [0.0, 0.0], atol=1e-12)

    def test_fast_negative_vertical_drift(self, grid):
        """m < -L keeps every particle inside the grid, step after step"""
        store = ParticleStore(3)
        store.append_positions([0.5, 4.5, 7.5], [0.5, 5.5, 9.5])
        finish_distribution(store, 0, 3, 0, 0, -11)

        for step in range(1, 6):
            push_population(store, grid)

            assert np.all(store.y[:3] >= 0.0)
            assert np.all(store.y[:3] < 10.0)
            expected = np.mod(np.array([0.5, 5.5, 9.5]) - 11 * step, 10.0)
            np.testing.assert_allclose(store.y[:3], expected, atol=1e-9)

    def test_only_live_particles_move(self, grid):
        store = ParticleStore(4)
        store.append_positions([0.5, 1.5, 2.5, 3.5], [0.5, 0.5, 0.5, 0.5])
        finish_distribution(store, 0, 4, 0, 0, 0)
        store.compact(np.array([True, True, False, False]))

        # Stale slots beyond n_particles keep their values
        stale = store.x[2:4].copy()
        push_population(store, grid)

        np.testing.assert_array_equal(store.x[2:4], stale)
        np.testing.assert_allclose(store.x[:2], [1.5, 2.5], atol=1e-12)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
