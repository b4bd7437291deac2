"""
Shared fixtures for the PICSim tests.
"""

import matplotlib
import pytest

from picsim.config import BoundingPatch, SimulationConfig
from picsim.pic.grid import ChargeGrid
from picsim.rng import DeterministicSequenceGenerator
from picsim.initialization import create_population

# Headless backend for the plotting tests
matplotlib.use("Agg")


@pytest.fixture
def grid():
    """10 x 10 cell grid (11 x 11 charges)."""
    return ChargeGrid(10)


@pytest.fixture
def rng():
    return DeterministicSequenceGenerator()


@pytest.fixture
def geometric_config():
    """Reference scenario: L=10, n=100, T=10, k=1, m=1, rho=0.5."""
    return SimulationConfig(
        steps=10, n_cells=10, n_particles=100, k=1, m=1,
        init_mode="GEOMETRIC", rho=0.5,
    )


@pytest.fixture
def patch_store(rng):
    """40 particles seeded uniformly in [2,4) x [2,4) at t = 0."""
    config = SimulationConfig(
        steps=10, n_cells=10, n_particles=40, k=0, m=0,
        init_mode="PATCH", init_patch=BoundingPatch(2, 4, 2, 4),
    )
    return create_population(config, rng)
