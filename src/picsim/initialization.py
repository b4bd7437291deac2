"""
Particle Initialization

Builds the initial particle population under one of four density
profiles, then completes every particle (charge, velocity, provenance)
with `finish_distribution`.

Profiles (columns x = 0 .. g-2, one column of cells per x):
- GEOMETRIC:  column count ~ A * rho^x
- SINUSOIDAL: column count ~ 1 + cos(2*pi*x / (g-2))
- LINEAR:     column count ~ beta - alpha * x / (g-2)
- PATCH:      uniform count per cell inside a bounding box

Particles sit at the fixed offset (REL_X, REL_Y) inside their cell; the
deterministic sequence generator only picks the coordinate the profile
leaves free.
"""

import logging
import math

import numpy as np
from numba import njit

from .constants import (
    Q,
    DT,
    REL_X,
    REL_Y,
    GEOMETRIC,
    SINUSOIDAL,
    LINEAR,
    PATCH,
)
from .particles import ParticleStore

logger = logging.getLogger(__name__)


# ==================== DENSITY PROFILES ====================


def initialize_geometric(n, g, rho, rng):
    """
    Geometric column profile.

    Each cell in column x receives floor(A * rho^x) particles, with

        A = n * (1 - rho) / (1 - rho^(g-1))

    so that the un-truncated counts sum to n. The shortfall caused by
    truncation goes to column 0.

    Args:
        n: Number of particles
        g: Grid points per side
        rho: Attenuation factor (rho != 1)
        rng: DeterministicSequenceGenerator

    Returns:
        x, y: Position arrays of shape (n,)
    """
    x = np.empty(n, dtype=np.float64)
    y = np.empty(n, dtype=np.float64)

    rho = np.float64(rho)
    A = n * ((1.0 - rho) / (1.0 - rho ** (g - 1)))

    pi = 0
    for col in range(g - 1):
        n_part_column = min(int(math.floor(A * rho ** col)), n - pi)
        for _ in range(n_part_column):
            x[pi] = col + REL_X
            y[pi] = rng.next(g - 1) + REL_Y
            pi += 1

    # Remaining particles in the first column of cells
    while pi < n:
        x[pi] = REL_X
        y[pi] = rng.next(g - 1) + REL_Y
        pi += 1

    return x, y


def _initialize_weighted(n, g, weights, rng):
    """
    Place floor(n * w / sum(w)) particles in each column, the remainder
    uniformly at random over the whole domain.
    """
    x = np.empty(n, dtype=np.float64)
    y = np.empty(n, dtype=np.float64)

    total_weight = float(np.sum(weights))

    pi = 0
    for col, weight in enumerate(weights):
        n_part_column = min(int(math.floor(n * weight / total_weight)), n - pi)
        for _ in range(n_part_column):
            x[pi] = col + REL_X
            y[pi] = rng.next(g - 1) + REL_Y
            pi += 1

    while pi < n:
        x[pi] = rng.next(g - 1) + REL_X
        y[pi] = rng.next(g - 1) + REL_Y
        pi += 1

    return x, y


def sinusoidal_weights(g):
    """Column weights 1 + cos(2*pi*x / (g-2)) for x = 0 .. g-2."""
    step = 2.0 * np.pi / (g - 2)
    return np.array([1.0 + math.cos(step * col) for col in range(g - 1)])


def linear_weights(g, alpha, beta):
    """Column weights beta - alpha * x / (g-2) for x = 0 .. g-2."""
    step = 1.0 / (g - 2)
    return np.array([beta - alpha * step * col for col in range(g - 1)])


def initialize_sinusoidal(n, g, rng):
    """
    Single-period sinusoidal column profile.

    Args:
        n: Number of particles
        g: Grid points per side
        rng: DeterministicSequenceGenerator

    Returns:
        x, y: Position arrays of shape (n,)
    """
    return _initialize_weighted(n, g, sinusoidal_weights(g), rng)


def initialize_linear(n, g, alpha, beta, rng):
    """
    Linearly decreasing column profile f(x) = beta - alpha * x, x in [0, 1].

    Weights must be positive on every column.

    Args:
        n: Number of particles
        g: Grid points per side
        alpha: Negative slope
        beta: Offset
        rng: DeterministicSequenceGenerator

    Returns:
        x, y: Position arrays of shape (n,)
    """
    return _initialize_weighted(n, g, linear_weights(g, alpha, beta), rng)


def initialize_patch(n, patch):
    """
    Uniform seeding inside a bounding patch.

    Every cell receives floor(n / cells) particles; the remainder is
    handed out one per cell (x outer, y inner) until exhausted.

    Args:
        n: Number of particles
        patch: BoundingPatch inside the cell domain

    Returns:
        x, y: Position arrays of shape (n,)
    """
    x = np.empty(n, dtype=np.float64)
    y = np.empty(n, dtype=np.float64)

    particles_per_cell = n // patch.n_cells

    pi = 0
    for col in range(patch.xleft, patch.xright):
        for row in range(patch.ybottom, patch.ytop):
            for _ in range(particles_per_cell):
                x[pi] = col + REL_X
                y[pi] = row + REL_Y
                pi += 1

    for col in range(patch.xleft, patch.xright):
        for row in range(patch.ybottom, patch.ytop):
            if pi >= n:
                break
            x[pi] = col + REL_X
            y[pi] = row + REL_Y
            pi += 1

    return x, y


# ==================== CHARGE DESIGN ====================


@njit
def finish_distribution_kernel(
    x, y, vx, vy, q, x0, y0, k_arr, m_arr, init_timestamp,
    start, stop, timestep, k, m,
):
    """
    Complete particles [start, stop): charge, velocity and provenance.

    The charge is the inverse of the force the four corner charges exert
    on a particle at fractional offset (rel_x, rel_y):

        r1^2 = rel_x^2 + rel_y^2
        r2^2 = (1 - rel_x)^2 + rel_y^2
        charge = 1 / (dt^2 * Q * (cos_theta / r1^2 + cos_phi / r2^2))

    with cos_theta = rel_x / r1 and cos_phi = (1 - rel_x) / r2. Scaled by
    (2k+1) and signed by the column parity, it makes the particle travel
    exactly 2k+1 cells per step, which is what the verifier checks.
    """
    for i in range(start, stop):
        x_coord = x[i]
        y_coord = y[i]
        rel_x = x_coord % 1.0
        rel_y = y_coord % 1.0
        col = int(x_coord)

        r1_sq = rel_y * rel_y + rel_x * rel_x
        r2_sq = rel_y * rel_y + (1.0 - rel_x) * (1.0 - rel_x)
        cos_theta = rel_x / math.sqrt(r1_sq)
        cos_phi = (1.0 - rel_x) / math.sqrt(r2_sq)
        charge = 1.0 / ((DT * DT) * Q * (cos_theta / r1_sq + cos_phi / r2_sq))

        vx[i] = 0.0
        vy[i] = m / DT
        if col % 2 == 0:
            q[i] = (2 * k + 1) * charge
        else:
            q[i] = -1.0 * (2 * k + 1) * charge
        x0[i] = x_coord
        y0[i] = y_coord
        k_arr[i] = k
        m_arr[i] = m
        init_timestamp[i] = timestep


def finish_distribution(store, start, stop, timestep, k, m):
    """
    Derive charge, velocity and provenance for particles [start, stop).

    Args:
        store: ParticleStore
        start, stop: Index range of particles to complete
        timestep: Step at which the particles enter the simulation
        k: Horizontal drift index
        m: Vertical velocity number
    """
    if not 0 <= start <= stop <= store.n_particles:
        raise ValueError(
            f"Invalid particle range [{start}, {stop}) for "
            f"{store.n_particles} particles"
        )

    finish_distribution_kernel(
        store.x, store.y, store.vx, store.vy, store.q,
        store.x0, store.y0, store.k, store.m, store.init_timestamp,
        start, stop, timestep, k, m,
    )


# ==================== POPULATION FACTORY ====================


def create_population(config, rng):
    """
    Seed the initial population described by a SimulationConfig.

    Args:
        config: Validated SimulationConfig
        rng: DeterministicSequenceGenerator, used once per run

    Returns:
        store: ParticleStore with n_particles finished particles at t = 0
    """
    n = config.n_particles
    g = config.grid_size

    if config.init_mode == GEOMETRIC:
        x, y = initialize_geometric(n, g, config.rho, rng)
    elif config.init_mode == SINUSOIDAL:
        x, y = initialize_sinusoidal(n, g, rng)
    elif config.init_mode == LINEAR:
        x, y = initialize_linear(n, g, config.alpha, config.beta, rng)
    elif config.init_mode == PATCH:
        x, y = initialize_patch(n, config.init_patch)
    else:
        raise ValueError(f"Unknown initialization mode: {config.init_mode}")

    store = ParticleStore(capacity=n + config.particles_injected)
    start, stop = store.append_positions(x, y)
    finish_distribution(store, start, stop, 0, config.k, config.m)

    logger.debug("Seeded %d particles (%s)", stop - start, config.init_mode)

    return store
