"""
PIC Particle Mover: Coulomb Force and Explicit Integration

Implements:
- Coulomb force between two point charges
- Total force on a particle from the four charges at its cell corners
- Explicit constant-acceleration update with periodic wraparound
- Whole-population push (force + move for every live particle)

Cell layout used for the corner forces (rel_x, rel_y measured from the
cell origin at the top-left corner):

    (x, y)  TL ---------- TR  (x+1, y)
             |             |
             |    p        |
             |             |
    (x, y+1) BL ---------- BR (x+1, y+1)
"""

import math

import numpy as np
import numba
from numba import prange

from ..constants import DT, MASS_INV


# ==================== FORCE MODEL ====================


@numba.njit
def compute_coulomb(x_dist, y_dist, q1, q2):
    """
    Coulomb force between charges q1 and q2 separated by (x_dist, y_dist).

        |F| = q1 * q2 / r^2, directed along (x_dist, y_dist) / r

    Args:
        x_dist, y_dist: Separation components [cells]
        q1, q2: Charges

    Returns:
        (fx, fy): Force components
    """
    r2 = x_dist * x_dist + y_dist * y_dist
    r = math.sqrt(r2)
    f_coulomb = q1 * q2 / r2

    fx = f_coulomb * x_dist / r  # f_coulomb * cos_theta
    fy = f_coulomb * y_dist / r  # f_coulomb * sin_theta

    return fx, fy


@numba.njit
def compute_total_force(x, y, q, charges):
    """
    Total Coulomb force on a particle from the charges of its enclosing cell.

    The corner contributions are accumulated in a fixed order (TL, BL, TR,
    BR) so that the result is bit-identical between runs.

    Args:
        x, y: Particle position [cells]
        q: Particle charge
        charges: Grid charge array, indexed [x, y]

    Returns:
        (fx, fy): Total force components
    """
    # Coordinates of the cell containing the particle
    cx = int(np.floor(x))
    cy = int(np.floor(y))
    rel_x = x - cx
    rel_y = y - cy

    res_x = 0.0
    res_y = 0.0

    # Top-left charge
    fx, fy = compute_coulomb(rel_x, rel_y, q, charges[cx, cy])
    res_x += fx
    res_y += fy

    # Bottom-left charge
    fx, fy = compute_coulomb(rel_x, 1.0 - rel_y, q, charges[cx, cy + 1])
    res_x += fx
    res_y -= fy

    # Top-right charge
    fx, fy = compute_coulomb(1.0 - rel_x, rel_y, q, charges[cx + 1, cy])
    res_x -= fx
    res_y += fy

    # Bottom-right charge
    fx, fy = compute_coulomb(1.0 - rel_x, 1.0 - rel_y, q, charges[cx + 1, cy + 1])
    res_x -= fx
    res_y -= fy

    return res_x, res_y


# ==================== INTEGRATOR ====================


@numba.njit
def move_particle(x, y, vx, vy, ax, ay, L):
    """
    Advance one particle by one time step under constant acceleration.

        x' = (x + vx*dt + 0.5*ax*dt^2 + L) mod L
        v' = v + a*dt

    The modulus is a floor modulus, so the result lies in [0, L) for any
    displacement, including drifts of more than one period per step.
    Wraparound is on the cell count L, not on the number of grid points.

    Args:
        x, y: Position [cells]
        vx, vy: Velocity [cells/step]
        ax, ay: Acceleration [cells/step^2]
        L: Periodic domain length [cells]

    Returns:
        (x, y, vx, vy): Updated kinematics
    """
    x_new = (x + vx * DT + 0.5 * ax * DT * DT + L) % L
    y_new = (y + vy * DT + 0.5 * ay * DT * DT + L) % L

    return x_new, y_new, vx + ax * DT, vy + ay * DT


@numba.njit(parallel=True)
def push_particles(x, y, vx, vy, q, charges, L, n_particles):
    """
    Compute forces on and move the first n_particles particles.

    Particles do not interact, so the loop is parallel; every particle's
    arithmetic is the same as in a sequential sweep.

    Args:
        x, y: Position arrays [cells] (modified in-place)
        vx, vy: Velocity arrays [cells/step] (modified in-place)
        q: Charge array
        charges: Grid charge array, indexed [x, y]
        L: Periodic domain length [cells]
        n_particles: Number of live particles
    """
    for i in prange(n_particles):
        fx, fy = compute_total_force(x[i], y[i], q[i], charges)
        ax = fx * MASS_INV
        ay = fy * MASS_INV
        x_new, y_new, vx_new, vy_new = move_particle(
            x[i], y[i], vx[i], vy[i], ax, ay, L
        )
        x[i] = x_new
        y[i] = y_new
        vx[i] = vx_new
        vy[i] = vy_new


def push_population(store, grid):
    """
    Force + move pass over every live particle of a ParticleStore.

    Args:
        store: ParticleStore
        grid: ChargeGrid
    """
    push_particles(
        store.x, store.y, store.vx, store.vy, store.q,
        grid.charges, float(grid.n_cells), store.n_particles,
    )
