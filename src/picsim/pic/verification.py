"""
Analytic Trajectory Verification

Every particle's charge is designed so that it drifts exactly 2k+1 cells
per step horizontally and m cells per step vertically. The verifier
reconstructs the expected position from the particle's creation record
and compares it with the simulated one.
"""

import numpy as np
import numba

from ..constants import EPSILON


@numba.njit
def verify_particle(x, y, q, x0, y0, k, m, init_timestamp, current_step, charges, L):
    """
    Check one particle against its analytic position.

    The horizontal direction follows the sign of q times the charge at the
    creation cell: like charges push the particle to the right.

        x_T = x0 +/- elapsed * (2k+1)
        y_T = y0 + m * elapsed

    Both targets are wrapped periodically on L after adding a whole number
    of periods, so the modulus never sees a negative argument.

    Args:
        x, y: Simulated position [cells]
        q: Particle charge
        x0, y0: Position at creation [cells]
        k, m: Drift parameters
        init_timestamp: Creation step
        current_step: Step at which the check happens
        charges: Grid charge array, indexed [x, y]
        L: Periodic domain length [cells]

    Returns:
        ok: True if both coordinates match within EPSILON
    """
    total_steps = current_step - init_timestamp
    drift = 2 * k + 1

    # Coordinates of the cell containing the particle initially
    cx = int(np.floor(x0))
    cy = int(np.floor(y0))

    if q * charges[cx, cy] > 0:
        x_T = x0 + total_steps * drift
    else:
        x_T = x0 - total_steps * drift
    y_T = y0 + m * total_steps

    x_periodic = (x_T + total_steps * drift * L) % L
    y_periodic = (y_T + total_steps * abs(m) * L) % L

    if abs(x - x_periodic) > EPSILON or abs(y - y_periodic) > EPSILON:
        return False

    return True


@numba.njit
def verify_particles(
    x, y, q, x0, y0, k, m, init_timestamp, indices, current_step, charges, L
):
    """
    Verify a subset of particles.

    Args:
        (particle arrays): As stored in ParticleStore
        indices: Integer array of particle indices to check
        current_step: Step at which the check happens
        charges: Grid charge array
        L: Periodic domain length [cells]

    Returns:
        ok: Boolean array, one entry per index
    """
    n = indices.shape[0]
    ok = np.empty(n, dtype=np.bool_)

    for j in range(n):
        i = indices[j]
        ok[j] = verify_particle(
            x[i], y[i], q[i], x0[i], y0[i], k[i], m[i], init_timestamp[i],
            current_step, charges, L,
        )

    return ok


def verify_subset(store, indices, current_step, grid):
    """
    Verify the particles of a ParticleStore listed in `indices`.

    Returns:
        ok: Boolean array aligned with `indices`
    """
    indices = np.asarray(indices, dtype=np.int64)
    return verify_particles(
        store.x, store.y, store.q, store.x0, store.y0,
        store.k, store.m, store.init_timestamp,
        indices, current_step, grid.charges, float(grid.n_cells),
    )


def verify_population(store, current_step, grid):
    """
    Verify every live particle.

    Returns:
        ok: True if all particles are where their design says (also True
            for an empty population)
    """
    indices = np.arange(store.n_particles, dtype=np.int64)
    return bool(np.all(verify_subset(store, indices, current_step, grid)))
