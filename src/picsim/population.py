"""
Population Changes: Injection and Removal

Particles enter the simulation in bulk at the injection step and leave
in bulk at the removal step. Removed particles are verified on the way
out, so removal also contributes to the run's correctness flag.
"""

import logging

import numpy as np

from .constants import REL_X, REL_Y
from .initialization import finish_distribution
from .pic.verification import verify_subset

logger = logging.getLogger(__name__)


def inject_particles(store, timestep, patch, particles_per_cell):
    """
    Add particles_per_cell particles to every cell of a patch.

    New particles sit at (REL_X, REL_Y) inside their cell (y outer, x
    inner). They always get drift parameters k = 0, m = 0, whatever the
    run's k and m are.

    Args:
        store: ParticleStore (grown in place)
        timestep: Current step; becomes the particles' init_timestamp
        patch: BoundingPatch inside the cell domain
        particles_per_cell: Non-negative number of particles per cell

    Returns:
        n_injected: Number of particles added
    """
    if particles_per_cell < 0:
        raise ValueError(
            f"Injected particles per cell need to be non-negative: {particles_per_cell}"
        )

    rows = np.arange(patch.ybottom, patch.ytop, dtype=np.float64)
    cols = np.arange(patch.xleft, patch.xright, dtype=np.float64)

    # y outer, x inner, particles_per_cell copies per cell
    yy, xx = np.meshgrid(rows, cols, indexing="ij")
    x = np.repeat(xx.ravel(), particles_per_cell) + REL_X
    y = np.repeat(yy.ravel(), particles_per_cell) + REL_Y

    start, stop = store.append_positions(x, y)
    finish_distribution(store, start, stop, timestep, 0, 0)

    n_injected = stop - start
    logger.info(
        "Step %d: injected %d particles into patch [%s]", timestep, n_injected, patch
    )

    return n_injected


def particles_inside(store, patch):
    """
    Mask of live particles strictly inside a patch.

    Particles exactly on a patch boundary are outside.

    Returns:
        mask: Boolean array of shape (n_particles,)
    """
    n = store.n_particles
    x = store.x[:n]
    y = store.y[:n]

    return ((x > patch.xleft) & (x < patch.xright) &
            (y > patch.ybottom) & (y < patch.ytop))


def remove_particles(store, timestep, patch, grid):
    """
    Verify and drop every particle strictly inside a patch.

    Survivors are compacted into a contiguous prefix in their original
    order.

    Args:
        store: ParticleStore (compacted in place)
        timestep: Current step, used to verify the removed particles
        patch: BoundingPatch
        grid: ChargeGrid

    Returns:
        (n_removed, correct): Number of removed particles and 1 if all of
            them verified, else 0
    """
    inside = particles_inside(store, patch)
    removed = np.flatnonzero(inside)

    correct = 1
    if removed.size > 0:
        ok = verify_subset(store, removed, timestep, grid)
        if not np.all(ok):
            correct = 0
            logger.warning(
                "Step %d: %d of %d removed particles failed verification",
                timestep, int(np.sum(~ok)), removed.size,
            )

    n_removed = store.compact(~inside)
    logger.info(
        "Step %d: removed %d particles from patch [%s]", timestep, n_removed, patch
    )

    return n_removed, correct
