"""
Population diagnostics: column density profile and position snapshots.
"""

import numpy as np
from numba import njit
import matplotlib.pyplot as plt


@njit
def compute_column_counts(x, n_particles, n_cells):
    """
    Number of particles in each column of cells.

    Args:
        x: Horizontal positions (n_max,) [cells]
        n_particles: Number of live particles
        n_cells: Cells per side

    Returns:
        counts: Particles per column (n_cells,)
    """
    counts = np.zeros(n_cells, dtype=np.int64)

    for i in range(n_particles):
        col = int(np.floor(x[i]))
        if 0 <= col < n_cells:
            counts[col] += 1

    return counts


def column_density(store, grid):
    """Column counts of a ParticleStore on a ChargeGrid."""
    return compute_column_counts(store.x, store.n_particles, grid.n_cells)


def plot_population(store, grid, filename=None, title=None):
    """
    Scatter plot of particle positions over the grid, coloured by charge
    sign, with the column density profile underneath.

    Args:
        store: ParticleStore
        grid: ChargeGrid
        filename: If given, the figure is saved there and closed
        title: Optional figure title

    Returns:
        fig: matplotlib Figure (None once saved and closed)
    """
    n = store.n_particles
    L = grid.n_cells

    fig, (ax_pos, ax_col) = plt.subplots(
        2, 1, figsize=(6, 8), gridspec_kw={"height_ratios": [3, 1]}
    )

    positive = store.q[:n] > 0
    ax_pos.scatter(store.x[:n][positive], store.y[:n][positive],
                   s=8, c="tab:red", label="q > 0")
    ax_pos.scatter(store.x[:n][~positive], store.y[:n][~positive],
                   s=8, c="tab:blue", label="q < 0")
    ax_pos.set_xlim(0, L)
    ax_pos.set_ylim(0, L)
    ax_pos.set_xticks(np.arange(0, L + 1))
    ax_pos.set_yticks(np.arange(0, L + 1))
    ax_pos.grid(True, alpha=0.3)
    ax_pos.set_aspect("equal")
    ax_pos.set_xlabel("x [cells]")
    ax_pos.set_ylabel("y [cells]")
    ax_pos.legend(loc="upper right")

    counts = column_density(store, grid)
    ax_col.bar(np.arange(L) + 0.5, counts, width=0.9, color="gray")
    ax_col.set_xlim(0, L)
    ax_col.set_xlabel("column")
    ax_col.set_ylabel("particles")

    if title:
        fig.suptitle(title)
    fig.tight_layout()

    if filename:
        fig.savefig(filename, dpi=100)
        plt.close(fig)
        return None

    return fig
