"""
Static Charge Grid

Fixed field of point charges at the vertices of a square, unit-spaced
grid. Charges alternate sign by column, forming vertical dipole lines:

    y  ^
       |   +Q  -Q  +Q  -Q  ...
       |   +Q  -Q  +Q  -Q  ...
       |   +Q  -Q  +Q  -Q  ...
    (0,0)------------------> x

Design Philosophy:
- Built once per run, read-only afterwards
- Stored as a plain numpy array so numba kernels can index it directly
"""

import numpy as np
from numba import njit

from ..constants import Q


@njit
def build_charge_grid(g):
    """
    Fill a g x g charge array with the column-parity dipole pattern.

    Args:
        g: Number of grid points per side (cells + 1)

    Returns:
        charges: Array of shape (g, g), indexed [x, y]
    """
    charges = np.empty((g, g), dtype=np.float64)

    for x in range(g):
        value = Q if x % 2 == 0 else -Q
        for y in range(g):
            charges[x, y] = value

    return charges


class ChargeGrid:
    """
    Immutable grid of point charges.

    Attributes:
        n_cells: Number of cells per side (L, even)
        size: Number of grid points per side (g = L + 1)
        charges: Read-only charge array, shape (g, g), indexed [x, y]
    """

    def __init__(self, n_cells: int):
        """
        Build the charge grid.

        Args:
            n_cells: Number of cells per side; must be positive and even
                so the parity pattern is consistent across the periodic
                boundary

        Raises:
            ValueError: If n_cells is not positive and even
        """
        if n_cells < 1 or n_cells % 2:
            raise ValueError(
                f"Number of grid cells must be positive and even: {n_cells}"
            )

        self.n_cells = int(n_cells)
        self.size = self.n_cells + 1

        self.charges = build_charge_grid(self.size)
        self.charges.flags.writeable = False

    def charge_at(self, x: int, y: int) -> float:
        """
        Charge stored at integer grid point (x, y).

        Raises:
            IndexError: If (x, y) lies outside the grid
        """
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(
                f"Grid point ({x}, {y}) outside grid of size {self.size}"
            )
        return float(self.charges[x, y])

    def __repr__(self):
        return f"ChargeGrid(n_cells={self.n_cells}, size={self.size})"
