"""
Particle-in-Cell (PIC) Module

Field, force and verification kernels for the PIC proxy.

Components:
- grid: static grid of dipole charges
- mover: Coulomb force from the cell corners + explicit integrator
- verification: analytic trajectory check
"""

from .grid import ChargeGrid, build_charge_grid
from .mover import (
    compute_coulomb,
    compute_total_force,
    move_particle,
    push_particles,
    push_population,
)
from .verification import (
    verify_particle,
    verify_particles,
    verify_subset,
    verify_population,
)

__all__ = [
    # Grid
    "ChargeGrid",
    "build_charge_grid",
    # Mover
    "compute_coulomb",
    "compute_total_force",
    "move_particle",
    "push_particles",
    "push_population",
    # Verification
    "verify_particle",
    "verify_particles",
    "verify_subset",
    "verify_population",
]
