"""
Kernel Constants and Mode Identifiers

All quantities are in normalized grid units: one cell has unit width,
one time step has unit length and every particle has unit mass.
"""

import numpy as np

# ==================== FIELD & KINEMATICS ====================

Q = 1.0  # Magnitude of every grid charge
DT = 1.0  # Fixed time step
MASS_INV = 1.0  # Inverse particle mass

# Fractional position of seeded/injected particles inside their cell
REL_X = 0.5
REL_Y = 0.5

# Tolerance for the analytic trajectory check
EPSILON = 1.0e-8

# ==================== INITIALIZATION MODES ====================

GEOMETRIC = "GEOMETRIC"
SINUSOIDAL = "SINUSOIDAL"
LINEAR = "LINEAR"
PATCH = "PATCH"

INIT_MODES = (GEOMETRIC, SINUSOIDAL, LINEAR, PATCH)

# Number of numeric parameters each mode consumes on the command line
INIT_MODE_NARGS = {
    GEOMETRIC: 1,   # rho
    SINUSOIDAL: 0,
    LINEAR: 2,      # alpha, beta
    PATCH: 4,       # xleft, xright, ybottom, ytop
}

# ==================== POPULATION CHANGE ====================

INJECTION = "INJECTION"
REMOVAL = "REMOVAL"

# ==================== SEQUENCE GENERATOR ====================

# Knuth's MMIX linear congruential generator
LCG_A = 6364136223846793005
LCG_C = 1442695040888963407
LCG_SEED = 27182818285
LCG_MASK = (1 << 64) - 1

# ==================== DTYPES ====================

FLOAT_DTYPE = np.float64
INT_DTYPE = np.int64
