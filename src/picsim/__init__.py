"""
PICSim: Particle-in-Cell Proxy Simulation

Charged particles drift through a static, periodic grid of dipole
charges. Particle charges are designed so every trajectory has a closed
form, which makes the simulation self-verifying.

Version: 0.1.0
"""

__version__ = "0.1.0"

# Import key classes for convenient access
from .config import BoundingPatch, SimulationConfig, ConfigurationError
from .particles import Particle, ParticleStore
from .rng import DeterministicSequenceGenerator
from .pic.grid import ChargeGrid
from .simulation import Simulation, SimulationResult, SimulationState, run_simulation

__all__ = [
    "BoundingPatch",
    "SimulationConfig",
    "ConfigurationError",
    "Particle",
    "ParticleStore",
    "DeterministicSequenceGenerator",
    "ChargeGrid",
    "Simulation",
    "SimulationResult",
    "SimulationState",
    "run_simulation",
]
