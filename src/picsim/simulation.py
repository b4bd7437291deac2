"""
PIC Proxy Simulation Driver

Owns the time-step loop:

    t = 0         warm-up step (not timed)
    t = 1 .. T    timed steps
    t = T + 1     verification only

At each step, injection and removal (if scheduled for exactly this step)
complete before the force/move pass over the live population.
"""

import logging
import time
from dataclasses import dataclass

from .config import SimulationConfig
from .rng import DeterministicSequenceGenerator
from .initialization import create_population
from .population import inject_particles, remove_particles
from .pic.grid import ChargeGrid
from .pic.mover import push_population
from .pic.verification import verify_population

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """
    Mutable counters of a run, owned by the driver.

    Attributes:
        step: Current step t
        n_particles: Live particle count
        particle_steps: Particle moves performed inside the timed interval
        partial_correctness: 1 until a removed particle fails verification
        n_injected: Particles added by injection
        n_removed: Particles dropped by removal
    """
    step: int = 0
    n_particles: int = 0
    particle_steps: int = 0
    partial_correctness: int = 1
    n_injected: int = 0
    n_removed: int = 0


@dataclass
class SimulationResult:
    """Outcome of a completed run."""
    correct: bool
    n_particles: int
    simulation_time: float
    particle_steps: int
    n_injected: int = 0
    n_removed: int = 0

    @property
    def rate(self) -> float:
        """Particles moved per second over the timed interval."""
        if self.simulation_time <= 0.0:
            return 0.0
        return self.particle_steps / self.simulation_time

    def __str__(self):
        status = "Solution validates" if self.correct else "Solution does not validate"
        return (f"{status}: {self.n_particles} particles, "
                f"{self.simulation_time:.6f} s, "
                f"{1.0e-6 * self.rate:.6f} Mparticles_moved/s")


class Simulation:
    """
    Particle-in-cell proxy run.

    Example:
        >>> config = SimulationConfig(steps=10, n_cells=10, n_particles=100,
        ...                           k=1, m=1, init_mode="GEOMETRIC", rho=0.5)
        >>> result = Simulation(config).run()
        >>> result.correct
        True
    """

    def __init__(self, config: SimulationConfig):
        """
        Build grid, sequence generator and initial population.

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.config = config.validate()

        self.grid = ChargeGrid(config.n_cells)
        self.rng = DeterministicSequenceGenerator(config.seed)
        self.particles = create_population(config, self.rng)

        self.state = SimulationState(n_particles=self.particles.n_particles)

        logger.info(
            "Initialized %d particles on a %d x %d cell grid (%s)",
            self.particles.n_particles, config.n_cells, config.n_cells,
            config.init_mode,
        )

    def step(self, t: int):
        """
        Execute simulation step t.

        Population changes scheduled for exactly this step happen first,
        then every live particle is pushed once.
        """
        config = self.config
        state = self.state
        state.step = t

        if config.injection_enabled and t == config.injection_step:
            state.n_injected += inject_particles(
                self.particles, t, config.injection_patch, config.particles_per_cell
            )

        if config.removal_enabled and t == config.removal_step:
            n_removed, correct = remove_particles(
                self.particles, t, config.removal_patch, self.grid
            )
            state.n_removed += n_removed
            state.partial_correctness *= correct

        state.n_particles = self.particles.n_particles

        push_population(self.particles, self.grid)

        if t >= 1:
            state.particle_steps += state.n_particles

        logger.debug("Step %d: moved %d particles", t, state.n_particles)

    def verify(self, current_step: int) -> bool:
        """Verify every live particle at current_step."""
        return verify_population(self.particles, current_step, self.grid)

    def run(self) -> SimulationResult:
        """
        Run steps 0 .. T and verify the survivors at T + 1.

        Returns:
            SimulationResult
        """
        T = self.config.steps
        simulation_time = 0.0

        for t in range(T + 1):
            # Start the timer after one warm-up step
            if t == 1:
                simulation_time = time.time()
            self.step(t)

        simulation_time = time.time() - simulation_time

        finalize_ok = self.verify(T + 1)
        correct = bool(self.state.partial_correctness) and finalize_ok

        result = SimulationResult(
            correct=correct,
            n_particles=self.particles.n_particles,
            simulation_time=simulation_time,
            particle_steps=self.state.particle_steps,
            n_injected=self.state.n_injected,
            n_removed=self.state.n_removed,
        )

        if correct:
            logger.info("Solution validates")
        else:
            logger.warning("Solution does not validate")

        return result


def run_simulation(config: SimulationConfig) -> SimulationResult:
    """Build and run a simulation in one call."""
    return Simulation(config).run()
