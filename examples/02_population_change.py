"""
Example 02: Injection and Removal

Demonstrates:
- Injecting a block of particles mid-run (created with k=0, m=0)
- Removing every particle inside a patch, verifying each on the way out
- Particle-step accounting with a changing population
"""

from picsim.config import BoundingPatch, SimulationConfig
from picsim.simulation import Simulation
from picsim.diagnostics import plot_population


def example_1_injection():
    """Example 1: Inject 4 particles per cell into [5,10) x [5,10) at step 20."""
    print("\n" + "="*60)
    print("Example 1: Injection")
    print("="*60)

    config = SimulationConfig(
        steps=50, n_cells=20, n_particles=1000, k=2, m=-1,
        init_mode="LINEAR", alpha=1.0, beta=1.5,
        injection_patch=BoundingPatch(5, 10, 5, 10),
        injection_step=20,
        particles_per_cell=4,
    )

    sim = Simulation(config)
    result = sim.run()

    print(f"\n  Injected:       {result.n_injected}")
    print(f"  Final count:    {result.n_particles}")
    print(f"  Particle steps: {result.particle_steps:,}")
    print(f"  {result}")

    plot_population(sim.particles, sim.grid, "02_injection.png",
                    title="Injection at t = 20")
    print("\nSaved: 02_injection.png")


def example_2_removal():
    """Example 2: Remove everything in (0,10) x (0,21) at step 15."""
    print("\n" + "="*60)
    print("Example 2: Removal")
    print("="*60)

    config = SimulationConfig(
        steps=50, n_cells=20, n_particles=2000, k=0, m=2,
        init_mode="PATCH", init_patch=BoundingPatch(0, 20, 0, 20),
        removal_patch=BoundingPatch(0, 10, 0, 21),
        removal_step=15,
    )

    sim = Simulation(config)
    result = sim.run()

    print(f"\n  Removed:        {result.n_removed}")
    print(f"  Final count:    {result.n_particles}")
    print(f"  Particle steps: {result.particle_steps:,}")
    print(f"  {result}")


if __name__ == "__main__":
    example_1_injection()
    example_2_removal()
