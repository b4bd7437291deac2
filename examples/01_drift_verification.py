"""
Example 01: Analytic Drift Verification

Demonstrates:
- Seeding particles with each density profile
- Designed charges producing an exact drift of 2k+1 cells per step
- Step-by-step verification against the closed-form trajectory
- Throughput measurement

Reference scenario: L=10, n=100, T=10, k=1, m=1, GEOMETRIC rho=0.5
"""

import numpy as np
import matplotlib.pyplot as plt

from picsim.config import BoundingPatch, SimulationConfig
from picsim.simulation import Simulation, run_simulation
from picsim.diagnostics import column_density, plot_population


def example_1_reference_scenario():
    """Example 1: Reference scenario, verified at every step."""
    print("\n" + "="*60)
    print("Example 1: Geometric profile, k=1, m=1")
    print("="*60)

    config = SimulationConfig(
        steps=10, n_cells=10, n_particles=100, k=1, m=1,
        init_mode="GEOMETRIC", rho=0.5,
    )
    sim = Simulation(config)

    print(f"\nColumn counts at t=0: {column_density(sim.particles, sim.grid)}")

    x0 = sim.particles.x[:100].copy()

    for t in range(config.steps + 1):
        sim.step(t)
        ok = sim.verify(t + 1)
        shift = np.mean(np.mod(sim.particles.x[:100] - x0, 10))
        print(f"  step {t:2d}: mean x shift (mod 10) = {shift:5.2f}, verified = {ok}")

    sim.particles.summary()


def example_2_all_profiles():
    """Example 2: Every density profile on a larger grid."""
    print("\n" + "="*60)
    print("Example 2: Density profiles")
    print("="*60)

    profiles = {
        "GEOMETRIC": {"rho": 0.95},
        "SINUSOIDAL": {},
        "LINEAR": {"alpha": 1.0, "beta": 2.0},
        "PATCH": {"init_patch": BoundingPatch(10, 30, 10, 30)},
    }

    fig, axes = plt.subplots(2, 2, figsize=(10, 8))

    for ax, (mode, params) in zip(axes.flat, profiles.items()):
        config = SimulationConfig(
            steps=50, n_cells=40, n_particles=20000, k=0, m=1,
            init_mode=mode, **params,
        )
        sim = Simulation(config)
        ax.bar(np.arange(40) + 0.5, column_density(sim.particles, sim.grid), width=0.9)
        ax.set_title(mode)
        ax.set_xlabel("column")
        ax.set_ylabel("particles")

        result = sim.run()
        print(f"  {mode:10s}: {result}")

    plt.tight_layout()
    plt.savefig("01_density_profiles.png", dpi=150)
    print("\nSaved: 01_density_profiles.png")


def example_3_throughput():
    """Example 3: Particles moved per second for growing populations."""
    print("\n" + "="*60)
    print("Example 3: Throughput")
    print("="*60)

    for n in [1_000, 10_000, 100_000]:
        config = SimulationConfig(
            steps=100, n_cells=1000, n_particles=n, k=1, m=1,
            init_mode="SINUSOIDAL",
        )
        result = run_simulation(config)
        print(f"  n = {n:7,d}: {1e-6 * result.rate:8.2f} Mparticles_moved/s "
              f"(validates: {result.correct})")


if __name__ == "__main__":
    example_1_reference_scenario()
    example_2_all_profiles()
    example_3_throughput()

    # Final snapshot of the reference scenario
    config = SimulationConfig(
        steps=10, n_cells=10, n_particles=100, k=1, m=1,
        init_mode="GEOMETRIC", rho=0.5,
    )
    sim = Simulation(config)
    sim.run()
    plot_population(sim.particles, sim.grid, "01_final_population.png", title="t = 11")
    print("Saved: 01_final_population.png")
