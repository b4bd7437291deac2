"""
PICSim Test Suite

Tests organized by:
- test_grid.py: Charge grid
- test_rng.py: Deterministic sequence generator
- test_particles.py: Particle store
- test_initialization.py: Density profiles and charge design
- test_pic_mover.py: Coulomb force and integrator
- test_verification.py: Analytic trajectory check
- test_population.py: Injection and removal
- test_simulation.py: Time-step driver, end-to-end scenarios
- test_config.py / test_cli.py: Configuration and command line
- test_diagnostics.py: Column density and plots
"""
