"""
Command-line front end.

Usage:
    picsim [options] <#steps> <grid size> <#particles> <k> <m>
           <init mode> <init parameters>
           [<population change mode> <population change parameters>]

    init mode "GEOMETRIC"  parameters: <attenuation factor>
              "SINUSOIDAL" parameters: none
              "LINEAR"     parameters: <slope> <constant>
              "PATCH"      parameters: <xleft> <xright> <ybottom> <ytop>
    population change mode
              "INJECTION"  parameters: <#particles per cell> <time step>
                                       <xleft> <xright> <ybottom> <ytop>
              "REMOVAL"    parameters: <time step>
                                       <xleft> <xright> <ybottom> <ytop>

Options (--seed, --plot, ...) must precede the positional arguments.

Exit status: 0 if the run validates, 1 if it does not, 2 on bad input.
"""

import argparse
import logging
import sys

from . import __version__
from .config import BoundingPatch, ConfigurationError, SimulationConfig
from .constants import (
    GEOMETRIC,
    LINEAR,
    PATCH,
    INIT_MODES,
    INIT_MODE_NARGS,
    INJECTION,
    REMOVAL,
    LCG_SEED,
)
from .simulation import Simulation
from .utils import setup_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILURE = 1


def _int(token, name):
    try:
        return int(token)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer: {token!r}") from None


def _float(token, name):
    try:
        return float(token)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number: {token!r}") from None


def _patch(tokens, name):
    if len(tokens) != 4:
        raise ConfigurationError(f"{name} needs 4 coordinates, got {len(tokens)}")
    return BoundingPatch(*(_int(t, name) for t in tokens))


def parse_mode_arguments(init_mode, tokens):
    """
    Parse the initialization parameters and the optional population-change
    clause that follow the init mode.

    Args:
        init_mode: Initialization mode name
        tokens: Remaining command-line tokens

    Returns:
        fields: Dict of SimulationConfig keyword arguments

    Raises:
        ConfigurationError: On unknown modes or missing/malformed values
    """
    if init_mode not in INIT_MODES:
        raise ConfigurationError(f"Unsupported particle initialization mode: {init_mode}")

    # Everything after the init mode is taken verbatim, so a late option
    # would otherwise be read as a mode parameter
    for token in tokens:
        if token.startswith("--"):
            raise ConfigurationError(
                f"Options must come before the positional arguments: {token}"
            )

    nargs = INIT_MODE_NARGS[init_mode]
    if len(tokens) < nargs:
        raise ConfigurationError("Not enough arguments")

    params, rest = tokens[:nargs], tokens[nargs:]
    fields = {"init_mode": init_mode}

    if init_mode == GEOMETRIC:
        fields["rho"] = _float(params[0], "Attenuation factor")
    elif init_mode == LINEAR:
        fields["alpha"] = _float(params[0], "Slope")
        fields["beta"] = _float(params[1], "Constant")
    elif init_mode == PATCH:
        fields["init_patch"] = _patch(params, "initial patch")

    if not rest:
        return fields

    change_mode, args = rest[0], rest[1:]

    if change_mode == INJECTION:
        if len(args) != 6:
            raise ConfigurationError("INJECTION needs 6 parameters")
        fields["particles_per_cell"] = _int(args[0], "Particles per cell")
        fields["injection_step"] = _int(args[1], "Injection time step")
        fields["injection_patch"] = _patch(args[2:], "injection patch")
    elif change_mode == REMOVAL:
        if len(args) != 5:
            raise ConfigurationError("REMOVAL needs 5 parameters")
        fields["removal_step"] = _int(args[0], "Removal time step")
        fields["removal_patch"] = _patch(args[1:], "removal patch")
    else:
        raise ConfigurationError(f"Unsupported population change mode: {change_mode}")

    return fields


def build_parser():
    parser = argparse.ArgumentParser(
        prog="picsim",
        description="Particle-in-cell proxy: charged particles drifting "
                    "through a periodic grid of fixed charges.",
        epilog="Options must precede the positional arguments.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--seed", type=int, default=LCG_SEED,
                        help="seed of the deterministic sequence generator")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log here")
    parser.add_argument("--plot", default=None, metavar="FILE",
                        help="save a snapshot of the final population")

    parser.add_argument("steps", type=int, help="number of simulation steps")
    parser.add_argument("grid_size", type=int, help="grid cells per side (even)")
    parser.add_argument("n_particles", type=int, help="initial number of particles")
    parser.add_argument("k", type=int, help="particle charge semi-increment")
    parser.add_argument("m", type=int, help="vertical particle velocity")
    parser.add_argument("init_mode", choices=INIT_MODES, help="initialization mode")
    parser.add_argument("params", nargs=argparse.REMAINDER,
                        help="init parameters and optional population change clause")
    return parser


def config_from_args(args):
    """Turn parsed arguments into a validated SimulationConfig."""
    fields = parse_mode_arguments(args.init_mode, list(args.params))
    config = SimulationConfig(
        steps=args.steps,
        n_cells=args.grid_size,
        n_particles=args.n_particles,
        k=args.k,
        m=args.m,
        seed=args.seed,
        **fields,
    )
    return config.validate()


def main(argv=None):
    """
    Entry point.

    Returns:
        status: Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    logger.info("Particle-in-Cell execution on 2D grid")
    for line in config.describe():
        logger.info(line)

    simulation = Simulation(config)
    result = simulation.run()

    if args.plot:
        from .diagnostics import plot_population

        plot_population(simulation.particles, simulation.grid, args.plot,
                        title=f"t = {config.steps + 1}")
        logger.info("Population snapshot written to %s", args.plot)

    if not result.correct:
        return EXIT_VALIDATION_FAILURE

    logger.info("Final number of particles = %d", result.n_particles)
    logger.info("Simulation time is %f seconds", result.simulation_time)
    logger.info("Rate (Mparticles_moved/s): %f", 1.0e-6 * result.rate)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
