"""
Run Configuration

Typed, validated description of a single PIC run. Every field the
simulation core reads lives here; the command line (see cli.py) is just
one way of building it.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from .constants import (
    GEOMETRIC,
    LINEAR,
    PATCH,
    INIT_MODES,
    LCG_SEED,
)


class ConfigurationError(ValueError):
    """Raised when a run configuration is inconsistent."""


@dataclass(frozen=True)
class BoundingPatch:
    """
    Axis-aligned half-open integer region [xleft, xright) x [ybottom, ytop).
    """
    xleft: int
    xright: int
    ybottom: int
    ytop: int

    @property
    def width(self) -> int:
        return self.xright - self.xleft

    @property
    def height(self) -> int:
        return self.ytop - self.ybottom

    @property
    def n_cells(self) -> int:
        """Number of unit cells covered by the patch."""
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.xleft >= self.xright or self.ybottom >= self.ytop

    def contains(self, other: "BoundingPatch") -> bool:
        """True if `other` lies entirely inside this patch."""
        return (self.xleft <= other.xleft and other.xright <= self.xright
                and self.ybottom <= other.ybottom and other.ytop <= self.ytop)

    def validate(self, container: Optional["BoundingPatch"] = None, name: str = "patch"):
        """
        Check the patch is well formed and, optionally, inside `container`.

        Raises:
            ConfigurationError: If the patch is empty or sticks out
        """
        if self.is_empty():
            raise ConfigurationError(f"Inconsistent {name}: {self}")
        if container is not None and not container.contains(self):
            raise ConfigurationError(
                f"Inconsistent {name}: {self} not contained in {container}"
            )

    def __str__(self):
        return f"{self.xleft}, {self.xright}, {self.ybottom}, {self.ytop}"


@dataclass
class SimulationConfig:
    """
    Configuration for a PIC proxy run.

    Attributes:
        steps: Number of simulation steps T (the loop runs t = 0..T)
        n_cells: Grid cells per side L (positive, even)
        n_particles: Initial number of particles
        k: Horizontal drift index; particles move 2k+1 cells per step
        m: Vertical velocity in cells per step
        init_mode: One of GEOMETRIC, SINUSOIDAL, LINEAR, PATCH
        rho: Attenuation factor (GEOMETRIC)
        alpha: Negative slope (LINEAR)
        beta: Offset (LINEAR)
        init_patch: Seeding region (PATCH)
        injection_patch: Region receiving new particles, if any
        injection_step: Step at which injection happens
        particles_per_cell: Particles injected into each patch cell
        removal_patch: Region emptied at removal time, if any
        removal_step: Step at which removal happens
        seed: Seed of the deterministic sequence generator
    """

    steps: int
    n_cells: int
    n_particles: int
    k: int = 0
    m: int = 0
    init_mode: str = GEOMETRIC

    rho: Optional[float] = None
    alpha: Optional[float] = None
    beta: Optional[float] = None
    init_patch: Optional[BoundingPatch] = None

    injection_patch: Optional[BoundingPatch] = None
    injection_step: int = 0
    particles_per_cell: int = 0

    removal_patch: Optional[BoundingPatch] = None
    removal_step: int = 0

    seed: int = LCG_SEED

    @property
    def grid_size(self) -> int:
        """Grid points per side, g = L + 1."""
        return self.n_cells + 1

    @property
    def grid_patch(self) -> BoundingPatch:
        """Whole grid domain [0, g) x [0, g)."""
        return BoundingPatch(0, self.grid_size, 0, self.grid_size)

    @property
    def cell_patch(self) -> BoundingPatch:
        """Cells whose four corners are all grid points, [0, L) x [0, L)."""
        return BoundingPatch(0, self.n_cells, 0, self.n_cells)

    @property
    def injection_enabled(self) -> bool:
        return self.injection_patch is not None

    @property
    def removal_enabled(self) -> bool:
        return self.removal_patch is not None

    @property
    def particles_injected(self) -> int:
        """Number of particles the injection event adds."""
        if not self.injection_enabled:
            return 0
        return self.injection_patch.n_cells * self.particles_per_cell

    def validate(self):
        """
        Check the configuration before any allocation happens.

        Returns:
            self, to allow chaining

        Raises:
            ConfigurationError: On the first inconsistency found
        """
        if self.steps < 1:
            raise ConfigurationError(
                f"Number of time steps must be positive: {self.steps}"
            )
        if self.n_cells < 1 or self.n_cells % 2:
            raise ConfigurationError(
                f"Number of grid cells must be positive and even: {self.n_cells}"
            )
        if self.n_particles < 1:
            raise ConfigurationError(
                f"Number of particles must be positive: {self.n_particles}"
            )
        if self.k < 0:
            raise ConfigurationError(
                f"Particle semi-charge must be non-negative: {self.k}"
            )
        if self.init_mode not in INIT_MODES:
            raise ConfigurationError(
                f"Unsupported particle initialization mode: {self.init_mode}"
            )

        self._validate_init_parameters()

        if self.injection_enabled:
            if self.particles_per_cell < 0:
                raise ConfigurationError(
                    "Injected particles per cell need to be non-negative: "
                    f"{self.particles_per_cell}"
                )
            if self.injection_step < 0:
                raise ConfigurationError(
                    f"Injection time step needs to be non-negative: {self.injection_step}"
                )
            self.injection_patch.validate(self.cell_patch, name="injection patch")

        if self.removal_enabled:
            if self.removal_step < 0:
                raise ConfigurationError(
                    f"Removal time step needs to be non-negative: {self.removal_step}"
                )
            self.removal_patch.validate(self.grid_patch, name="removal patch")

        if self.seed < 0:
            raise ConfigurationError(f"Seed must be non-negative: {self.seed}")

        return self

    def _validate_init_parameters(self):
        if self.init_mode == GEOMETRIC:
            if self.rho is None:
                raise ConfigurationError("GEOMETRIC mode needs an attenuation factor")
            # A = n(1-rho)/(1-rho^(g-1)) is undefined at rho == 1
            if math.isclose(self.rho, 1.0):
                raise ConfigurationError(
                    f"Attenuation factor must not be 1: {self.rho}"
                )
            # Negative factors would give negative column counts
            if self.rho < 0:
                raise ConfigurationError(
                    f"Attenuation factor must be non-negative: {self.rho}"
                )

        elif self.init_mode == LINEAR:
            if self.alpha is None or self.beta is None:
                raise ConfigurationError("LINEAR mode needs a slope and an offset")
            # Weight is linear in x, so checking the end columns suffices
            if self.beta <= 0 or self.beta - self.alpha <= 0:
                raise ConfigurationError(
                    "LINEAR weights must be positive on every column: "
                    f"alpha={self.alpha}, beta={self.beta}"
                )

        elif self.init_mode == PATCH:
            if self.init_patch is None:
                raise ConfigurationError("PATCH mode needs a bounding box")
            self.init_patch.validate(self.cell_patch, name="initial patch")

    def describe(self) -> List[str]:
        """Human-readable configuration echo, one line per entry."""
        lines = [
            f"Grid size                      = {self.n_cells}",
            f"Initial number of particles    = {self.n_particles}",
            f"Number of time steps           = {self.steps}",
            f"Initialization mode            = {self.init_mode}",
        ]

        if self.init_mode == GEOMETRIC:
            lines.append(f"  Attenuation factor           = {self.rho:f}")
        elif self.init_mode == LINEAR:
            lines.append(f"  Negative slope               = {self.alpha:f}")
            lines.append(f"  Offset                       = {self.beta:f}")
        elif self.init_mode == PATCH:
            lines.append(f"  Bounding box                 = {self.init_patch}")

        lines.append(f"Particle charge semi-increment = {self.k}")
        lines.append(f"Vertical velocity              = {self.m}")

        if self.injection_enabled:
            lines.append("Population change mode         = INJECTION")
            lines.append(f"  Bounding box                 = {self.injection_patch}")
            lines.append(f"  Injection time step          = {self.injection_step}")
            lines.append(f"  Particles per cell           = {self.particles_per_cell}")
            lines.append(f"  Total particles added        = {self.particles_injected}")
        if self.removal_enabled:
            lines.append("Population change mode         = REMOVAL")
            lines.append(f"  Bounding box                 = {self.removal_patch}")
            lines.append(f"  Removal time step            = {self.removal_step}")

        return lines
