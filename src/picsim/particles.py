"""
Particle Data Structures for the PIC Kernel

Uses Structure-of-Arrays (SoA) layout for cache efficiency and Numba performance.
"""

from dataclasses import dataclass

import numpy as np

from .constants import FLOAT_DTYPE, INT_DTYPE


@dataclass(frozen=True)
class Particle:
    """
    Snapshot of a single particle.

    Kinematic fields (x, y, vx, vy) are copied at the time the snapshot
    was taken; provenance fields (x0, y0, k, m, init_timestamp) never
    change after creation.
    """
    x: float
    y: float
    vx: float
    vy: float
    q: float
    x0: float
    y0: float
    k: int
    m: int
    init_timestamp: int


class ParticleStore:
    """
    Growable particle container optimized for Numba JIT compilation.

    Each property is stored in a separate array of length `capacity`;
    only the first `n_particles` entries are live. Growth reallocates
    and copies (capacity at least doubles), removal compacts survivors
    into a contiguous prefix preserving their relative order.

    Attributes:
        x, y: Positions [cells]
        vx, vy: Velocities [cells/step]
        q: Particle charge
        x0, y0: Position at creation
        k: Horizontal drift index
        m: Vertical velocity number [cells/step]
        init_timestamp: Step at which the particle entered the simulation
        n_particles: Current number of live particles
        capacity: Allocated length of every array
    """

    FLOAT_FIELDS = ("x", "y", "vx", "vy", "q", "x0", "y0")
    INT_FIELDS = ("k", "m", "init_timestamp")

    def __init__(self, capacity: int = 0):
        """
        Initialize empty particle arrays.

        Args:
            capacity: Number of particles to pre-allocate
        """
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative: {capacity}")

        self.capacity = capacity
        self.n_particles = 0

        for name in self.FLOAT_FIELDS:
            setattr(self, name, np.zeros(capacity, dtype=FLOAT_DTYPE))
        for name in self.INT_FIELDS:
            setattr(self, name, np.zeros(capacity, dtype=INT_DTYPE))

    def reserve(self, capacity: int):
        """
        Ensure at least `capacity` slots are allocated.

        Live particles are copied into the new arrays; the old arrays are
        dropped, so views taken before a reallocation must not be reused.
        """
        if capacity <= self.capacity:
            return

        new_capacity = max(capacity, 2 * self.capacity)
        n = self.n_particles

        for name in self.FLOAT_FIELDS + self.INT_FIELDS:
            old = getattr(self, name)
            new = np.zeros(new_capacity, dtype=old.dtype)
            new[:n] = old[:n]
            setattr(self, name, new)

        self.capacity = new_capacity

    def append_positions(self, x, y):
        """
        Append particles at the given positions.

        Kinematics and provenance of the new slots are zeroed; callers
        complete them with `finish_distribution`.

        Args:
            x: Horizontal positions, shape (n,)
            y: Vertical positions, shape (n,)

        Returns:
            (start, stop): Index range of the appended particles
        """
        x = np.atleast_1d(np.asarray(x, dtype=FLOAT_DTYPE))
        y = np.atleast_1d(np.asarray(y, dtype=FLOAT_DTYPE))

        if x.shape != y.shape:
            raise ValueError(
                f"Position arrays differ in shape: {x.shape} vs {y.shape}"
            )

        n_add = x.shape[0]
        start = self.n_particles
        stop = start + n_add

        self.reserve(stop)

        for name in self.FLOAT_FIELDS + self.INT_FIELDS:
            getattr(self, name)[start:stop] = 0
        self.x[start:stop] = x
        self.y[start:stop] = y

        self.n_particles = stop

        return start, stop

    def compact(self, keep_mask):
        """
        Drop particles whose mask entry is False.

        Survivors keep their relative order.

        Args:
            keep_mask: Boolean array of shape (n_particles,)

        Returns:
            n_removed: Number of particles dropped
        """
        keep_mask = np.asarray(keep_mask, dtype=np.bool_)
        if keep_mask.shape != (self.n_particles,):
            raise ValueError(
                f"Mask shape {keep_mask.shape} does not match "
                f"{self.n_particles} live particles"
            )

        n_keep = int(np.sum(keep_mask))
        n_removed = self.n_particles - n_keep

        if n_removed == 0:
            return 0

        for name in self.FLOAT_FIELDS + self.INT_FIELDS:
            arr = getattr(self, name)
            arr[:n_keep] = arr[:self.n_particles][keep_mask]

        self.n_particles = n_keep

        return n_removed

    def particle(self, i: int) -> Particle:
        """Snapshot of live particle i."""
        if not 0 <= i < self.n_particles:
            raise IndexError(
                f"Particle index {i} out of range for {self.n_particles} particles"
            )
        return Particle(
            x=float(self.x[i]),
            y=float(self.y[i]),
            vx=float(self.vx[i]),
            vy=float(self.vy[i]),
            q=float(self.q[i]),
            x0=float(self.x0[i]),
            y0=float(self.y0[i]),
            k=int(self.k[i]),
            m=int(self.m[i]),
            init_timestamp=int(self.init_timestamp[i]),
        )

    def positions(self):
        """
        Live positions.

        Returns:
            xy: Array of shape (n_particles, 2)
        """
        n = self.n_particles
        return np.column_stack((self.x[:n], self.y[:n]))

    def __iter__(self):
        for i in range(self.n_particles):
            yield self.particle(i)

    def __len__(self):
        """Return number of live particles."""
        return self.n_particles

    def __repr__(self):
        return (f"ParticleStore(n_particles={self.n_particles}, "
                f"capacity={self.capacity})")

    def summary(self):
        """Print summary statistics."""
        n = self.n_particles
        print(f"\nParticle Store Summary:")
        print(f"  Live particles:   {n}")
        print(f"  Capacity:         {self.capacity}")
        if self.capacity > 0:
            print(f"  Fill ratio:       {100*n/self.capacity:.1f}%")

        if n > 0:
            n_positive = int(np.sum(self.q[:n] > 0))
            print(f"\n  Positive charges: {n_positive}")
            print(f"  Negative charges: {n - n_positive}")
            print(f"  Mean |v|:         "
                  f"{np.mean(np.hypot(self.vx[:n], self.vy[:n])):.3e} cells/step")
