"""
Deterministic Sequence Generator

Reproducible pseudo-random offsets for particle seeding. A single
generator is created per run and threaded through every initializer, so
two runs with the same seed produce bit-identical populations.
"""

from .constants import LCG_A, LCG_C, LCG_SEED, LCG_MASK


class DeterministicSequenceGenerator:
    """
    64-bit mixed linear congruential generator (Knuth, MMIX constants).

        state_{i+1} = (a * state_i + c) mod 2^64
        value       = state_{i+1} mod bound

    The modulo introduces a small bias for bounds that do not divide 2^64.
    That bias is accepted: the point is reproducibility, not statistical
    quality.

    Attributes:
        seed: Seed the generator was (re)initialized with
        state: Current 64-bit state
    """

    def __init__(self, seed: int = LCG_SEED):
        self.reset(seed)

    def reset(self, seed: int = LCG_SEED):
        """Re-seed the generator."""
        if seed < 0:
            raise ValueError(f"Seed must be non-negative: {seed}")
        self.seed = seed
        self.state = seed & LCG_MASK

    def next(self, bound: int) -> float:
        """
        Draw the next offset in [0, bound).

        Args:
            bound: Exclusive upper bound (positive integer)

        Returns:
            offset: Integer-valued offset as a float
        """
        if bound < 1:
            raise ValueError(f"Bound must be positive: {bound}")
        self.state = (LCG_A * self.state + LCG_C) & LCG_MASK
        return float(self.state % bound)

    def __repr__(self):
        return f"DeterministicSequenceGenerator(seed={self.seed})"
