"""
Error types raised while building a packing.

Geometric dead ends (no tangent sphere for a pair, a candidate outside the
container or overlapping a neighbour) are normal search outcomes and are
never raised.
"""

from typing import Sequence

from .config import PackingProgress


class PackingError(Exception):
    """Base class for packing failures."""
    pass


class SeedUnplaceable(PackingError):
    """
    Raised when the three seed spheres do not fit in the container.

    A legitimate outcome for small containers or large initial radii: it
    ends this packing attempt, nothing more.
    """

    def __init__(self, radii: Sequence[float]):
        self.radii = tuple(float(r) for r in radii)
        super().__init__(
            "Seed triangle with radii "
            f"({', '.join(f'{r:g}' for r in self.radii)}) is not contained by the boundary"
        )


class InvalidSample(PackingError):
    """Raised when the size sampler returns a non-positive or non-finite radius."""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Size sampler returned an invalid radius: {value!r}")


class PackingBudgetExceeded(PackingError):
    """
    Raised when the iteration or time budget runs out with a non-empty front.

    The spheres placed so far are valid, but the packing is incomplete, so
    it is never handed back as a finished result.
    """

    def __init__(self, progress: PackingProgress, reason: str):
        self.progress = progress
        self.reason = reason
        super().__init__(f"Packing stopped early ({reason}): {progress}")
