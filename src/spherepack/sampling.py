"""
Radius samplers.

Any object with a `sample() -> float` method can drive the packer; the
classes here cover the common distributions.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional

from .errors import InvalidSample


class SizeSampler(ABC):
    """Source of independent radius draws."""

    @abstractmethod
    def sample(self) -> float:
        """Draw one radius. Must be strictly positive."""
        pass


class UniformSizes(SizeSampler):
    """Radii drawn uniformly from [low, high)."""

    def __init__(self, low: float, high: float, seed: Optional[int] = None):
        if low <= 0:
            raise ValueError(f"low ({low}) must be positive")
        if high < low:
            raise ValueError(f"high ({high}) must not be below low ({low})")
        self.low = float(low)
        self.high = float(high)
        self.rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self.rng.uniform(self.low, self.high))


class NormalSizes(SizeSampler):
    """
    Normally distributed radii.

    Nothing truncates the tail: with a wide spread a draw can come out
    non-positive, which the packer rejects with InvalidSample.
    """

    def __init__(self, mean: float, std: float, seed: Optional[int] = None):
        if std < 0:
            raise ValueError(f"std ({std}) must be non-negative")
        self.mean = float(mean)
        self.std = float(std)
        self.rng = np.random.default_rng(seed)

    def sample(self) -> float:
        return float(self.rng.normal(self.mean, self.std))


def draw_radius(sampler: SizeSampler) -> float:
    """Draw one radius from `sampler`, rejecting non-positive or non-finite values."""
    value = sampler.sample()
    radius = float(value)
    if not np.isfinite(radius) or radius <= 0:
        raise InvalidSample(value)
    return radius
