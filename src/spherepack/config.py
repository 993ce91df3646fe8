"""
Configuration and type definitions for sphere packing.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum

# Type aliases
Point = np.ndarray
Center = Tuple[float, float, float]  # (x, y, z)

CONTACT_TOLERANCE = 1e-3


class ContactNormal(Enum):
    """How the fabric tensor derives a direction for each contact."""
    DIFFERENCE = "difference"   # unit(center_c - center_p)
    CROSS = "cross"             # unit(center_p x center_c), legacy results


@dataclass
class PackingConfig:
    """
    Configuration parameters for the advancing front packing algorithm.

    Geometry:
        padding: Gap added to every tangent distance, so that freshly solved
            spheres clear their reference spheres despite round-off
        contact_tolerance: Distance slack for two spheres to count as touching

    Performance tuning:
        batch_size: Sphere pairs overlap-tested together per vectorised step

    Limits:
        max_iterations: Stop with an error after this many front iterations
        time_limit: Stop with an error after this many seconds

    Reproducibility:
        seed: Seed for the engine's random generator when none is injected
    """
    # Geometry
    padding: float = 1e-10
    contact_tolerance: float = CONTACT_TOLERANCE

    # Performance tuning
    batch_size: int = 256

    # Limits
    max_iterations: Optional[int] = None
    time_limit: Optional[float] = None

    # Reproducibility
    seed: Optional[int] = None

    # Output
    verbose: bool = False
    log_interval: int = 500

    def __post_init__(self):
        if self.padding < 0:
            raise ValueError(f"padding ({self.padding}) must be non-negative")
        if self.contact_tolerance <= 0:
            raise ValueError(f"contact_tolerance ({self.contact_tolerance}) must be positive")
        if self.batch_size < 1:
            raise ValueError(f"batch_size ({self.batch_size}) must be at least 1")
        if self.log_interval < 1:
            raise ValueError(f"log_interval ({self.log_interval}) must be at least 1")


@dataclass
class PackingProgress:
    """Tracks the current state of the packing algorithm."""
    spheres_placed: int = 0
    front_size: int = 0
    retired: int = 0
    iterations: int = 0

    @property
    def retired_ratio(self) -> float:
        """Share of placed spheres that can no longer grow (1.0 = done)."""
        return self.retired / self.spheres_placed if self.spheres_placed > 0 else 0

    def __str__(self) -> str:
        return (
            f"Placed: {self.spheres_placed} | Front: {self.front_size} | "
            f"Retired: {self.retired} ({self.retired_ratio:.0%}) | Iterations: {self.iterations}"
        )
