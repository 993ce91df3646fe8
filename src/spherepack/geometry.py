"""
Geometry primitives for sphere packing.

Contains:
- Sphere: immutable value type with overlap and contact predicates
- center_distances: the single distance kernel every predicate goes through
- Container: boundary interface (contains, volume)
- SphericalContainer, CuboidContainer: the stock boundaries
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .config import Center, Point, CONTACT_TOLERANCE


def center_distances(point: Point, centers: np.ndarray) -> np.ndarray:
    """
    Euclidean distance between point(s) and center(s), broadcasting over
    leading axes.

    The components are summed in a fixed order so a scalar check and the
    vectorised check inside the engine agree bit for bit.
    """
    d = np.asarray(centers, dtype=float) - np.asarray(point, dtype=float)
    return np.sqrt(d[..., 0] ** 2 + d[..., 1] ** 2 + d[..., 2] ** 2)


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center and radius. Equality is structural."""

    center: Center
    radius: float

    def __post_init__(self):
        center = tuple(float(c) for c in self.center)
        if len(center) != 3:
            raise ValueError(f"center must have 3 coordinates, got {len(center)}")
        if self.radius < 0:
            raise ValueError(f"radius ({self.radius}) must be non-negative")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "radius", float(self.radius))

    @property
    def position(self) -> Point:
        """Center as a numpy array."""
        return np.array(self.center)

    def volume(self) -> float:
        return 4.0 / 3.0 * np.pi * self.radius ** 3

    def distance_to(self, other: "Sphere") -> float:
        """Center-to-center distance."""
        return float(center_distances(self.center, other.center))

    def overlaps(self, other: "Sphere") -> bool:
        """Strict overlap: centers closer than the sum of radii."""
        return self.distance_to(other) < self.radius + other.radius

    def in_contact(self, other: "Sphere", tolerance: float = CONTACT_TOLERANCE) -> bool:
        """Surfaces within `tolerance` of touching. Analysis only, never placement."""
        return abs(self.distance_to(other) - (self.radius + other.radius)) < tolerance


class Container(ABC):
    """Bounding geometry that spheres are packed into."""

    @abstractmethod
    def contains(self, sphere: Sphere) -> bool:
        """Check if a sphere lies completely inside the container."""
        pass

    @abstractmethod
    def volume(self) -> float:
        """Volume of the container."""
        pass


class SphericalContainer(Container):
    """Spherical boundary."""

    def __init__(self, radius: float, center: Sequence[float] = (0.0, 0.0, 0.0)):
        if radius <= 0:
            raise ValueError(f"radius ({radius}) must be positive")
        self.radius = float(radius)
        self.center = tuple(float(c) for c in center)

    def contains(self, sphere: Sphere) -> bool:
        return float(center_distances(self.center, sphere.center)) + sphere.radius <= self.radius

    def volume(self) -> float:
        return 4.0 / 3.0 * np.pi * self.radius ** 3

    def __repr__(self) -> str:
        return f"SphericalContainer(radius={self.radius}, center={self.center})"


class CuboidContainer(Container):
    """Axis-aligned box centered at the origin, given by its half side lengths."""

    def __init__(self, half_x: float, half_y: float, half_z: float):
        self.half_extents = np.array([half_x, half_y, half_z], dtype=float)
        if np.any(self.half_extents <= 0):
            raise ValueError(f"half extents ({half_x}, {half_y}, {half_z}) must be positive")

    @classmethod
    def cube(cls, side: float) -> "CuboidContainer":
        """Cube with the given side length."""
        return cls(side / 2, side / 2, side / 2)

    def contains(self, sphere: Sphere) -> bool:
        reach = np.abs(sphere.position) + sphere.radius
        return bool(np.all(reach <= self.half_extents))

    def volume(self) -> float:
        return float(np.prod(2 * self.half_extents))

    def __repr__(self) -> str:
        hx, hy, hz = self.half_extents
        return f"CuboidContainer(half_x={hx}, half_y={hy}, half_z={hz})"
