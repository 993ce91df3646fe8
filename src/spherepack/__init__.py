"""
spherepack - High volume fraction sphere packing by advancing front.

Usage:
    from spherepack import PackedVolume, PackingConfig, SphericalContainer, CuboidContainer, UniformSizes

    # Spheres with radii in [0.05, 0.1) inside a sphere of radius 2
    packed = PackedVolume.pack(SphericalContainer(2.0), UniformSizes(0.05, 0.1))
    print(f"Volume fraction: {packed.volume_fraction():.2%}")

    # Reproducible runs: seed both the packer and the sampler
    config = PackingConfig(seed=7, verbose=True)
    packed = PackedVolume.pack(CuboidContainer.cube(3.0), UniformSizes(0.1, 0.2, seed=7), config)

    # Statistics for a packing built elsewhere
    packed = PackedVolume.from_spheres(spheres, container)
    packed.coordination_number()
    packed.fabric_tensor()

The method is the advancing front algorithm of Valera et al.,
Computational Particle Mechanics 2, 161 (2015).
"""

from .config import PackingConfig, PackingProgress, ContactNormal, Center, Point
from .errors import PackingError, SeedUnplaceable, InvalidSample, PackingBudgetExceeded
from .geometry import Sphere, Container, SphericalContainer, CuboidContainer
from .sampling import SizeSampler, UniformSizes, NormalSizes
from .tangency import seed_triangle, tangent_spheres
from .packer import SpherePacker, pack_spheres, pairs
from .packing import PackedVolume
from .logging_config import setup_logging

__all__ = [
    "PackedVolume",
    "SpherePacker",
    "pack_spheres",
    "pairs",
    "seed_triangle",
    "tangent_spheres",
    "PackingConfig",
    "PackingProgress",
    "ContactNormal",
    "Sphere",
    "Container",
    "SphericalContainer",
    "CuboidContainer",
    "SizeSampler",
    "UniformSizes",
    "NormalSizes",
    "PackingError",
    "SeedUnplaceable",
    "InvalidSample",
    "PackingBudgetExceeded",
    "setup_logging",
    "Center",
    "Point",
]

__version__ = "0.1.0"
