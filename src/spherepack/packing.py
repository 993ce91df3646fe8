"""
Packed volumes and their structural statistics.

Contacts are recomputed from the sphere list on every query; nothing is
cached, so a PackedVolume can be edited or replayed freely.
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .config import CONTACT_TOLERANCE, ContactNormal, PackingConfig
from .geometry import Container, Sphere, center_distances
from .packer import SpherePacker
from .sampling import SizeSampler

# Rows of the contact matrix evaluated per vectorised step
CONTACT_CHUNK = 512


@dataclass
class PackedVolume:
    """A container together with the spheres packed into it."""

    spheres: List[Sphere]
    container: Container
    contact_tolerance: float = CONTACT_TOLERANCE

    @classmethod
    def pack(
        cls,
        container: Container,
        sizes: SizeSampler,
        config: Optional[PackingConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "PackedVolume":
        """Run the advancing front packer on `container` with radii from `sizes`."""
        config = config or PackingConfig()
        spheres = SpherePacker(container, sizes, config, rng).pack()
        return cls(spheres, container, config.contact_tolerance)

    @classmethod
    def from_spheres(
        cls,
        spheres: Iterable[Sphere],
        container: Container,
        contact_tolerance: float = CONTACT_TOLERANCE,
    ) -> "PackedVolume":
        """
        Wrap an existing packing, e.g. one produced by another algorithm,
        to compare its statistics.
        """
        return cls(list(spheres), container, contact_tolerance)

    def __len__(self) -> int:
        return len(self.spheres)

    def _get_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        if not self.spheres:
            return np.empty((0, 3)), np.empty(0)
        centers = np.array([sphere.center for sphere in self.spheres])
        radii = np.array([sphere.radius for sphere in self.spheres])
        return centers, radii

    def _contact_mask(self, rows: np.ndarray, centers: np.ndarray, radii: np.ndarray) -> np.ndarray:
        """Contact matrix for the given rows against every sphere, self excluded."""
        distances = center_distances(centers[rows, np.newaxis, :], centers)
        gaps = np.abs(distances - (radii[rows, np.newaxis] + radii))
        mask = gaps < self.contact_tolerance
        mask[np.arange(len(rows)), rows] = False
        return mask

    # =========================================================================
    # Contacts
    # =========================================================================

    def contact_graph(self) -> List[np.ndarray]:
        """Indices of the spheres touching each sphere, in packing order."""
        centers, radii = self._get_arrays()
        graph: List[np.ndarray] = []
        for start in range(0, len(self.spheres), CONTACT_CHUNK):
            rows = np.arange(start, min(start + CONTACT_CHUNK, len(self.spheres)))
            mask = self._contact_mask(rows, centers, radii)
            graph.extend(np.flatnonzero(row) for row in mask)
        return graph

    def contacts(self, index: int) -> List[Sphere]:
        """Spheres in contact with the sphere at `index`."""
        centers, radii = self._get_arrays()
        mask = self._contact_mask(np.array([index]), centers, radii)[0]
        return [self.spheres[i] for i in np.flatnonzero(mask)]

    def contact_count(self, index: int) -> int:
        """Number of spheres in contact with the sphere at `index`."""
        return len(self.contacts(index))

    # =========================================================================
    # Statistics
    # =========================================================================

    def coordination_number(self) -> float:
        """Mean number of contacts per sphere (0.0 for an empty packing)."""
        if not self.spheres:
            return 0.0
        return float(np.mean([len(neighbours) for neighbours in self.contact_graph()]))

    def fabric_tensor(self, normal: Union[ContactNormal, str] = ContactNormal.DIFFERENCE) -> np.ndarray:
        """
        Second order fabric tensor of the contact normals.

            phi_ab = 1/N sum_p 1/m_p sum_{c in contacts(p)} n_pc[a] n_pc[b]

        with m_p the contact count of sphere p. Spheres without contacts
        (rattlers) are left out of both sums and N, so the trace is 1 for
        any packing with a contact; an isotropic packing gives about I/3.

        Args:
            normal: DIFFERENCE uses unit(center_c - center_p). CROSS uses
                unit(center_p x center_c) to reproduce legacy results;
                contacts whose cross product vanishes are skipped.

        Returns:
            3x3 array, all zeros when there are no contacts.
        """
        normal = ContactNormal(normal)
        centers, _ = self._get_arrays()

        phi = np.zeros((3, 3))
        contacted = 0
        for p, neighbours in enumerate(self.contact_graph()):
            m_p = len(neighbours)
            if m_p == 0:
                continue
            contacted += 1

            if normal is ContactNormal.DIFFERENCE:
                vectors = centers[neighbours] - centers[p]
            else:
                vectors = np.cross(centers[p], centers[neighbours])

            norms = np.linalg.norm(vectors, axis=1)
            keep = norms > 0
            n_pc = vectors[keep] / norms[keep, np.newaxis]
            phi += n_pc.T @ n_pc / m_p

        return phi / contacted if contacted else phi

    def solid_volume(self) -> float:
        """Combined volume of all spheres."""
        return float(sum(sphere.volume() for sphere in self.spheres))

    def volume_fraction(self) -> float:
        """Sphere volume over container volume."""
        return self.solid_volume() / self.container.volume()

    def void_ratio(self) -> float:
        """Void volume over sphere volume (inf for an empty packing)."""
        solid = self.solid_volume()
        if solid == 0:
            return float("inf")
        return (self.container.volume() - solid) / solid
