"""
Tangency solvers for the advancing front.

Contains:
- seed_triangle: three pairwise tangent spheres centred on the origin
- tangent_centers: batched solve for centers at given distances from three points
- tangent_spheres: candidate spheres tangent to three reference spheres
"""

import numpy as np
from typing import Iterable, List, Sequence, Tuple

from .config import Point
from .errors import SeedUnplaceable
from .geometry import Container, Sphere

# Below this, reference centers are treated as coincident or collinear
DEGENERATE_EPSILON = 1e-12


def seed_triangle(
    radii: Sequence[float], container: Container, padding: float = 0.0
) -> List[Sphere]:
    """
    Build three pairwise tangent spheres in the z = 0 plane.

    A sits at the origin, B along +x and C where the circles of radius |AC|
    about A and |BC| about B meet. The triangle is then shifted so its
    incenter lands on the origin, keeping the seeds away from a boundary
    that hugs the origin.

    Raises:
        SeedUnplaceable: if any seed sphere is not contained.
    """
    radius_a, radius_b, radius_c = (float(r) for r in radii)

    # Side lengths, named after the opposite vertex
    side_a = radius_b + radius_c + padding
    side_b = radius_a + radius_c + padding
    side_c = radius_a + radius_b + padding

    # Law of cosines for C
    x = (side_b ** 2 + side_c ** 2 - side_a ** 2) / (2 * side_c)
    y = np.sqrt(max(side_b ** 2 - x ** 2, 0.0))

    # Incenter: vertices weighted by opposite side lengths
    perimeter = side_a + side_b + side_c
    incenter = np.array([
        (side_b * side_c + side_c * x) / perimeter,
        side_c * y / perimeter,
        0.0,
    ])

    vertices = np.array([
        [0.0, 0.0, 0.0],
        [side_c, 0.0, 0.0],
        [x, y, 0.0],
    ]) - incenter

    seeds = [Sphere(vertex, r) for vertex, r in zip(vertices, (radius_a, radius_b, radius_c))]
    if not all(container.contains(sphere) for sphere in seeds):
        raise SeedUnplaceable((radius_a, radius_b, radius_c))
    return seeds


def tangent_centers(
    c1: Point, d1: float, c2: np.ndarray, d2: np.ndarray, c3: np.ndarray, d3: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find points at distance d1 from c1, d2 from c2 and d3 from c3.

    c1/d1 is shared; c2, c3 have shape (P, 3) and d2, d3 shape (P,), one row
    per reference triple. Each row has at most two solutions, mirror images
    through the plane of the three centers.

    Working relative to c1 (p = c - c1):
        |p|^2       = d1^2
        |p + U|^2   = d2^2,  U = c1 - c2
        |p + W|^2   = d3^2,  W = c1 - c3
    Subtracting the first from the others gives two planes
        p . u = a = (d2^2 - d1^2 - |U|^2) / (2|U|)
        p . v = b = (d3^2 - d1^2 - |W|^2) / (2|W|)
    With p = alpha u + beta v + gamma t, t = unit(u x v), the planes fix
    alpha and beta, and the sphere leaves gamma^2 = d1^2 - |alpha u + beta v|^2.

    Returns:
        centers: shape (P, 2, 3), the +gamma root first
        valid: shape (P, 2) mask of real, distinct solutions
    """
    c1 = np.asarray(c1, dtype=float)
    c2 = np.atleast_2d(np.asarray(c2, dtype=float))
    c3 = np.atleast_2d(np.asarray(c3, dtype=float))
    d2 = np.atleast_1d(np.asarray(d2, dtype=float))
    d3 = np.atleast_1d(np.asarray(d3, dtype=float))

    vec_u = c1 - c2
    vec_v = c1 - c3
    norm_u = np.linalg.norm(vec_u, axis=1)
    norm_v = np.linalg.norm(vec_v, axis=1)

    with np.errstate(divide='ignore', invalid='ignore'):
        u = vec_u / norm_u[:, np.newaxis]
        v = vec_v / norm_v[:, np.newaxis]
        cross_uv = np.cross(u, v)
        sin_uv = np.linalg.norm(cross_uv, axis=1)
        t = cross_uv / sin_uv[:, np.newaxis]

        a = (d2 ** 2 - d1 ** 2 - norm_u ** 2) / (2 * norm_u)
        b = (d3 ** 2 - d1 ** 2 - norm_v ** 2) / (2 * norm_v)
        dot_uv = np.sum(u * v, axis=1)
        denom = 1 - dot_uv ** 2

        alpha = (a - b * dot_uv) / denom
        beta = (b - a * dot_uv) / denom
        discriminant = d1 ** 2 - (alpha ** 2 + beta ** 2 + 2 * alpha * beta * dot_uv)

        solvable = (
            (norm_u > DEGENERATE_EPSILON)
            & (norm_v > DEGENERATE_EPSILON)
            & (sin_uv > DEGENERATE_EPSILON)
            & (discriminant >= 0)
        )

    # Zero out unsolvable rows so nothing downstream sees NaN
    alpha = np.where(solvable, alpha, 0.0)
    beta = np.where(solvable, beta, 0.0)
    gamma = np.sqrt(np.where(solvable, discriminant, 0.0))
    t = np.where(solvable[:, np.newaxis], t, 0.0)
    u = np.where(solvable[:, np.newaxis], u, 0.0)
    v = np.where(solvable[:, np.newaxis], v, 0.0)

    base = c1 + alpha[:, np.newaxis] * u + beta[:, np.newaxis] * v
    offset = gamma[:, np.newaxis] * t
    centers = np.stack([base + offset, base - offset], axis=1)

    # A double root is one solution, not two
    valid = np.stack([solvable, solvable & (gamma > 0)], axis=1)
    return centers, valid


def tangent_spheres(
    s1: Sphere,
    s2: Sphere,
    s3: Sphere,
    radius: float,
    container: Container,
    neighbours: Iterable[Sphere],
    padding: float = 0.0,
) -> List[Sphere]:
    """
    Find spheres of `radius` in outer contact with s1, s2 and s3 at once.

    Keeps only candidates that are contained and overlap nothing in
    `neighbours`. Returns 0, 1, or 2 spheres, the +gamma root first.
    """
    centers, valid = tangent_centers(
        s1.center, s1.radius + radius + padding,
        [s2.center], [s2.radius + radius + padding],
        [s3.center], [s3.radius + radius + padding],
    )
    neighbours = list(neighbours)

    accepted = []
    for center, ok in zip(centers[0], valid[0]):
        if not ok:
            continue
        candidate = Sphere(center, radius)
        if container.contains(candidate) and not any(candidate.overlaps(n) for n in neighbours):
            accepted.append(candidate)
    return accepted
