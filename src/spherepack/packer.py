import itertools
import logging
import time
import numpy as np
from typing import Iterator, List, Optional, Sequence, Tuple, TypeVar

from .config import PackingConfig, PackingProgress
from .errors import PackingBudgetExceeded
from .geometry import Container, Sphere, center_distances
from .sampling import SizeSampler, draw_radius
from .tangency import seed_triangle, tangent_centers

logger = logging.getLogger(__name__)

T = TypeVar("T")

INITIAL_CAPACITY = 64


def pairs(items: Sequence[T]) -> List[Tuple[T, T]]:
    """
    Every unordered pair of `items`, each exactly once.

    Order is fixed by the input order: (0, 1), (0, 2), ..., (1, 2), ...
    """
    return list(itertools.combinations(items, 2))


class SpherePacker:
    """
    Packs spheres into a container with an advancing front.

    Three tangent seeds start both the placed set and the front. Each
    iteration picks a front sphere s0 at random and tries to attach a sphere
    of the current radius tangent to s0 and two of its neighbours. Success
    adds the new sphere to the front and draws a new radius; when no
    neighbour pair works, s0 leaves the front for good. Packing ends when
    the front is empty.
    """

    def __init__(
        self,
        container: Container,
        sizes: SizeSampler,
        config: Optional[PackingConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or PackingConfig()
        self.container = container
        self.sizes = sizes
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._reset()

    def _reset(self) -> None:
        self.spheres: List[Sphere] = []
        self.front: List[int] = []
        self.progress = PackingProgress()

        # Growable buffers backing the vectorised neighbour search
        self._centers = np.empty((INITIAL_CAPACITY, 3))
        self._radii = np.empty(INITIAL_CAPACITY)

    def _get_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        count = len(self.spheres)
        return self._centers[:count], self._radii[:count]

    def _place_sphere(self, sphere: Sphere) -> int:
        index = len(self.spheres)
        if index == len(self._radii):
            self._centers = np.concatenate([self._centers, np.empty_like(self._centers)])
            self._radii = np.concatenate([self._radii, np.empty_like(self._radii)])
        self._centers[index] = sphere.center
        self._radii[index] = sphere.radius

        self.spheres.append(sphere)
        self.front.append(index)
        self.progress.spheres_placed = len(self.spheres)
        self.progress.front_size = len(self.front)
        return index

    def _retire(self, index: int) -> None:
        self.front.remove(index)
        self.progress.retired += 1
        self.progress.front_size = len(self.front)
        logger.debug("Retired sphere %d, %d left on the front", index, len(self.front))

    def _neighbour_indices(self, index: int, radius: float) -> np.ndarray:
        """
        Indices of placed spheres a new sphere of `radius`, tangent to sphere
        `index`, could touch or overlap, in placement order.
        """
        centers, radii = self._get_arrays()
        distances = center_distances(centers[index], centers)
        reach = radii[index] + radii + 2 * radius + self.config.padding
        mask = distances <= reach
        mask[index] = False
        return np.flatnonzero(mask)

    def _grow_from(self, index: int, radius: float) -> Optional[Sphere]:
        """
        Try to attach a sphere of `radius` to sphere `index`.

        Neighbour pairs are scanned in enumeration order; the first pair with
        any acceptable candidate wins and one of its candidates is picked at
        random. The solve and overlap tests run over whole batches of pairs,
        the container is only consulted in order, so the outcome matches a
        pair-by-pair scan.
        """
        centers, radii = self._get_arrays()
        padding = self.config.padding

        neighbours = self._neighbour_indices(index, radius)
        neighbour_pairs = pairs(neighbours.tolist())
        if not neighbour_pairs:
            return None

        pair_idx = np.array(neighbour_pairs)
        first, second = pair_idx[:, 0], pair_idx[:, 1]
        solutions, valid = tangent_centers(
            centers[index], radii[index] + radius + padding,
            centers[first], radii[first] + radius + padding,
            centers[second], radii[second] + radius + padding,
        )

        near_centers = centers[neighbours]
        near_radii = radii[neighbours]
        rows = np.flatnonzero(valid.any(axis=1))

        for start in range(0, len(rows), self.config.batch_size):
            batch = rows[start:start + self.config.batch_size]
            block = solutions[batch]

            # (batch, 2, neighbours)
            distances = center_distances(block[:, :, np.newaxis, :], near_centers)
            clear = valid[batch] & ~np.any(distances < near_radii + radius, axis=2)

            for row in np.flatnonzero(clear.any(axis=1)):
                accepted = []
                for k in np.flatnonzero(clear[row]):
                    candidate = Sphere(block[row, k], radius)
                    if self.container.contains(candidate):
                        accepted.append(candidate)
                if accepted:
                    return accepted[int(self.rng.integers(len(accepted)))]

        return None

    def _check_budget(self, started: float) -> None:
        max_iterations = self.config.max_iterations
        if max_iterations is not None and self.progress.iterations >= max_iterations:
            raise PackingBudgetExceeded(self.progress, f"max_iterations={max_iterations}")

        time_limit = self.config.time_limit
        if time_limit is not None and time.monotonic() - started >= time_limit:
            raise PackingBudgetExceeded(self.progress, f"time_limit={time_limit}s")

    def _log_progress(self) -> None:
        if self.progress.spheres_placed % self.config.log_interval == 0:
            level = logging.INFO if self.config.verbose else logging.DEBUG
            logger.log(level, "%s", self.progress)

    # =========================================================================
    # Main Entry Points
    # =========================================================================

    def generate(self) -> Iterator[Sphere]:
        """
        Generate spheres until the front is exhausted.

        Yields:
            Each sphere as it is placed, seeds first.

        Raises:
            SeedUnplaceable: the seed triangle does not fit in the container.
            InvalidSample: the size sampler returned a bad radius.
            PackingBudgetExceeded: max_iterations or time_limit ran out.
        """
        self._reset()

        radii = [draw_radius(self.sizes) for _ in range(3)]
        seeds = seed_triangle(radii, self.container, self.config.padding)
        logger.info("Seeded with radii %s", ", ".join(f"{r:.4g}" for r in radii))
        for sphere in seeds:
            self._place_sphere(sphere)
            yield sphere

        radius = draw_radius(self.sizes)
        started = time.monotonic()

        while self.front:
            self._check_budget(started)
            self.progress.iterations += 1

            index = self.front[int(self.rng.integers(len(self.front)))]
            sphere = self._grow_from(index, radius)

            if sphere is None:
                # No neighbour pair can host a sphere here; radius is kept
                self._retire(index)
                continue

            self._place_sphere(sphere)
            self._log_progress()
            yield sphere
            radius = draw_radius(self.sizes)

        logger.info("Done! %s", self.progress)

    def pack(self) -> List[Sphere]:
        """Pack spheres and return them as a list."""
        return list(self.generate())


def pack_spheres(
    container: Container,
    sizes: SizeSampler,
    config: Optional[PackingConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[Sphere]:
    """Pack `container` with radii drawn from `sizes`."""
    return SpherePacker(container, sizes, config, rng).pack()
