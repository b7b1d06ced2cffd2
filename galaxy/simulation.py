"""
Procedural galaxy simulation.

Owns the Body Store, its double buffers and the output vertex stream. The
dynamics kernel reads the front buffers and writes the back buffers; the two
are swapped after every frame so neighbour sampling always sees a
consistent frame-start snapshot.
"""

from typing import Optional

import numpy as np

from config import galaxy as config
from .generators import GalaxyType, build_galaxy, parse_morphology, random_morphology
from .kernel import allocate_vertices, step_bodies, warmup
from .store import BodyStore


class GalaxySimulation:
    """
    Up to ~1,000,000 stars updated every frame by a numba-parallel kernel.

    A reset regenerates the whole population. If generation or buffer
    allocation fails, the previous galaxy stays live.
    """

    def __init__(self, star_count: Optional[int] = None,
                 morphology: Optional[GalaxyType] = None,
                 seed: Optional[int] = None,
                 bulge_count: Optional[int] = None,
                 jet_count: Optional[int] = None,
                 warm_up: bool = True):
        galaxy_cfg = config.GALAXY
        self.star_count = int(galaxy_cfg["star_count"] if star_count is None else star_count)
        self.bulge_count = int(galaxy_cfg["bulge_count"] if bulge_count is None else bulge_count)
        self.jet_count = int(galaxy_cfg["jet_count"] if jet_count is None else jet_count)

        # Reject bad configuration before anything is allocated
        if self.star_count <= 0:
            raise ValueError(f"star_count must be > 0, got {self.star_count}")
        if self.bulge_count < 0 or self.jet_count < 0:
            raise ValueError(
                f"population sizes must be >= 0 (bulge={self.bulge_count}, jets={self.jet_count})"
            )

        self.pinned_morphology = None if morphology is None else parse_morphology(morphology)
        self.rng = np.random.default_rng(seed)

        self.morphology: Optional[GalaxyType] = None
        self.last_error: Optional[str] = None
        self.frame_count = 0

        self._front: Optional[BodyStore] = None
        self._back: Optional[BodyStore] = None
        self._vertex_positions = None
        self._vertex_colors = None

        if warm_up:
            warmup()

        if not self.reset():
            raise RuntimeError(f"Initial galaxy generation failed: {self.last_error}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, morphology: Optional[GalaxyType] = None) -> bool:
        """
        Regenerate the galaxy and reallocate every buffer.

        Uses `morphology`, else the pinned morphology, else a random one.
        Returns False (keeping the current galaxy) if the reset failed.
        """
        try:
            if morphology is None:
                morphology = self.pinned_morphology
            if morphology is None:
                morphology = random_morphology(self.rng)
            morphology = parse_morphology(morphology)

            front = build_galaxy(morphology, self.star_count, self.rng,
                                 self.bulge_count, self.jet_count)
            back = front.copy()
            positions, colors = allocate_vertices(front.count)
        except (MemoryError, ValueError) as e:
            self.last_error = f"{type(e).__name__}: {e}"
            print(f"[Galaxy] Reset failed, keeping current galaxy: {self.last_error}")
            return False

        # Swap in only once everything exists
        self._front, self._back = front, back
        self._vertex_positions, self._vertex_colors = positions, colors
        self.morphology = morphology
        self.last_error = None
        self.frame_count = 0

        self._emit_static()
        print(f"[Galaxy] {morphology.value}: {front.count:,} bodies "
              f"({self.star_count:,} stars requested, {self.jet_count:,} jets, "
              f"{self.bulge_count:,} bulge seeds)")
        return True

    def _emit_static(self):
        """Fill the vertex stream from the current state without advancing it."""
        self.step(0.0)
        self.frame_count = 0

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def step(self, dt: float):
        """Advance every body by dt (seconds)."""
        front, back = self._front, self._back
        step_bodies(
            front.triangles,
            front.velocities,
            front.kinds,
            front.colors,
            float(dt),
            back.triangles,
            back.velocities,
            self._vertex_positions,
            self._vertex_colors
        )
        self._front, self._back = back, front
        self.frame_count += 1

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def num_bodies(self) -> int:
        return self._front.count

    @property
    def store(self) -> BodyStore:
        """Current state. Valid until the next step() or reset()."""
        return self._front

    @property
    def vertex_positions(self) -> np.ndarray:
        return self._vertex_positions

    @property
    def vertex_colors(self) -> np.ndarray:
        return self._vertex_colors
