"""
Body Store
==========

Flat, column-oriented arrays describing every simulated star. One body is
one row across all arrays:

- triangles:  (n, 3, 2) float64 - rigid marker, centroid = body position
- velocities: (n, 2)    float64 - world units per second
- masses:     (n,)      float32 - carried, unused by the default force model
- colors:     (n, 3)    float32 - RGB, may exceed 1.0 (additive blending)
- sizes:      (n,)      float32 - marker size, informational only
- kinds:      (n,)      uint8   - BodyKind tag, fixed for the body's lifetime
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

import numpy as np


# Marker shape: unit offsets of p0, p1, p2 from the centre
TRIANGLE_OFFSETS = np.array([
    [0.0, 1.0],
    [-0.86, -0.5],
    [0.86, -0.5],
], dtype=np.float64)

# Legacy tag: jets were told apart from stars by an out-of-gamut blue channel
JET_BLUE_THRESHOLD = 1.2


class BodyKind(IntEnum):
    STAR = 0    # Gravitational population
    JET = 1     # Ballistic, respawns near the origin


def make_triangles(centers: np.ndarray, sizes) -> np.ndarray:
    """Build (n, 3, 2) markers around (n, 2) centres."""
    centers = np.asarray(centers, dtype=np.float64)
    sizes = np.broadcast_to(np.asarray(sizes, dtype=np.float64), (len(centers),))
    return centers[:, None, :] + TRIANGLE_OFFSETS[None, :, :] * sizes[:, None, None]


@dataclass
class BodyStore:
    triangles: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    colors: np.ndarray
    sizes: np.ndarray
    kinds: np.ndarray

    @classmethod
    def from_centers(cls, centers, velocities, masses, colors, sizes,
                     kind: BodyKind = BodyKind.STAR) -> "BodyStore":
        """Create a population of one kind from marker centres.

        ``masses``, ``colors`` and ``sizes`` may be scalars / a single RGB
        triple; they are broadcast to the population size.
        """
        centers = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
        n = len(centers)
        sizes = np.broadcast_to(np.asarray(sizes, dtype=np.float32), (n,)).copy()
        return cls(
            triangles=make_triangles(centers, sizes),
            velocities=np.asarray(velocities, dtype=np.float64).reshape(n, 2).copy(),
            masses=np.broadcast_to(np.asarray(masses, dtype=np.float32), (n,)).copy(),
            colors=np.broadcast_to(np.asarray(colors, dtype=np.float32), (n, 3)).copy(),
            sizes=sizes,
            kinds=np.full(n, int(kind), dtype=np.uint8),
        )

    @classmethod
    def empty(cls) -> "BodyStore":
        return cls.from_centers(np.zeros((0, 2)), np.zeros((0, 2)), 0.0, (0.0, 0.0, 0.0), 0.0)

    @classmethod
    def concatenate(cls, stores: Sequence["BodyStore"]) -> "BodyStore":
        """Flatten several self-contained populations into one store."""
        if not stores:
            return cls.empty()
        return cls(
            triangles=np.concatenate([s.triangles for s in stores]),
            velocities=np.concatenate([s.velocities for s in stores]),
            masses=np.concatenate([s.masses for s in stores]),
            colors=np.concatenate([s.colors for s in stores]),
            sizes=np.concatenate([s.sizes for s in stores]),
            kinds=np.concatenate([s.kinds for s in stores]),
        )

    @property
    def count(self) -> int:
        return len(self.triangles)

    def __len__(self) -> int:
        return self.count

    def centroids(self) -> np.ndarray:
        return self.triangles.mean(axis=1)

    def radii(self) -> np.ndarray:
        return np.linalg.norm(self.centroids(), axis=1)

    def speeds(self) -> np.ndarray:
        return np.linalg.norm(self.velocities, axis=1)

    def jet_mask(self) -> np.ndarray:
        return self.kinds == BodyKind.JET

    def is_jet_color(self) -> np.ndarray:
        """Mask of bodies carrying the legacy blue-channel jet tag."""
        return self.colors[:, 2] > JET_BLUE_THRESHOLD

    def copy(self) -> "BodyStore":
        return BodyStore(
            triangles=self.triangles.copy(),
            velocities=self.velocities.copy(),
            masses=self.masses.copy(),
            colors=self.colors.copy(),
            sizes=self.sizes.copy(),
            kinds=self.kinds.copy(),
        )

    def validate(self):
        """Check that every column describes the same bodies with the kernel's dtypes."""
        n = self.count
        expected = {
            "triangles": ((n, 3, 2), np.float64),
            "velocities": ((n, 2), np.float64),
            "masses": ((n,), np.float32),
            "colors": ((n, 3), np.float32),
            "sizes": ((n,), np.float32),
            "kinds": ((n,), np.uint8),
        }
        for name, (shape, dtype) in expected.items():
            arr = getattr(self, name)
            if arr.shape != shape:
                raise ValueError(f"{name} has shape {arr.shape}, expected {shape}")
            if arr.dtype != dtype:
                raise ValueError(f"{name} has dtype {arr.dtype}, expected {np.dtype(dtype)}")
        unknown = ~np.isin(self.kinds, [k.value for k in BodyKind])
        if unknown.any():
            raise ValueError(f"{int(unknown.sum())} bodies have an unknown kind tag")
