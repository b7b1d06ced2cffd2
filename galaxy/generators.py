"""
Galaxy Generators
=================

Initial conditions for the 13 galaxy morphologies, plus the two universal
populations (bulge seeds and polar jets) that every galaxy carries.

Every recipe samples a radius and an angle from a distribution that is
characteristic of the morphology and starts stars close to circular speed

    v(r) = sqrt(K / (r + eps)),   K = 3.5

moving counter-clockwise, so the first frame is already near the kernel's
steady state. Each recipe returns its own self-contained BodyStore.
"""

from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from config import galaxy as config
from .store import BodyKind, BodyStore


K = config.GENERATION["orbit_k"]
STAR_SIZE = config.GENERATION["star_size"]
TWO_PI = 2.0 * np.pi


class GalaxyType(Enum):
    GRAND_SPIRAL = "grand_spiral"          # Classic 2-arm spiral
    FLOCCULENT = "flocculent"              # Messy, many-armed spiral
    ELLIPTICAL = "elliptical"              # Egg-shaped swarm of old stars
    STARBURST_RING = "starburst_ring"      # Ring of intense star formation
    BARRED_SPIRAL = "barred_spiral"        # Central bar with trailing arms
    LENTICULAR = "lenticular"              # S0: bright disk, weak arms
    IRREGULAR_DWARF = "irregular_dwarf"    # Clumpy, chaotic structure
    MERGING_PAIR = "merging_pair"          # Two cores with tidal tails
    FRACTAL_SPIRAL = "fractal_spiral"      # Multi-scale spiral noise arms
    POLAR_RING = "polar_ring"              # Inner disk with tilted ring
    VORTEX_LENS = "vortex_lens"            # Log-spiral lensing toward a focal point
    BUTTERFLY = "butterfly"                # Mirrored twin lobes with a waist
    LOPSIDED_ARC = "lopsided_arc"          # Single sweeping arc with debris


DESCRIPTIONS = {
    GalaxyType.GRAND_SPIRAL: "Classic 2-arm spiral",
    GalaxyType.FLOCCULENT: "Messy, many-armed spiral",
    GalaxyType.ELLIPTICAL: "Egg-shaped swarm of old stars",
    GalaxyType.STARBURST_RING: "Rare ring of intense star formation",
    GalaxyType.BARRED_SPIRAL: "Central bar with trailing arms",
    GalaxyType.LENTICULAR: "S0: bright disk, weak arms",
    GalaxyType.IRREGULAR_DWARF: "Clumpy, chaotic structure",
    GalaxyType.MERGING_PAIR: "Two cores with tidal tails",
    GalaxyType.FRACTAL_SPIRAL: "Multi-scale spiral noise arms",
    GalaxyType.POLAR_RING: "Orthogonal inner disk with tilted ring",
    GalaxyType.VORTEX_LENS: "Log-spiral lensing toward a focal point",
    GalaxyType.BUTTERFLY: "Mirrored twin-lobe with waist",
    GalaxyType.LOPSIDED_ARC: "Single sweeping arc with debris",
}


# =============================================================================
# SHARED HELPERS
# =============================================================================

# Cool blue / warm yellow / hot red
PALETTE = np.array([
    [0.5, 0.7, 1.0],
    [1.0, 0.9, 0.5],
    [1.0, 0.3, 0.2],
], dtype=np.float32)
PALETTE_WEIGHTS = np.array([0.45, 0.45, 0.10])


def random_star_colors(n: int, rng: np.random.Generator) -> np.ndarray:
    """Draw n colours from the 45/45/10 three-bucket palette."""
    return PALETTE[rng.choice(len(PALETTE), size=n, p=PALETTE_WEIGHTS)]


def pick_colors(mask: np.ndarray, color_a, color_b) -> np.ndarray:
    """color_a where mask is set, color_b elsewhere."""
    return np.where(mask[:, None],
                    np.asarray(color_a, dtype=np.float32),
                    np.asarray(color_b, dtype=np.float32)).astype(np.float32)


def polar(r: np.ndarray, angle: np.ndarray) -> np.ndarray:
    return np.stack([np.cos(angle) * r, np.sin(angle) * r], axis=1)


def tangential(angle: np.ndarray, speed: np.ndarray) -> np.ndarray:
    """Counter-clockwise velocity perpendicular to the radius at `angle`."""
    return np.stack([-np.sin(angle), np.cos(angle)], axis=1) * np.asarray(speed)[..., None]


def normalize(vectors: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vectors, axis=1, keepdims=True)
    return vectors / (norm + 1e-9)


def tangential_at(pos: np.ndarray, speed) -> np.ndarray:
    """Counter-clockwise velocity perpendicular to an arbitrary position."""
    direction = normalize(np.stack([-pos[:, 1], pos[:, 0]], axis=1))
    return direction * np.asarray(speed)[..., None]


def _stars(pos, vel, masses, colors, size=STAR_SIZE) -> BodyStore:
    return BodyStore.from_centers(pos, vel, masses, colors, size, BodyKind.STAR)


# =============================================================================
# UNIVERSAL POPULATIONS
# =============================================================================

def generate_bulge_seed(count: int, rng: np.random.Generator) -> BodyStore:
    """Warm, motionless core seeds. Visual only."""
    if count < 0:
        raise ValueError(f"bulge count must be >= 0, got {count}")
    gen = config.GENERATION
    r = rng.uniform(0.0, gen["bulge_radius"], count)
    angle = rng.uniform(0.0, TWO_PI, count)
    return _stars(polar(r, angle), np.zeros((count, 2)), 0.0,
                  gen["bulge_color"], gen["bulge_size"])


def generate_jets(count: int, rng: np.random.Generator) -> BodyStore:
    """Ballistic polar jet particles launched straight up or down."""
    if count < 0:
        raise ValueError(f"jet count must be >= 0, got {count}")
    gen = config.GENERATION
    spread = gen["jet_spread"]
    pos = rng.uniform(-spread, spread, (count, 2))
    vel = np.zeros((count, 2))
    vel[:, 1] = np.where(rng.random(count) < 0.5, gen["jet_speed"], -gen["jet_speed"])
    return BodyStore.from_centers(pos, vel, 0.0, gen["jet_color"], gen["jet_size"],
                                  BodyKind.JET)


# =============================================================================
# MORPHOLOGIES
# =============================================================================

def _spiral(n, rng, arms, tightness):
    i = np.arange(n)
    arm = (i % arms) * (TWO_PI / arms)
    r = np.sqrt(rng.random(n)) * 1.3 + 0.05
    angle = arm + r * tightness + rng.uniform(-0.15, 0.15, n)
    speed = np.sqrt(K / (r + 0.05)) * 1.05
    return _stars(polar(r, angle), tangential(angle, speed),
                  rng.uniform(0.5, 2.0, n), random_star_colors(n, rng))


def generate_grand_spiral(n, rng):
    return _spiral(n, rng, arms=2, tightness=4.5)


def generate_flocculent(n, rng):
    return _spiral(n, rng, arms=7, tightness=2.0)


def generate_elliptical(n, rng):
    r = rng.random(n) ** 0.7 * 0.9
    angle = rng.uniform(0.0, TWO_PI, n)

    # Random orbit directions for the "beehive" look
    speed = np.sqrt(K / (r + 0.1)) * rng.uniform(0.7, 1.1, n)
    orbit_angle = rng.uniform(0.0, TWO_PI, n)
    vel = np.stack([np.cos(orbit_angle), np.sin(orbit_angle)], axis=1) * speed[:, None]

    return _stars(polar(r, angle), vel, 1.0, (1.0, 0.6, 0.3), 0.007)


def generate_starburst_ring(n, rng):
    r = rng.uniform(0.7, 0.9, n)  # Tight band
    angle = rng.uniform(0.0, TWO_PI, n)
    speed = np.sqrt(K / r) * 1.1
    return _stars(polar(r, angle), tangential(angle, speed), 1.2, (0.2, 0.8, 1.0))


def generate_barred_spiral(n, rng):
    # Central bar
    bar_len = 0.5
    bar_stars = min(n, max(600, n // 20))
    t = (np.arange(bar_stars) / max(1, bar_stars - 1) - 0.5) * 2.0
    bar_pos = np.stack([t * bar_len, rng.uniform(-0.04, 0.04, bar_stars)], axis=1)
    bar_r = np.maximum(0.12, np.abs(bar_pos[:, 0]))
    bar_speed = np.sqrt(K / (bar_r + 0.05)) * 0.9
    # Each half of the bar moves along its own tangent
    bar_vel = np.zeros((bar_stars, 2))
    bar_vel[:, 1] = np.where(bar_pos[:, 0] >= 0.0, bar_speed, -bar_speed)
    bar = _stars(bar_pos, bar_vel, 1.0, (1.0, 0.85, 0.6), 0.007)

    # Trailing arms from the bar ends
    arm_stars = n - bar_stars
    i = np.arange(arm_stars)
    base_angle = np.where(i % 2 == 0, 0.0, np.pi)
    r = np.sqrt(rng.random(arm_stars)) * 1.4 + 0.2
    angle = base_angle + r * 3.8 + rng.uniform(-0.12, 0.12, arm_stars)
    speed = np.sqrt(K / (r + 0.05))
    colors = pick_colors(rng.random(arm_stars) < 0.5, (0.9, 0.8, 0.5), (0.55, 0.75, 1.0))
    arms = _stars(polar(r, angle), tangential(angle, speed),
                  rng.uniform(0.7, 1.4, arm_stars), colors)

    return BodyStore.concatenate([bar, arms])


def generate_lenticular(n, rng):
    # Smooth, concentrated disk
    r = rng.random(n) ** 0.4 * 1.2 + 0.05
    angle = rng.uniform(0.0, TWO_PI, n)
    speed = np.sqrt(K / (r + 0.05)) * rng.uniform(0.95, 1.05, n)
    disk = _stars(polar(r, angle), tangential(angle, speed),
                  rng.uniform(0.8, 1.2, n), (1.0, 0.85, 0.6))

    # Faint outer ring, an extra n/8 stars on top of the budget
    ring_n = n // 8
    r = rng.uniform(0.9, 1.1, ring_n)
    angle = rng.uniform(0.0, TWO_PI, ring_n)
    speed = np.sqrt(K / (r + 0.05))
    ring = _stars(polar(r, angle), tangential(angle, speed), 1.0, (0.9, 0.9, 0.9), 0.005)

    return BodyStore.concatenate([disk, ring])


def generate_irregular_dwarf(n, rng):
    clumps = 6
    centers = polar(rng.uniform(0.0, 0.7, clumps), rng.uniform(0.0, TWO_PI, clumps))

    pos = centers[rng.integers(0, clumps, n)] + rng.uniform(-0.12, 0.12, (n, 2))
    r = np.maximum(0.08, np.linalg.norm(pos, axis=1))
    base_speed = np.sqrt(K / (r + 0.08))
    direction = normalize(np.stack([-pos[:, 1], pos[:, 0]], axis=1)
                          + rng.uniform(-0.3, 0.3, (n, 2)))
    vel = direction * (base_speed * rng.uniform(0.6, 1.2, n))[:, None]
    colors = pick_colors(rng.random(n) < 0.5, (0.6, 0.8, 1.0), (1.0, 0.7, 0.5))
    return _stars(pos, vel, rng.uniform(0.5, 1.5, n), colors)


def generate_merging_pair(n, rng):
    # Two cores on a collision course with tidal tails
    sep = 0.6
    centers = np.array([[-sep, 0.0], [sep, 0.0]])
    approach = np.array([[0.25, 0.0], [-0.25, 0.0]])
    core_stars = min(n // 2, max(600, n // 10))
    tail_stars = n - core_stars * 2

    populations = []
    for idx in range(2):
        r = rng.uniform(0.0, 0.15, core_stars)
        a = rng.uniform(0.0, TWO_PI, core_stars)
        pos = centers[idx] + polar(r, a)
        speed = np.sqrt(K / (np.maximum(0.08, r) + 0.05)) * 0.8
        vel = tangential_at(pos, speed) + approach[idx]
        populations.append(_stars(pos, vel, 1.2, (1.2, 1.0, 0.8), 0.007))

    which = np.arange(tail_stars) % 2
    r = rng.uniform(0.2, 1.6, tail_stars)
    a = rng.uniform(0.0, TWO_PI, tail_stars)
    pos = centers[which] + polar(r, a)
    speed = np.sqrt(K / (r + 0.1)) * rng.uniform(0.7, 1.1, tail_stars)
    vel = tangential(a, speed) + approach[which]
    populations.append(_stars(pos, vel, rng.uniform(0.6, 1.3, tail_stars), (0.8, 0.9, 1.0)))

    return BodyStore.concatenate(populations)


def generate_fractal_spiral(n, rng):
    # Outer log-spiral perturbed by nested harmonics
    arms = 3
    i = np.arange(n)
    arm = (i % arms) * (TWO_PI / arms)
    r = np.sqrt(rng.random(n)) * 1.5 + 0.08
    angle = arm + r * 3.2
    angle += np.sin(r * 6.0 + (i % 7)) * 0.05
    angle += np.sin(r * 12.0 + (i % 11)) * 0.03
    angle += np.sin(r * 24.0 + (i % 13)) * 0.015
    speed = np.sqrt(K / (r + 0.05)) * rng.uniform(0.95, 1.1, n)
    colors = random_star_colors(n, rng)
    colors[i % 5 == 0] = (0.55, 0.8, 1.0)
    return _stars(polar(r, angle), tangential(angle, speed), rng.uniform(0.6, 1.4, n), colors)


def generate_polar_ring(n, rng):
    inner_n = n // 3
    r = rng.random(inner_n) ** 0.6 * 0.6 + 0.05
    angle = rng.uniform(0.0, TWO_PI, inner_n)
    speed = np.sqrt(K / (r + 0.05))
    inner = _stars(polar(r, angle), tangential(angle, speed), 1.0, (1.0, 0.9, 0.7))

    # Ring tilted by ~77 degrees
    ring_n = n - inner_n
    tilt = np.pi / 2 * 0.85
    rot = np.array([[np.cos(tilt), np.sin(tilt)],
                    [-np.sin(tilt), np.cos(tilt)]])
    r = rng.uniform(0.9, 1.3, ring_n)
    a = rng.uniform(0.0, TWO_PI, ring_n)
    speed = np.sqrt(K / (r + 0.05)) * 0.95
    pos = polar(r, a) @ rot.T
    vel = tangential(a, speed) @ rot.T
    ring = _stars(pos, vel, 1.0, (0.7, 0.85, 1.0))

    return BodyStore.concatenate([inner, ring])


def generate_vortex_lens(n, rng):
    focus = np.array([0.35, 0.2])
    i = np.arange(n)
    r = np.sqrt(rng.random(n)) * 1.4 + 0.1
    angle = r * 4.5 + rng.uniform(-0.2, 0.2, n)
    pos = polar(r, angle)
    toward = normalize(focus - pos)
    pos = pos + toward * np.minimum(0.25, 0.12 * r)[:, None]
    speed = np.sqrt(K / (np.linalg.norm(pos, axis=1) + 0.05))
    colors = random_star_colors(n, rng)
    colors[i % 9 == 0] = (1.0, 0.6, 0.9)
    return _stars(pos, tangential_at(pos, speed), rng.uniform(0.7, 1.3, n), colors)


def generate_butterfly(n, rng):
    lobe_n = n // 2
    waist = 0.12
    lobes = []
    for side, color in ((-1.0, (0.8, 0.9, 1.0)), (1.0, (1.0, 0.7, 0.6))):
        r = rng.random(lobe_n) ** 0.6 * 0.9 + 0.1
        a = rng.uniform(-0.9, 0.9, lobe_n)
        pos = np.stack([side * (waist + r * 0.6), a * r], axis=1)
        speed = np.sqrt(K / (np.linalg.norm(pos, axis=1) + 0.08)) * 0.9
        lobes.append(_stars(pos, tangential_at(pos, speed), 1.0, color))
    return BodyStore.concatenate(lobes)


def generate_lopsided_arc(n, rng):
    main_n = int(n * 0.7)
    i = np.arange(main_n)
    r = rng.uniform(0.6, 1.4, main_n)
    a = rng.uniform(0.1, 2.7, main_n)
    speed = np.sqrt(K / (r + 0.05))
    colors = random_star_colors(main_n, rng)
    colors[i % 7 == 0] = (1.0, 0.8, 0.5)
    arc = _stars(polar(r, a), tangential(a, speed), rng.uniform(0.7, 1.3, main_n), colors)

    # Debris and counter-tail
    debris_n = n - main_n
    r = rng.uniform(0.2, 1.8, debris_n)
    a = rng.uniform(-0.3, np.pi + 0.3, debris_n)
    pos = polar(r, a) + rng.uniform(-0.15, 0.15, (debris_n, 2))
    speed = np.sqrt(K / np.maximum(0.12, r)) * rng.uniform(0.7, 1.1, debris_n)
    debris = _stars(pos, tangential_at(pos, speed), rng.uniform(0.6, 1.4, debris_n),
                    random_star_colors(debris_n, rng))

    return BodyStore.concatenate([arc, debris])


GENERATORS: Dict[GalaxyType, Callable[[int, np.random.Generator], BodyStore]] = {
    GalaxyType.GRAND_SPIRAL: generate_grand_spiral,
    GalaxyType.FLOCCULENT: generate_flocculent,
    GalaxyType.ELLIPTICAL: generate_elliptical,
    GalaxyType.STARBURST_RING: generate_starburst_ring,
    GalaxyType.BARRED_SPIRAL: generate_barred_spiral,
    GalaxyType.LENTICULAR: generate_lenticular,
    GalaxyType.IRREGULAR_DWARF: generate_irregular_dwarf,
    GalaxyType.MERGING_PAIR: generate_merging_pair,
    GalaxyType.FRACTAL_SPIRAL: generate_fractal_spiral,
    GalaxyType.POLAR_RING: generate_polar_ring,
    GalaxyType.VORTEX_LENS: generate_vortex_lens,
    GalaxyType.BUTTERFLY: generate_butterfly,
    GalaxyType.LOPSIDED_ARC: generate_lopsided_arc,
}


# =============================================================================
# ENTRY POINTS
# =============================================================================

def parse_morphology(name) -> GalaxyType:
    """Resolve a GalaxyType from an enum member or its name."""
    if isinstance(name, GalaxyType):
        return name
    key = str(name).strip().lower().replace("-", "_")
    try:
        return GalaxyType(key)
    except ValueError:
        known = ", ".join(t.value for t in GalaxyType)
        raise ValueError(f"Unknown morphology '{name}' (choose from: {known})") from None


def random_morphology(rng: np.random.Generator) -> GalaxyType:
    types = list(GalaxyType)
    return types[rng.integers(len(types))]


def generate_morphology(morphology: GalaxyType, star_count: int,
                        rng: np.random.Generator) -> BodyStore:
    if star_count <= 0:
        raise ValueError(f"star_count must be > 0, got {star_count}")
    return GENERATORS[parse_morphology(morphology)](star_count, rng)


def build_galaxy(morphology: Optional[GalaxyType], star_count: int,
                 rng: Optional[np.random.Generator] = None,
                 bulge_count: int = config.GALAXY["bulge_count"],
                 jet_count: int = config.GALAXY["jet_count"]) -> BodyStore:
    """
    Generate a complete Body Store: bulge seeds, jets, then the morphology.

    A morphology of None draws one uniformly at random.
    """
    if star_count <= 0:
        raise ValueError(f"star_count must be > 0, got {star_count}")
    if bulge_count < 0 or jet_count < 0:
        raise ValueError(f"population sizes must be >= 0 (bulge={bulge_count}, jets={jet_count})")
    rng = rng if rng is not None else np.random.default_rng()
    morphology = random_morphology(rng) if morphology is None else parse_morphology(morphology)

    store = BodyStore.concatenate([
        generate_bulge_seed(bulge_count, rng),
        generate_jets(jet_count, rng),
        generate_morphology(morphology, star_count, rng),
    ])
    store.validate()
    return store
