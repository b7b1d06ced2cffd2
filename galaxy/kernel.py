"""
Galaxy dynamics kernel.

One frame is an embarrassingly parallel map over every body index. Each body
reads the frame-start snapshot (src_*) and writes only its own slots of the
back buffers (dst_*) and the output vertex stream, so neighbour sampling
never observes a half-updated frame.

Force model per gravitational body:
- Softened central point mass (Keplerian far out, bounded at r -> 0)
- Isothermal halo (flat rotation curve at large radius)
- Rotation-curve stabilizer steering tangential speed toward v_flat
- Radial damping
- Epicyclic spring toward a per-body preferred radius
- Weak clumping toward a few hash-sampled neighbours (O(1) per body)
- Tiny deterministic jitter to break orbit phase-locking

Integration is semi-implicit Euler. Jet bodies skip all of it: they move
ballistically and respawn near the origin once they leave the galaxy.
"""

import math
import time

import numpy as np
from numba import njit, prange

from config import galaxy as config
from .store import BodyKind, BodyStore


# Frozen into the compiled kernel; clear __pycache__ after editing config.DYNAMICS
_D = config.DYNAMICS

JET = int(BodyKind.JET)

JET_RESPAWN_RADIUS = _D["jet_respawn_radius"]
JET_RESPAWN_SPREAD = _D["jet_respawn_spread"]

CENTRAL_MASS = _D["central_mass"]
CENTRAL_SOFTENING = _D["central_softening"]
HALO_STRENGTH = _D["halo_strength"]
HALO_CORE = _D["halo_core"]

RAMP_START = _D["ramp_start"]
RAMP_WIDTH = _D["ramp_width"]
V_FLAT_INNER = _D["v_flat_inner"]
V_FLAT_OUTER = _D["v_flat_outer"]
DEADZONE = _D["deadzone"]
TANGENTIAL_GAIN = _D["tangential_gain"]
OUTER_GAIN_SCALE = _D["outer_gain_scale"]
MAX_TANGENTIAL_ACCEL = _D["max_tangential_accel"]

RADIAL_DAMPING_INNER = _D["radial_damping_inner"]
RADIAL_DAMPING_OUTER = _D["radial_damping_outer"]

PREFERRED_RADIUS_MIN = _D["preferred_radius_min"]
PREFERRED_RADIUS_MAX = _D["preferred_radius_max"]
EPICYCLE_INNER = _D["epicycle_inner"]
EPICYCLE_OUTER = _D["epicycle_outer"]

CLUMP_SAMPLES = _D["clump_samples"]
CLUMP_RADIUS = _D["clump_radius"]
CLUMP_STRENGTH = _D["clump_strength"]
CLUMP_SOFTENING = _D["clump_softening"]

JITTER = _D["jitter"]

ESCAPE_RADIUS = _D["escape_radius"]
BOUNCE = _D["bounce"]
INWARD_NUDGE = _D["inward_nudge"]

BRIGHTNESS_SOFTENING = _D["brightness_softening"]
DIRECTION_EPSILON = _D["direction_epsilon"]

MASK32 = 0xFFFFFFFF
TWO_PI = 2.0 * math.pi
GOLDEN = 0.6180339887498949
SQRT2 = 1.4142135623730951


# ============================================================================
# STATELESS HASHING
# ============================================================================

@njit(cache=True)
def hash_u32(x: int) -> int:
    """Avalanche an integer into a 32-bit hash (kept in int64 range)."""
    x = x & MASK32
    x = (((x >> 16) ^ x) * 0x45D9F3B) & MASK32
    x = (((x >> 16) ^ x) * 0x45D9F3B) & MASK32
    x = (x >> 16) ^ x
    return x


@njit(cache=True)
def hash_unit(x: int) -> float:
    """Hash into [0, 1)."""
    return hash_u32(x) / 4294967296.0


@njit(cache=True)
def preferred_radius(i: int) -> float:
    """Per-body equilibrium radius. Fixed for the body's lifetime."""
    h = hash_unit(i * 2654435761 + 1013904223)
    r = 1.3 * math.sqrt(h)
    return min(max(r, PREFERRED_RADIUS_MIN), PREFERRED_RADIUS_MAX)


@njit(cache=True)
def neighbor_index(i: int, sample: int, n: int) -> int:
    """Pseudo-random other body for clumping sample `sample` of body `i`."""
    return hash_u32(i * 747796405 + sample * 277803737 + 2891336453) % n


@njit(cache=True)
def jet_respawn_point(i: int) -> tuple:
    """De-correlated respawn point near the origin from irrational multiples of i."""
    fx = i * GOLDEN
    fy = i * SQRT2
    ox = (fx - math.floor(fx) - 0.5) * 2.0 * JET_RESPAWN_SPREAD
    oy = (fy - math.floor(fy) - 0.5) * 2.0 * JET_RESPAWN_SPREAD
    return ox, oy


# ============================================================================
# FORCE HELPERS
# ============================================================================

@njit(cache=True)
def mix(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@njit(cache=True)
def apply_deadzone(error: float, width: float) -> float:
    """Zero small errors, shrink larger ones toward zero by `width`."""
    if error > width:
        return error - width
    if error < -width:
        return error + width
    return 0.0


# ============================================================================
# KERNEL
# ============================================================================

@njit(parallel=True, fastmath=True, cache=True)
def step_bodies(
    src_triangles: np.ndarray,
    src_velocities: np.ndarray,
    kinds: np.ndarray,
    colors: np.ndarray,
    dt: float,
    dst_triangles: np.ndarray,
    dst_velocities: np.ndarray,
    out_positions: np.ndarray,
    out_colors: np.ndarray
):
    """Advance every body by dt and emit three vertices per body."""
    n = src_triangles.shape[0]
    clump_radius_sq = CLUMP_RADIUS * CLUMP_RADIUS

    for i in prange(n):
        vx = src_velocities[i, 0]
        vy = src_velocities[i, 1]
        cx = (src_triangles[i, 0, 0] + src_triangles[i, 1, 0] + src_triangles[i, 2, 0]) / 3.0
        cy = (src_triangles[i, 0, 1] + src_triangles[i, 1, 1] + src_triangles[i, 2, 1]) / 3.0
        base = 3 * i

        # --- Jets: ballistic, respawn on escape ---
        if kinds[i] == JET:
            dx = vx * dt
            dy = vy * dt
            nx = cx + dx
            ny = cy + dy
            if math.sqrt(nx * nx + ny * ny) > JET_RESPAWN_RADIUS:
                sx, sy = jet_respawn_point(i)
                dx = sx - cx
                dy = sy - cy
            for k in range(3):
                px = src_triangles[i, k, 0] + dx
                py = src_triangles[i, k, 1] + dy
                dst_triangles[i, k, 0] = px
                dst_triangles[i, k, 1] = py
                out_positions[base + k, 0] = px
                out_positions[base + k, 1] = py
                out_colors[base + k, 0] = colors[i, 0]
                out_colors[base + k, 1] = colors[i, 1]
                out_colors[base + k, 2] = colors[i, 2]
            dst_velocities[i, 0] = vx
            dst_velocities[i, 1] = vy
            continue

        # --- Local frame ---
        dist = math.sqrt(cx * cx + cy * cy)
        inv = 1.0 / (dist + DIRECTION_EPSILON)
        rx = cx * inv
        ry = cy * inv
        tx = -ry
        ty = rx

        # Central point mass
        d2 = dist * dist + CENTRAL_SOFTENING
        f = CENTRAL_MASS / (d2 * math.sqrt(d2))
        ax = -cx * f
        ay = -cy * f

        # Halo
        f = HALO_STRENGTH / (dist + HALO_CORE)
        ax -= cx * f
        ay -= cy * f

        # Rotation-curve stabilization, in the body's own orbital sense
        t = min(max((dist - RAMP_START) / RAMP_WIDTH, 0.0), 1.0)
        v_r = vx * rx + vy * ry
        v_t = vx * tx + vy * ty
        v_flat = mix(V_FLAT_INNER, V_FLAT_OUTER, t)
        target = v_flat if v_t >= 0.0 else -v_flat
        error = apply_deadzone(target - v_t, DEADZONE)
        gain = TANGENTIAL_GAIN * mix(1.0, OUTER_GAIN_SCALE, t)
        a_t = min(max(error * gain, -MAX_TANGENTIAL_ACCEL), MAX_TANGENTIAL_ACCEL)
        ax += tx * a_t
        ay += ty * a_t

        # Radial damping
        damping = mix(RADIAL_DAMPING_INNER, RADIAL_DAMPING_OUTER, t)
        ax -= rx * v_r * damping
        ay -= ry * v_r * damping

        # Epicyclic spring
        spring = (dist - preferred_radius(i)) * mix(EPICYCLE_INNER, EPICYCLE_OUTER, t)
        ax -= rx * spring
        ay -= ry * spring

        # Clumping against hash-sampled neighbours (snapshot positions)
        for s in range(CLUMP_SAMPLES):
            j = neighbor_index(i, s, n)
            if j == i or kinds[j] == JET:
                continue
            qx = (src_triangles[j, 0, 0] + src_triangles[j, 1, 0] + src_triangles[j, 2, 0]) / 3.0 - cx
            qy = (src_triangles[j, 0, 1] + src_triangles[j, 1, 1] + src_triangles[j, 2, 1]) / 3.0 - cy
            r2 = qx * qx + qy * qy
            if r2 < clump_radius_sq:
                w = 1.0 - math.sqrt(r2) / CLUMP_RADIUS
                d2 = r2 + CLUMP_SOFTENING
                f = CLUMP_STRENGTH * w / (d2 * math.sqrt(d2))
                ax += qx * f
                ay += qy * f

        # Semi-implicit Euler: velocity first, then jitter, then position
        vx += ax * dt
        vy += ay * dt
        phase = TWO_PI * hash_unit(i * 1664525 + int(min(dist, 1.0e6) * 4096.0) * 22695477)
        vx += math.cos(phase) * JITTER * dt
        vy += math.sin(phase) * JITTER * dt
        dx = vx * dt
        dy = vy * dt
        nx = cx + dx
        ny = cy + dy

        # Escape safety net: inelastic bounce of outward motion plus an inward nudge
        new_dist = math.sqrt(nx * nx + ny * ny)
        if new_dist > ESCAPE_RADIUS:
            inv = 1.0 / (new_dist + DIRECTION_EPSILON)
            nrx = nx * inv
            nry = ny * inv
            v_out = vx * nrx + vy * nry
            kick = INWARD_NUDGE
            if v_out > 0.0:
                kick += BOUNCE * v_out
            vx -= kick * nrx
            vy -= kick * nry

        dst_velocities[i, 0] = vx
        dst_velocities[i, 1] = vy

        # Emit
        boost = 1.0 / (new_dist + BRIGHTNESS_SOFTENING)
        for k in range(3):
            px = src_triangles[i, k, 0] + dx
            py = src_triangles[i, k, 1] + dy
            dst_triangles[i, k, 0] = px
            dst_triangles[i, k, 1] = py
            out_positions[base + k, 0] = px
            out_positions[base + k, 1] = py
            out_colors[base + k, 0] = colors[i, 0] * boost
            out_colors[base + k, 1] = colors[i, 1] * boost
            out_colors[base + k, 2] = colors[i, 2] * boost


# ============================================================================
# HOST-SIDE HELPERS
# ============================================================================

def allocate_vertices(num_bodies: int):
    """Output vertex buffers: (3n, 2) positions and (3n, 3) colours."""
    return (np.zeros((num_bodies * 3, 2), dtype=np.float32),
            np.zeros((num_bodies * 3, 3), dtype=np.float32))


def step_store(store: BodyStore, dt: float):
    """
    Pure frame step: returns (next_store, vertex_positions, vertex_colors).

    The input store is left untouched.
    """
    nxt = store.copy()
    positions, colors = allocate_vertices(store.count)
    step_bodies(store.triangles, store.velocities, store.kinds, store.colors, float(dt),
                nxt.triangles, nxt.velocities, positions, colors)
    return nxt, positions, colors


def warmup():
    """Pre-compile the kernel with a tiny store."""
    print("[Kernel] Compiling dynamics kernel (cached after first run)...")
    start = time.perf_counter()
    pos = np.array([[0.3, 0.0], [0.0, 0.5], [0.0, 0.0]])
    vel = np.array([[0.0, 1.5], [-1.5, 0.0], [0.0, 2.5]])
    stars = BodyStore.from_centers(pos[:2], vel[:2], 1.0, (1.0, 0.9, 0.5), 0.006)
    jets = BodyStore.from_centers(pos[2:], vel[2:], 0.0, (0.4, 0.6, 2.0), 0.008, BodyKind.JET)
    step_store(BodyStore.concatenate([stars, jets]), 0.016)
    print(f"[Kernel] Ready in {time.perf_counter() - start:.2f}s")
