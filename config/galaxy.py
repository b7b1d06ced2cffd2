"""Configuration for the procedural galaxy simulation."""

# =============================================================================
# POPULATION PRESETS - Choose one by uncommenting
# =============================================================================

# PRESET: FULL (1M stars) - what the galaxy is tuned for
STAR_COUNT = 1_000_000

# PRESET: MEDIUM (250K stars) - laptops without many cores
# STAR_COUNT = 250_000

# PRESET: LIGHT (50K stars) - debugging
# STAR_COUNT = 50_000

# =============================================================================

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Cosmos: Procedural Galaxy Generator (Space/Click to Reset)"
}

# Population sizes
GALAXY = {
    "star_count": STAR_COUNT,      # Morphology population
    "bulge_count": 300,            # Warm core seeds (visual only)
    "jet_count": 20_000,           # Ballistic polar jet particles
    "max_dt": 0.02,                # Frame delta clamp (seconds)
}

# Generation constants shared by every morphology
GENERATION = {
    "orbit_k": 3.5,                # v(r) = sqrt(K / (r + eps))
    "star_size": 0.006,
    "bulge_radius": 0.04,
    "bulge_size": 0.01,
    "bulge_color": (1.5, 1.3, 0.9),
    "jet_spread": 0.01,
    "jet_speed": 2.5,
    "jet_size": 0.008,
    "jet_color": (0.4, 0.6, 2.0),
}

# Dynamics kernel constants (empirically tuned, keep as-is)
DYNAMICS = {
    # Jets
    "jet_respawn_radius": 1.5,
    "jet_respawn_spread": 0.01,

    # Central point mass
    "central_mass": 3.5,
    "central_softening": 0.05,

    # Isothermal halo
    "halo_strength": 0.75,
    "halo_core": 1.7,

    # Rotation-curve stabilization
    "ramp_start": 0.2,
    "ramp_width": 1.2,
    "v_flat_inner": 2.0,
    "v_flat_outer": 2.0,
    "deadzone": 0.32,
    "tangential_gain": 0.38,
    "outer_gain_scale": 0.35,
    "max_tangential_accel": 0.8,

    # Radial damping
    "radial_damping_inner": 0.10,
    "radial_damping_outer": 0.06,

    # Epicyclic spring
    "preferred_radius_min": 0.15,
    "preferred_radius_max": 1.2,
    "epicycle_inner": 0.06,
    "epicycle_outer": 0.02,

    # Local clumping
    "clump_samples": 6,
    "clump_radius": 0.14,
    "clump_strength": 0.035,
    "clump_softening": 0.02,

    # Jitter
    "jitter": 0.0035,

    # Escape handling
    "escape_radius": 1000.0,
    "bounce": 1.4,
    "inward_nudge": 0.05,

    # Emission
    "brightness_softening": 0.2,

    # Direction normalization
    "direction_epsilon": 1e-6,
}

RENDER = {
    "view_extent": 1.6,            # Half-height of the visible world region
}

COLORS = {
    "background": (0.005, 0.005, 0.01, 1.0),  # Near-black so additive stars pop
    "text": (0.7, 0.8, 0.9)
}
