import numpy as np
import pytest

from galaxy.generators import (
    GENERATORS, GalaxyType, PALETTE, build_galaxy, generate_bulge_seed, generate_jets,
    generate_morphology, parse_morphology, random_morphology, random_star_colors,
)
from galaxy.store import BodyKind


def expected_count(galaxy_type, n):
    if galaxy_type == GalaxyType.LENTICULAR:
        return n + n // 8
    if galaxy_type == GalaxyType.BUTTERFLY:
        return 2 * (n // 2)
    return n


def test_every_morphology_has_a_generator():
    assert set(GENERATORS) == set(GalaxyType)
    assert len(GalaxyType) == 13


@pytest.mark.parametrize("galaxy_type", list(GalaxyType))
def test_morphology_population(galaxy_type, rng):
    n = 3000
    store = generate_morphology(galaxy_type, n, rng)

    store.validate()
    assert store.count == expected_count(galaxy_type, n)
    assert np.all(store.kinds == BodyKind.STAR)
    assert np.all(np.isfinite(store.triangles))
    assert np.all(np.isfinite(store.velocities))
    assert not store.is_jet_color().any()
    # Everything starts inside the visible galaxy
    assert store.radii().max() < 2.5


@pytest.mark.parametrize("galaxy_type", [
    GalaxyType.GRAND_SPIRAL, GalaxyType.FLOCCULENT, GalaxyType.STARBURST_RING,
    GalaxyType.LENTICULAR, GalaxyType.FRACTAL_SPIRAL, GalaxyType.VORTEX_LENS,
    GalaxyType.BUTTERFLY, GalaxyType.POLAR_RING,
])
def test_disk_morphologies_orbit_counter_clockwise(galaxy_type, rng):
    store = generate_morphology(galaxy_type, 2000, rng)
    pos = store.centroids()
    r_hat = pos / np.linalg.norm(pos, axis=1, keepdims=True)
    t_hat = np.stack([-r_hat[:, 1], r_hat[:, 0]], axis=1)

    radial = np.sum(store.velocities * r_hat, axis=1)
    tangential = np.sum(store.velocities * t_hat, axis=1)

    np.testing.assert_allclose(radial, 0.0, atol=1e-9)
    assert np.all(tangential > 0.0)


def test_ring_initial_conditions(rng):
    store = generate_morphology(GalaxyType.STARBURST_RING, 10_000, rng)
    r = store.radii()

    assert store.count == 10_000
    assert r.min() >= 0.7 - 1e-12
    assert r.max() <= 0.9 + 1e-12
    np.testing.assert_allclose(store.speeds(), np.sqrt(3.5 / r) * 1.1, rtol=1e-9)
    np.testing.assert_allclose(store.colors, np.tile([0.2, 0.8, 1.0], (10_000, 1)), rtol=1e-6)


def test_barred_spiral_bar_halves_rotate_same_way(rng):
    store = generate_morphology(GalaxyType.BARRED_SPIRAL, 20_000, rng)
    bar = slice(0, 1000)
    x = store.centroids()[bar, 0]
    vy = store.velocities[bar, 1]

    assert np.all(vy[x > 0] > 0)
    assert np.all(vy[x < 0] < 0)


def test_merging_pair_cores_approach(rng):
    store = generate_morphology(GalaxyType.MERGING_PAIR, 10_000, rng)
    left_core = slice(0, 1000)
    right_core = slice(1000, 2000)

    assert store.velocities[left_core, 0].mean() > 0.0
    assert store.velocities[right_core, 0].mean() < 0.0


def test_small_budgets_do_not_overflow(rng):
    for galaxy_type in (GalaxyType.BARRED_SPIRAL, GalaxyType.MERGING_PAIR):
        assert generate_morphology(galaxy_type, 50, rng).count == 50


def test_palette_weights(rng):
    colors = random_star_colors(100_000, rng)
    fractions = [np.mean(np.all(colors == c, axis=1)) for c in PALETTE]

    np.testing.assert_allclose(fractions, [0.45, 0.45, 0.10], atol=0.01)


def test_bulge_seed(rng):
    bulge = generate_bulge_seed(300, rng)

    assert bulge.count == 300
    assert bulge.radii().max() <= 0.04 + 1e-12
    np.testing.assert_array_equal(bulge.velocities, 0.0)
    np.testing.assert_array_equal(bulge.masses, 0.0)
    assert np.all(bulge.kinds == BodyKind.STAR)


def test_jets(rng):
    jets = generate_jets(20_000, rng)

    assert jets.count == 20_000
    assert np.all(jets.kinds == BodyKind.JET)
    assert np.all(jets.is_jet_color())
    np.testing.assert_array_equal(jets.velocities[:, 0], 0.0)
    assert set(np.unique(jets.velocities[:, 1])) == {-2.5, 2.5}
    assert np.abs(jets.centroids()).max() <= 0.01 + 1e-12


def test_build_galaxy_layout(rng):
    store = build_galaxy(GalaxyType.ELLIPTICAL, 5000, rng, bulge_count=300, jet_count=20_000)

    assert store.count == 300 + 20_000 + 5000
    assert np.all(store.kinds[:300] == BodyKind.STAR)
    assert np.all(store.kinds[300:20_300] == BodyKind.JET)
    assert np.all(store.kinds[20_300:] == BodyKind.STAR)


def test_build_galaxy_is_reproducible():
    a = build_galaxy(GalaxyType.FRACTAL_SPIRAL, 4000, np.random.default_rng(99), 30, 200)
    b = build_galaxy(GalaxyType.FRACTAL_SPIRAL, 4000, np.random.default_rng(99), 30, 200)

    np.testing.assert_array_equal(a.triangles, b.triangles)
    np.testing.assert_array_equal(a.velocities, b.velocities)
    np.testing.assert_array_equal(a.colors, b.colors)


def test_build_galaxy_random_morphology(rng):
    store = build_galaxy(None, 1000, rng, bulge_count=10, jet_count=10)
    assert store.count >= 1010


@pytest.mark.parametrize("star_count", [0, -5])
def test_invalid_star_budget_rejected(star_count, rng):
    with pytest.raises(ValueError, match="star_count"):
        build_galaxy(GalaxyType.STARBURST_RING, star_count, rng)
    with pytest.raises(ValueError, match="star_count"):
        generate_morphology(GalaxyType.STARBURST_RING, star_count, rng)


def test_negative_population_rejected(rng):
    with pytest.raises(ValueError):
        build_galaxy(GalaxyType.STARBURST_RING, 100, rng, bulge_count=-1)


def test_parse_morphology():
    assert parse_morphology("barred-spiral") is GalaxyType.BARRED_SPIRAL
    assert parse_morphology("Polar_Ring") is GalaxyType.POLAR_RING
    assert parse_morphology(GalaxyType.BUTTERFLY) is GalaxyType.BUTTERFLY
    with pytest.raises(ValueError, match="Unknown morphology"):
        parse_morphology("ring")


def test_random_morphology_covers_all_types(rng):
    seen = {random_morphology(rng) for _ in range(500)}
    assert seen == set(GalaxyType)
