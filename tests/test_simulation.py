import numpy as np
import pytest

import galaxy.simulation as simulation_module
from galaxy import GalaxySimulation, GalaxyType
from galaxy.store import BodyKind


def make_sim(**kwargs):
    options = dict(star_count=2000, bulge_count=50, jet_count=100, warm_up=False)
    options.update(kwargs)
    return GalaxySimulation(**options)


def test_sizes_and_vertex_stream():
    sim = make_sim(morphology=GalaxyType.GRAND_SPIRAL, seed=1)

    assert sim.num_bodies == 2000 + 50 + 100
    assert sim.vertex_positions.shape == (sim.num_bodies * 3, 2)
    assert sim.vertex_colors.shape == (sim.num_bodies * 3, 3)
    assert sim.vertex_positions.dtype == np.float32
    assert np.count_nonzero(sim.store.kinds == BodyKind.JET) == 100
    assert sim.frame_count == 0


def test_vertex_stream_ready_before_first_step():
    sim = make_sim(morphology=GalaxyType.STARBURST_RING, seed=2)

    np.testing.assert_array_equal(
        sim.vertex_positions, sim.store.triangles.reshape(-1, 2).astype(np.float32)
    )


def test_step_swaps_buffers():
    sim = make_sim(morphology=GalaxyType.ELLIPTICAL, seed=3)
    before = sim.store
    snapshot = before.triangles.copy()

    sim.step(0.016)

    assert sim.store is not before
    assert sim.frame_count == 1
    assert not np.array_equal(sim.store.triangles, snapshot)
    np.testing.assert_array_equal(
        sim.vertex_positions, sim.store.triangles.reshape(-1, 2).astype(np.float32)
    )


def test_same_seed_same_galaxy():
    a = make_sim(morphology=GalaxyType.FLOCCULENT, seed=42)
    b = make_sim(morphology=GalaxyType.FLOCCULENT, seed=42)

    np.testing.assert_array_equal(a.store.triangles, b.store.triangles)
    np.testing.assert_array_equal(a.store.velocities, b.store.velocities)


def test_seed_without_pinned_morphology_is_reproducible():
    a = make_sim(seed=7)
    b = make_sim(seed=7)

    assert a.morphology is b.morphology
    np.testing.assert_array_equal(a.store.triangles, b.store.triangles)


def test_resets_are_statistically_alike():
    sim = make_sim(star_count=20_000, morphology=GalaxyType.GRAND_SPIRAL, seed=11)
    first = sim.store.copy()
    assert sim.reset()
    second = sim.store

    assert first.count == second.count
    assert not np.array_equal(first.triangles, second.triangles)
    assert first.radii().mean() == pytest.approx(second.radii().mean(), rel=0.05)
    assert first.speeds().mean() == pytest.approx(second.speeds().mean(), rel=0.05)


def test_reset_with_explicit_morphology():
    sim = make_sim(morphology=GalaxyType.ELLIPTICAL, seed=5)

    assert sim.reset("polar-ring")
    assert sim.morphology is GalaxyType.POLAR_RING
    assert sim.frame_count == 0


def test_failed_reset_keeps_current_galaxy(monkeypatch):
    sim = make_sim(morphology=GalaxyType.IRREGULAR_DWARF, seed=9)
    sim.step(0.016)
    store = sim.store
    positions = sim.vertex_positions

    def out_of_memory(*args, **kwargs):
        raise MemoryError("cannot allocate")

    monkeypatch.setattr(simulation_module, "build_galaxy", out_of_memory)

    assert sim.reset() is False
    assert sim.store is store
    assert sim.vertex_positions is positions
    assert sim.morphology is GalaxyType.IRREGULAR_DWARF
    assert "MemoryError" in sim.last_error

    # Still steppable
    sim.step(0.016)
    assert sim.frame_count == 2


@pytest.mark.parametrize("kwargs", [
    dict(star_count=0),
    dict(star_count=-10),
    dict(bulge_count=-1),
    dict(jet_count=-1),
])
def test_invalid_populations_rejected(kwargs):
    with pytest.raises(ValueError):
        make_sim(**kwargs)


def test_unknown_morphology_rejected():
    with pytest.raises(ValueError, match="Unknown morphology"):
        make_sim(morphology="cigar")
