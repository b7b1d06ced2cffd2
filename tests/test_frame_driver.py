import numpy as np
import pytest

from core.frame_driver import FrameDriver, clamp_dt
from galaxy.generators import GalaxyType


class FakeSimulation:
    """Records calls instead of stepping a real galaxy."""

    def __init__(self, reset_ok=True):
        self.morphology = GalaxyType.GRAND_SPIRAL
        self.reset_ok = reset_ok
        self.calls = []
        self.vertex_positions = np.zeros((3, 2), dtype=np.float32)
        self.vertex_colors = np.zeros((3, 3), dtype=np.float32)

    def step(self, dt):
        self.calls.append(("step", dt))

    def reset(self, morphology=None):
        self.calls.append(("reset", morphology))
        return self.reset_ok


@pytest.mark.parametrize("now, last, expected", [
    (10.0, None, 0.0),
    (10.01, 10.0, 0.01),
    (10.5, 10.0, 0.02),
    (9.0, 10.0, 0.0),
])
def test_clamp_dt(now, last, expected):
    dt, new_last = clamp_dt(now, last, 0.02)

    assert dt == pytest.approx(expected)
    assert new_last == now


def test_first_frame_steps_with_zero_dt():
    sim = FakeSimulation()
    driver = FrameDriver(sim, max_dt=0.02)

    positions, colors = driver.frame(100.0)

    assert sim.calls == [("step", 0.0)]
    assert positions is sim.vertex_positions
    assert colors is sim.vertex_colors


def test_stall_is_clamped():
    sim = FakeSimulation()
    driver = FrameDriver(sim, max_dt=0.02)
    driver.frame(0.0)
    driver.frame(0.010)
    driver.frame(3.0)

    dts = [dt for name, dt in sim.calls if name == "step"]
    assert dts[1] == pytest.approx(0.010)
    assert dts[2] == 0.02
    assert driver.last_dt == 0.02


def test_default_max_dt_from_config():
    driver = FrameDriver(FakeSimulation())
    assert driver.max_dt == 0.02


def test_reset_runs_before_next_step():
    sim = FakeSimulation()
    driver = FrameDriver(sim, max_dt=0.02)
    driver.frame(0.0)

    driver.request_reset(GalaxyType.BUTTERFLY)
    assert driver.reset_pending
    assert sim.calls == [("step", 0.0)]

    driver.frame(0.016)

    assert sim.calls[1:] == [("reset", GalaxyType.BUTTERFLY), ("step", pytest.approx(0.016))]
    assert not driver.reset_pending


def test_repeated_requests_reset_once():
    sim = FakeSimulation()
    driver = FrameDriver(sim)
    driver.request_reset()
    driver.request_reset()
    driver.frame(0.0)

    assert [name for name, _ in sim.calls].count("reset") == 1


def test_failed_reset_keeps_running():
    sim = FakeSimulation(reset_ok=False)
    driver = FrameDriver(sim)
    driver.request_reset()

    driver.frame(0.0)

    assert [name for name, _ in sim.calls] == ["reset", "step"]
    assert not driver.reset_pending


def test_pause_skips_steps_but_keeps_clock():
    sim = FakeSimulation()
    driver = FrameDriver(sim, max_dt=0.02)
    driver.frame(0.0)

    driver.paused = True
    driver.frame(0.01)
    driver.frame(5.0)
    assert len(sim.calls) == 1

    driver.paused = False
    driver.frame(5.01)
    assert sim.calls[-1][1] == pytest.approx(0.01)


def test_real_simulation_round_trip():
    from galaxy import GalaxySimulation

    sim = GalaxySimulation(star_count=500, morphology=GalaxyType.LENTICULAR, seed=0,
                           bulge_count=10, jet_count=20, warm_up=False)
    driver = FrameDriver(sim)

    positions, colors = driver.frame(0.0)
    positions, colors = driver.frame(0.016)

    assert sim.frame_count == 2
    assert positions.shape == (sim.num_bodies * 3, 2)
    assert np.all(np.isfinite(positions))
    assert np.all(colors >= 0.0)
