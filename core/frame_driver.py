"""Frame driver: wall-clock time in, one kernel step per frame out."""

from typing import Optional, Tuple

import numpy as np

from config import galaxy as config


def clamp_dt(now: float, last_time: Optional[float], max_dt: float) -> Tuple[float, float]:
    """
    Time step for a frame presented at `now`.

    Returns (dt, new_last_time). A stall (debugger pause, window drag) never
    injects more than max_dt; the first frame and clock steps backwards give 0.
    """
    if last_time is None:
        return 0.0, now
    return min(max(now - last_time, 0.0), max_dt), now


class FrameDriver:
    """Advances a GalaxySimulation once per presented frame."""

    def __init__(self, simulation, max_dt: Optional[float] = None,
                 last_time: Optional[float] = None):
        self.simulation = simulation
        self.max_dt = float(config.GALAXY["max_dt"] if max_dt is None else max_dt)
        self.last_time = last_time
        self.last_dt = 0.0
        self.paused = False
        self._reset_pending = False
        self._reset_morphology = None

    def request_reset(self, morphology=None):
        """Regenerate the galaxy before the next frame runs."""
        self._reset_pending = True
        self._reset_morphology = morphology

    @property
    def reset_pending(self) -> bool:
        return self._reset_pending

    def _apply_reset(self):
        morphology = self._reset_morphology
        self._reset_pending = False
        self._reset_morphology = None
        print("[Frame] Resetting simulation...")
        if not self.simulation.reset(morphology):
            print(f"[Frame] Reset failed, continuing with {self.simulation.morphology.value}")

    def frame(self, now: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Run one frame at clock reading `now`.

        Returns the vertex stream (positions (3n, 2), colors (3n, 3)).
        """
        if self._reset_pending:
            self._apply_reset()

        dt, self.last_time = clamp_dt(now, self.last_time, self.max_dt)
        self.last_dt = dt

        if not self.paused:
            self.simulation.step(dt)

        return self.simulation.vertex_positions, self.simulation.vertex_colors
