import numpy as np
import pytest

from galaxy.store import BodyKind, BodyStore


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def single_body(x, y, vx=0.0, vy=0.0, kind=BodyKind.STAR, color=(1.0, 0.9, 0.5)):
    """A one-body store; with n=1 clumping has no neighbours to sample."""
    return BodyStore.from_centers(np.array([[x, y]]), np.array([[vx, vy]]), 1.0, color, 0.006, kind)


@pytest.fixture
def make_body():
    return single_body
