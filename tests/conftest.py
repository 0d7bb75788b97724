import numpy as np
import pytest

from trajsynth.config import TrajectoryConfig
from trajsynth.flight.state import TargetState


@pytest.fixture
def config():
    return TrajectoryConfig()


@pytest.fixture
def state():
    """Default target: origin, 200 m/s, heading north, level."""
    return TargetState()


def accelerations(batch):
    """Finite-difference acceleration magnitudes between consecutive samples."""
    dv = np.diff(batch.velocities_mps, axis=0)
    dt = np.diff(batch.times_s)
    return np.linalg.norm(dv, axis=1) / dt
