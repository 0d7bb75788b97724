"""Straight-line constant-velocity propagation."""

from __future__ import annotations

import math

import numpy as np

from ..config import TrajectoryConfig
from ..core.samples import SampleBatch
from ..errors import ManeuverInputError
from .state import ManeuverResult, TargetState, as_real


def propagate_to(state: TargetState, config: TrajectoryConfig, time_s) -> ManeuverResult:
    """Advance ``state`` to ``time_s`` at constant velocity.

    Times at or before the clock leave the state unchanged and emit nothing.
    With ``thick_updates`` the straight segment is sampled at roughly the
    nominal update rate, otherwise a single sample lands on ``time_s``.
    """
    target = as_real("time_s", time_s)
    if target < 0.0:
        raise ManeuverInputError(f"time_s must be >= 0, got {target}")
    if target <= state.clock_time_s:
        return ManeuverResult(state=state, samples=SampleBatch.empty())

    span_s = target - state.clock_time_s
    if config.thick_updates:
        n_updates = max(3, int(math.ceil(span_s / config.nominal_update_rate_s)) + 1)
        offsets = np.linspace(0.0, span_s, n_updates)[1:]
    else:
        offsets = np.array([span_s])

    velocity = state.velocity_ned_mps()
    positions = state.position + offsets[:, None] * velocity
    velocities = np.tile(velocity, (offsets.size, 1))
    times = state.clock_time_s + offsets
    times[-1] = target

    new_state = state.replace(clock_time_s=target, position_ned_m=tuple(positions[-1]))
    return ManeuverResult(state=new_state, samples=SampleBatch(times, positions, velocities))
