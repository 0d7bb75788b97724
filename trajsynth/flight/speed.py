"""Constant-heading speed change."""

from __future__ import annotations

import logging

from ..config import TrajectoryConfig
from ..core.constants import G_MPS2, MIN_SPEED_DELTA_MPS
from ..core.ramp import solve_ramp_profile
from .common import chain_results, finish_maneuver, no_op, resolve_limits, validate_speed, validate_start_time
from .propagation import propagate_to
from .state import ManeuverOptions, ManeuverResult, TargetState

logger = logging.getLogger(__name__)


def change_speed(
    state: TargetState,
    config: TrajectoryConfig,
    start_time_s,
    final_speed_mps,
    options: ManeuverOptions | None = None,
) -> ManeuverResult:
    """Accelerate or decelerate along the current heading to ``final_speed_mps``."""
    options = options or ManeuverOptions()
    start = validate_start_time(state, start_time_s)
    final_speed = validate_speed(final_speed_mps)
    accel_g, jerk_gps = resolve_limits(options, config)

    delta = final_speed - state.speed_mps
    if abs(delta) < MIN_SPEED_DELTA_MPS:
        logger.warning(
            "Requested speed %.4f m/s is within %.2f m/s of the current speed; speed change skipped",
            final_speed,
            MIN_SPEED_DELTA_MPS,
        )
        return no_op(state)

    lead = propagate_to(state, config, start)
    current = lead.state

    profile = solve_ramp_profile(delta, accel_g * G_MPS2, jerk_gps * G_MPS2, config.nominal_update_rate_s)
    logger.debug(
        "Speed change of %.4f m/s: %.4f s, peak acceleration %.4f m/s^2, hold %.4f s",
        delta,
        profile.duration_s,
        profile.peak_rate,
        profile.hold_duration_s,
    )

    speeds = current.speed_mps + profile.values
    speeds[-1] = final_speed
    velocities = speeds[:, None] * current.unit_direction()
    result = finish_maneuver(current, config, profile.times_s, velocities, speed_mps=final_speed)
    return chain_results(lead, result)
