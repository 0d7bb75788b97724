"""Constant-speed direction change along a great circle."""

from __future__ import annotations

import logging
import math

from ..config import TrajectoryConfig
from ..core.constants import G_MPS2
from ..core.ramp import solve_ramp_profile
from ..core.spherical import GreatCircleFrame
from .common import (
    chain_results,
    finish_maneuver,
    no_op,
    resolve_frame,
    resolve_limits,
    validate_bearing,
    validate_pitch,
    validate_spiral,
    validate_start_time,
)
from .propagation import propagate_to
from .state import ManeuverOptions, ManeuverResult, TargetState

logger = logging.getLogger(__name__)


def turn_speed_mps(state: TargetState, spiral: bool) -> float:
    """Speed along the turning great circle; the horizontal component for spirals."""
    if spiral:
        return state.speed_mps * math.cos(math.radians(state.pitch_deg))
    return state.speed_mps


def _turn(
    state: TargetState,
    config: TrajectoryConfig,
    frame: GreatCircleFrame,
    accel_g: float,
    jerk_gps: float,
    spiral: bool,
    final_bearing_deg: float,
    final_pitch_deg: float,
) -> ManeuverResult:
    vt = turn_speed_mps(state, spiral)
    # Lateral acceleration a at speed vt turns the velocity at a / vt rad/s.
    profile = solve_ramp_profile(
        frame.angle_rad,
        accel_g * G_MPS2 / vt,
        jerk_gps * G_MPS2 / vt,
        config.nominal_update_rate_s,
    )
    logger.debug(
        "Direction change of %.4f deg: %.4f s, peak turn rate %.6f rad/s, hold %.4f s",
        frame.angle_deg,
        profile.duration_s,
        profile.peak_rate,
        profile.hold_duration_s,
    )

    velocities = vt * frame.direction_at(profile.values)
    if spiral:
        velocities[:, 2] = -state.speed_mps * math.sin(math.radians(state.pitch_deg))
        final_pitch_deg = state.pitch_deg

    return finish_maneuver(
        state,
        config,
        profile.times_s,
        velocities,
        bearing_deg=final_bearing_deg,
        pitch_deg=final_pitch_deg,
    )


def change_direction(
    state: TargetState,
    config: TrajectoryConfig,
    start_time_s,
    final_bearing_deg,
    final_pitch_deg,
    options: ManeuverOptions | None = None,
) -> ManeuverResult:
    """Turn from the current orientation to ``(final_bearing_deg, final_pitch_deg)``.

    The target is first propagated to ``start_time_s``. The turn follows the
    great circle between the two orientations under a jerk-limited turn-rate
    profile, keeping speed constant. Orientations closer than the angle
    threshold leave the target untouched.
    """
    options = options or ManeuverOptions()
    start = validate_start_time(state, start_time_s)
    bearing = validate_bearing(final_bearing_deg)
    pitch = validate_pitch(final_pitch_deg)
    accel_g, jerk_gps = resolve_limits(options, config)
    if options.spiral:
        validate_spiral(state, pitch)

    frame = resolve_frame(
        state.bearing_deg,
        state.pitch_deg,
        bearing,
        pitch,
        options.connecting_orientation,
        spiral=options.spiral,
    )
    if frame is None:
        logger.warning(
            "Requested orientation (%.4f, %.4f) matches the current one; direction change skipped", bearing, pitch
        )
        return no_op(state)

    lead = propagate_to(state, config, start)
    result = _turn(lead.state, config, frame, accel_g, jerk_gps, options.spiral, bearing, pitch)
    return chain_results(lead, result)
