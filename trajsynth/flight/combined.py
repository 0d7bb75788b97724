"""Simultaneous direction and speed change.

The total acceleration and jerk budgets are split by an angle ``phi``: the
tangential part ``sin(phi)`` drives the speed profile and the centripetal part
``cos(phi)`` turns the velocity. Both share the timing of the tangential
ramp, so the centripetal acceleration is the tangential one scaled by
``cot(phi)``. ``phi`` is searched until the turn accumulated over the speed
change equals the great-circle separation of the two orientations.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config import TrajectoryConfig
from ..core.constants import (
    ANGLE_THRESHOLD_DEG,
    G_MPS2,
    MIN_SPEED_DELTA_MPS,
    SPLIT_ANGLE_MAX_ITERATIONS,
    SPLIT_ANGLE_NUDGE_DEG,
    SPLIT_ANGLE_START_DEG,
    SPLIT_ANGLE_STEP_DEG,
    SPLIT_ANGLE_TOLERANCE_DEG,
)
from ..core.ramp import RampTiming, solve_ramp_profile, solve_ramp_timing
from ..core.spherical import angle_info
from ..core.turn_integral import integrate_linear_over_quadratic
from ..errors import ManeuverConvergenceError
from .common import (
    chain_results,
    finish_maneuver,
    no_op,
    resolve_frame,
    resolve_limits,
    validate_bearing,
    validate_pitch,
    validate_speed,
    validate_spiral,
    validate_start_time,
)
from .direction import change_direction
from .propagation import propagate_to
from .speed import change_speed
from .state import ManeuverOptions, ManeuverResult, TargetState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SplitAngleSolution:
    split_angle_deg: float
    iterations: int
    angle_error_deg: float
    timing: RampTiming

    @property
    def cot(self) -> float:
        return 1.0 / math.tan(math.radians(self.split_angle_deg))


def _clamp_split_angle(phi_deg: float) -> float:
    return min(max(phi_deg, SPLIT_ANGLE_NUDGE_DEG), 90.0 - SPLIT_ANGLE_NUDGE_DEG)


def _turn_phases(timing: RampTiming, initial_speed_mps: float, cot: float, horizontal_scale: float):
    """``(start_s, end_s, alpha, beta, c2, c1, c0)`` for each phase of the ramp.

    Within a phase the turn rate is ``(alpha*t + beta) / (c2*t^2 + c1*t + c0)``
    in phase-local time, with ``a_c`` linear and ``horizontal_scale * v`` at most
    quadratic.
    """
    s = timing.sign
    k = horizontal_scale
    jerk = timing.jerk
    peak = timing.peak_rate
    v0 = initial_speed_mps
    v1 = initial_speed_mps + timing.delta
    t_ramp = timing.ramp_duration_s
    t_down = timing.ramp_down_start_s

    phases = [(0.0, t_ramp, cot * jerk, 0.0, 0.5 * k * s * jerk, 0.0, k * v0)]
    if timing.hold_duration_s > 0.0:
        v_hold = v0 + s * timing.ramp_delta
        phases.append((t_ramp, t_down, 0.0, cot * peak, 0.0, k * s * peak, k * v_hold))
    v_down = v1 - s * timing.ramp_delta
    phases.append((t_down, t_down + t_ramp, -cot * jerk, cot * peak, -0.5 * k * s * jerk, k * s * peak, k * v_down))
    return phases


def turn_angle_for_timing(timing: RampTiming, initial_speed_mps: float, cot: float, horizontal_scale: float = 1.0) -> float:
    """Turn (rad) accumulated over a tangential ramp with centripetal scale ``cot``."""
    return sum(
        integrate_linear_over_quadratic(*coeffs, 0.0, end - start)
        for start, end, *coeffs in _turn_phases(timing, initial_speed_mps, cot, horizontal_scale)
    )


def turn_angles_at(
    timing: RampTiming, initial_speed_mps: float, cot: float, times_s, horizontal_scale: float = 1.0
) -> np.ndarray:
    """Turn (rad) accumulated from the start of the ramp up to each of ``times_s``."""
    phases = _turn_phases(timing, initial_speed_mps, cot, horizontal_scale)
    times = np.asarray(times_s, dtype=float)
    theta = np.zeros(times.shape)
    for i, t in enumerate(times):
        for start, end, *coeffs in phases:
            if t <= start:
                break
            theta[i] += integrate_linear_over_quadratic(*coeffs, 0.0, min(t, end) - start)
    return theta


def predict_turn_angle_rad(
    delta_speed_mps: float,
    initial_speed_mps: float,
    accel_mps2: float,
    jerk_mps3: float,
    split_angle_deg: float,
    horizontal_scale: float = 1.0,
) -> float:
    phi = math.radians(split_angle_deg)
    timing = solve_ramp_timing(delta_speed_mps, accel_mps2 * math.sin(phi), jerk_mps3 * math.sin(phi))
    return turn_angle_for_timing(timing, initial_speed_mps, 1.0 / math.tan(phi), horizontal_scale)


def solve_split_angle(
    delta_speed_mps: float,
    initial_speed_mps: float,
    accel_mps2: float,
    jerk_mps3: float,
    turn_angle_rad: float,
    horizontal_scale: float = 1.0,
) -> SplitAngleSolution:
    """Halving search for the split angle that turns exactly ``turn_angle_rad``.

    The predicted turn falls as ``phi`` grows, so an overshoot moves ``phi``
    up and an undershoot moves it down by a step halved every iteration.
    """
    phi = SPLIT_ANGLE_START_DEG
    step = SPLIT_ANGLE_STEP_DEG
    error_deg = math.inf

    for iteration in range(1, SPLIT_ANGLE_MAX_ITERATIONS + 1):
        phi = _clamp_split_angle(phi)
        predicted = predict_turn_angle_rad(
            delta_speed_mps, initial_speed_mps, accel_mps2, jerk_mps3, phi, horizontal_scale
        )
        error_deg = math.degrees(predicted - turn_angle_rad)
        if abs(error_deg) < SPLIT_ANGLE_TOLERANCE_DEG:
            rad = math.radians(phi)
            timing = solve_ramp_timing(delta_speed_mps, accel_mps2 * math.sin(rad), jerk_mps3 * math.sin(rad))
            return SplitAngleSolution(
                split_angle_deg=phi, iterations=iteration, angle_error_deg=error_deg, timing=timing
            )
        step /= 2.0
        phi += math.copysign(step, error_deg)

    raise ManeuverConvergenceError(
        f"split-angle search did not converge after {SPLIT_ANGLE_MAX_ITERATIONS} iterations "
        f"(phi={phi:.6f} deg, error={error_deg:.6g} deg)",
        split_angle_deg=phi,
        angle_error_deg=error_deg,
        iterations=SPLIT_ANGLE_MAX_ITERATIONS,
    )


def change_direction_and_speed(
    state: TargetState,
    config: TrajectoryConfig,
    start_time_s,
    final_bearing_deg,
    final_pitch_deg,
    final_speed_mps,
    options: ManeuverOptions | None = None,
) -> ManeuverResult:
    """Turn to a new orientation while changing speed, ending both together.

    Falls back to a pure speed change when the orientations coincide and to a
    pure direction change when the speed change is negligible. Either way the
    returned state carries the requested bearing, pitch and speed.
    """
    options = options or ManeuverOptions()
    start = validate_start_time(state, start_time_s)
    bearing = validate_bearing(final_bearing_deg)
    pitch = validate_pitch(final_pitch_deg)
    final_speed = validate_speed(final_speed_mps)
    accel_g, jerk_gps = resolve_limits(options, config)
    if options.spiral:
        validate_spiral(state, pitch)

    flat = options.spiral
    info = angle_info(
        state.bearing_deg,
        0.0 if flat else state.pitch_deg,
        bearing,
        0.0 if flat else pitch,
        ANGLE_THRESHOLD_DEG,
    )
    negligible_speed = abs(final_speed - state.speed_mps) < MIN_SPEED_DELTA_MPS

    if info.close and negligible_speed:
        logger.warning("Requested orientation and speed match the current state; maneuver skipped")
        return no_op(state)
    if info.close:
        result = change_speed(state, config, start, final_speed, options)
        return ManeuverResult(result.state.replace(bearing_deg=bearing, pitch_deg=pitch), result.samples)
    if negligible_speed:
        result = change_direction(state, config, start, bearing, pitch, options)
        return ManeuverResult(result.state.replace(speed_mps=final_speed), result.samples)

    frame = resolve_frame(
        state.bearing_deg, state.pitch_deg, bearing, pitch, options.connecting_orientation, spiral=options.spiral
    )
    lead = propagate_to(state, config, start)
    current = lead.state

    k = math.cos(math.radians(current.pitch_deg)) if options.spiral else 1.0
    delta = final_speed - current.speed_mps
    accel = accel_g * G_MPS2
    jerk = jerk_gps * G_MPS2

    solution = solve_split_angle(delta, current.speed_mps, accel, jerk, frame.angle_rad, k)
    logger.debug(
        "Combined maneuver: split angle %.6f deg after %d iterations (error %.3g deg), duration %.4f s",
        solution.split_angle_deg,
        solution.iterations,
        solution.angle_error_deg,
        solution.timing.duration_s,
    )

    phi = math.radians(solution.split_angle_deg)
    profile = solve_ramp_profile(delta, accel * math.sin(phi), jerk * math.sin(phi), config.nominal_update_rate_s)
    times = profile.times_s
    speeds = current.speed_mps + profile.values
    speeds[-1] = final_speed

    theta = turn_angles_at(solution.timing, current.speed_mps, solution.cot, times, k)
    # The search stops within its tolerance; pin the endpoint.
    theta *= frame.angle_rad / theta[-1]

    directions = frame.direction_at(theta)
    if options.spiral:
        velocities = (k * speeds)[:, None] * directions
        velocities[:, 2] = -speeds * math.sin(math.radians(current.pitch_deg))
        pitch = current.pitch_deg
    else:
        velocities = speeds[:, None] * directions

    result = finish_maneuver(
        current, config, times, velocities, bearing_deg=bearing, pitch_deg=pitch, speed_mps=final_speed
    )
    return chain_results(lead, result)
