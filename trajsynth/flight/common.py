"""Input validation and sample assembly shared by the maneuvers."""

from __future__ import annotations

import logging

import numpy as np

from ..config import TrajectoryConfig
from ..core.constants import ANGLE_THRESHOLD_DEG, MAX_BEARING_DEG, MAX_PITCH_DEG
from ..core.samples import SampleBatch
from ..core.spherical import (
    GreatCircleFrame,
    angle_info,
    great_circle_frame,
    is_valid_connecting_orientation,
    orientation_to_vector,
    resolve_antipodal_third,
)
from ..errors import ManeuverInputError
from .state import ManeuverOptions, ManeuverResult, TargetState, as_real

logger = logging.getLogger(__name__)


def validate_start_time(state: TargetState, start_time_s) -> float:
    start = as_real("start_time_s", start_time_s)
    if start < 0.0:
        raise ManeuverInputError(f"start_time_s must be >= 0, got {start}")
    if start < state.clock_time_s:
        logger.warning(
            "Maneuver start time %.6f s is behind the target clock %.6f s; starting at the clock instead",
            start,
            state.clock_time_s,
        )
        return state.clock_time_s
    return start


def validate_bearing(bearing_deg) -> float:
    bearing = as_real("bearing_deg", bearing_deg)
    if abs(bearing) > MAX_BEARING_DEG:
        raise ManeuverInputError(f"bearing_deg must be within [-360, 360], got {bearing}")
    return bearing


def validate_pitch(pitch_deg) -> float:
    pitch = as_real("pitch_deg", pitch_deg)
    if abs(pitch) > MAX_PITCH_DEG:
        raise ManeuverInputError(f"pitch_deg must be within [-90, 90], got {pitch}")
    return pitch


def validate_speed(speed_mps) -> float:
    speed = as_real("speed_mps", speed_mps)
    if speed <= 0.0:
        raise ManeuverInputError(f"speed_mps must be > 0, got {speed}")
    return speed


def _capped(name: str, requested, maximum: float) -> float:
    if requested is None:
        return maximum
    value = as_real(name, requested)
    if value <= 0.0:
        raise ManeuverInputError(f"{name} must be > 0, got {value}")
    if value > maximum:
        logger.warning("Requested %s %.6g exceeds the configured maximum %.6g; using the maximum", name, value, maximum)
        return maximum
    return value


def resolve_limits(options: ManeuverOptions, config: TrajectoryConfig) -> tuple[float, float]:
    """Acceleration (g) and jerk (g/s) for a maneuver, capped to the configuration."""
    accel_g = _capped("acceleration_g", options.acceleration_g, config.max_acceleration_g)
    jerk_gps = _capped("jerk_gps", options.jerk_gps, config.max_jerk_gps)
    return accel_g, jerk_gps


def validate_spiral(state: TargetState, final_pitch_deg: float):
    if abs(state.pitch_deg) >= MAX_PITCH_DEG:
        raise ManeuverInputError("a spiral maneuver is undefined for vertical flight")
    if final_pitch_deg != state.pitch_deg:
        raise ManeuverInputError(
            f"a spiral maneuver keeps pitch constant: current {state.pitch_deg}, requested {final_pitch_deg}"
        )


def resolve_frame(
    bearing1_deg: float,
    pitch1_deg: float,
    bearing2_deg: float,
    pitch2_deg: float,
    connecting_orientation: tuple[float, float] | None = None,
    *,
    spiral: bool = False,
) -> GreatCircleFrame | None:
    """Great-circle frame between two orientations, or ``None`` when they coincide.

    Under ``spiral`` every orientation, including a supplied connecting one, is
    flattened onto the horizon.
    """
    if spiral:
        pitch1_deg = 0.0
        pitch2_deg = 0.0

    info = angle_info(bearing1_deg, pitch1_deg, bearing2_deg, pitch2_deg, ANGLE_THRESHOLD_DEG)
    if info.close:
        return None
    if not info.antipodal:
        return great_circle_frame(info)

    if connecting_orientation is not None:
        if len(connecting_orientation) != 2:
            raise ManeuverInputError("connecting_orientation must be a (bearing, pitch) pair")
        az3 = validate_bearing(connecting_orientation[0])
        el3 = 0.0 if spiral else validate_pitch(connecting_orientation[1])
        if not is_valid_connecting_orientation(info, az3, el3, ANGLE_THRESHOLD_DEG):
            raise ManeuverInputError(
                f"connecting orientation ({az3}, {el3}) is too close to an endpoint to define a plane"
            )
    else:
        az3, el3 = resolve_antipodal_third(bearing1_deg, pitch1_deg, bearing2_deg, pitch2_deg)
        logger.warning(
            "Orientations (%.3f, %.3f) and (%.3f, %.3f) are antipodal; turning through (%.3f, %.3f)",
            bearing1_deg,
            pitch1_deg,
            bearing2_deg,
            pitch2_deg,
            az3,
            el3,
        )
    return great_circle_frame(info, orientation_to_vector(az3, el3))


def append_terminal_sample(times_s: np.ndarray, velocities: np.ndarray, dt_s: float):
    """Repeat the final velocity one nominal update after the last sample."""
    times_s = np.append(times_s, times_s[-1] + dt_s)
    velocities = np.vstack([velocities, velocities[-1]])
    return times_s, velocities


def integrate_positions(start_position, times_s: np.ndarray, velocities: np.ndarray) -> np.ndarray:
    """Rectangular integration: each step carries the velocity at its left end."""
    dt = np.diff(times_s)
    steps = velocities[:-1] * dt[:, None]
    positions = np.empty_like(velocities)
    positions[0] = np.asarray(start_position, dtype=float)
    positions[1:] = positions[0] + np.cumsum(steps, axis=0)
    return positions


def build_batch(clock_time_s: float, times_s: np.ndarray, positions: np.ndarray, velocities: np.ndarray) -> SampleBatch:
    """Samples on the absolute clock without the already-emitted first point."""
    return SampleBatch(clock_time_s + times_s[1:], positions[1:], velocities[1:])


def finish_maneuver(state: TargetState, config: TrajectoryConfig, times_s, velocities, **changes) -> ManeuverResult:
    """Integrate a sampled velocity profile starting at ``state`` into a result.

    ``times_s`` starts at zero on the maneuver's own clock; ``changes`` are the
    orientation and speed the target holds once the maneuver ends.
    """
    times_s, velocities = append_terminal_sample(
        np.asarray(times_s, dtype=float), np.asarray(velocities, dtype=float), config.nominal_update_rate_s
    )
    positions = integrate_positions(state.position, times_s, velocities)
    batch = build_batch(state.clock_time_s, times_s, positions, velocities)
    new_state = state.replace(
        clock_time_s=float(batch.times_s[-1]),
        position_ned_m=tuple(positions[-1]),
        **changes,
    )
    return ManeuverResult(state=new_state, samples=batch)


def chain_results(lead: ManeuverResult, result: ManeuverResult) -> ManeuverResult:
    """Prefix ``result`` with the samples of the propagation that preceded it."""
    return ManeuverResult(state=result.state, samples=SampleBatch.concatenate([lead.samples, result.samples]))


def no_op(state: TargetState) -> ManeuverResult:
    return ManeuverResult(state=state, samples=SampleBatch.empty())
