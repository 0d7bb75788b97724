"""
Tests for the combined direction-and-speed maneuver and its split-angle search.
"""

import logging
import math

import numpy as np
import pytest

from trajsynth.config import TrajectoryConfig
from trajsynth.core.constants import G_MPS2, SPLIT_ANGLE_MAX_ITERATIONS, SPLIT_ANGLE_TOLERANCE_DEG
from trajsynth.core.ramp import solve_ramp_timing
from trajsynth.core.spherical import vector_to_orientation
from trajsynth.errors import ManeuverConvergenceError
from trajsynth.flight.combined import (
    change_direction_and_speed,
    predict_turn_angle_rad,
    solve_split_angle,
    turn_angle_for_timing,
    turn_angles_at,
)
from trajsynth.flight.direction import change_direction
from trajsynth.flight.speed import change_speed
from trajsynth.flight.state import ManeuverOptions, TargetState

from conftest import accelerations


A = 6.0 * G_MPS2
J = 3.0 * G_MPS2


class TestTurnPrediction:
    """The phase integrals sum to cot(phi) * |ln(v1 / v0)| / k."""

    @pytest.mark.parametrize(
        "v0, v1, peak, jerk",
        [
            (200.0, 300.0, 20.0, 10.0),  # speed up, with hold
            (200.0, 205.0, 20.0, 10.0),  # speed up, triangular
            (300.0, 120.0, 20.0, 10.0),  # slow down, with hold
            (150.0, 149.0, 20.0, 10.0),  # slow down, triangular
        ],
    )
    @pytest.mark.parametrize("k", [1.0, math.cos(math.radians(25.0))])
    def test_matches_logarithmic_identity(self, v0, v1, peak, jerk, k):
        timing = solve_ramp_timing(v1 - v0, peak, jerk)
        cot = 0.7
        expected = cot * abs(math.log(v1 / v0)) / k
        assert turn_angle_for_timing(timing, v0, cot, k) == pytest.approx(expected, rel=1e-9)

    def test_turn_at_sample_times(self):
        timing = solve_ramp_timing(100.0, 20.0, 10.0)
        times = np.linspace(0.0, timing.duration_s, 41)
        theta = turn_angles_at(timing, 200.0, 0.7, times)
        assert theta[0] == 0.0
        assert np.all(np.diff(theta) > 0.0)
        assert theta[-1] == pytest.approx(turn_angle_for_timing(timing, 200.0, 0.7), rel=1e-12)
        # Turn so far is cot * ln(v(t) / v0) at every instant.
        speeds = 200.0 + timing.value_at(times)
        np.testing.assert_allclose(theta[1:], 0.7 * np.log(speeds[1:] / 200.0), rtol=1e-8)

    def test_turn_shrinks_as_split_grows(self):
        angles = [predict_turn_angle_rad(100.0, 200.0, A, J, phi) for phi in (10.0, 30.0, 60.0, 80.0)]
        assert all(a > b for a, b in zip(angles, angles[1:]))


class TestSplitAngleSearch:

    def test_converges_to_analytic_split(self):
        turn = math.radians(30.0)
        solution = solve_split_angle(100.0, 200.0, A, J, turn)
        expected = math.degrees(math.atan(math.log(1.5) / turn))
        assert solution.split_angle_deg == pytest.approx(expected, abs=1e-2)
        assert abs(solution.angle_error_deg) < SPLIT_ANGLE_TOLERANCE_DEG
        assert 1 <= solution.iterations < SPLIT_ANGLE_MAX_ITERATIONS

    def test_start_value_may_already_converge(self):
        # tan(45) = 1: the turn equals ln(v1 / v0).
        turn = math.log(1.5)
        solution = solve_split_angle(100.0, 200.0, A, J, turn)
        assert solution.iterations == 1
        assert solution.split_angle_deg == 45.0

    def test_unreachable_turn_raises(self):
        with pytest.raises(ManeuverConvergenceError) as excinfo:
            solve_split_angle(0.2, 5000.0, A, J, math.radians(179.0))
        assert excinfo.value.iterations == SPLIT_ANGLE_MAX_ITERATIONS
        assert excinfo.value.angle_error_deg < 0.0
        assert excinfo.value.split_angle_deg > 0.0


class TestCombinedManeuver:

    @pytest.fixture
    def result(self, state, config):
        return change_direction_and_speed(state, config, 0.0, 60.0, 0.0, 300.0)

    def test_final_state(self, result):
        assert result.state.bearing_deg == 60.0
        assert result.state.pitch_deg == 0.0
        assert result.state.speed_mps == 300.0

    def test_final_velocity(self, result):
        bearing, pitch, speed = vector_to_orientation(result.samples.velocities_mps[-1])
        assert bearing == pytest.approx(60.0)
        assert pitch == pytest.approx(0.0, abs=1e-9)
        assert speed == pytest.approx(300.0)

    def test_speed_and_turn_are_monotonic(self, result):
        speeds = result.samples.speeds_mps
        bearings, _, _ = vector_to_orientation(result.samples.velocities_mps)
        assert np.all(np.diff(speeds) >= 0.0)
        assert np.all(np.diff(bearings) >= -1e-12)

    def test_total_acceleration_bounded(self, result, config):
        assert np.max(accelerations(result.samples)) <= config.max_acceleration_g * G_MPS2 * (1.0 + 1e-4)

    @pytest.mark.parametrize("dt", [0.1, 0.5, 1.0])
    def test_acceleration_bounded_on_coarse_grid(self, state, dt):
        config = TrajectoryConfig(nominal_update_rate_s=dt)
        result = change_direction_and_speed(state, config, 0.0, 120.0, 0.0, 260.0)
        assert result.state.bearing_deg == 120.0
        assert np.max(accelerations(result.samples)) <= config.max_acceleration_g * G_MPS2 * (1.0 + 1e-4)

    def test_times_and_clock(self, result):
        assert np.all(np.diff(result.samples.times_s) > 0.0)
        assert result.state.clock_time_s == result.samples.times_s[-1]

    def test_deceleration_with_climb(self, state, config):
        result = change_direction_and_speed(state, config, 2.0, -30.0, 15.0, 150.0)
        bearing, pitch, speed = vector_to_orientation(result.samples.velocities_mps[-1])
        assert (bearing, pitch, speed) == pytest.approx((-30.0, 15.0, 150.0))
        assert result.samples.times_s[0] == 2.0

    def test_spiral_holds_pitch(self, config):
        climbing = TargetState(pitch_deg=10.0)
        result = change_direction_and_speed(
            climbing, config, 0.0, 90.0, 10.0, 250.0, ManeuverOptions(spiral=True)
        )
        vels = result.samples.velocities_mps
        speeds = np.linalg.norm(vels, axis=1)
        np.testing.assert_allclose(vels[:, 2], -speeds * math.sin(math.radians(10.0)))
        assert result.state.pitch_deg == 10.0
        _, pitch, speed = vector_to_orientation(vels[-1])
        assert pitch == pytest.approx(10.0)
        assert speed == pytest.approx(250.0)


class TestDelegation:

    def test_same_orientation_is_speed_change(self, state, config):
        combined = change_direction_and_speed(state, config, 0.0, 0.0, 0.0, 300.0)
        speed_only = change_speed(state, config, 0.0, 300.0)
        assert combined.state == speed_only.state
        np.testing.assert_array_equal(combined.samples.velocities_mps, speed_only.samples.velocities_mps)

    def test_same_speed_is_direction_change(self, state, config):
        combined = change_direction_and_speed(state, config, 0.0, 45.0, 0.0, 200.05)
        turn_only = change_direction(state, config, 0.0, 45.0, 0.0)
        assert combined.state == turn_only.state.replace(speed_mps=200.05)
        np.testing.assert_array_equal(combined.samples.positions_m, turn_only.samples.positions_m)

    def test_nearly_same_orientation_takes_requested_bearing(self, state, config):
        result = change_direction_and_speed(state, config, 0.0, 0.05, 0.0, 300.0)
        assert (result.state.bearing_deg, result.state.pitch_deg, result.state.speed_mps) == (0.05, 0.0, 300.0)

    def test_nothing_to_do(self, state, config, caplog):
        with caplog.at_level(logging.WARNING):
            result = change_direction_and_speed(state, config, 4.0, 0.0, 0.0, 200.0)
        assert "maneuver skipped" in caplog.text
        assert result.state is state
        assert not result.executed
