"""
Tests for orientation vectors and great-circle geometry.

Tests cover:
- Orientation to NED vector conversion and its inverse
- Close / antipodal / generic classification
- Connecting orientations for antipodal pairs
- Great-circle frame construction
"""

import math

import numpy as np
import pytest

from trajsynth.core.spherical import (
    angle_info,
    build_frame,
    great_circle_frame,
    is_valid_connecting_orientation,
    orientation_to_vector,
    resolve_antipodal_third,
    vector_to_orientation,
)


class TestOrientationVectors:
    """Azimuth/elevation to NED conversion."""

    def test_cardinal_directions(self):
        np.testing.assert_allclose(orientation_to_vector(0.0, 0.0), [1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(orientation_to_vector(90.0, 0.0), [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(orientation_to_vector(0.0, 90.0), [0.0, 0.0, -1.0], atol=1e-12)
        np.testing.assert_allclose(orientation_to_vector(0.0, -90.0), [0.0, 0.0, 1.0], atol=1e-12)

    def test_magnitude_scales_vector(self):
        vec = orientation_to_vector(45.0, 30.0, 200.0)
        assert np.linalg.norm(vec) == pytest.approx(200.0)
        assert vec[2] == pytest.approx(-100.0)

    def test_vectorized_input(self):
        vecs = orientation_to_vector(np.array([0.0, 90.0, 180.0]), 0.0)
        assert vecs.shape == (3, 3)
        np.testing.assert_allclose(vecs[2], [-1.0, 0.0, 0.0], atol=1e-12)

    def test_level_flight_has_positive_zero_down(self):
        vecs = orientation_to_vector(np.array([0.0, 90.0]), 0.0, 200.0)
        assert not np.any(np.signbit(vecs[:, 2]))

    def test_inverse_conversion(self):
        bearing, pitch, magnitude = vector_to_orientation(orientation_to_vector(-120.0, 25.0, 7.5))
        assert bearing == pytest.approx(-120.0)
        assert pitch == pytest.approx(25.0)
        assert magnitude == pytest.approx(7.5)


class TestAngleInfo:
    """Classification of orientation pairs."""

    def test_generic_pair(self):
        info = angle_info(0.0, 0.0, 90.0, 0.0)
        assert info.generic
        assert info.angle_deg == pytest.approx(90.0)

    def test_close_pair(self):
        info = angle_info(10.0, 5.0, 10.05, 5.0)
        assert info.close
        assert not info.antipodal

    def test_antipodal_pair(self):
        info = angle_info(0.0, 0.0, 180.0, 0.0)
        assert info.antipodal
        assert not info.close
        assert info.angle_deg == pytest.approx(180.0)

    def test_just_inside_antipodal_threshold_is_generic(self):
        info = angle_info(0.0, 0.0, 179.0, 0.0)
        assert info.generic
        assert info.angle_deg == pytest.approx(179.0)

    def test_equivalent_bearings_are_close(self):
        assert angle_info(-90.0, 0.0, 270.0, 0.0).close

    def test_angle_is_never_above_half_turn(self):
        info = angle_info(0.0, 0.0, 270.0, 0.0)
        assert info.angle_deg == pytest.approx(90.0)


class TestConnectingOrientation:
    """Third orientation used to turn through an antipodal pair."""

    def test_horizontal_reversal_bisects_bearing(self):
        assert resolve_antipodal_third(0.0, 0.0, 180.0, 0.0) == pytest.approx((90.0, 0.0))

    def test_negative_angles_keep_their_sign(self):
        az3, el3 = resolve_antipodal_third(-90.0, -30.0, -270.0, 30.0)
        assert az3 == pytest.approx(-180.0)
        assert el3 == pytest.approx(0.0)

    def test_resolved_third_is_valid(self):
        info = angle_info(0.0, 45.0, 180.0, -45.0)
        az3, el3 = resolve_antipodal_third(0.0, 45.0, 180.0, -45.0)
        assert is_valid_connecting_orientation(info, az3, el3)

    def test_third_on_endpoint_is_invalid(self):
        info = angle_info(0.0, 0.0, 180.0, 0.0)
        assert not is_valid_connecting_orientation(info, 0.0, 0.0)
        assert not is_valid_connecting_orientation(info, 180.0, 0.0)
        assert is_valid_connecting_orientation(info, 0.0, 90.0)


class TestGreatCircleFrame:
    """Plane frame construction and traversal."""

    def test_frame_is_orthonormal(self):
        frame = great_circle_frame(angle_info(10.0, 20.0, 100.0, -30.0))
        assert np.linalg.norm(frame.u) == pytest.approx(1.0)
        assert np.linalg.norm(frame.v) == pytest.approx(1.0)
        assert float(np.dot(frame.p, frame.u)) == pytest.approx(0.0, abs=1e-12)
        assert float(np.dot(frame.v, frame.u)) == pytest.approx(0.0, abs=1e-12)

    def test_traversal_reaches_destination(self):
        info = angle_info(10.0, 20.0, 100.0, -30.0)
        frame = great_circle_frame(info)
        np.testing.assert_allclose(frame.direction_at(0.0), info.p, atol=1e-12)
        np.testing.assert_allclose(frame.direction_at(frame.angle_rad), info.q, atol=1e-9)

    def test_direction_rows(self):
        frame = great_circle_frame(angle_info(0.0, 0.0, 90.0, 0.0))
        dirs = frame.direction_at(np.linspace(0.0, math.pi / 2.0, 5))
        assert dirs.shape == (5, 3)
        np.testing.assert_allclose(np.linalg.norm(dirs, axis=1), 1.0)

    def test_antipodal_frame_through_third(self):
        info = angle_info(0.0, 0.0, 180.0, 0.0)
        frame = great_circle_frame(info, orientation_to_vector(-90.0, 0.0))
        np.testing.assert_allclose(frame.direction_at(math.pi / 2.0), [0.0, -1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(frame.direction_at(math.pi), [-1.0, 0.0, 0.0], atol=1e-12)

    def test_antipodal_frame_requires_third(self):
        with pytest.raises(ValueError):
            great_circle_frame(angle_info(0.0, 0.0, 180.0, 0.0))

    def test_close_pair_has_no_frame(self):
        with pytest.raises(ValueError):
            great_circle_frame(angle_info(0.0, 0.0, 0.0, 0.0))

    def test_parallel_vectors_rejected(self):
        with pytest.raises(ValueError):
            build_frame(np.array([1.0, 0.0, 0.0]), np.array([2.0, 0.0, 0.0]))
