"""Orientation vectors and great-circle geometry in the local NED frame."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .constants import ANGLE_THRESHOLD_DEG


def orientation_to_vector(bearing_deg, pitch_deg, magnitude=1.0):
    """Azimuth/elevation (relative to north and the horizon) to an NED vector."""
    az = np.deg2rad(np.asarray(bearing_deg, dtype=float))
    el = np.deg2rad(np.asarray(pitch_deg, dtype=float))
    r = np.asarray(magnitude, dtype=float)

    cos_el = np.cos(el)
    n = r * cos_el * np.cos(az)
    e = r * cos_el * np.sin(az)
    d = -r * np.sin(el) + 0.0
    return np.stack(np.broadcast_arrays(n, e, d), axis=-1)


def vector_to_orientation(vec_ned):
    v = np.asarray(vec_ned, dtype=float)
    n = v[..., 0]
    e = v[..., 1]
    d = v[..., 2]
    horizontal = np.hypot(n, e)
    bearing = np.rad2deg(np.arctan2(e, n))
    pitch = np.rad2deg(np.arctan2(-d, horizontal))
    magnitude = np.sqrt(horizontal * horizontal + d * d)
    return bearing, pitch, magnitude


def _normalize(v):
    v = np.asarray(v, dtype=float)
    n = np.linalg.norm(v)
    if n == 0.0:
        raise ValueError("zero-length vector")
    return v / n


@dataclass(frozen=True, slots=True)
class AngleInfo:
    close: bool
    antipodal: bool
    p: np.ndarray
    q: np.ndarray
    angle_deg: float

    @property
    def generic(self) -> bool:
        return not (self.close or self.antipodal)


def angle_info(az1_deg, el1_deg, az2_deg, el2_deg, threshold_deg: float = ANGLE_THRESHOLD_DEG) -> AngleInfo:
    """Classify two orientations as close, antipodal or generic."""
    p = orientation_to_vector(az1_deg, el1_deg)
    q = orientation_to_vector(az2_deg, el2_deg)

    dot_pq = float(np.clip(np.dot(p, q), -1.0, 1.0))
    angle_deg = math.degrees(math.acos(dot_pq))

    close = False
    antipodal = False
    if angle_deg > 180.0 - threshold_deg:
        antipodal = True
    elif angle_deg < threshold_deg:
        close = True
    return AngleInfo(close=close, antipodal=antipodal, p=p, q=q, angle_deg=angle_deg)


def _wrap_signed(value: float, period: float) -> float:
    # Keeps the sign of the input: negative values land in (-period, 0].
    return math.fmod(value, period)


def resolve_antipodal_third(az1_deg, el1_deg, az2_deg, el2_deg):
    """Deterministic connecting orientation for an antipodal pair."""
    az3 = _wrap_signed(az1_deg + (az2_deg - az1_deg) / 2.0, 360.0)
    el3 = _wrap_signed(el1_deg + (el2_deg - el1_deg) / 2.0, 90.0)

    # Bisecting can land back on an endpoint (e.g. vertical pairs); turn a
    # quarter circle in azimuth to leave the degenerate plane.
    third = orientation_to_vector(az3, el3)
    p = orientation_to_vector(az1_deg, el1_deg)
    if abs(float(np.dot(third, p))) > math.cos(math.radians(ANGLE_THRESHOLD_DEG)):
        az3 = _wrap_signed(az3 + 90.0, 360.0)
        el3 = 0.0
    return float(az3), float(el3)


def is_valid_connecting_orientation(info: AngleInfo, az3_deg, el3_deg, threshold_deg: float = ANGLE_THRESHOLD_DEG) -> bool:
    third = orientation_to_vector(az3_deg, el3_deg)
    limit = math.cos(math.radians(threshold_deg))
    # Too close to either endpoint (or its antipode) leaves the plane undefined.
    return abs(float(np.dot(third, info.p))) < limit and abs(float(np.dot(third, info.q))) < limit


def build_frame(p, q):
    """Plane normal ``v`` and in-plane unit vector ``u`` orthogonal to ``p``."""
    v = _normalize(np.cross(p, q))
    u = _normalize(np.cross(v, p))
    return v, u


@dataclass(frozen=True, slots=True)
class GreatCircleFrame:
    p: np.ndarray
    u: np.ndarray
    v: np.ndarray
    angle_deg: float

    @property
    def angle_rad(self) -> float:
        return math.radians(self.angle_deg)

    def direction_at(self, theta_rad):
        """Unit directions along the arc, one row per angle."""
        theta = np.asarray(theta_rad, dtype=float)
        return (
            np.expand_dims(np.cos(theta), axis=-1) * self.p
            + np.expand_dims(np.sin(theta), axis=-1) * self.u
        )


def great_circle_frame(info: AngleInfo, third: np.ndarray | None = None) -> GreatCircleFrame:
    if info.close:
        raise ValueError("cannot build a great-circle frame for coincident orientations")
    if info.antipodal and third is None:
        raise ValueError("an antipodal pair needs a connecting orientation")

    plane_point = info.q if third is None else np.asarray(third, dtype=float)
    v, u = build_frame(info.p, plane_point)
    return GreatCircleFrame(p=np.asarray(info.p, dtype=float), u=u, v=v, angle_deg=float(info.angle_deg))
