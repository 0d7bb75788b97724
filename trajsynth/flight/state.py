"""Target state, maneuver options and maneuver results."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass

import numpy as np

from ..config import InitialTargetConfig
from ..core.constants import MAX_BEARING_DEG, MAX_PITCH_DEG
from ..core.samples import SampleBatch
from ..core.spherical import orientation_to_vector
from ..errors import ManeuverInputError


def as_real(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ManeuverInputError(f"{name} must be a real scalar, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ManeuverInputError(f"{name} must be finite")
    return value


def as_position(value) -> tuple[float, float, float]:
    arr = np.asarray(value)
    if arr.shape != (3,) or not np.issubdtype(arr.dtype, np.number):
        raise ManeuverInputError(f"position must be a numeric 3-vector, got {value!r}")
    if not np.all(np.isfinite(arr)):
        raise ManeuverInputError("position must be finite")
    return tuple(float(v) for v in arr)


@dataclass(frozen=True, slots=True)
class TargetState:
    """Kinematic snapshot threaded through every maneuver."""

    clock_time_s: float = 0.0
    position_ned_m: tuple[float, float, float] = (0.0, 0.0, 0.0)
    speed_mps: float = 200.0
    bearing_deg: float = 0.0
    pitch_deg: float = 0.0

    def __post_init__(self):
        clock = as_real("clock_time_s", self.clock_time_s)
        if clock < 0.0:
            raise ManeuverInputError("clock_time_s must be >= 0")
        speed = as_real("speed_mps", self.speed_mps)
        if speed <= 0.0:
            raise ManeuverInputError("speed_mps must be > 0")
        bearing = as_real("bearing_deg", self.bearing_deg)
        if abs(bearing) > MAX_BEARING_DEG:
            raise ManeuverInputError("bearing_deg must be within [-360, 360]")
        pitch = as_real("pitch_deg", self.pitch_deg)
        if abs(pitch) > MAX_PITCH_DEG:
            raise ManeuverInputError("pitch_deg must be within [-90, 90]")

        object.__setattr__(self, "clock_time_s", clock)
        object.__setattr__(self, "position_ned_m", as_position(self.position_ned_m))
        object.__setattr__(self, "speed_mps", speed)
        object.__setattr__(self, "bearing_deg", bearing)
        object.__setattr__(self, "pitch_deg", pitch)

    @classmethod
    def from_config(cls, config: InitialTargetConfig, clock_time_s: float = 0.0) -> "TargetState":
        return cls(
            clock_time_s=clock_time_s,
            position_ned_m=config.position_ned_m,
            speed_mps=config.speed_mps,
            bearing_deg=config.bearing_deg,
            pitch_deg=config.pitch_deg,
        )

    @property
    def position(self) -> np.ndarray:
        return np.asarray(self.position_ned_m, dtype=float)

    def unit_direction(self) -> np.ndarray:
        return orientation_to_vector(self.bearing_deg, self.pitch_deg)

    def velocity_ned_mps(self) -> np.ndarray:
        return orientation_to_vector(self.bearing_deg, self.pitch_deg, self.speed_mps)

    def replace(self, **changes) -> "TargetState":
        return dataclasses.replace(self, **changes)

    def as_sample(self) -> SampleBatch:
        return SampleBatch.single(self.clock_time_s, self.position, self.velocity_ned_mps())


@dataclass(frozen=True, slots=True)
class ManeuverOptions:
    """Optional maneuver parameters; ``None`` falls back to configured maxima."""

    acceleration_g: float | None = None
    jerk_gps: float | None = None
    spiral: bool = False
    connecting_orientation: tuple[float, float] | None = None


@dataclass(frozen=True, slots=True)
class ManeuverResult:
    state: TargetState
    samples: SampleBatch

    @property
    def executed(self) -> bool:
        return len(self.samples) > 0
