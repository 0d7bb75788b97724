"""Geometry, ramp profiles and closed-form integrals."""

from .ramp import RampProfile, RampTiming, solve_ramp_profile, solve_ramp_timing
from .samples import Sample, SampleBatch
from .spherical import (
    AngleInfo,
    GreatCircleFrame,
    angle_info,
    great_circle_frame,
    orientation_to_vector,
    resolve_antipodal_third,
    vector_to_orientation,
)
from .turn_integral import integrate_linear_over_quadratic

__all__ = [
    "RampProfile",
    "RampTiming",
    "solve_ramp_profile",
    "solve_ramp_timing",
    "Sample",
    "SampleBatch",
    "AngleInfo",
    "GreatCircleFrame",
    "angle_info",
    "great_circle_frame",
    "orientation_to_vector",
    "resolve_antipodal_third",
    "vector_to_orientation",
    "integrate_linear_over_quadratic",
]
