"""Maneuver kinematics."""

from .combined import change_direction_and_speed, solve_split_angle
from .direction import change_direction
from .propagation import propagate_to
from .speed import change_speed
from .state import ManeuverOptions, ManeuverResult, TargetState

__all__ = [
    "change_direction_and_speed",
    "solve_split_angle",
    "change_direction",
    "propagate_to",
    "change_speed",
    "ManeuverOptions",
    "ManeuverResult",
    "TargetState",
]
