"""Exception types raised by trajectory generation."""

from __future__ import annotations


class TrajectoryError(Exception):
    """Base class for fatal trajectory-generation errors."""


class ConfigurationError(TrajectoryError, ValueError):
    pass


class ConfigurationLockedError(TrajectoryError, RuntimeError):
    """Raised when configuration is changed after the first maneuver ran."""


class ManeuverInputError(TrajectoryError, ValueError):
    pass


class ManeuverConvergenceError(TrajectoryError, RuntimeError):
    """The combined-maneuver split-angle search did not converge."""

    def __init__(self, message: str, *, split_angle_deg: float, angle_error_deg: float, iterations: int):
        super().__init__(message)
        self.split_angle_deg = float(split_angle_deg)
        self.angle_error_deg = float(angle_error_deg)
        self.iterations = int(iterations)
