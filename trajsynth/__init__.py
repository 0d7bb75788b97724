"""Jerk-limited point-mass trajectory synthesis."""

from .config import GeneratorConfig, InitialTargetConfig, TrajectoryConfig, load_config
from .errors import (
    ConfigurationError,
    ConfigurationLockedError,
    ManeuverConvergenceError,
    ManeuverInputError,
    TrajectoryError,
)
from .flight.state import ManeuverOptions, ManeuverResult, TargetState
from .simulation.engine import TrajectoryGenerator
from .simulation.outputs import MemorySink, TrajFileSink

__all__ = [
    "GeneratorConfig",
    "InitialTargetConfig",
    "TrajectoryConfig",
    "load_config",
    "ConfigurationError",
    "ConfigurationLockedError",
    "ManeuverConvergenceError",
    "ManeuverInputError",
    "TrajectoryError",
    "ManeuverOptions",
    "ManeuverResult",
    "TargetState",
    "TrajectoryGenerator",
    "MemorySink",
    "TrajFileSink",
]
