"""Generator lifecycle and output sinks."""

from .engine import TrajectoryGenerator
from .outputs import MemorySink, SampleSink, TrajFileSink, to_output_frame

__all__ = [
    "TrajectoryGenerator",
    "MemorySink",
    "SampleSink",
    "TrajFileSink",
    "to_output_frame",
]
