"""Trajectory generator lifecycle."""

from __future__ import annotations

import dataclasses
import logging

from ..config import GeneratorConfig, TrajectoryConfig
from ..errors import ConfigurationError, ConfigurationLockedError
from ..flight.combined import change_direction_and_speed
from ..flight.direction import change_direction
from ..flight.propagation import propagate_to
from ..flight.speed import change_speed
from ..flight.state import ManeuverOptions, ManeuverResult, TargetState
from .outputs import MemorySink, SampleSink, TrajFileSink

logger = logging.getLogger(__name__)


class TrajectoryGenerator:
    """Drives one target through a sequence of maneuvers.

    The generator starts out configurable. The first successful maneuver call
    locks the configuration, emits the initial state as the first sample and
    moves the generator to the active phase. Every later call appends the new
    samples to the sink. A call that raises leaves the generator unchanged.
    """

    def __init__(
        self,
        config: TrajectoryConfig | None = None,
        initial_state: TargetState | None = None,
        sink: SampleSink | None = None,
        *,
        output_file: str | None = None,
    ):
        if sink is not None and output_file:
            raise ConfigurationError("give either a sink or an output file, not both")
        self._config = config or TrajectoryConfig()
        self._state = initial_state or TargetState()
        self._output_file = output_file or None
        self._sink = sink if sink is not None else MemorySink()
        self._active = False
        self._bind_file_sink()

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "TrajectoryGenerator":
        return cls(
            config=config.trajectory,
            initial_state=TargetState.from_config(config.target),
            output_file=config.output_file,
        )

    @property
    def config(self) -> TrajectoryConfig:
        return self._config

    @property
    def state(self) -> TargetState:
        return self._state

    @property
    def sink(self) -> SampleSink:
        return self._sink

    @property
    def is_active(self) -> bool:
        return self._active

    def _ensure_configurable(self, what: str):
        if self._active:
            raise ConfigurationLockedError(f"cannot change {what} after the first maneuver")

    def configure(self, **changes) -> TrajectoryConfig:
        """Replace configuration fields; only allowed before the first maneuver."""
        self._ensure_configurable("the configuration")
        try:
            self._config = dataclasses.replace(self._config, **changes)
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc
        self._bind_file_sink()
        return self._config

    def _bind_file_sink(self):
        # The file sink writes nothing until activation.
        if self._output_file is not None:
            self._sink = TrajFileSink.from_config(self._output_file, self._config)

    def set_initial_state(self, state: TargetState):
        self._ensure_configurable("the initial state")
        if not isinstance(state, TargetState):
            raise ConfigurationError(f"initial state must be a TargetState, got {type(state).__name__}")
        self._state = state

    def _commit(self, result: ManeuverResult) -> TargetState:
        if not self._active:
            logger.debug("Generator activated at t=%.6f s", self._state.clock_time_s)
            self._sink.append(self._state.as_sample())
            self._active = True
        if result.executed:
            self._sink.append(result.samples)
        self._state = result.state
        return self._state

    def propagate_to(self, time_s) -> TargetState:
        return self._commit(propagate_to(self._state, self._config, time_s))

    def change_direction(
        self, start_time_s, final_bearing_deg, final_pitch_deg, options: ManeuverOptions | None = None
    ) -> TargetState:
        return self._commit(
            change_direction(self._state, self._config, start_time_s, final_bearing_deg, final_pitch_deg, options)
        )

    def change_speed(self, start_time_s, final_speed_mps, options: ManeuverOptions | None = None) -> TargetState:
        return self._commit(change_speed(self._state, self._config, start_time_s, final_speed_mps, options))

    def change_direction_and_speed(
        self,
        start_time_s,
        final_bearing_deg,
        final_pitch_deg,
        final_speed_mps,
        options: ManeuverOptions | None = None,
    ) -> TargetState:
        return self._commit(
            change_direction_and_speed(
                self._state,
                self._config,
                start_time_s,
                final_bearing_deg,
                final_pitch_deg,
                final_speed_mps,
                options,
            )
        )
