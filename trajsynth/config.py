"""Configuration model for the trajectory generator."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .core.constants import MAX_BEARING_DEG, MAX_PITCH_DEG, MIN_OUTPUT_PRECISION, MIN_UPDATE_RATE_S
from .errors import ConfigurationError


def _require_real(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite")
    return value


def _require_bool(name: str, value) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a bool, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class TrajectoryConfig:
    """Limits and output options locked once the first maneuver runs."""

    max_acceleration_g: float = 6.0
    max_jerk_gps: float = 3.0
    nominal_update_rate_s: float = 0.1
    output_precision: int = 5
    thick_updates: bool = False
    use_nue_output: bool = False

    def __post_init__(self):
        if _require_real("max_acceleration_g", self.max_acceleration_g) <= 0.0:
            raise ConfigurationError("max_acceleration_g must be > 0")
        if _require_real("max_jerk_gps", self.max_jerk_gps) <= 0.0:
            raise ConfigurationError("max_jerk_gps must be > 0")
        if _require_real("nominal_update_rate_s", self.nominal_update_rate_s) < MIN_UPDATE_RATE_S:
            raise ConfigurationError(f"nominal_update_rate_s must be >= {MIN_UPDATE_RATE_S}")

        precision = self.output_precision
        if isinstance(precision, bool) or not isinstance(precision, (int, float)) or precision != int(precision):
            raise ConfigurationError(f"output_precision must be an integer, got {precision!r}")
        if precision < MIN_OUTPUT_PRECISION:
            raise ConfigurationError(f"output_precision must be >= {MIN_OUTPUT_PRECISION}")
        _require_bool("thick_updates", self.thick_updates)
        _require_bool("use_nue_output", self.use_nue_output)

        # Normalize numeric types on the frozen instance.
        object.__setattr__(self, "max_acceleration_g", float(self.max_acceleration_g))
        object.__setattr__(self, "max_jerk_gps", float(self.max_jerk_gps))
        object.__setattr__(self, "nominal_update_rate_s", float(self.nominal_update_rate_s))
        object.__setattr__(self, "output_precision", int(precision))


@dataclass(frozen=True, slots=True)
class InitialTargetConfig:
    position_ned_m: tuple[float, float, float] = (0.0, 0.0, 0.0)
    speed_mps: float = 200.0
    bearing_deg: float = 0.0
    pitch_deg: float = 0.0

    def __post_init__(self):
        position = tuple(self.position_ned_m)
        if len(position) != 3:
            raise ConfigurationError("position_ned_m must have 3 elements")
        position = tuple(_require_real("position_ned_m", v) for v in position)
        if _require_real("speed_mps", self.speed_mps) <= 0.0:
            raise ConfigurationError("speed_mps must be > 0")
        if abs(_require_real("bearing_deg", self.bearing_deg)) > MAX_BEARING_DEG:
            raise ConfigurationError("bearing_deg must be within [-360, 360]")
        if abs(_require_real("pitch_deg", self.pitch_deg)) > MAX_PITCH_DEG:
            raise ConfigurationError("pitch_deg must be within [-90, 90]")

        object.__setattr__(self, "position_ned_m", position)
        object.__setattr__(self, "speed_mps", float(self.speed_mps))
        object.__setattr__(self, "bearing_deg", float(self.bearing_deg))
        object.__setattr__(self, "pitch_deg", float(self.pitch_deg))


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    trajectory: TrajectoryConfig = field(default_factory=TrajectoryConfig)
    target: InitialTargetConfig = field(default_factory=InitialTargetConfig)
    output_file: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratorConfig":
        if not isinstance(data, dict):
            raise ConfigurationError("Generator config root must be a JSON object")
        unknown = set(data) - {"trajectory", "target", "output_file"}
        if unknown:
            raise ConfigurationError(f"Unknown config sections: {sorted(unknown)}")

        target = dict(data.get("target", {}))
        if "position_ned_m" in target:
            target["position_ned_m"] = tuple(target["position_ned_m"])
        try:
            return cls(
                trajectory=TrajectoryConfig(**data.get("trajectory", {})),
                target=InitialTargetConfig(**target),
                output_file=data.get("output_file"),
            )
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["target"]["position_ned_m"] = list(self.target.position_ned_m)
        return out


def load_config(path: str | Path | None) -> GeneratorConfig:
    if path is None:
        return GeneratorConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")
    return GeneratorConfig.from_dict(raw)
