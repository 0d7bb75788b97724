"""Time-ordered position and velocity samples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np


@dataclass(frozen=True, slots=True)
class Sample:
    time_s: float
    position_m: tuple[float, float, float]
    velocity_mps: tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class SampleBatch:
    """Time-ordered samples in NED, stored column-wise."""

    times_s: np.ndarray
    positions_m: np.ndarray
    velocities_mps: np.ndarray

    def __post_init__(self):
        times = np.asarray(self.times_s, dtype=float).reshape(-1)
        positions = np.asarray(self.positions_m, dtype=float).reshape(-1, 3)
        velocities = np.asarray(self.velocities_mps, dtype=float).reshape(-1, 3)
        if not (times.shape[0] == positions.shape[0] == velocities.shape[0]):
            raise ValueError("times, positions and velocities must have the same length")
        object.__setattr__(self, "times_s", times)
        object.__setattr__(self, "positions_m", positions)
        object.__setattr__(self, "velocities_mps", velocities)

    @classmethod
    def empty(cls) -> "SampleBatch":
        return cls(np.empty(0), np.empty((0, 3)), np.empty((0, 3)))

    @classmethod
    def single(cls, time_s: float, position_m, velocity_mps) -> "SampleBatch":
        return cls(np.array([time_s], dtype=float), np.asarray(position_m), np.asarray(velocity_mps))

    @classmethod
    def concatenate(cls, batches: Sequence["SampleBatch"]) -> "SampleBatch":
        batches = [b for b in batches if len(b) > 0]
        if not batches:
            return cls.empty()
        return cls(
            np.concatenate([b.times_s for b in batches]),
            np.concatenate([b.positions_m for b in batches]),
            np.concatenate([b.velocities_mps for b in batches]),
        )

    def __len__(self) -> int:
        return int(self.times_s.shape[0])

    def __iter__(self) -> Iterator[Sample]:
        for t, p, v in zip(self.times_s, self.positions_m, self.velocities_mps):
            yield Sample(float(t), (float(p[0]), float(p[1]), float(p[2])), (float(v[0]), float(v[1]), float(v[2])))

    @property
    def speeds_mps(self) -> np.ndarray:
        return np.linalg.norm(self.velocities_mps, axis=1)

