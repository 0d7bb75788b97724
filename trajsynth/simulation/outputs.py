"""Output sinks for trajectory samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import numpy as np

from ..config import TrajectoryConfig
from ..core.samples import Sample, SampleBatch

TRAJ_SUFFIX = ".traj"

NED_HEADER = ("Time_s", "PosN_m", "PosE_m", "PosD_m", "VelN_mps", "VelE_mps", "VelD_mps")
NUE_HEADER = ("Time_s", "PosN_m", "PosU_m", "PosE_m", "VelN_mps", "VelU_mps", "VelE_mps")


def to_output_frame(positions_m, velocities_mps, use_nue: bool):
    """Reorder NED columns into North-Up-East when requested."""
    pos = np.asarray(positions_m, dtype=float)
    vel = np.asarray(velocities_mps, dtype=float)
    if not use_nue:
        return pos, vel
    order = np.array([0, 2, 1])
    flip = np.array([1.0, -1.0, 1.0])
    return pos[..., order] * flip, vel[..., order] * flip


class SampleSink(Protocol):
    def append(self, batch: SampleBatch) -> None:
        ...


@dataclass(slots=True)
class MemorySink:
    """Keeps every appended batch in memory."""

    batches: list[SampleBatch] = field(default_factory=list)

    def append(self, batch: SampleBatch) -> None:
        if len(batch) > 0:
            self.batches.append(batch)

    def __len__(self) -> int:
        return int(sum(len(b) for b in self.batches))

    def collected(self) -> SampleBatch:
        return SampleBatch.concatenate(self.batches)

    @property
    def times_s(self) -> np.ndarray:
        return self.collected().times_s

    @property
    def positions_m(self) -> np.ndarray:
        return self.collected().positions_m

    @property
    def velocities_mps(self) -> np.ndarray:
        return self.collected().velocities_mps

    def samples(self) -> list[Sample]:
        return list(self.collected())


class TrajFileSink:
    """Tab-separated ``.traj`` text output.

    The file is truncated and the header written on the first append, so a
    sink that never receives samples leaves no file behind.
    """

    def __init__(self, path: str | Path, *, precision: int = 5, use_nue: bool = False):
        path = Path(path)
        if path.suffix != TRAJ_SUFFIX:
            path = path.with_name(path.name + TRAJ_SUFFIX)
        if int(precision) < 0:
            raise ValueError("precision must be non-negative")
        self.path = path
        self.precision = int(precision)
        self.use_nue = bool(use_nue)
        self._initialized = False
        self._rows_written = 0

    @classmethod
    def from_config(cls, path: str | Path, config: TrajectoryConfig) -> "TrajFileSink":
        return cls(path, precision=config.output_precision, use_nue=config.use_nue_output)

    @property
    def rows_written(self) -> int:
        return self._rows_written

    @property
    def header(self) -> tuple[str, ...]:
        return NUE_HEADER if self.use_nue else NED_HEADER

    def _initialize(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            f.write("\t".join(self.header))
        self._initialized = True

    def append(self, batch: SampleBatch) -> None:
        if not self._initialized:
            self._initialize()
        if len(batch) == 0:
            return

        pos, vel = to_output_frame(batch.positions_m, batch.velocities_mps, self.use_nue)
        table = np.column_stack([batch.times_s, pos, vel])
        # Values that round to zero print unsigned.
        table[np.abs(table) < 0.5 * 10.0 ** -self.precision] = 0.0
        fmt = f"%.{self.precision}f"
        with self.path.open("a", encoding="utf-8") as f:
            for row in table:
                f.write("\n" + "\t".join(fmt % value for value in row))
        self._rows_written += len(batch)
