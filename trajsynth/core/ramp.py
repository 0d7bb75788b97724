"""Jerk-limited ramp-up / hold / ramp-down profiles.

A profile moves a scalar quantity (a great-circle angle or a speed) by a
signed delta. Its rate of change ramps linearly from zero to a peak at the
jerk limit, holds the peak, then ramps linearly back to zero, so the traversed
quantity is piecewise quadratic in time. When the delta is too small to reach
the requested peak the hold phase disappears and the ramps meet at a reduced
peak (triangular rate profile).

Magnitudes are solved for a positive delta and the sign is reapplied to the
sampled values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class RampTiming:
    delta: float
    peak_rate: float
    jerk: float
    ramp_duration_s: float
    ramp_delta: float
    hold_duration_s: float
    hold_delta: float

    @property
    def sign(self) -> float:
        return 1.0 if self.delta >= 0.0 else -1.0

    @property
    def duration_s(self) -> float:
        return 2.0 * self.ramp_duration_s + self.hold_duration_s

    @property
    def triangular(self) -> bool:
        return self.hold_delta <= 0.0

    @property
    def ramp_down_start_s(self) -> float:
        return self.ramp_duration_s + self.hold_duration_s

    def rate_at(self, t_s):
        """Rate magnitude of the analytic profile at times from its start."""
        t = np.asarray(t_s, dtype=float)
        up = self.jerk * t
        down = self.peak_rate - self.jerk * (t - self.ramp_down_start_s)
        rate = np.where(t <= self.ramp_duration_s, up, np.where(t < self.ramp_down_start_s, self.peak_rate, down))
        return np.clip(rate, 0.0, self.peak_rate)

    def value_at(self, t_s):
        """Traversed magnitude of the analytic profile at times from its start."""
        t = np.clip(np.asarray(t_s, dtype=float), 0.0, self.duration_s)
        total = abs(self.delta)
        up = 0.5 * self.jerk * t * t
        hold = self.ramp_delta + self.peak_rate * (t - self.ramp_duration_s)
        tau = t - self.ramp_down_start_s
        down = total - self.ramp_delta + self.peak_rate * tau - 0.5 * self.jerk * tau * tau
        return np.where(t <= self.ramp_duration_s, up, np.where(t < self.ramp_down_start_s, hold, down))


def solve_ramp_timing(delta: float, peak_rate: float, jerk: float) -> RampTiming:
    """Timing of a ramp profile covering ``delta`` under ``peak_rate`` and ``jerk``."""
    delta = float(delta)
    if delta == 0.0 or not math.isfinite(delta):
        raise ValueError("ramp delta must be finite and non-zero")
    if not peak_rate > 0.0:
        raise ValueError("ramp peak rate must be positive")
    if not jerk > 0.0:
        raise ValueError("ramp jerk must be positive")

    magnitude = abs(delta)
    ramp_duration_s = peak_rate / jerk
    ramp_delta = 0.5 * jerk * ramp_duration_s**2

    if magnitude < 2.0 * ramp_delta:
        # Not enough room to reach the requested peak.
        ramp_delta = magnitude / 2.0
        ramp_duration_s = math.sqrt(2.0 * ramp_delta / jerk)
        achieved_peak = jerk * ramp_duration_s
        hold_delta = 0.0
        hold_duration_s = 0.0
    else:
        achieved_peak = float(peak_rate)
        hold_delta = magnitude - 2.0 * ramp_delta
        hold_duration_s = hold_delta / achieved_peak

    return RampTiming(
        delta=delta,
        peak_rate=float(achieved_peak),
        jerk=float(jerk),
        ramp_duration_s=float(ramp_duration_s),
        ramp_delta=float(ramp_delta),
        hold_duration_s=float(hold_duration_s),
        hold_delta=float(hold_delta),
    )


@dataclass(frozen=True, slots=True)
class RampProfile:
    timing: RampTiming
    times_s: np.ndarray
    values: np.ndarray

    @property
    def peak_rate(self) -> float:
        return self.timing.peak_rate

    @property
    def ramp_duration_s(self) -> float:
        return self.timing.ramp_duration_s

    @property
    def hold_duration_s(self) -> float:
        return self.timing.hold_duration_s

    @property
    def duration_s(self) -> float:
        return float(self.times_s[-1])

    def rate_at(self, t_s):
        return self.timing.rate_at(t_s)


def _ramp_sample_count(duration_s: float, dt_s: float) -> int:
    return max(3, int(math.ceil(duration_s / dt_s)) + 1)


def _hold_sample_count(duration_s: float, dt_s: float) -> int:
    # Two extra points are trimmed afterwards; they duplicate the ramp ends.
    return max(3, int(math.ceil(duration_s / dt_s)) + 2)


def solve_ramp_profile(delta: float, peak_rate: float, jerk: float, dt_s: float) -> RampProfile:
    """Sample a ramp profile at roughly ``dt_s`` spacing.

    Values start at zero and end exactly at ``delta``.
    """
    if not dt_s > 0.0:
        raise ValueError("sample spacing must be positive")

    timing = solve_ramp_timing(delta, peak_rate, jerk)
    magnitude = abs(timing.delta)
    t_ramp = timing.ramp_duration_s
    n_ramp = _ramp_sample_count(t_ramp, dt_s)

    ramp_t = np.linspace(0.0, t_ramp, n_ramp)
    up_values = 0.5 * timing.jerk * ramp_t**2

    segments_t = [ramp_t]
    segments_x = [up_values]

    if timing.hold_delta > 0.0:
        n_hold = _hold_sample_count(timing.hold_duration_s, dt_s)
        hold_t = np.linspace(t_ramp, t_ramp + timing.hold_duration_s, n_hold)[1:-1]
        hold_x = np.linspace(timing.ramp_delta, magnitude - timing.ramp_delta, n_hold)[1:-1]
        segments_t.append(hold_t)
        segments_x.append(hold_x)
        down_first = 0
    else:
        # The apex is shared by both ramps.
        down_first = 1

    down_start_s = timing.ramp_down_start_s
    down_x = -0.5 * timing.jerk * ramp_t**2 + timing.peak_rate * ramp_t + (magnitude - timing.ramp_delta)
    segments_t.append(down_start_s + ramp_t[down_first:])
    segments_x.append(down_x[down_first:])

    times_s = np.concatenate(segments_t)
    values = np.concatenate(segments_x)
    values[-1] = magnitude
    values = values * timing.sign

    return RampProfile(timing=timing, times_s=times_s, values=values)
