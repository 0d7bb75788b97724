"""Closed-form integrals of a linear numerator over a quadratic denominator.

During a combined maneuver the turn rate is centripetal acceleration divided by
speed. Within each phase both are polynomials in phase-local time, linear and
at most quadratic respectively, so the turn angle of a phase is

    I = integral from t0 to t1 of (alpha*t + beta) / (c2*t^2 + c1*t + c0) dt

which splits into a logarithm plus ``k * integral dt / Q(t)``. The second term
takes an arctangent, area-hyperbolic-tangent (or logarithmic) or reciprocal
form depending on the sign of the discriminant ``c1^2 - 4*c2*c0``.
"""

from __future__ import annotations

import math

# Relative size below which a coefficient or the discriminant counts as zero.
_REL_EPS = 1e-12


def _log_ratio(q1: float, q0: float) -> float:
    if q0 == 0.0 or q1 == 0.0 or (q0 > 0.0) != (q1 > 0.0):
        raise ValueError("denominator vanishes inside the integration interval")
    return math.log(q1 / q0)


def discriminant(c2: float, c1: float, c0: float) -> float:
    return c1 * c1 - 4.0 * c2 * c0


def integrate_reciprocal_quadratic(c2: float, c1: float, c0: float, t0: float, t1: float) -> float:
    """Integral of ``1 / (c2*t^2 + c1*t + c0)`` over ``[t0, t1]`` with ``c2 != 0``."""
    disc = discriminant(c2, c1, c0)
    scale = max(c1 * c1, abs(4.0 * c2 * c0))
    x0 = 2.0 * c2 * t0 + c1
    x1 = 2.0 * c2 * t1 + c1

    if abs(disc) <= _REL_EPS * scale:
        # Repeated root.
        if x0 == 0.0 or x1 == 0.0 or (x0 > 0.0) != (x1 > 0.0):
            raise ValueError("denominator vanishes inside the integration interval")
        return 2.0 / x0 - 2.0 / x1

    if disc < 0.0:
        root = math.sqrt(-disc)
        return 2.0 / root * (math.atan(x1 / root) - math.atan(x0 / root))

    root = math.sqrt(disc)
    if abs(x0) < root and abs(x1) < root:
        return -2.0 / root * (math.atanh(x1 / root) - math.atanh(x0 / root))
    # Both ends outside the roots: the arcoth form, written as a logarithm.
    f1 = (x1 - root) / (x1 + root)
    f0 = (x0 - root) / (x0 + root)
    return _log_ratio(f1, f0) / root


def integrate_linear_over_quadratic(
    alpha: float,
    beta: float,
    c2: float,
    c1: float,
    c0: float,
    t0: float,
    t1: float,
) -> float:
    """Integral of ``(alpha*t + beta) / (c2*t^2 + c1*t + c0)`` over ``[t0, t1]``."""
    if t1 == t0:
        return 0.0

    q0 = (c2 * t0 + c1) * t0 + c0
    q1 = (c2 * t1 + c1) * t1 + c0
    span = max(abs(t0), abs(t1), 1.0)
    size = max(abs(c1) * span, abs(c0), abs(c2) * span * span)

    if abs(c2) * span * span <= _REL_EPS * size:
        if abs(c1) * span <= _REL_EPS * size:
            # Constant denominator.
            return (0.5 * alpha * (t1 * t1 - t0 * t0) + beta * (t1 - t0)) / c0
        log_term = _log_ratio(q1, q0)
        return alpha / c1 * (t1 - t0) + (beta - alpha * c0 / c1) / c1 * log_term

    log_term = _log_ratio(q1, q0)
    remainder = beta - alpha * c1 / (2.0 * c2)
    result = alpha / (2.0 * c2) * log_term
    if remainder != 0.0:
        result += remainder * integrate_reciprocal_quadratic(c2, c1, c0, t0, t1)
    return result
