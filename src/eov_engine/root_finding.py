"""
Equation-of-Value Root Finding

Bisection over a scalar function and linear interpolation of a crossing
between two sampled points.
"""
from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def bisect(
    func: Callable[[float], float],
    lower: float,
    upper: float,
    tolerance: float = 1e-6,
    max_iterations: int = 100,
) -> float | None:
    """
    Find x in [lower, upper] with |func(x)| < tolerance by bisection.

    At each step the midpoint m is evaluated. When func(lower) and func(m)
    have opposite signs the root lies below m and the upper bound moves to m,
    otherwise the lower bound moves to m. Assumes a single sign change in the
    bracket; schedules with several sign reversals may not converge.

    Args:
        func: Scalar function (e.g. NPV as a function of the rate)
        lower: Lower end of the search interval
        upper: Upper end of the search interval
        tolerance: Accepted |func(x)| at the root
        max_iterations: Iterations before giving up

    Returns:
        The root, or None if no root was reached within max_iterations
    """
    for iteration in range(max_iterations):
        mid = (lower + upper) / 2
        f_mid = func(mid)
        if abs(f_mid) < tolerance:
            logger.debug("bisect converged after %d iterations at %.10f", iteration + 1, mid)
            return mid

        f_lower = func(lower)
        if f_lower * f_mid < 0:
            upper = mid
        else:
            lower = mid

    logger.debug("bisect did not converge in %d iterations [%.6f, %.6f]", max_iterations, lower, upper)
    return None


def interpolate_crossing(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    target: float,
) -> float:
    """
    Abscissa where the segment (x0, y0)-(x1, y1) reaches target.

    x = x0 + (target - y0) / (y1 - y0) * (x1 - x0)

    A flat segment returns x1.
    """
    difference = y1 - y0
    if difference == 0:
        return x1
    return x0 + (target - y0) / difference * (x1 - x0)
