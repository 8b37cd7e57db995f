"""Scalar helpers shared by the geometric code.

The min/max helpers deliberately follow C comparison semantics rather than
Python's builtins: ``tmin(a, b)`` is ``a if a < b else b``. Combined with
``ieee_divide`` this reproduces how the slab test behaves on IEEE hardware
when a ray direction component is zero (infinities order correctly, and a
NaN operand falls through to the other operand).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.python.config import (
    EPSILON,
    FCOMPARE_TOLERANCE,
    MAX_COMP_DIFF,
    MAX_DELTA_MAG,
    MAX_DOUBLE_DIFF,
)

if TYPE_CHECKING:
    from src.python.core.vector import Vector3

PI = math.pi
TWO_PI = 2.0 * math.pi

__all__ = [
    "EPSILON",
    "PI",
    "TWO_PI",
    "almost_equal",
    "clip",
    "degrees_to_radians",
    "fcompare",
    "ieee_divide",
    "lerp",
    "tmax",
    "tmax3",
    "tmin",
    "tmin3",
    "vectors_almost_equal",
]


def degrees_to_radians(degrees: float) -> float:
    return degrees * PI / 180.0


def fcompare(a: float, b: float) -> bool:
    """Loose equality used for derived quantities such as magnitudes."""
    return abs(a - b) <= FCOMPARE_TOLERANCE


def almost_equal(x: float, y: float, max_diff: float = MAX_DOUBLE_DIFF) -> bool:
    return abs(x - y) <= max_diff


def vectors_almost_equal(
    expected: Vector3,
    actual: Vector3,
    max_delta_mag: float = MAX_DELTA_MAG,
    max_comp_diff: float = MAX_COMP_DIFF,
) -> bool:
    """Check two vectors are close both per component and by delta length.

    Args:
        expected: The reference vector.
        actual: The vector under test.
        max_delta_mag: Largest allowed magnitude of ``expected - actual``.
        max_comp_diff: Largest allowed absolute difference of any component.

    Returns:
        True if both tolerances are met.
    """
    dx = expected.x - actual.x
    dy = expected.y - actual.y
    dz = expected.z - actual.z
    delta_mag = math.sqrt(dx * dx + dy * dy + dz * dz)
    comp_diff = max(abs(dx), abs(dy), abs(dz))
    return delta_mag <= max_delta_mag and comp_diff <= max_comp_diff


def tmin(a: float, b: float) -> float:
    return a if a < b else b


def tmax(a: float, b: float) -> float:
    return a if a > b else b


def tmin3(a: float, b: float, c: float) -> float:
    return tmin(a, tmin(b, c))


def tmax3(a: float, b: float, c: float) -> float:
    return tmax(a, tmax(b, c))


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE 754 results for a zero denominator.

    Python raises ``ZeroDivisionError`` on float division by zero; hardware
    floats return a signed infinity, or NaN for ``0/0``. Geometric code that
    relies on the hardware behavior uses this helper.
    """
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def clip(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


def lerp(a: float, b: float, u: float) -> float:
    return a + u * (b - a)
