"""Degree arithmetic on the 360° circle.

Every longitude that flows through the package passes through these
helpers before being compared against a boundary, so the 359°→0°
discontinuity is handled in exactly one place.
"""

from __future__ import annotations

import math
from typing import Final

__all__ = [
    "DEGREES_PER_SIGN",
    "absolute_difference",
    "directional_difference",
    "normalize",
    "sign_degrees",
]


DEGREES_PER_SIGN: Final[float] = 30.0
EPSILON_DEG: Final[float] = 1e-9


def normalize(angle: float) -> float:
    """Return ``angle`` wrapped into ``[0, 360)``.

    Negative inputs wrap forward. Values that land within ``1e-9`` of
    ``360`` after wrapping a tiny negative input are coerced to ``0``.
    """

    wrapped = math.fmod(float(angle), 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped


def absolute_difference(a: float, b: float) -> float:
    """Short-way separation between ``a`` and ``b`` in ``[0, 180]``."""

    diff = abs(normalize(a) - normalize(b))
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def directional_difference(a: float, b: float) -> float:
    """Signed delta from ``a`` to ``b`` folded into ``(-180, 180]``.

    A positive result means ``b`` lies ahead of ``a`` in zodiacal order.
    An exact half-circle separation resolves to ``+180``.
    """

    delta = (float(b) - float(a) + 180.0) % 360.0 - 180.0
    if delta == -180.0:
        return 180.0
    return delta


def sign_degrees(longitude: float) -> float:
    """Offset of ``longitude`` within its own sign, in ``[0, 30)``."""

    return normalize(longitude) % DEGREES_PER_SIGN
