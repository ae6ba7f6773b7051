"""Numeric primitives shared by every SacredStar component."""

from .angles import (
    DEGREES_PER_SIGN,
    absolute_difference,
    directional_difference,
    normalize,
    sign_degrees,
)

__all__ = [
    "DEGREES_PER_SIGN",
    "absolute_difference",
    "directional_difference",
    "normalize",
    "sign_degrees",
]
