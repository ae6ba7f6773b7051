"""Zodiac primitives: signs, positions, points and houses."""

from __future__ import annotations

from .dignities import Dignity, dignity_of
from .houses import opposite_house, sign_of_house, whole_sign_house
from .points import (
    CLASSICAL_PLANETS,
    MODERN_PLANETS,
    TRADITIONAL_PLANETS,
    VEDIC_PLANETS,
    PointID,
)
from .position import ZodiacalPosition
from .sign import ZODIAC_SIGNS, Sign, sign_for_longitude

__all__ = [
    "CLASSICAL_PLANETS",
    "Dignity",
    "MODERN_PLANETS",
    "PointID",
    "Sign",
    "TRADITIONAL_PLANETS",
    "VEDIC_PLANETS",
    "ZODIAC_SIGNS",
    "ZodiacalPosition",
    "dignity_of",
    "opposite_house",
    "sign_for_longitude",
    "sign_of_house",
    "whole_sign_house",
]
