"""Ephemeris adapters."""

from .base import BodyPosition, EphemerisAdapter
from .swe import has_swe
from .swiss import SwissEphemeris

__all__ = ["BodyPosition", "EphemerisAdapter", "SwissEphemeris", "has_swe"]
