"""Nakshatras and the Vimshottari dasha system."""

from .dasha import (
    LORD_ORDER,
    DashaLord,
    antardasha_duration,
    antardashas,
    dasha_lord_pair,
    next_antardasha,
    period_duration,
)
from .nakshatra import NAKSHATRA_NAMES, NAKSHATRA_SPAN, PADA_SPAN, Nakshatra, nakshatra_of
from .tree import TOTAL_PERIODS, DashaInterval, DashaTree, build_dasha_tree

__all__ = [
    "DashaInterval",
    "DashaLord",
    "DashaTree",
    "LORD_ORDER",
    "NAKSHATRA_NAMES",
    "NAKSHATRA_SPAN",
    "Nakshatra",
    "PADA_SPAN",
    "TOTAL_PERIODS",
    "antardasha_duration",
    "antardashas",
    "build_dasha_tree",
    "dasha_lord_pair",
    "nakshatra_of",
    "next_antardasha",
    "period_duration",
]
