"""Essential dignity tables for the seven traditional planets."""

from __future__ import annotations

from typing import Final, Literal

from .points import PointID
from .sign import Sign

__all__ = ["Dignity", "dignity_of"]

Dignity = Literal["domicile", "exaltation", "detriment", "fall"]

_S = Sign
_P = PointID

DOMICILE: Final[dict[PointID, frozenset[Sign]]] = {
    _P.SUN: frozenset({_S.LEO}),
    _P.MOON: frozenset({_S.CANCER}),
    _P.MERCURY: frozenset({_S.GEMINI, _S.VIRGO}),
    _P.VENUS: frozenset({_S.TAURUS, _S.LIBRA}),
    _P.MARS: frozenset({_S.ARIES, _S.SCORPIO}),
    _P.JUPITER: frozenset({_S.SAGITTARIUS, _S.PISCES}),
    _P.SATURN: frozenset({_S.CAPRICORN, _S.AQUARIUS}),
}

DETRIMENT: Final[dict[PointID, frozenset[Sign]]] = {
    _P.SUN: frozenset({_S.AQUARIUS}),
    _P.MOON: frozenset({_S.CAPRICORN}),
    _P.MERCURY: frozenset({_S.SAGITTARIUS, _S.PISCES}),
    _P.VENUS: frozenset({_S.ARIES, _S.SCORPIO}),
    _P.MARS: frozenset({_S.TAURUS, _S.LIBRA}),
    _P.JUPITER: frozenset({_S.GEMINI, _S.VIRGO}),
    _P.SATURN: frozenset({_S.CANCER, _S.LEO}),
}

EXALTATION: Final[dict[PointID, Sign]] = {
    _P.SUN: _S.ARIES,
    _P.MOON: _S.TAURUS,
    _P.MERCURY: _S.VIRGO,
    _P.VENUS: _S.PISCES,
    _P.MARS: _S.CAPRICORN,
    _P.JUPITER: _S.CANCER,
    _P.SATURN: _S.LIBRA,
}

FALL: Final[dict[PointID, Sign]] = {
    _P.SUN: _S.LIBRA,
    _P.MOON: _S.SCORPIO,
    _P.MERCURY: _S.PISCES,
    _P.VENUS: _S.VIRGO,
    _P.MARS: _S.CANCER,
    _P.JUPITER: _S.CAPRICORN,
    _P.SATURN: _S.ARIES,
}


def dignity_of(point: PointID, sign: Sign) -> tuple[Dignity, ...]:
    """Return every essential dignity ``point`` holds in ``sign``."""

    found: list[Dignity] = []
    if sign in DOMICILE.get(point, ()):
        found.append("domicile")
    if EXALTATION.get(point) is sign:
        found.append("exaltation")
    if sign in DETRIMENT.get(point, ()):
        found.append("detriment")
    if FALL.get(point) is sign:
        found.append("fall")
    return tuple(found)
