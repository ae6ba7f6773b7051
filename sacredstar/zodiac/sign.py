"""The twelve zodiac signs and their rulership tables."""

from __future__ import annotations

from enum import StrEnum
from typing import Final, Literal

from ..core.angles import normalize
from ..exceptions import InvalidSignError
from .points import PointID

__all__ = [
    "ZODIAC_SIGNS",
    "Modality",
    "Sign",
    "sign_for_longitude",
]

Modality = Literal["movable", "fixed", "dual"]


class Sign(StrEnum):
    """Zodiac signs numbered 1 (Aries) through 12 (Pisces)."""

    ARIES = "aries"
    TAURUS = "taurus"
    GEMINI = "gemini"
    CANCER = "cancer"
    LEO = "leo"
    VIRGO = "virgo"
    LIBRA = "libra"
    SCORPIO = "scorpio"
    SAGITTARIUS = "sagittarius"
    CAPRICORN = "capricorn"
    AQUARIUS = "aquarius"
    PISCES = "pisces"

    @classmethod
    def from_int(cls, value: int) -> Sign:
        """Return the sign for ``value`` reduced onto ``1..12``.

        Zero and exact multiples of twelve map to Pisces, so offsets can be
        summed freely and reduced once at the end.
        """

        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidSignError(f"Invalid sign index: {value!r}")
        reduced = value % 12
        if reduced == 0:
            reduced = 12
        return ZODIAC_SIGNS[reduced - 1]

    @classmethod
    def parse(cls, value: str | int | Sign) -> Sign:
        if isinstance(value, Sign):
            return value
        if isinstance(value, int):
            return cls.from_int(value)
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidSignError(f"Invalid sign: {value!r}") from exc

    @property
    def number(self) -> int:
        """One-based position of the sign in zodiacal order."""

        return _INDEX[self]

    @property
    def start_degree(self) -> float:
        return (self.number - 1) * 30.0

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_odd(self) -> bool:
        return self.number % 2 == 1

    @property
    def is_even(self) -> bool:
        return not self.is_odd

    @property
    def modality(self) -> Modality:
        return ("movable", "fixed", "dual")[(self.number - 1) % 3]

    def next(self) -> Sign:
        return Sign.from_int(self.number + 1)

    def previous(self) -> Sign:
        return Sign.from_int(self.number - 1)

    def traditional_ruler(self) -> PointID:
        return _TRADITIONAL_RULERS[self]

    def modern_ruler(self) -> PointID:
        return _MODERN_RULERS.get(self, _TRADITIONAL_RULERS[self])


ZODIAC_SIGNS: Final[tuple[Sign, ...]] = tuple(Sign)

_INDEX: Final[dict[Sign, int]] = {sign: pos + 1 for pos, sign in enumerate(ZODIAC_SIGNS)}

_TRADITIONAL_RULERS: Final[dict[Sign, PointID]] = {
    Sign.ARIES: PointID.MARS,
    Sign.TAURUS: PointID.VENUS,
    Sign.GEMINI: PointID.MERCURY,
    Sign.CANCER: PointID.MOON,
    Sign.LEO: PointID.SUN,
    Sign.VIRGO: PointID.MERCURY,
    Sign.LIBRA: PointID.VENUS,
    Sign.SCORPIO: PointID.MARS,
    Sign.SAGITTARIUS: PointID.JUPITER,
    Sign.CAPRICORN: PointID.SATURN,
    Sign.AQUARIUS: PointID.SATURN,
    Sign.PISCES: PointID.JUPITER,
}

_MODERN_RULERS: Final[dict[Sign, PointID]] = {
    Sign.SCORPIO: PointID.PLUTO,
    Sign.AQUARIUS: PointID.URANUS,
    Sign.PISCES: PointID.NEPTUNE,
}


def sign_for_longitude(longitude: float) -> Sign:
    """Return the sign containing ``longitude`` (any real value)."""

    return ZODIAC_SIGNS[int(normalize(longitude) // 30.0) % 12]
