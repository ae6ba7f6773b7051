"""Chart types: the tropical zodiac plus the sidereal rashi and vargas."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from ..exceptions import InvalidChartTypeError
from ..zodiac.points import PointID

__all__ = ["ChartType"]


class ChartType(StrEnum):
    TROPICAL = "tropical"
    D1 = "d1"
    D4 = "d4"
    D7 = "d7"
    D9 = "d9"
    D10 = "d10"

    @classmethod
    def parse(cls, value: str | ChartType) -> ChartType:
        if isinstance(value, ChartType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidChartTypeError(f"Unknown chart type: {value!r}") from exc

    @property
    def divisions(self) -> int:
        """Number of parts each sign is cut into (0 for tropical)."""

        return _DIVISIONS[self]

    @property
    def is_sidereal(self) -> bool:
        return self is not ChartType.TROPICAL

    @property
    def is_varga(self) -> bool:
        """True for the sidereal rashi (D1) and every divisional chart."""

        return self.is_sidereal

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def karakas(self) -> tuple[PointID, ...]:
        return _KARAKAS.get(self, ())

    @property
    def important_houses(self) -> tuple[int, ...]:
        return _IMPORTANT_HOUSES.get(self, ())


_DIVISIONS: Final[dict[ChartType, int]] = {
    ChartType.TROPICAL: 0,
    ChartType.D1: 1,
    ChartType.D4: 4,
    ChartType.D7: 7,
    ChartType.D9: 9,
    ChartType.D10: 10,
}

_DESCRIPTIONS: Final[dict[ChartType, str]] = {
    ChartType.TROPICAL: "Tropical",
    ChartType.D1: "D1 Rashi",
    ChartType.D4: "D4 Chaturthamsa - Moving home",
    ChartType.D7: "D7 Saptamsa - Children",
    ChartType.D9: "D9 Navamsa - Marriage",
    ChartType.D10: "D10 Dasamsa - Career",
}

_KARAKAS: Final[dict[ChartType, tuple[PointID, ...]]] = {
    ChartType.D4: (PointID.RAHU,),
    ChartType.D7: (PointID.JUPITER,),
    ChartType.D9: (PointID.VENUS,),
    ChartType.D10: (PointID.SUN, PointID.MERCURY, PointID.JUPITER, PointID.SATURN),
}

_IMPORTANT_HOUSES: Final[dict[ChartType, tuple[int, ...]]] = {
    ChartType.D4: (7, 12),
    ChartType.D7: (5,),
    ChartType.D9: (7,),
    ChartType.D10: (10,),
}
