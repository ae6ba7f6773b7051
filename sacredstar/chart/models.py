"""Immutable chart snapshot records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..aspects import Aspect, Lunation
from ..zodiac.dignities import Dignity, dignity_of
from ..zodiac.houses import sign_of_house, whole_sign_house
from ..zodiac.points import PointID
from ..zodiac.position import ZodiacalPosition
from ..zodiac.sign import Sign
from .types import ChartType

__all__ = ["AstroPoint", "Chart"]


@dataclass(frozen=True, slots=True)
class AstroPoint:
    """A point placed in a chart."""

    id: PointID
    longitude: float
    position: ZodiacalPosition
    house: int
    is_retrograde: bool = False

    @property
    def sign(self) -> Sign:
        return self.position.sign

    @property
    def dignities(self) -> tuple[Dignity, ...]:
        return dignity_of(self.id, self.position.sign)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.value,
            "longitude": self.longitude,
            "position": self.position.to_dict(),
            "house": self.house,
            "is_retrograde": self.is_retrograde,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AstroPoint:
        return cls(
            id=PointID(payload["id"]),
            longitude=float(payload["longitude"]),
            position=ZodiacalPosition.from_dict(payload["position"]),
            house=int(payload["house"]),
            is_retrograde=bool(payload.get("is_retrograde", False)),
        )


@dataclass(frozen=True)
class Chart:
    """Positions, houses and aspects at a single instant and place."""

    time: datetime
    longitude: float
    latitude: float
    chart_type: ChartType
    points: tuple[AstroPoint, ...]
    aspects: tuple[Aspect, ...] = ()
    lunation: Lunation | None = None
    _index: dict[PointID, AstroPoint] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {point.id: point for point in self.points})

    @property
    def ascendant(self) -> AstroPoint:
        return self.must_point(PointID.ASC)

    def point(self, point_id: PointID) -> AstroPoint | None:
        return self._index.get(point_id)

    def must_point(self, point_id: PointID) -> AstroPoint:
        found = self._index.get(point_id)
        if found is None:
            raise KeyError(f"{point_id.value} is not part of this {self.chart_type.value} chart")
        return found

    def signs_in_order(self) -> list[Sign]:
        """Signs in house order, starting with the rising sign."""

        asc = self.ascendant.sign
        return [sign_of_house(house, asc) for house in range(1, 13)]

    def sign_of_house(self, house: int) -> Sign:
        return sign_of_house(house, self.ascendant.sign)

    def house_for(self, sign: Sign) -> int:
        return whole_sign_house(sign, self.ascendant.sign)

    def house_lord(self, house: int, *, modern: bool = False) -> PointID:
        sign = self.sign_of_house(house)
        return sign.modern_ruler() if modern else sign.traditional_ruler()

    def has_aspect(self, aspect: Aspect, *, ignore_degree: bool = True) -> bool:
        return any(existing.equals(aspect, ignore_degree=ignore_degree) for existing in self.aspects)

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "longitude": self.longitude,
            "latitude": self.latitude,
            "chart_type": self.chart_type.value,
            "points": [p.to_dict() for p in self.points],
            "aspects": [a.to_dict() for a in self.aspects],
            "lunation": self.lunation.to_dict() if self.lunation else None,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Chart:
        lunation = payload.get("lunation")
        points: Sequence[Mapping[str, Any]] = payload.get("points", ())
        return cls(
            time=datetime.fromisoformat(payload["time"]),
            longitude=float(payload["longitude"]),
            latitude=float(payload["latitude"]),
            chart_type=ChartType.parse(payload["chart_type"]),
            points=tuple(AstroPoint.from_dict(p) for p in points),
            aspects=tuple(Aspect.from_dict(a) for a in payload.get("aspects", ())),
            lunation=Lunation.from_dict(lunation) if lunation else None,
        )
