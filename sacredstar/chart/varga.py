"""Divisional (varga) chart transforms.

Each sign is cut into ``N`` equal parts. The part a point falls in picks a
destination sign by a chart-specific counting rule, and the point's
progress through the part is stretched back across a full 30° sign.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from math import floor
from typing import Final

from ..core.angles import normalize
from ..exceptions import InvalidChartTypeError
from ..zodiac.points import PointID
from ..zodiac.position import ZodiacalPosition
from ..zodiac.sign import Sign, sign_for_longitude
from .types import ChartType

__all__ = [
    "VARGA_DEFINITIONS",
    "VargaDefinition",
    "to_varga",
    "varga_longitude",
    "varga_part",
]


@dataclass(frozen=True)
class VargaDefinition:
    chart_type: ChartType
    name: str
    offset_fn: Callable[[Sign, int], int]
    rule_description: str

    @property
    def divisions(self) -> int:
        return self.chart_type.divisions

    @property
    def span(self) -> float:
        return 30.0 / self.divisions


def _odd_even_offset(even_offset: int) -> Callable[[Sign, int], int]:
    def _inner(sign: Sign, part: int) -> int:
        return (0 if sign.is_odd else even_offset) + part

    return _inner


_MODAL_OFFSETS: Final[dict[str, int]] = {"movable": 0, "fixed": 8, "dual": 4}


VARGA_DEFINITIONS: Final[dict[ChartType, VargaDefinition]] = {
    ChartType.D4: VargaDefinition(
        chart_type=ChartType.D4,
        name="Chaturthamsa",
        offset_fn=lambda sign, part: 3 * part,
        rule_description="Each 7°30' part advances three signs from the natal sign.",
    ),
    ChartType.D7: VargaDefinition(
        chart_type=ChartType.D7,
        name="Saptamsa",
        offset_fn=_odd_even_offset(6),
        rule_description="Odd signs count from the natal sign; even signs count from the 7th sign.",
    ),
    ChartType.D9: VargaDefinition(
        chart_type=ChartType.D9,
        name="Navamsa",
        offset_fn=lambda sign, part: _MODAL_OFFSETS[sign.modality] + part,
        rule_description="Movable signs count from the natal sign, fixed from the 9th, dual from the 5th.",
    ),
    ChartType.D10: VargaDefinition(
        chart_type=ChartType.D10,
        name="Dasamsa",
        offset_fn=_odd_even_offset(8),
        rule_description="Odd signs count from the natal sign; even signs count from the 9th sign.",
    ),
}


def varga_part(sign_degrees: float, divisions: int) -> tuple[int, float]:
    """Return the zero-based part index and the fraction elapsed within it."""

    span = 30.0 / divisions
    # Nudge values sitting on a part boundary (10° with a 3°20' span) upward.
    index = floor((sign_degrees / span) + 1e-9)
    if index >= divisions:
        index = divisions - 1
    fraction = max(0.0, (sign_degrees - index * span) / span)
    return int(index), fraction


def _varga_components(
    longitude: float, chart_type: ChartType, point: PointID | None
) -> tuple[Sign, float]:
    definition = VARGA_DEFINITIONS.get(chart_type)
    if definition is None:
        label = f" for {point.value}" if point is not None else ""
        raise InvalidChartTypeError(f"{chart_type.value} is not a divisional chart{label}")

    lon = normalize(longitude)
    sign = sign_for_longitude(lon)
    index, fraction = varga_part(lon - sign.start_degree, definition.divisions)
    # Offsets are summed first and the sign reduced onto 1..12 once.
    new_sign = Sign.from_int(sign.number + definition.offset_fn(sign, index))
    return new_sign, fraction * 30.0


def varga_longitude(
    longitude: float,
    chart_type: ChartType | str,
    *,
    point: PointID | None = None,
) -> float:
    """Map a sidereal rashi ``longitude`` into ``chart_type`` coordinates.

    ``D1`` returns the normalised longitude unchanged. ``point`` only
    labels error messages.
    """

    chart_type = ChartType.parse(chart_type)
    if chart_type is ChartType.D1:
        return normalize(longitude)
    sign, degrees = _varga_components(longitude, chart_type, point)
    return sign.start_degree + degrees


def to_varga(
    position: ZodiacalPosition,
    chart_type: ChartType | str,
    *,
    point: PointID | None = None,
) -> ZodiacalPosition:
    """Map a zodiacal position into the divisional chart ``chart_type``."""

    chart_type = ChartType.parse(chart_type)
    if chart_type is ChartType.D1:
        return position
    sign, degrees = _varga_components(position.absolute_degrees, chart_type, point)
    # Stay inside the destination sign even when rounding reaches 30°.
    total_minutes = min(round(degrees * 60.0), 30 * 60 - 1)
    whole, minutes = divmod(total_minutes, 60)
    return ZodiacalPosition(sign, int(whole), int(minutes))
