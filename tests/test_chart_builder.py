from __future__ import annotations

from datetime import UTC, datetime

import pytest

from sacredstar.aspects import AspectType, LunationType
from sacredstar.chart import Chart, ChartType, build_chart, sanity_check
from sacredstar.core.angles import absolute_difference
from sacredstar.exceptions import EphemerisError
from sacredstar.zodiac import PointID, Sign, ZodiacalPosition
from tests.fakes import FakeEphemeris, linear, sky


def test_tropical_chart_places_points_in_whole_sign_houses(
    fake_sky: FakeEphemeris, epoch: datetime
) -> None:
    chart = build_chart(fake_sky, epoch, -0.1278, 51.5074)

    assert chart.chart_type is ChartType.TROPICAL
    assert chart.points[0].id is PointID.ASC
    assert chart.ascendant.position == ZodiacalPosition(Sign.LIBRA, 7, 0)
    assert chart.ascendant.house == 1

    sun = chart.must_point(PointID.SUN)
    assert sun.position == ZodiacalPosition(Sign.CAPRICORN, 10, 0)
    assert sun.house == 4
    assert chart.must_point(PointID.MOON).house == 8
    assert chart.signs_in_order()[0] is Sign.LIBRA
    assert chart.sign_of_house(4) is Sign.CAPRICORN
    assert chart.house_for(Sign.ARIES) == 7
    assert chart.house_lord(1) is PointID.VENUS
    assert chart.house_lord(2, modern=True) is PointID.PLUTO


def test_ketu_is_opposite_rahu(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    chart = build_chart(fake_sky, epoch, 0.0, 0.0, ChartType.TROPICAL, [PointID.KETU])

    rahu = chart.point(PointID.RAHU)
    ketu = chart.must_point(PointID.KETU)
    assert rahu is None
    assert ketu.position == ZodiacalPosition(Sign.LIBRA, 15, 0)
    assert ketu.house == 1
    assert ketu.is_retrograde


def test_nodes_are_retrograde_and_opposed(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    chart = build_chart(fake_sky, epoch, 0.0, 0.0)

    rahu = chart.must_point(PointID.RAHU)
    ketu = chart.must_point(PointID.KETU)
    assert rahu.is_retrograde and ketu.is_retrograde
    assert absolute_difference(rahu.longitude, ketu.longitude) == pytest.approx(180.0)
    assert ketu.house == (rahu.house + 5) % 12 + 1
    assert not chart.must_point(PointID.SUN).is_retrograde


def test_aspects_cover_each_unordered_pair_once(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    chart = build_chart(fake_sky, epoch, 0.0, 0.0)

    pairs = [frozenset((a.p1, a.p2)) for a in chart.aspects]
    assert len(pairs) == len(set(pairs))
    assert all(PointID.ASC not in pair for pair in pairs)
    for aspect in chart.aspects:
        assert abs(aspect.degree - aspect.type.nominal) <= 5.0

    by_pair = {frozenset((a.p1, a.p2)): a.type for a in chart.aspects}
    assert by_pair[frozenset((PointID.SUN, PointID.SATURN))] is AspectType.SEXTILE
    assert by_pair[frozenset((PointID.MOON, PointID.URANUS))] is AspectType.CONJUNCTION
    assert by_pair[frozenset((PointID.RAHU, PointID.KETU))] is AspectType.OPPOSITION
    assert chart.lunation is None


def test_lunation_detected_when_sun_and_moon_meet(epoch: datetime) -> None:
    ephemeris = FakeEphemeris(sky(moon=linear(284.0, 13.2)))
    chart = build_chart(ephemeris, epoch, 0.0, 0.0, points=[PointID.SUN, PointID.MOON])

    assert chart.lunation is not None
    assert chart.lunation.type is LunationType.NEW_MOON
    assert len(chart.aspects) == 1


def test_sidereal_and_varga_charts(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    d1 = build_chart(fake_sky, epoch, 0.0, 0.0, "d1", [PointID.SUN])
    d9 = build_chart(fake_sky, epoch, 0.0, 0.0, ChartType.D9, [PointID.SUN])

    assert d1.ascendant.position == ZodiacalPosition(Sign.VIRGO, 13, 0)
    assert d1.must_point(PointID.SUN).position == ZodiacalPosition(Sign.SAGITTARIUS, 16, 0)
    assert d9.must_point(PointID.SUN).position == ZodiacalPosition(Sign.LEO, 24, 0)


def test_ephemeris_failure_aborts_build(epoch: datetime) -> None:
    ephemeris = FakeEphemeris(sky(), failing={PointID.MARS})
    with pytest.raises(EphemerisError):
        build_chart(ephemeris, epoch, 0.0, 0.0)


def test_chart_dict_round_trip(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    chart = build_chart(fake_sky, epoch, 12.5, 41.9)
    restored = Chart.from_dict(chart.to_dict())

    assert restored.to_dict() == chart.to_dict()
    assert restored.time == epoch
    assert restored.has_aspect(chart.aspects[0])


def test_sanity_check_builds_reference_chart(fake_sky: FakeEphemeris) -> None:
    chart = sanity_check(fake_sky)
    assert chart.time == datetime(2024, 1, 1, tzinfo=UTC)
    assert chart.ascendant.sign is Sign.LIBRA
    assert chart.point(PointID.KETU) is not None
