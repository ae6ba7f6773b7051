from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from sacredstar.aspects import Aspect, AspectType, Lunation, LunationType
from sacredstar.chart import build_chart
from sacredstar.config import AspectsCfg, SearchCfg
from sacredstar.transits import (
    AspectTransit,
    IngressTransit,
    LunationTransit,
    aspect_journey,
    calculate,
    ingress_journey,
    journey_fraction,
    transit_from_dict,
)
from sacredstar.zodiac import PointID, Sign
from tests.fakes import EPOCH_JD, FakeEphemeris, linear, sky

FINE = SearchCfg(aspect_epsilon_deg=0.01, ingress_epsilon_deg=0.01, resolution_minutes=1.0)


def _days(moment: datetime, epoch: datetime) -> float:
    return (moment - epoch) / timedelta(days=1)


def _sun(ephemeris: FakeEphemeris, epoch: datetime):
    return build_chart(ephemeris, epoch, 0.0, 0.0, points=[PointID.SUN]).must_point(PointID.SUN)


def test_journey_fraction_is_not_clamped() -> None:
    assert journey_fraction(5.0, 0.0, 10.0) == pytest.approx(0.5)
    assert journey_fraction(15.0, 0.0, 10.0) == pytest.approx(1.5)
    assert journey_fraction(1.0, 2.0, 2.0) == 0.0


def test_direct_ingress_journey(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    # The Sun sits at Capricorn 10° moving a degree a day.
    transit = ingress_journey(fake_sky, _sun(fake_sky, epoch), epoch)

    assert transit.point.sign is Sign.CAPRICORN
    assert _days(transit.start, epoch) == pytest.approx(-10.0, abs=0.15)
    assert _days(transit.end, epoch) == pytest.approx(20.0, abs=0.15)
    assert transit.journey == pytest.approx(1.0 / 3.0, abs=0.01)
    assert transit.days_elapsed in (29, 30)
    assert transit.in_window
    assert transit.time == epoch


def _placed(ephemeris: FakeEphemeris, epoch: datetime, point: PointID):
    return build_chart(ephemeris, epoch, 0.0, 0.0, points=[point]).must_point(point)


def _mars_visits_aquarius(jd: float) -> float:
    t = jd - EPOCH_JD
    if t <= -25.0:
        return 270.0 + (t + 65.0)
    if t <= 15.0:
        return 310.0 - 0.5 * (t + 25.0)
    return 290.0 + (t - 15.0)


def _mercury_dips_into_sagittarius(jd: float) -> float:
    t = jd - EPOCH_JD
    if t <= -10.0:
        return 277.0 + (t + 10.0)
    if t <= 10.0:
        return 277.0 - 0.5 * (t + 10.0)
    return 267.0 + (t - 10.0)


def test_ingress_spans_retrograde_visit_to_next_sign(epoch: datetime) -> None:
    # Mars enters Capricorn at -65, runs into Aquarius, backs into Capricorn
    # and reaches Aquarius for good at +25.
    ephemeris = FakeEphemeris(sky(mars=_mars_visits_aquarius))
    mars = _placed(ephemeris, epoch, PointID.MARS)
    transit = ingress_journey(ephemeris, mars, epoch, search=FINE)

    assert transit.point.sign is Sign.CAPRICORN
    assert _days(transit.start, epoch) == pytest.approx(-65.0, abs=0.05)
    assert _days(transit.end, epoch) == pytest.approx(25.0, abs=0.05)
    assert transit.journey == pytest.approx(65.0 / 90.0, abs=0.01)


def test_ingress_spans_retrograde_dip_to_previous_sign(epoch: datetime) -> None:
    # Mercury enters Capricorn at -17, slips back into Sagittarius between
    # +4 and +13, and leaves for Aquarius at +43.
    ephemeris = FakeEphemeris(sky(mercury=_mercury_dips_into_sagittarius))
    mercury = _placed(ephemeris, epoch, PointID.MERCURY)
    transit = ingress_journey(ephemeris, mercury, epoch, search=FINE)

    assert _days(transit.start, epoch) == pytest.approx(-17.0, abs=0.05)
    assert _days(transit.end, epoch) == pytest.approx(43.0, abs=0.05)
    assert transit.journey == pytest.approx(17.0 / 60.0, abs=0.01)
    exit_lon = ephemeris.body_position(ephemeris.julian_day(transit.end), PointID.MERCURY).longitude
    assert exit_lon == pytest.approx(300.0, abs=0.05)


def test_aspect_window_walks_through_short_excursion(epoch: datetime) -> None:
    # Venus sextiles a fixed Saturn from -60 to -48, drifts up to 5° off
    # nominal, comes back into orb at -24 and leaves it for good at +36.
    def venus(jd: float) -> float:
        t = jd - EPOCH_JD
        if t <= -44.0:
            return 277.0 + 0.5 * (t + 60.0)
        return 285.0 - 0.1 * (t + 44.0)

    ephemeris = FakeEphemeris(sky(venus=venus, saturn=linear(340.0, 0.0)))
    aspect = Aspect(PointID.VENUS, PointID.SATURN, 59.4, AspectType.SEXTILE)
    transit = aspect_journey(ephemeris, aspect, epoch, search=FINE)

    assert _days(transit.start, epoch) == pytest.approx(-60.0, abs=0.05)
    assert _days(transit.end, epoch) == pytest.approx(36.0, abs=0.15)
    assert transit.journey == pytest.approx(0.625, abs=0.01)
    assert transit.days_elapsed in (95, 96)


def test_aspect_journey_brackets_the_orb(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    # Sun-Saturn separation is exactly 60° at the epoch, closing at 0.97°/day.
    aspect = Aspect(PointID.SUN, PointID.SATURN, 60.0, AspectType.SEXTILE)
    transit = aspect_journey(fake_sky, aspect, epoch, search=FINE)

    half = 3.0 / 0.97
    assert _days(transit.start, epoch) == pytest.approx(-half, abs=0.05)
    assert _days(transit.end, epoch) == pytest.approx(half, abs=0.05)
    assert transit.journey == pytest.approx(0.5, abs=0.02)
    assert transit.days_elapsed == 6
    assert transit.aspect is aspect


def test_aspect_journey_follows_orb_overrides(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    aspect = Aspect(PointID.SUN, PointID.SATURN, 60.0, AspectType.SEXTILE)
    wide = aspect_journey(fake_sky, aspect, epoch, search=FINE, orbs={"sextile": 6.0})
    assert _days(wide.end, epoch) == pytest.approx(6.0 / 0.97, abs=0.05)


def test_inactive_aspect_is_rejected(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    aspect = Aspect(PointID.SUN, PointID.MARS, 90.0, AspectType.SQUARE)
    with pytest.raises(ValueError):
        aspect_journey(fake_sky, aspect, epoch)


def test_edges_follow_the_moment_zone(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    ist = timezone(timedelta(hours=5, minutes=30))
    moment = epoch.astimezone(ist)
    transit = ingress_journey(fake_sky, _sun(fake_sky, epoch), moment)
    assert transit.start.utcoffset() == timedelta(hours=5, minutes=30)
    assert transit.end.utcoffset() == timedelta(hours=5, minutes=30)


def test_calculate_collects_ingresses_and_aspects(
    fake_sky: FakeEphemeris, epoch: datetime
) -> None:
    transits = calculate(fake_sky, epoch)

    ingresses = [t for t in transits if isinstance(t, IngressTransit)]
    aspects = [t for t in transits if isinstance(t, AspectTransit)]
    assert len(ingresses) == 10
    assert PointID.ASC not in {t.point.id for t in ingresses}
    assert PointID.RAHU not in {t.point.id for t in ingresses}
    assert all(t.in_window for t in ingresses)

    pairs = {frozenset((t.aspect.p1, t.aspect.p2)) for t in aspects}
    assert frozenset((PointID.SUN, PointID.SATURN)) in pairs
    assert frozenset((PointID.MOON, PointID.URANUS)) in pairs
    assert not any(isinstance(t, LunationTransit) for t in transits)


def test_calculate_reports_lunation(epoch: datetime) -> None:
    ephemeris = FakeEphemeris(sky(moon=lambda jd: 283.0 + 13.2 * (jd - EPOCH_JD)))
    transits = calculate(ephemeris, epoch, aspects=AspectsCfg())

    lunations = [t for t in transits if isinstance(t, LunationTransit)]
    assert len(lunations) == 1
    assert lunations[0].lunation.type is LunationType.NEW_MOON
    assert lunations[0].start == lunations[0].end == epoch


def test_lunation_transit_is_instantaneous(epoch: datetime) -> None:
    transit = LunationTransit.at(Lunation(LunationType.FULL_MOON), epoch)
    assert transit.journey == 0.0
    assert transit.days_elapsed == 0
    assert transit.in_window
    assert "full" in str(transit)


def test_transit_dict_round_trip(fake_sky: FakeEphemeris, epoch: datetime) -> None:
    aspect = Aspect(PointID.SUN, PointID.SATURN, 60.0, AspectType.SEXTILE)
    samples = [
        aspect_journey(fake_sky, aspect, epoch),
        ingress_journey(fake_sky, _sun(fake_sky, epoch), epoch),
        LunationTransit.at(Lunation(LunationType.NEW_MOON), epoch),
    ]
    for transit in samples:
        payload = transit.to_dict()
        assert payload["kind"] == transit.kind
        assert transit_from_dict(payload) == transit

    with pytest.raises(ValueError):
        transit_from_dict({"kind": "eclipse"})
