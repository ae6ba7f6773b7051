"""Reference positions computed against the Swiss Ephemeris.

Skipped when ``pyswisseph`` is not importable.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import pytest

from sacredstar.aspects import orb_table
from sacredstar.chart import ChartType, build_chart, correct_to_longitude, sanity_check
from sacredstar.config import SearchCfg
from sacredstar.core.angles import absolute_difference, directional_difference
from sacredstar.ephemeris import SwissEphemeris, has_swe
from sacredstar.search import aspect_window, coarse_step
from sacredstar.transits import aspect_journey, ingress_journey, journey_fraction
from sacredstar.vedic import DashaLord, build_dasha_tree, nakshatra_of
from sacredstar.zodiac import MODERN_PLANETS, VEDIC_PLANETS, PointID, Sign, ZodiacalPosition

pytestmark = pytest.mark.skipif(not has_swe(), reason="pyswisseph not installed")

LONDON = (-0.1278, 51.5074)
NEW_YEAR = datetime(2024, 1, 1, tzinfo=UTC)
TOLERANCE_DEG = 0.2

P = PointID
S = Sign

FIXTURES = [
    (
        "2024 tropical",
        NEW_YEAR,
        LONDON,
        ChartType.TROPICAL,
        {
            P.ASC: (S.LIBRA, 7, 3),
            P.SUN: (S.CAPRICORN, 10, 2),
            P.MOON: (S.VIRGO, 5, 59),
            P.MERCURY: (S.SAGITTARIUS, 22, 16),
            P.VENUS: (S.SAGITTARIUS, 2, 36),
            P.MARS: (S.SAGITTARIUS, 27, 18),
            P.JUPITER: (S.TAURUS, 5, 34),
            P.SATURN: (S.PISCES, 3, 14),
            P.RAHU: (S.ARIES, 21, 4),
            P.KETU: (S.LIBRA, 21, 3),
        },
    ),
    (
        "2024 d1",
        NEW_YEAR,
        LONDON,
        ChartType.D1,
        {
            P.ASC: (S.VIRGO, 12, 52),
            P.SUN: (S.SAGITTARIUS, 15, 50),
            P.MOON: (S.LEO, 11, 48),
            P.MARS: (S.SAGITTARIUS, 3, 7),
            P.MERCURY: (S.SCORPIO, 28, 5),
            P.JUPITER: (S.ARIES, 11, 23),
            P.VENUS: (S.SCORPIO, 8, 25),
            P.SATURN: (S.AQUARIUS, 9, 3),
            P.RAHU: (S.PISCES, 26, 53),
            P.KETU: (S.VIRGO, 26, 53),
        },
    ),
    (
        "1992 d1",
        datetime(1992, 6, 13, 4, 40, tzinfo=UTC),
        (36.3, 33.5),
        ChartType.D1,
        {
            P.ASC: (S.GEMINI, 27, 49),
            P.SUN: (S.TAURUS, 28, 39),
            P.MOON: (S.SCORPIO, 5, 16),
            P.MERCURY: (S.GEMINI, 13, 3),
            P.VENUS: (S.TAURUS, 28, 31),
            P.MARS: (S.ARIES, 5, 9),
            P.JUPITER: (S.LEO, 13, 34),
            P.SATURN: (S.CAPRICORN, 24, 32),
            P.RAHU: (S.SAGITTARIUS, 6, 54),
            P.KETU: (S.GEMINI, 6, 53),
        },
    ),
    (
        "2024 d4",
        NEW_YEAR,
        LONDON,
        ChartType.D4,
        {
            P.ASC: (S.SAGITTARIUS, 21, 29),
            P.SUN: (S.GEMINI, 3, 23),
            P.MOON: (S.SCORPIO, 17, 12),
            P.MERCURY: (S.LEO, 22, 21),
            P.VENUS: (S.AQUARIUS, 3, 41),
            P.MARS: (S.SAGITTARIUS, 12, 28),
            P.JUPITER: (S.CANCER, 15, 34),
            P.SATURN: (S.TAURUS, 6, 12),
            P.RAHU: (S.SAGITTARIUS, 17, 32),
            P.KETU: (S.GEMINI, 17, 30),
        },
    ),
    (
        "2024 d7",
        NEW_YEAR,
        LONDON,
        ChartType.D7,
        {
            P.ASC: (S.GEMINI, 0, 6),
            P.SUN: (S.PISCES, 20, 56),
            P.MOON: (S.LIBRA, 22, 36),
            P.MERCURY: (S.SCORPIO, 16, 38),
            P.VENUS: (S.GEMINI, 28, 57),
            P.MARS: (S.SAGITTARIUS, 21, 49),
            P.JUPITER: (S.GEMINI, 19, 44),
            P.SATURN: (S.ARIES, 3, 22),
            P.RAHU: (S.PISCES, 8, 12),
            P.KETU: (S.VIRGO, 8, 11),
        },
    ),
    (
        "2024 d9",
        NEW_YEAR,
        LONDON,
        ChartType.D9,
        {
            P.ASC: (S.ARIES, 25, 51),
            P.SUN: (S.LEO, 22, 38),
            P.MOON: (S.CANCER, 16, 13),
            P.MERCURY: (S.PISCES, 12, 49),
            P.VENUS: (S.VIRGO, 15, 47),
            P.MARS: (S.ARIES, 28, 3),
            P.JUPITER: (S.CANCER, 12, 31),
            P.SATURN: (S.SAGITTARIUS, 21, 28),
            P.RAHU: (S.PISCES, 1, 58),
            P.KETU: (S.VIRGO, 1, 56),
        },
    ),
    (
        "2024 d10",
        NEW_YEAR,
        LONDON,
        ChartType.D10,
        {
            P.ASC: (S.VIRGO, 8, 44),
            P.SUN: (S.TAURUS, 8, 29),
            P.MOON: (S.SCORPIO, 28, 1),
            P.MERCURY: (S.ARIES, 10, 54),
            P.VENUS: (S.VIRGO, 24, 13),
            P.MARS: (S.CAPRICORN, 1, 10),
            P.JUPITER: (S.CANCER, 23, 55),
            P.SATURN: (S.TAURUS, 0, 31),
            P.RAHU: (S.CANCER, 28, 52),
            P.KETU: (S.CAPRICORN, 28, 48),
        },
    ),
]


@pytest.fixture(scope="module")
def swiss() -> SwissEphemeris:
    return SwissEphemeris()


@pytest.mark.parametrize(
    ("moment", "place", "chart_type", "expected"),
    [pytest.param(*fixture[1:], id=fixture[0]) for fixture in FIXTURES],
)
def test_chart_positions(
    swiss: SwissEphemeris,
    moment: datetime,
    place: tuple[float, float],
    chart_type: ChartType,
    expected: dict[PointID, tuple[Sign, int, int]],
) -> None:
    chart = build_chart(swiss, moment, place[0], place[1], chart_type, VEDIC_PLANETS)
    for point_id, parts in expected.items():
        want = ZodiacalPosition(*parts).absolute_degrees
        got = chart.must_point(point_id).position.absolute_degrees
        assert absolute_difference(got, want) < TOLERANCE_DEG, (point_id, got, want)


def test_sanity_check(swiss: SwissEphemeris) -> None:
    chart = sanity_check(swiss)
    assert chart.ascendant.sign is Sign.LIBRA
    assert chart.must_point(PointID.SUN).house == 4


@pytest.mark.parametrize(
    ("day", "name"),
    [(1, "Magha"), (2, "Purva Phalguni"), (3, "Uttara Phalguni")],
)
def test_natal_nakshatra(swiss: SwissEphemeris, day: int, name: str) -> None:
    jd = swiss.julian_day(datetime(2024, 1, day, tzinfo=UTC))
    moon = swiss.body_position(jd, PointID.MOON, sidereal=True)
    assert nakshatra_of(moon.longitude).name == name


@pytest.mark.parametrize(
    ("at", "mahadasha", "antardasha"),
    [
        (datetime(2024, 1, 2, tzinfo=UTC), DashaLord.KETU, DashaLord.MERCURY),
        (datetime(2024, 10, 22, tzinfo=UTC), DashaLord.VENUS, DashaLord.VENUS),
    ],
)
def test_dasha_tree_lookup(
    swiss: SwissEphemeris, at: datetime, mahadasha: DashaLord, antardasha: DashaLord
) -> None:
    tree = build_dasha_tree(swiss, NEW_YEAR)
    active = tree.lookup(at)
    assert active is not None
    assert (active.mahadasha, active.antardasha) == (mahadasha, antardasha)


@pytest.mark.parametrize(
    ("start", "target", "expected"),
    [
        (2455550.9396453705, ZodiacalPosition(Sign.TAURUS, 23, 20), 2455550.9611446653),
        (2455551.9517194447, ZodiacalPosition(Sign.GEMINI, 6, 40), 2455551.939015),
    ],
)
def test_correct_moon_to_nakshatra_boundary(
    swiss: SwissEphemeris, start: float, target: ZodiacalPosition, expected: float
) -> None:
    assert correct_to_longitude(swiss, PointID.MOON, start, target) == pytest.approx(
        expected, abs=0.002
    )


# Transit windows for 2025 skies, cast at longitude and latitude zero. The
# reference windows stop refining an aspect edge within 1° of the orb and an
# ingress edge within 0.1° of the cusp, on positions truncated to the
# arcminute. Each edge may therefore sit as far from ours as the bodies take
# to cover that band, and never further than one scan step.
REFERENCE_ASPECT_TOLERANCE_DEG = 1.0 + 2.0 / 60.0
REFERENCE_INGRESS_TOLERANCE_DEG = 0.1 + 1.0 / 60.0
REFERENCE_ASPECT_STEP_DAYS = 14.0
RATE_SLACK = 1.5
HOUR = 1.0 / 24.0

TRANSIT_SEARCH = SearchCfg(
    aspect_epsilon_deg=0.01,
    ingress_epsilon_deg=0.01,
    resolution_minutes=1.0,
    max_steps=2000,
)

TRANSIT_ASPECT_FIXTURES = [
    ("pluto-sun conjunction", P.PLUTO, P.SUN, datetime(2025, 1, 24, tzinfo=UTC), 252, 0.75),
    ("venus-neptune conjunction", P.VENUS, P.NEPTUNE, datetime(2025, 1, 29, tzinfo=UTC), 315, 0.20),
    ("neptune-pluto sextile", P.NEPTUNE, P.PLUTO, datetime(2025, 6, 30, tzinfo=UTC), 122040, 0.358),
    ("saturn-neptune", P.SATURN, P.NEPTUNE, datetime(2025, 4, 30, tzinfo=UTC), 9000, 0.060),
    ("moon-uranus trine", P.MOON, P.URANUS, datetime(2025, 1, 1, tzinfo=UTC), 17, 0.538),
    ("mars-neptune retrograde", P.MARS, P.NEPTUNE, datetime(2025, 1, 1, tzinfo=UTC), 2394, 0.761),
    ("mars-pluto", P.MARS, P.PLUTO, datetime(2025, 1, 1, tzinfo=UTC), 2079, 0.835),
    ("jupiter-saturn", P.JUPITER, P.SATURN, datetime(2025, 1, 1, tzinfo=UTC), 8370, 0.451),
]

TRANSIT_INGRESS_FIXTURES = [
    ("venus in pisces", P.VENUS, datetime(2025, 1, 24, tzinfo=UTC), 771, 0.67),
    ("mercury in capricorn", P.MERCURY, datetime(2025, 1, 24, tzinfo=UTC), 472, 0.79),
    ("mars in cancer retrograde", P.MARS, datetime(2025, 1, 7, tzinfo=UTC), 5407, 0.55),
    ("mars in cancer direct", P.MARS, datetime(2025, 2, 25, tzinfo=UTC), 5407, 0.77),
]


def _sky(swiss: SwissEphemeris, moment: datetime):
    return build_chart(swiss, moment, 0.0, 0.0, ChartType.TROPICAL, MODERN_PLANETS)


def _edge_slack(rate: float, tolerance_deg: float, step_days: float) -> float:
    """Days by which a reference edge may differ from ours."""

    if rate == 0.0:
        return step_days + HOUR
    return min(RATE_SLACK * tolerance_deg / abs(rate), step_days) + HOUR


def _assert_matches_reference(
    jd: float,
    start: float,
    end: float,
    start_slack: float,
    end_slack: float,
    hours: float,
    journey: float,
    journey_rtol: float,
) -> None:
    duration = (end - start) / HOUR
    assert abs(duration - hours) <= (start_slack + end_slack) / HOUR + 1.0, duration
    # The fraction shrinks as either edge moves later.
    highest = journey_fraction(jd, start - start_slack, end - end_slack)
    lowest = journey_fraction(jd, start + start_slack, end + end_slack)
    pad = journey * journey_rtol + 0.005
    assert lowest - pad <= journey <= highest + pad, (lowest, highest)


@pytest.mark.parametrize(
    ("p1", "p2", "moment", "hours", "journey"),
    [pytest.param(*fixture[1:], id=fixture[0]) for fixture in TRANSIT_ASPECT_FIXTURES],
)
def test_aspect_transit_window(
    swiss: SwissEphemeris,
    p1: PointID,
    p2: PointID,
    moment: datetime,
    hours: float,
    journey: float,
) -> None:
    aspect = next(a for a in _sky(swiss, moment).aspects if {a.p1, a.p2} == {p1, p2})
    transit = aspect_journey(swiss, aspect, moment, search=TRANSIT_SEARCH)

    g = aspect_window(swiss, aspect.p1, aspect.p2, aspect.type, orb_table()[aspect.type])
    jd = swiss.julian_day(moment)
    start, end = swiss.julian_day(transit.start), swiss.julian_day(transit.end)
    assert start < jd < end
    assert abs(g(start)) < 0.05
    assert abs(g(end)) < 0.05

    slack = [
        _edge_slack(
            (g(edge + 0.1) - g(edge - 0.1)) / 0.2,
            REFERENCE_ASPECT_TOLERANCE_DEG,
            REFERENCE_ASPECT_STEP_DAYS,
        )
        for edge in (start, end)
    ]
    _assert_matches_reference(jd, start, end, *slack, hours, journey, 0.01)


@pytest.mark.parametrize(
    ("point", "moment", "hours", "journey"),
    [pytest.param(*fixture[1:], id=fixture[0]) for fixture in TRANSIT_INGRESS_FIXTURES],
)
def test_ingress_transit_window(
    swiss: SwissEphemeris, point: PointID, moment: datetime, hours: float, journey: float
) -> None:
    placed = _sky(swiss, moment).must_point(point)
    transit = ingress_journey(swiss, placed, moment, search=TRANSIT_SEARCH)

    jd = swiss.julian_day(moment)
    start, end = swiss.julian_day(transit.start), swiss.julian_day(transit.end)
    assert start < jd < end
    entered = swiss.body_position(start, point).longitude
    left = swiss.body_position(end, point).longitude
    assert absolute_difference(entered, placed.sign.start_degree) < 0.05
    assert absolute_difference(left, placed.sign.next().start_degree) < 0.05

    slack = [
        _edge_slack(
            swiss.body_position(edge, point).speed_longitude,
            REFERENCE_INGRESS_TOLERANCE_DEG,
            coarse_step(point),
        )
        for edge in (start, end)
    ]
    _assert_matches_reference(jd, start, end, *slack, hours, journey, 0.1)


def test_ayanamsa_separates_tropical_and_sidereal(swiss: SwissEphemeris) -> None:
    jd = swiss.julian_day(NEW_YEAR)
    ayanamsa = swiss.ayanamsa(jd)
    assert 24.0 < ayanamsa < 24.4

    tropical = swiss.body_position(jd, PointID.SUN).longitude
    sidereal = swiss.body_position(jd, PointID.SUN, sidereal=True).longitude
    assert directional_difference(sidereal, tropical) == pytest.approx(ayanamsa, abs=0.02)


def test_cache_is_shared_between_threads() -> None:
    cached = SwissEphemeris(cache_size=16)
    uncached = SwissEphemeris(cache_size=0)
    base = cached.julian_day(NEW_YEAR)
    requests = [(base + day, point) for day in range(6) for point in MODERN_PLANETS] * 3

    with ThreadPoolExecutor(max_workers=8) as pool:
        got = list(pool.map(lambda request: cached.body_position(*request), requests))

    assert got == [uncached.body_position(*request) for request in requests]
    assert len(cached._cache) <= 16
