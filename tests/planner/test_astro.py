import datetime

import pytest

from skyscout.planner.astro import (
    angular_separation,
    equatorial_to_horizontal,
    gmst_hours,
    hour_angle_hours,
    local_sidereal_time_hours,
    to_julian_date,
)


UTC = datetime.timezone.utc


@pytest.mark.parametrize(
    "dt, expected",
    [
        (datetime.datetime(2000, 1, 1, 12, 0, tzinfo=UTC), 2451545.0),
        (datetime.datetime(1987, 1, 27, 0, 0, tzinfo=UTC), 2446822.5),
        (datetime.datetime(1957, 10, 4, 19, 26, 24, tzinfo=UTC), 2436116.31),
    ],
)
def test_julian_date_reference_values(dt, expected):
    assert to_julian_date(dt) == pytest.approx(expected, abs=1e-6)


def test_julian_date_naive_is_utc():
    naive = datetime.datetime(2024, 3, 15, 4, 30)
    aware = naive.replace(tzinfo=UTC)
    assert to_julian_date(naive) == to_julian_date(aware)


def test_julian_date_converts_offsets():
    plus_two = datetime.timezone(datetime.timedelta(hours=2))
    dt = datetime.datetime(2000, 1, 1, 14, 0, tzinfo=plus_two)
    assert to_julian_date(dt) == pytest.approx(2451545.0, abs=1e-9)


def test_julian_date_matches_astropy():
    time_mod = pytest.importorskip("astropy.time")
    dt = datetime.datetime(2024, 3, 15, 4, 30, tzinfo=UTC)
    expected = time_mod.Time("2024-03-15T04:30:00", scale="utc").jd
    assert to_julian_date(dt) == pytest.approx(expected, abs=1e-6)


def test_gmst_at_j2000():
    assert gmst_hours(2451545.0) == pytest.approx(18.697374558, abs=1e-6)


def test_gmst_meeus_example():
    # Meeus example 12.a: 1987 April 10, 0h UT.
    assert gmst_hours(2446895.5) == pytest.approx(13.1795463, abs=1e-6)


def test_gmst_range():
    for jd in (2451545.0, 2451545.3, 2460000.75, 2415020.0):
        assert 0.0 <= gmst_hours(jd) < 24.0


def test_local_sidereal_time_adds_longitude():
    dt = datetime.datetime(2000, 1, 1, 12, 0, tzinfo=UTC)
    greenwich = local_sidereal_time_hours(dt, 0.0)
    east = local_sidereal_time_hours(dt, 90.0)
    assert (east - greenwich) % 24.0 == pytest.approx(6.0, abs=1e-9)
    assert 0.0 <= local_sidereal_time_hours(dt, -179.0) < 24.0


@pytest.mark.parametrize(
    "lst, ra, expected",
    [
        (1.0, 23.0, 2.0),
        (23.0, 1.0, -2.0),
        (12.0, 0.0, 12.0),
        (0.0, 12.0, 12.0),
        (5.0, 5.0, 0.0),
    ],
)
def test_hour_angle_folds(lst, ra, expected):
    assert hour_angle_hours(lst, ra) == pytest.approx(expected)


def test_altaz_andromeda_from_new_york():
    dt = datetime.datetime(2024, 3, 15, 4, 30, tzinfo=UTC)
    pos = equatorial_to_horizontal(0.712, 41.269, 40.7, -74.0, dt)
    assert pos.altitude_deg == pytest.approx(-5.211326902823543, abs=1e-6)
    assert pos.azimuth_deg == pytest.approx(342.19171489762016, abs=1e-6)


def test_altaz_orion_from_sydney():
    dt = datetime.datetime(2024, 12, 1, 12, 0, tzinfo=UTC)
    pos = equatorial_to_horizontal(5.588, -5.391, -33.9, 151.2, dt)
    assert pos.altitude_deg == pytest.approx(41.95795208832676, abs=1e-6)
    assert pos.azimuth_deg == pytest.approx(63.131919446409015, abs=1e-6)


def test_altaz_on_meridian():
    dt = datetime.datetime(2024, 6, 1, 3, 0, tzinfo=UTC)
    lst = local_sidereal_time_hours(dt, -74.0)
    pos = equatorial_to_horizontal(lst, 10.0, 40.0, -74.0, dt)
    assert pos.altitude_deg == pytest.approx(60.0, abs=1e-6)
    assert pos.azimuth_deg == pytest.approx(180.0, abs=1e-4)


def test_altaz_zenith():
    dt = datetime.datetime(2024, 6, 1, 3, 0, tzinfo=UTC)
    lst = local_sidereal_time_hours(dt, 10.0)
    pos = equatorial_to_horizontal(lst, 52.0, 52.0, 10.0, dt)
    assert pos.altitude_deg == pytest.approx(90.0, abs=1e-4)


def test_altaz_ranges():
    dt = datetime.datetime(2024, 1, 10, 3, 0, tzinfo=UTC)
    for ra in (0.0, 3.3, 6.0, 11.9, 18.5, 23.99):
        for dec in (-89.0, -30.0, 0.0, 45.0, 89.0):
            pos = equatorial_to_horizontal(ra, dec, -33.9, 151.2, dt)
            assert -90.0 <= pos.altitude_deg <= 90.0
            assert 0.0 <= pos.azimuth_deg < 360.0


def test_altaz_at_pole_is_finite():
    dt = datetime.datetime(2024, 1, 10, 3, 0, tzinfo=UTC)
    pos = equatorial_to_horizontal(3.0, 20.0, 90.0, 0.0, dt)
    assert pos.altitude_deg == pytest.approx(20.0, abs=1e-6)
    assert 0.0 <= pos.azimuth_deg < 360.0


def test_angular_separation_reference_value():
    assert angular_separation(0.712, 41.269, 5.588, -5.391) == pytest.approx(81.07964852987382, abs=1e-9)


def test_angular_separation_edge_cases():
    assert angular_separation(5.0, 20.0, 5.0, 20.0) == pytest.approx(0.0, abs=1e-6)
    assert angular_separation(0.0, 0.0, 12.0, 0.0) == pytest.approx(180.0)
    assert angular_separation(0.0, 90.0, 7.0, -90.0) == pytest.approx(180.0)


def test_angular_separation_is_symmetric():
    a = angular_separation(1.0, 10.0, 20.0, -40.0)
    b = angular_separation(20.0, -40.0, 1.0, 10.0)
    assert a == pytest.approx(b)


def test_angular_separation_matches_astropy():
    coordinates = pytest.importorskip("astropy.coordinates")
    units = pytest.importorskip("astropy.units")
    first = coordinates.SkyCoord(ra=0.712 * 15.0 * units.deg, dec=41.269 * units.deg)
    second = coordinates.SkyCoord(ra=5.588 * 15.0 * units.deg, dec=-5.391 * units.deg)
    expected = first.separation(second).deg
    assert angular_separation(0.712, 41.269, 5.588, -5.391) == pytest.approx(expected, abs=1e-6)
