import datetime

import pytest

from skyscout.planner.moon import (
    REFERENCE_NEW_MOON,
    SYNODIC_MONTH_DAYS,
    illumination_from_phase,
    moon_phase,
    moon_position,
    moon_state,
    phase_fraction,
    phase_name,
)
from skyscout.planner.types import MoonPhaseName


UTC = datetime.timezone.utc


def test_moon_position_reference_values():
    ra, dec = moon_position(datetime.datetime(2024, 3, 15, 4, 30, tzinfo=UTC))
    assert ra == pytest.approx(3.7296083561548947, abs=1e-6)
    assert dec == pytest.approx(24.54149346795935, abs=1e-6)

    ra, dec = moon_position(datetime.datetime(1999, 7, 20, 20, 17, tzinfo=UTC))
    assert ra == pytest.approx(14.089357646479273, abs=1e-6)
    assert dec == pytest.approx(-9.483194751527593, abs=1e-6)


def test_moon_position_ranges():
    start = datetime.datetime(2024, 1, 1, tzinfo=UTC)
    for day in range(0, 60, 3):
        ra, dec = moon_position(start + datetime.timedelta(days=day))
        assert 0.0 <= ra < 24.0
        assert -30.0 < dec < 30.0


def test_phase_fraction_at_reference_new_moon():
    assert phase_fraction(REFERENCE_NEW_MOON) == pytest.approx(0.0, abs=1e-9)


def test_phase_fraction_half_month_later():
    dt = REFERENCE_NEW_MOON + datetime.timedelta(days=SYNODIC_MONTH_DAYS / 2)
    assert phase_fraction(dt) == pytest.approx(0.5, abs=1e-6)


def test_phase_fraction_before_reference():
    fraction = phase_fraction(datetime.datetime(1999, 7, 20, 20, 17, tzinfo=UTC))
    assert 0.0 <= fraction < 1.0


def test_phase_fraction_naive_is_utc():
    naive = datetime.datetime(2024, 3, 15, 4, 30)
    assert phase_fraction(naive) == phase_fraction(naive.replace(tzinfo=UTC))


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (0.0, 0.0),
        (0.25, 50.0),
        (0.5, 100.0),
        (0.75, 50.0),
    ],
)
def test_illumination_from_phase(fraction, expected):
    assert illumination_from_phase(fraction) == pytest.approx(expected)


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (0.0, MoonPhaseName.NEW_MOON),
        (0.02, MoonPhaseName.NEW_MOON),
        (0.033, MoonPhaseName.WAXING_CRESCENT),
        (0.1, MoonPhaseName.WAXING_CRESCENT),
        (0.25, MoonPhaseName.FIRST_QUARTER),
        (0.3, MoonPhaseName.WAXING_GIBBOUS),
        (0.5, MoonPhaseName.FULL_MOON),
        (0.6, MoonPhaseName.WANING_GIBBOUS),
        (0.75, MoonPhaseName.LAST_QUARTER),
        (0.9, MoonPhaseName.WANING_CRESCENT),
        (0.967, MoonPhaseName.WANING_CRESCENT),
        (0.98, MoonPhaseName.NEW_MOON),
    ],
)
def test_phase_name(fraction, expected):
    assert phase_name(fraction) is expected


def test_moon_phase_full_moon():
    dt = REFERENCE_NEW_MOON + datetime.timedelta(days=SYNODIC_MONTH_DAYS / 2)
    phase = moon_phase(dt)
    assert phase.phase_name is MoonPhaseName.FULL_MOON
    assert phase.illumination_percent == pytest.approx(100.0, abs=1e-3)


def test_moon_state_combines_phase_and_position():
    dt = datetime.datetime(2024, 3, 15, 4, 30, tzinfo=UTC)
    state = moon_state(dt)
    phase = moon_phase(dt)
    ra, dec = moon_position(dt)
    assert state.phase_fraction == phase.phase_fraction
    assert state.illumination_percent == phase.illumination_percent
    assert state.phase_name is phase.phase_name
    assert (state.ra_hours, state.dec_deg) == (ra, dec)
    assert 0.0 <= state.illumination_percent <= 100.0


_EPS = 1e-9


@pytest.mark.parametrize(
    "boundary, below, at",
    [
        (0.033, MoonPhaseName.NEW_MOON, MoonPhaseName.WAXING_CRESCENT),
        (0.216, MoonPhaseName.WAXING_CRESCENT, MoonPhaseName.FIRST_QUARTER),
        (0.284, MoonPhaseName.FIRST_QUARTER, MoonPhaseName.WAXING_GIBBOUS),
        (0.466, MoonPhaseName.WAXING_GIBBOUS, MoonPhaseName.FULL_MOON),
        (0.534, MoonPhaseName.FULL_MOON, MoonPhaseName.WANING_GIBBOUS),
        (0.716, MoonPhaseName.WANING_GIBBOUS, MoonPhaseName.LAST_QUARTER),
        (0.784, MoonPhaseName.LAST_QUARTER, MoonPhaseName.WANING_CRESCENT),
    ],
)
def test_phase_name_boundaries(boundary, below, at):
    assert phase_name(boundary - _EPS) is below
    assert phase_name(boundary) is at
    assert phase_name(boundary + _EPS) is at


def test_phase_name_late_new_moon_boundary():
    assert phase_name(0.967) is MoonPhaseName.WANING_CRESCENT
    assert phase_name(0.967 + _EPS) is MoonPhaseName.NEW_MOON


def test_phase_fraction_and_illumination_ranges():
    start = datetime.datetime(2023, 12, 1, tzinfo=UTC)
    for hours in range(0, 24 * 60, 7):
        phase = moon_phase(start + datetime.timedelta(hours=hours))
        assert 0.0 <= phase.phase_fraction < 1.0
        assert 0.0 <= phase.illumination_percent <= 100.0
    assert illumination_from_phase(0.999999) == pytest.approx(0.0, abs=1e-3)
