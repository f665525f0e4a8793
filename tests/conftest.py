import datetime

import pytest

from skyscout.planner.catalog import TargetCatalog, load_catalog
from skyscout.planner.equipment import build_setup, builtin_setups
from skyscout.planner.types import (
    Camera,
    FocalLengthBand,
    MoonPhaseName,
    MoonState,
    Optic,
    Target,
    TargetType,
)


UTC = datetime.timezone.utc


def _make_target(**overrides) -> Target:
    fields = dict(
        id="T1",
        name="Test Target",
        type=TargetType.GALAXY,
        constellation="Test",
        ra_hours=0.0,
        dec_deg=0.0,
        width_arcmin=10.0,
        height_arcmin=10.0,
        best_months=(1,),
        focal_length=FocalLengthBand.MEDIUM,
    )
    fields.update(overrides)
    return Target(**fields)


def _make_setup(setup_id="S1", focal_length_mm=382.0, sensor_mm=(10.0, 10.0), pixel_um=3.704):
    camera = Camera(f"{setup_id}-cam", "Test camera", sensor_mm[0], sensor_mm[1], pixel_um)
    optic = Optic(f"{setup_id}-optic", "Test optic", focal_length_mm)
    return build_setup(setup_id, f"Setup {setup_id}", optic, camera)


def _dark_moon(ra_hours=12.0, dec_deg=0.0, illumination=0.0) -> MoonState:
    return MoonState(
        phase_fraction=0.0,
        illumination_percent=illumination,
        phase_name=MoonPhaseName.NEW_MOON,
        ra_hours=ra_hours,
        dec_deg=dec_deg,
    )


@pytest.fixture(scope="session")
def builtin_catalog() -> TargetCatalog:
    return load_catalog()


@pytest.fixture(scope="session")
def setups():
    return builtin_setups()


@pytest.fixture
def winter_evening():
    # 2024-01-10 03:00 UTC is 22:00 EST, Orion high in the south from New York.
    return datetime.datetime(2024, 1, 10, 3, 0, tzinfo=UTC)


@pytest.fixture
def make_target():
    return _make_target


@pytest.fixture
def make_setup():
    return _make_setup


@pytest.fixture
def dark_moon():
    return _dark_moon
