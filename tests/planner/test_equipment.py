import pytest

from skyscout.errors import UnknownSetupError
from skyscout.planner.equipment import (
    BUILTIN_CAMERAS,
    BUILTIN_OPTICS,
    build_setup,
    builtin_setups,
    resolve_setups,
)
from skyscout.planner.types import BuiltinSetupRef, Camera, CustomSetupRef, Optic


@pytest.mark.parametrize(
    "setup_id, pixel_scale, fov_width, fov_height",
    [
        ("seestar-integrated", 2.392674, 77.0112, 44.0064),
        ("evostar-asi533", 1.846563, 92.580429, 92.580429),
        ("evostar-reduced-asi533", 2.172427, 108.918151, 108.918151),
        ("askar-v60-asi533", 2.308204, 115.725536, 115.725536),
        ("askar-v80-asi533", 1.538802, 77.150357, 77.150357),
        ("nikon-widefield", 60.848175, 6171.21, 4108.41),
    ],
)
def test_builtin_setup_geometry(setup_id, pixel_scale, fov_width, fov_height):
    setup = {s.id: s for s in builtin_setups()}[setup_id]
    assert setup.pixel_scale_arcsec == pytest.approx(pixel_scale, abs=1e-5)
    assert setup.fov_width_arcmin == pytest.approx(fov_width, abs=1e-4)
    assert setup.fov_height_arcmin == pytest.approx(fov_height, abs=1e-4)
    assert not setup.is_custom


def test_builtin_setup_order():
    assert [s.id for s in builtin_setups()] == [
        "seestar-integrated",
        "evostar-asi533",
        "evostar-reduced-asi533",
        "askar-v60-asi533",
        "askar-v80-asi533",
        "nikon-widefield",
    ]


def test_builtin_ids_are_unique():
    ids = [s.id for s in builtin_setups()]
    assert len(ids) == len(set(ids))


def test_optic_f_ratio():
    assert BUILTIN_OPTICS["evostar72"].f_ratio == pytest.approx(420.0 / 72.0)
    assert Optic("bare", "No aperture", 100.0).f_ratio is None


def test_build_setup_rejects_bad_values():
    camera = BUILTIN_CAMERAS["asi533mc"]
    with pytest.raises(ValueError):
        build_setup("bad", "Bad", Optic("o", "o", 0.0), camera)
    with pytest.raises(ValueError):
        build_setup("bad", "Bad", Optic("o", "o", 400.0), Camera("c", "c", 10.0, 10.0, 0.0))


def test_resolve_builtin_refs():
    setups = resolve_setups([BuiltinSetupRef("nikon-widefield"), BuiltinSetupRef("seestar-integrated")])
    assert [s.id for s in setups] == ["nikon-widefield", "seestar-integrated"]


def test_resolve_unknown_builtin():
    with pytest.raises(UnknownSetupError):
        resolve_setups([BuiltinSetupRef("hubble")])


def test_resolve_custom_with_known_camera():
    ref = CustomSetupRef(id="c8", name="C8 + ASI533", focal_length_mm=2032.0, camera_id="asi533mc", aperture_mm=203.0)
    (setup,) = resolve_setups([ref])
    assert setup.is_custom
    assert setup.camera is BUILTIN_CAMERAS["asi533mc"]
    assert setup.focal_length_mm == 2032.0
    assert setup.optic.f_ratio == pytest.approx(10.0, abs=0.01)
    assert setup.pixel_scale_arcsec == pytest.approx(3.76 / 2032.0 * 206.265)


def test_resolve_custom_with_inline_sensor():
    ref = CustomSetupRef(
        id="lens",
        name="135mm lens",
        focal_length_mm=135.0,
        sensor_width_mm=23.5,
        sensor_height_mm=15.6,
        pixel_size_um=3.9,
    )
    (setup,) = resolve_setups([ref])
    assert setup.fov_width_arcmin == pytest.approx(23.5 / 135.0 * 3438.0)
    assert setup.fov_height_arcmin == pytest.approx(15.6 / 135.0 * 3438.0)


def test_resolve_custom_missing_sensor():
    ref = CustomSetupRef(id="lens", name="lens", focal_length_mm=135.0, pixel_size_um=3.9)
    with pytest.raises(ValueError, match="sensor_width_mm"):
        resolve_setups([ref])


def test_resolve_custom_unknown_camera():
    ref = CustomSetupRef(id="x", name="x", focal_length_mm=400.0, camera_id="nope")
    with pytest.raises(UnknownSetupError):
        resolve_setups([ref])


def test_resolve_rejects_other_values():
    with pytest.raises(TypeError):
        resolve_setups(["seestar-integrated"])


@pytest.mark.parametrize("sensor", [(0.0, 10.0), (10.0, 0.0), (-5.0, 10.0)])
def test_build_setup_rejects_empty_sensor(sensor):
    camera = Camera("c", "c", sensor[0], sensor[1], 3.76)
    with pytest.raises(ValueError, match="sensor dimensions"):
        build_setup("bad", "Bad", Optic("o", "o", 400.0), camera)


def test_resolve_custom_zero_sensor():
    ref = CustomSetupRef(
        id="bad",
        name="bad",
        focal_length_mm=400.0,
        sensor_width_mm=0.0,
        sensor_height_mm=10.0,
        pixel_size_um=3.76,
    )
    with pytest.raises(ValueError, match="sensor dimensions"):
        resolve_setups([ref])
