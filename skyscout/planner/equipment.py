from typing import Iterable, Mapping, Sequence

from skyscout.errors import UnknownSetupError

from .types import (
    BuiltinSetupRef,
    Camera,
    CustomSetupRef,
    Optic,
    OpticalSetup,
    SetupRef,
)


BUILTIN_CAMERAS: dict[str, Camera] = {
    c.id: c
    for c in (
        Camera("asi533mc", "ZWO ASI533MC Pro", 11.31, 11.31, 3.76),
        Camera("asi220mm", "ZWO ASI220MM Mini", 8.8, 6.6, 2.9, color=False),
        Camera("nikon-z6iii", "Nikon Z6 III", 35.9, 23.9, 5.9),
        Camera("seestar-sensor", "Seestar S50 (integrated)", 5.6, 3.2, 2.9),
    )
}

BUILTIN_OPTICS: dict[str, Optic] = {
    o.id: o
    for o in (
        Optic("seestar", "Seestar S50", 250.0, 50.0),
        Optic("evostar72", "Evostar 72ED", 420.0, 72.0),
        Optic("evostar72-reducer", "Evostar 72ED + 0.85x", 357.0, 72.0),
        Optic("askar-v60", "Askar V 60mm", 336.0, 60.0),
        Optic("askar-v80", "Askar V 80mm", 504.0, 80.0),
        Optic("nikon-20mm", "Nikon 20mm f/1.8", 20.0, 11.1),
        Optic("nikon-24-70", "Nikon 24-70mm f/4", 50.0, 12.5),
    )
}

# (setup id, display name, optic id, camera id, category)
_BUILTIN_SETUP_ROWS = (
    ("seestar-integrated", "Seestar S50", "seestar", "seestar-sensor", "grab-and-go"),
    ("evostar-asi533", "Evostar 72ED + ASI533MC", "evostar72", "asi533mc", "main-rig"),
    ("evostar-reduced-asi533", "Evostar 72ED + 0.85x + ASI533MC", "evostar72-reducer", "asi533mc", "main-rig"),
    ("askar-v60-asi533", "Askar V 60mm + ASI533MC", "askar-v60", "asi533mc", "main-rig"),
    ("askar-v80-asi533", "Askar V 80mm + ASI533MC", "askar-v80", "asi533mc", "main-rig"),
    ("nikon-widefield", "Nikon Z6 III + 20mm f/1.8", "nikon-20mm", "nikon-z6iii", "widefield"),
)


def build_setup(
    setup_id: str,
    name: str,
    optic: Optic,
    camera: Camera,
    category: str | None = None,
    is_custom: bool = False,
) -> OpticalSetup:
    if optic.focal_length_mm <= 0:
        raise ValueError(f"Setup {setup_id}: focal length must be positive")
    if camera.pixel_size_um <= 0:
        raise ValueError(f"Setup {setup_id}: pixel size must be positive")
    if camera.sensor_width_mm <= 0 or camera.sensor_height_mm <= 0:
        raise ValueError(f"Setup {setup_id}: sensor dimensions must be positive")
    return OpticalSetup(
        id=setup_id,
        name=name,
        camera=camera,
        optic=optic,
        category=category,
        is_custom=is_custom,
    )


def builtin_setups() -> tuple[OpticalSetup, ...]:
    return tuple(
        build_setup(
            setup_id,
            name,
            BUILTIN_OPTICS[optic_id],
            BUILTIN_CAMERAS[camera_id],
            category=category,
        )
        for setup_id, name, optic_id, camera_id, category in _BUILTIN_SETUP_ROWS
    )


def resolve_setups(
    refs: Iterable[SetupRef],
    builtin: Sequence[OpticalSetup] | None = None,
    cameras: Mapping[str, Camera] | None = None,
) -> tuple[OpticalSetup, ...]:
    """Turn setup references from configuration into concrete setups."""
    builtin = builtin_setups() if builtin is None else builtin
    cameras = BUILTIN_CAMERAS if cameras is None else cameras
    by_id = {s.id: s for s in builtin}
    resolved: list[OpticalSetup] = []
    for ref in refs:
        if isinstance(ref, BuiltinSetupRef):
            if ref.id not in by_id:
                raise UnknownSetupError(f"Unknown built-in setup: {ref.id}")
            resolved.append(by_id[ref.id])
        elif isinstance(ref, CustomSetupRef):
            resolved.append(_build_custom(ref, cameras))
        else:
            raise TypeError(f"Unsupported setup reference: {ref!r}")
    return tuple(resolved)


def _build_custom(ref: CustomSetupRef, cameras: Mapping[str, Camera]) -> OpticalSetup:
    if ref.camera_id is not None:
        if ref.camera_id not in cameras:
            raise UnknownSetupError(f"Setup {ref.id}: unknown camera {ref.camera_id}")
        camera = cameras[ref.camera_id]
    else:
        missing = [
            name
            for name in ("sensor_width_mm", "sensor_height_mm", "pixel_size_um")
            if getattr(ref, name) is None
        ]
        if missing:
            raise ValueError(f"Setup {ref.id}: missing camera fields {', '.join(missing)}")
        camera = Camera(
            id=f"{ref.id}-camera",
            name=f"{ref.name} camera",
            sensor_width_mm=ref.sensor_width_mm,
            sensor_height_mm=ref.sensor_height_mm,
            pixel_size_um=ref.pixel_size_um,
        )
    optic = Optic(
        id=f"{ref.id}-optic",
        name=ref.name,
        focal_length_mm=ref.focal_length_mm,
        aperture_mm=ref.aperture_mm,
    )
    return build_setup(ref.id, ref.name, optic, camera, category=ref.category, is_custom=True)
