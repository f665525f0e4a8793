from dataclasses import dataclass, field
import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Union


class TargetType(str, Enum):
    GALAXY = "galaxy"
    EMISSION_NEBULA = "emission_nebula"
    PLANETARY_NEBULA = "planetary_nebula"
    REFLECTION_NEBULA = "reflection_nebula"
    DARK_NEBULA = "dark_nebula"
    SUPERNOVA_REMNANT = "supernova_remnant"
    OPEN_CLUSTER = "open_cluster"
    GLOBULAR_CLUSTER = "globular_cluster"
    STAR = "star"
    DOUBLE_STAR = "double_star"
    ASTERISM = "asterism"
    MILKY_WAY_REGION = "milky_way_region"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class FocalLengthBand(str, Enum):
    WIDE = "wide"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def label(self) -> str:
        return _FOCAL_LENGTH_LABELS[self]


_FOCAL_LENGTH_LABELS = {
    FocalLengthBand.WIDE: "Wide Field (14-50mm)",
    FocalLengthBand.SHORT: "Short (200-400mm)",
    FocalLengthBand.MEDIUM: "Medium (400-800mm)",
    FocalLengthBand.LONG: "Long (800mm+)",
}


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"
    EXPERT = "expert"


class MoonPhaseName(str, Enum):
    NEW_MOON = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL_MOON = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"


@dataclass(frozen=True)
class Target:
    id: str
    name: str
    type: TargetType
    constellation: str
    ra_hours: float
    dec_deg: float
    width_arcmin: float
    height_arcmin: float
    best_months: tuple[int, ...]
    focal_length: FocalLengthBand
    alt_names: tuple[str, ...] = ()
    magnitude: float | None = None
    description: str = ""
    difficulty: Difficulty | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ObserverContext:
    latitude_deg: float
    longitude_deg: float
    instant: datetime.datetime
    name: str | None = None

    def __post_init__(self) -> None:
        if self.instant.tzinfo is None:
            object.__setattr__(
                self, "instant", self.instant.replace(tzinfo=datetime.timezone.utc)
            )


@dataclass(frozen=True)
class HorizontalPosition:
    altitude_deg: float
    azimuth_deg: float


@dataclass(frozen=True)
class MoonPhase:
    phase_fraction: float
    illumination_percent: float
    phase_name: MoonPhaseName


@dataclass(frozen=True)
class MoonState:
    phase_fraction: float
    illumination_percent: float
    phase_name: MoonPhaseName
    ra_hours: float
    dec_deg: float


@dataclass(frozen=True)
class RiseTransitSet:
    rise: datetime.datetime | None
    transit: datetime.datetime | None
    set: datetime.datetime | None
    max_altitude_deg: float
    never_sets: bool = False
    never_rises: bool = False


@dataclass(frozen=True)
class VisibilityResult:
    target: Target
    altitude_deg: float
    azimuth_deg: float
    rise: datetime.datetime | None
    transit: datetime.datetime | None
    set: datetime.datetime | None
    max_altitude_deg: float
    never_rises: bool
    never_sets: bool
    moon_separation_deg: float
    hours_above_30: float
    is_good_month: bool
    score: int
    score_components: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )


@dataclass(frozen=True)
class Camera:
    id: str
    name: str
    sensor_width_mm: float
    sensor_height_mm: float
    pixel_size_um: float
    color: bool = True


@dataclass(frozen=True)
class Optic:
    id: str
    name: str
    focal_length_mm: float
    aperture_mm: float | None = None

    @property
    def f_ratio(self) -> float | None:
        if not self.aperture_mm:
            return None
        return self.focal_length_mm / self.aperture_mm


# Small-angle constants: arcsec per radian / 1000 (mm vs um), arcmin per radian.
PIXEL_SCALE_FACTOR = 206.265
FOV_FACTOR_ARCMIN = 3438.0


@dataclass(frozen=True)
class OpticalSetup:
    id: str
    name: str
    camera: Camera
    optic: Optic
    category: str | None = None
    is_custom: bool = False

    @property
    def focal_length_mm(self) -> float:
        return self.optic.focal_length_mm

    @property
    def pixel_scale_arcsec(self) -> float:
        return self.camera.pixel_size_um / self.focal_length_mm * PIXEL_SCALE_FACTOR

    @property
    def fov_width_arcmin(self) -> float:
        return self.camera.sensor_width_mm / self.focal_length_mm * FOV_FACTOR_ARCMIN

    @property
    def fov_height_arcmin(self) -> float:
        return self.camera.sensor_height_mm / self.focal_length_mm * FOV_FACTOR_ARCMIN


@dataclass(frozen=True)
class BuiltinSetupRef:
    id: str


@dataclass(frozen=True)
class CustomSetupRef:
    id: str
    name: str
    focal_length_mm: float
    camera_id: str | None = None
    aperture_mm: float | None = None
    sensor_width_mm: float | None = None
    sensor_height_mm: float | None = None
    pixel_size_um: float | None = None
    category: str | None = None


SetupRef = Union[BuiltinSetupRef, CustomSetupRef]


@dataclass(frozen=True)
class FovFit:
    fill_percent: float
    score: int
    rating: str
    details: str


@dataclass(frozen=True)
class ResolutionFit:
    pixels_across: int
    score: int
    rating: str
    details: str


@dataclass(frozen=True)
class GearFitResult:
    setup: OpticalSetup
    fov_fit: FovFit
    resolution_fit: ResolutionFit
    combined_score: int
    recommendation: str


@dataclass(frozen=True)
class GearCompatibility:
    best: GearFitResult | None
    all_scores: tuple[GearFitResult, ...]
    overall_score: int | None
    has_good_option: bool


@dataclass(frozen=True)
class RecommendationFilters:
    types: frozenset[TargetType] | None = None
    focal_length: FocalLengthBand | None = None
    min_score: int = 0
    min_altitude_deg: float = -90.0
    gear_setup_id: str | None = None
    setup_ids: frozenset[str] | None = None
    limit: int | None = None


@dataclass(frozen=True)
class Recommendation:
    visibility: VisibilityResult
    gear: GearCompatibility
    gear_score: int | None
    best_setup: GearFitResult | None

    @property
    def target(self) -> Target:
        return self.visibility.target

    @property
    def score(self) -> int:
        return self.visibility.score


@dataclass
class RecommendationResult:
    observer: ObserverContext
    moon: MoonState
    filters: RecommendationFilters
    entries: Sequence[Recommendation]
    message: Optional[str] = None
