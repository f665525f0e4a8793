from .catalog import TargetCatalog, load_catalog
from .planner import Planner, build_filters, recommend
from .types import (
    FocalLengthBand,
    GearFitResult,
    MoonState,
    ObserverContext,
    OpticalSetup,
    Recommendation,
    RecommendationFilters,
    RecommendationResult,
    Target,
    TargetType,
    VisibilityResult,
)

__all__ = [
    "Planner",
    "TargetCatalog",
    "load_catalog",
    "build_filters",
    "recommend",
    "FocalLengthBand",
    "GearFitResult",
    "MoonState",
    "ObserverContext",
    "OpticalSetup",
    "Recommendation",
    "RecommendationFilters",
    "RecommendationResult",
    "Target",
    "TargetType",
    "VisibilityResult",
]
