"""Field-of-view and sampling fit of targets against imaging setups."""

from typing import Sequence

from skyscout.util.format import round_half_up

from .types import (
    FovFit,
    GearCompatibility,
    GearFitResult,
    OpticalSetup,
    ResolutionFit,
    Target,
    TargetType,
)


FOV_WEIGHT = 0.6
RESOLUTION_WEIGHT = 0.4
GOOD_OPTION_SCORE = 60
SMALL_TARGET_WIDTH_ARCMIN = 5.0

# (min pixels across, score, rating, detail template), checked top down.
_SMALL_TARGET_BANDS = (
    (200, 95, "Excellent", "{px} pixels across. Great resolution."),
    (100, 75, "Good", "{px} pixels across. Adequate detail."),
    (50, 50, "Marginal", "Only {px} pixels across. Limited detail."),
    (0, 20, "Undersampled", "Only {px} pixels. Need longer FL."),
)
_LARGE_TARGET_BANDS = (
    (500, 95, "Excellent", "{px} pixels across. Great detail potential."),
    (200, 90, "Very Good", "{px} pixels across. Good resolution."),
    (100, 75, "Good", "{px} pixels across. Adequate."),
    (0, 50, "Low Res", "{px} pixels. Fine for context shots."),
)

_RECOMMENDATIONS = (
    (85, "Highly Recommended"),
    (70, "Good Match"),
    (50, "Workable"),
    (30, "Challenging"),
)


def fov_fit(target: Target, setup: OpticalSetup) -> FovFit:
    width_fill = target.width_arcmin / setup.fov_width_arcmin * 100.0
    height_fill = target.height_arcmin / setup.fov_height_arcmin * 100.0
    max_fill = max(width_fill, height_fill)

    if max_fill > 100:
        overflow = max_fill - 100
        score = max(0.0, 50 - overflow)
        rating = "Too Large"
        details = f"Target exceeds FOV by {round_half_up(overflow)}%. Consider mosaic."
    elif max_fill > 70:
        score = 70 + (100 - max_fill)
        rating = "Tight Fit"
        details = f"Fills {round_half_up(max_fill)}% of FOV. Limited framing options."
    elif max_fill >= 30:
        score = 90 + (max_fill - 30) / 4
        rating = "Excellent"
        details = f"Fills {round_half_up(max_fill)}% of FOV. Ideal framing."
    elif max_fill >= 15:
        score = 60 + max_fill
        rating = "Good"
        details = f"Fills {round_half_up(max_fill)}% of FOV. Room for context."
    elif max_fill >= 5:
        score = 30 + max_fill * 2
        rating = "Small"
        details = f"Only fills {round_half_up(max_fill)}% of FOV. Consider longer focal length."
    else:
        score = max_fill * 6
        rating = "Too Small"
        details = f"Fills only {max_fill:.1f}% of FOV. Much longer FL needed."

    return FovFit(
        fill_percent=max_fill,
        score=round_half_up(min(100.0, max(0.0, score))),
        rating=rating,
        details=details,
    )


def is_small_target(target: Target) -> bool:
    return (
        target.type is TargetType.PLANETARY_NEBULA
        or target.width_arcmin < SMALL_TARGET_WIDTH_ARCMIN
    )


def resolution_fit(target: Target, setup: OpticalSetup) -> ResolutionFit:
    size_arcsec = min(target.width_arcmin, target.height_arcmin) * 60.0
    pixels_across = size_arcsec / setup.pixel_scale_arcsec
    bands = _SMALL_TARGET_BANDS if is_small_target(target) else _LARGE_TARGET_BANDS
    px = round_half_up(pixels_across)
    _, score, rating, template = _sampling_band(pixels_across, bands)
    return ResolutionFit(
        pixels_across=px,
        score=score,
        rating=rating,
        details=template.format(px=px),
    )


def _sampling_band(pixels_across: float, bands: tuple) -> tuple:
    for band in bands:
        if pixels_across >= band[0]:
            return band
    return bands[-1]


def recommendation_label(combined_score: int) -> str:
    for threshold, label in _RECOMMENDATIONS:
        if combined_score >= threshold:
            return label
    return "Not Recommended"


def score_setup(target: Target, setup: OpticalSetup) -> GearFitResult:
    fov = fov_fit(target, setup)
    res = resolution_fit(target, setup)
    combined = round_half_up(fov.score * FOV_WEIGHT + res.score * RESOLUTION_WEIGHT)
    return GearFitResult(
        setup=setup,
        fov_fit=fov,
        resolution_fit=res,
        combined_score=combined,
        recommendation=recommendation_label(combined),
    )


def rank_setups(target: Target, setups: Sequence[OpticalSetup]) -> list[GearFitResult]:
    """Fit results for every setup, best first; ties keep ``setups`` order."""
    results = [score_setup(target, setup) for setup in setups]
    return sorted(results, key=lambda r: r.combined_score, reverse=True)


def gear_compatibility(target: Target, setups: Sequence[OpticalSetup]) -> GearCompatibility:
    ranked = rank_setups(target, setups)
    if not ranked:
        return GearCompatibility(best=None, all_scores=(), overall_score=None, has_good_option=False)
    best = ranked[0]
    return GearCompatibility(
        best=best,
        all_scores=tuple(ranked),
        overall_score=best.combined_score,
        has_good_option=best.combined_score >= GOOD_OPTION_SCORE,
    )


def suitable_setups(
    target: Target,
    setups: Sequence[OpticalSetup],
    min_score: int = 50,
) -> list[GearFitResult]:
    return [r for r in rank_setups(target, setups) if r.combined_score >= min_score]
