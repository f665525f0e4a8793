import json
import datetime
from dataclasses import asdict

from skyscout.util.format import cardinal_direction, format_dec, format_ra

from .types import GearCompatibility, MoonState, Recommendation, RecommendationResult


def result_to_dict(result: RecommendationResult) -> dict:
    return {
        "observer": asdict(result.observer),
        "moon": asdict(result.moon),
        "filters": {
            "types": sorted(t.value for t in result.filters.types) if result.filters.types else None,
            "focal_length": result.filters.focal_length,
            "min_score": result.filters.min_score,
            "min_altitude_deg": result.filters.min_altitude_deg,
            "gear_setup_id": result.filters.gear_setup_id,
            "setup_ids": sorted(result.filters.setup_ids) if result.filters.setup_ids else None,
            "limit": result.filters.limit,
        },
        "entries": [recommendation_to_dict(e) for e in result.entries],
        "message": result.message,
    }


def recommendation_to_dict(entry: Recommendation) -> dict:
    vis = entry.visibility
    target = vis.target
    return {
        "id": target.id,
        "name": target.name,
        "type": target.type,
        "constellation": target.constellation,
        "ra_hours": target.ra_hours,
        "dec_deg": target.dec_deg,
        "score": vis.score,
        "score_components": dict(vis.score_components),
        "altitude_deg": vis.altitude_deg,
        "azimuth_deg": vis.azimuth_deg,
        "direction": cardinal_direction(vis.azimuth_deg),
        "rise_utc": vis.rise,
        "transit_utc": vis.transit,
        "set_utc": vis.set,
        "max_altitude_deg": vis.max_altitude_deg,
        "never_rises": vis.never_rises,
        "never_sets": vis.never_sets,
        "moon_separation_deg": vis.moon_separation_deg,
        "hours_above_30": vis.hours_above_30,
        "is_good_month": vis.is_good_month,
        "gear_score": entry.gear_score,
        "best_setup": _fit_to_dict(entry.best_setup) if entry.best_setup else None,
    }


def gear_to_dict(gear: GearCompatibility) -> dict:
    return {
        "overall_score": gear.overall_score,
        "has_good_option": gear.has_good_option,
        "setups": [_fit_to_dict(fit) for fit in gear.all_scores],
    }


def _fit_to_dict(fit) -> dict:
    setup = fit.setup
    return {
        "setup_id": setup.id,
        "setup_name": setup.name,
        "focal_length_mm": setup.focal_length_mm,
        "pixel_scale_arcsec": setup.pixel_scale_arcsec,
        "fov_arcmin": [setup.fov_width_arcmin, setup.fov_height_arcmin],
        "fov_fit": asdict(fit.fov_fit),
        "resolution_fit": asdict(fit.resolution_fit),
        "combined_score": fit.combined_score,
        "recommendation": fit.recommendation,
    }


def format_json(result: RecommendationResult) -> str:
    return json.dumps(result_to_dict(result), indent=2, default=str)


def format_moon(moon: MoonState) -> str:
    return (
        f"{moon.phase_name.value}: {moon.illumination_percent:.0f}% illuminated "
        f"(phase {moon.phase_fraction:.3f}), at {format_ra(moon.ra_hours)}, {format_dec(moon.dec_deg)}"
    )


def format_text(result: RecommendationResult, verbose: bool = False) -> str:
    lines: list[str] = []
    local_tz = datetime.datetime.now().astimezone().tzinfo
    observer = result.observer
    lines.append("Skyscout Recommendations")
    lines.append("========================")
    lines.append(f"Time (local): {_format_time(observer.instant, local_tz)}")
    if observer.name:
        lines.append(f"Site: {observer.name}")
    lines.append(
        f"Location: lat {observer.latitude_deg:.3f}°, lon {observer.longitude_deg:.3f}°"
    )
    lines.append(f"Moon: {format_moon(result.moon)}")
    if result.filters.gear_setup_id:
        lines.append(f"Setup: {result.filters.gear_setup_id}")
    if result.message:
        lines.append("")
        lines.append(result.message)
        return "\n".join(lines)

    rows = []
    for idx, entry in enumerate(result.entries, start=1):
        vis = entry.visibility
        rows.append(
            {
                "idx": f"{idx:>2}.",
                "name": _display_name(entry),
                "type": vis.target.type.label,
                "score": f"{vis.score:>3}",
                "alt": f"{vis.altitude_deg:.0f}° {cardinal_direction(vis.azimuth_deg)}",
                "window": _window_text(entry, local_tz),
                "gear": _gear_text(entry),
                "moon": f"{vis.moon_separation_deg:.0f}°",
            }
        )

    lines.append("")
    if not rows:
        return "\n".join(lines)
    name_w = min(36, max(len(r["name"]) for r in rows))
    type_w = min(18, max(len(r["type"]) for r in rows))
    alt_w = max(len(r["alt"]) for r in rows)
    for r in rows:
        name = _pad(_truncate(r["name"], name_w), name_w)
        ttype = _pad(_truncate(r["type"], type_w), type_w)
        alt = _pad(r["alt"], alt_w)
        line = f"{r['idx']} {r['score']}  {name}  {ttype}  {alt}  {r['window']}"
        if verbose:
            line = f"{line}  moon {r['moon']}"
        if r["gear"]:
            line = f"{line}  {r['gear']}"
        lines.append(line)
    return "\n".join(lines)


def _display_name(entry: Recommendation) -> str:
    target = entry.visibility.target
    if target.name and target.name.lower() != target.id.lower():
        return f"{target.name} ({target.id})"
    return target.id


def _window_text(entry: Recommendation, tz: datetime.tzinfo | None) -> str:
    vis = entry.visibility
    if vis.never_sets:
        return "circumpolar"
    if vis.rise is None or vis.set is None:
        return ""
    return f"{_format_clock(vis.rise, tz)}-{_format_clock(vis.set, tz)}"


def _gear_text(entry: Recommendation) -> str:
    fit = entry.best_setup
    if fit is None:
        return ""
    return f"{fit.setup.name} ({fit.combined_score}, {fit.fov_fit.fill_percent:.0f}% fill)"


def _format_time(dt: datetime.datetime, tz: datetime.tzinfo | None) -> str:
    if tz is None:
        tz = datetime.timezone.utc
    return dt.astimezone(tz).strftime("%Y-%m-%d %H:%M")


def _format_clock(dt: datetime.datetime, tz: datetime.tzinfo | None) -> str:
    if tz is None:
        tz = datetime.timezone.utc
    return dt.astimezone(tz).strftime("%H:%M")


def _truncate(value: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return value[: width - 3] + "..."


def _pad(value: str, width: int) -> str:
    if len(value) >= width:
        return value
    return value + (" " * (width - len(value)))
