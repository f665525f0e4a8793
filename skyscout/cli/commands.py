import datetime
import json
import logging
import sys
from pathlib import Path

from skyscout.config import Config, load_config
from skyscout.errors import SkyscoutError
from skyscout.planner import ObserverContext, Planner, build_filters, load_catalog
from skyscout.planner.equipment import builtin_setups, resolve_setups
from skyscout.planner.formatters import (
    format_moon,
    format_text,
    gear_to_dict,
    result_to_dict,
)
from skyscout.planner.gear import gear_compatibility
from skyscout.planner.moon import moon_state
from skyscout.planner.providers import get_catalog_providers
from skyscout.planner.types import TargetType
from skyscout.util.format import format_dec, format_ra


def _json_envelope(command: str, ok: bool, data=None, error=None) -> dict:
    return {
        "ok": ok,
        "command": command,
        "timestamp_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": data,
        "error": error,
    }


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _init_logging(level: str | None) -> None:
    if not level:
        return
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(level=level_map.get(level, logging.INFO))


def _handle_error(command: str, args, exc: Exception) -> int:
    if args is not None and getattr(args, "json", False):
        payload = _json_envelope(
            command=command,
            ok=False,
            data=None,
            error={
                "code": type(exc).__name__,
                "message": str(exc),
                "details": None,
            },
        )
        _print_json(payload)
    else:
        print(str(exc), file=sys.stderr)
    return 2


def _config_path_from_args(args) -> Path | None:
    if args is None:
        return None
    path = getattr(args, "config", None)
    return Path(path) if path else None


def _parse_datetime_arg(value: str | None) -> datetime.datetime | None:
    if not value:
        return None
    dt = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def _observer_from_args(args, config: Config) -> ObserverContext:
    lat = args.lat if getattr(args, "lat", None) is not None else config.site_latitude_deg
    lon = args.lon if getattr(args, "lon", None) is not None else config.site_longitude_deg
    if lat is None or lon is None:
        raise ValueError("Observer location is required (--lat/--lon or [site] in config)")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"Longitude out of range: {lon}")
    instant = _parse_datetime_arg(getattr(args, "at", None))
    if instant is None:
        instant = datetime.datetime.now(datetime.timezone.utc)
    return ObserverContext(
        latitude_deg=float(lat),
        longitude_deg=float(lon),
        instant=instant,
        name=config.site_name,
    )


def _load_setups(config: Config):
    refs = config.setup_refs
    if refs is None:
        return builtin_setups()
    return resolve_setups(refs)


def _load_catalog(config: Config):
    return load_catalog(
        get_catalog_providers(
            extra_path=config.catalog_path,
            include_builtin=config.catalog_builtin,
        )
    )


def run_recommend(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        config = load_config(_config_path_from_args(args))
        observer = _observer_from_args(args, config)
        planner = Planner(_load_catalog(config), _load_setups(config), config=config)
        defaults = Planner.default_filters(config)
        filters = build_filters(
            types=args.types,
            focal_length=args.focal_length,
            min_score=args.min_score if args.min_score is not None else defaults.min_score,
            min_altitude_deg=(
                args.min_altitude if args.min_altitude is not None else defaults.min_altitude_deg
            ),
            gear_setup_id=args.setup or defaults.gear_setup_id,
            setup_ids=defaults.setup_ids,
            limit=args.limit if args.limit is not None else defaults.limit,
        )
        result = planner.recommend(observer, filters=filters)
    except (ValueError, SkyscoutError, FileNotFoundError) as e:
        return _handle_error("recommend", args, e)

    if getattr(args, "json", False):
        _print_json(_json_envelope("recommend", ok=True, data=result_to_dict(result)))
    else:
        print(format_text(result, verbose=getattr(args, "verbose", False)))
    return 0


def run_moon(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        instant = _parse_datetime_arg(args.at) or datetime.datetime.now(datetime.timezone.utc)
    except ValueError as e:
        return _handle_error("moon", args, e)
    moon = moon_state(instant)
    if getattr(args, "json", False):
        data = {
            "instant_utc": instant,
            "phase": moon.phase_name,
            "phase_fraction": moon.phase_fraction,
            "illumination_percent": moon.illumination_percent,
            "ra_hours": moon.ra_hours,
            "dec_deg": moon.dec_deg,
        }
        _print_json(_json_envelope("moon", ok=True, data=data))
    else:
        print(format_moon(moon))
    return 0


def run_gear(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        config = load_config(_config_path_from_args(args))
        target = _load_catalog(config).get(args.target_id)
        setups = _load_setups(config)
    except (ValueError, SkyscoutError, FileNotFoundError) as e:
        return _handle_error("gear", args, e)

    gear = gear_compatibility(target, setups)
    if getattr(args, "json", False):
        data = {"target_id": target.id, **gear_to_dict(gear)}
        _print_json(_json_envelope("gear", ok=True, data=data))
        return 0

    print(f"{target.name} ({target.id}): {target.width_arcmin:g}' x {target.height_arcmin:g}'")
    if not gear.all_scores:
        print("No imaging setups configured.")
        return 0
    for fit in gear.all_scores:
        print(
            f"{fit.combined_score:>3}  {fit.setup.name:<34} {fit.recommendation:<19} "
            f"FOV {fit.fov_fit.rating}: {fit.fov_fit.details} "
            f"Res {fit.resolution_fit.rating}: {fit.resolution_fit.details}"
        )
    return 0


def run_targets(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    try:
        config = load_config(_config_path_from_args(args))
        catalog = _load_catalog(config)
        types = {TargetType(t) for t in args.types} if args.types else None
    except (ValueError, SkyscoutError, FileNotFoundError) as e:
        return _handle_error("targets", args, e)

    targets = catalog.search(args.search) if args.search else list(catalog)
    if types:
        targets = [t for t in targets if t.type in types]
    if args.month is not None:
        targets = [t for t in targets if args.month in t.best_months]

    if getattr(args, "json", False):
        data = [
            {
                "id": t.id,
                "name": t.name,
                "type": t.type,
                "ra_hours": t.ra_hours,
                "dec_deg": t.dec_deg,
                "size_arcmin": [t.width_arcmin, t.height_arcmin],
                "best_months": t.best_months,
                "focal_length": t.focal_length,
            }
            for t in targets
        ]
        _print_json(_json_envelope("targets", ok=True, data=data))
        return 0

    for t in targets:
        print(
            f"{t.id:<10} {t.name:<32} {t.type.label:<18} "
            f"{format_ra(t.ra_hours):>11} {format_dec(t.dec_deg):>13}"
        )
    return 0
