from pathlib import Path
from typing import TYPE_CHECKING

from skyscout.errors import ConfigError
from skyscout.planner.types import BuiltinSetupRef, CustomSetupRef, SetupRef

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:  # Python < 3.11
        import tomli as tomllib

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "skyscout" / "config.toml"


class Config:
    def __init__(self, data: dict):
        self._data = data

    def _planner(self) -> dict:
        return self._data.get("planner", {})

    @property
    def site_latitude_deg(self):
        return self._data.get("site", {}).get("latitude_deg", None)

    @property
    def site_longitude_deg(self):
        return self._data.get("site", {}).get("longitude_deg", None)

    @property
    def site_name(self):
        return self._data.get("site", {}).get("name", None)

    @property
    def planner_min_score(self) -> int:
        return int(self._planner().get("min_score", 0))

    @property
    def planner_min_altitude_deg(self) -> float:
        return float(self._planner().get("min_altitude_deg", -90.0))

    @property
    def planner_limit(self):
        return self._planner().get("limit", None)

    @property
    def planner_gear_setup(self):
        return self._planner().get("gear_setup", None)

    @property
    def planner_setup_ids(self):
        ids = self._planner().get("setups", None)
        if not ids:
            return None
        return frozenset(ids)

    @property
    def catalog_path(self):
        path = self._data.get("catalog", {}).get("path", None)
        if not path:
            return None
        return Path(path).expanduser()

    @property
    def catalog_builtin(self) -> bool:
        return bool(self._data.get("catalog", {}).get("builtin", True))

    @property
    def setup_refs(self) -> list[SetupRef] | None:
        """Setup references from ``[[setups]]``; ``None`` means the built-in set."""
        entries = self._data.get("setups", None)
        if entries is None:
            return None
        return [_parse_setup_entry(i, entry) for i, entry in enumerate(entries)]


def _parse_setup_entry(index: int, entry: dict) -> SetupRef:
    if not isinstance(entry, dict):
        raise ConfigError(f"setups[{index}] must be a table")
    if "builtin" in entry:
        return BuiltinSetupRef(id=str(entry["builtin"]))
    try:
        return CustomSetupRef(
            id=str(entry["id"]),
            name=str(entry.get("name", entry["id"])),
            focal_length_mm=float(entry["focal_length_mm"]),
            camera_id=entry.get("camera", None),
            aperture_mm=_optional_float(entry.get("aperture_mm")),
            sensor_width_mm=_optional_float(entry.get("sensor_width_mm")),
            sensor_height_mm=_optional_float(entry.get("sensor_height_mm")),
            pixel_size_um=_optional_float(entry.get("pixel_size_um")),
            category=entry.get("category", None),
        )
    except KeyError as e:
        raise ConfigError(f"setups[{index}] is missing {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"setups[{index}] has an invalid value: {e}") from e


def _optional_float(value):
    if value is None:
        return None
    return float(value)


def load_config(path: Path | None = None) -> Config:
    explicit_path = path
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Return default config if default file missing
        return Config({})

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    return Config(data)
