from dataclasses import dataclass
import csv
import logging
from pathlib import Path

from .base import CatalogProvider
from skyscout.errors import CatalogError
from skyscout.planner.types import Difficulty, FocalLengthBand, Target, TargetType


REQUIRED_COLUMNS = (
    "id",
    "name",
    "type",
    "ra_hours",
    "dec_deg",
    "width_arcmin",
    "height_arcmin",
    "best_months",
    "focal_length",
)


@dataclass
class CsvCatalogProvider(CatalogProvider):
    """Targets from a CSV file; list columns are ``;``-separated."""

    name: str = "csv"
    catalog_path: Path | None = None

    def _resolve_path(self) -> Path:
        if self.catalog_path is None:
            raise CatalogError("No catalog path configured")
        return Path(self.catalog_path).expanduser()

    def list_targets(self) -> list[Target]:
        path = self._resolve_path()
        if not path.exists():
            raise FileNotFoundError(f"Target catalog not found: {path}")
        targets: list[Target] = []
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f, restval="")
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise CatalogError(f"{path}: missing columns {', '.join(missing)}")
            for row in reader:
                try:
                    targets.append(_parse_row(row))
                except (KeyError, ValueError) as e:
                    raise CatalogError(f"{path}:{reader.line_num}: {e}") from e
        logging.debug("Loaded %d targets from %s", len(targets), path)
        return targets


@dataclass
class BuiltinCatalogProvider(CsvCatalogProvider):
    name: str = "builtin"

    def _resolve_path(self) -> Path:
        if self.catalog_path is not None:
            return Path(self.catalog_path)
        package_root = Path(__file__).resolve().parents[2]
        return package_root / "data" / "targets.csv"


def _parse_row(row: dict) -> Target:
    months = tuple(int(m) for m in _split_list(row.get("best_months")))
    bad = [m for m in months if not 1 <= m <= 12]
    if bad:
        raise ValueError(f"invalid month(s) {bad}")
    target_id = row["id"].strip()
    if not target_id:
        raise ValueError("missing target id")
    difficulty = _parse_optional(row.get("difficulty"))
    return Target(
        id=target_id,
        name=row["name"].strip(),
        alt_names=tuple(_split_list(row.get("alt_names"))),
        type=TargetType(row["type"].strip()),
        constellation=(row.get("constellation") or "").strip(),
        ra_hours=float(row["ra_hours"]),
        dec_deg=float(row["dec_deg"]),
        magnitude=_parse_float(row.get("magnitude")),
        width_arcmin=float(row["width_arcmin"]),
        height_arcmin=float(row["height_arcmin"]),
        best_months=months,
        focal_length=FocalLengthBand(row["focal_length"].strip()),
        description=(row.get("description") or "").strip(),
        difficulty=Difficulty(difficulty) if difficulty else None,
        tags=tuple(_split_list(row.get("tags"))),
    )


def _split_list(value: str | None) -> list[str]:
    return [t.strip() for t in (value or "").split(";") if t.strip()]


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return float(value)


def _parse_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
