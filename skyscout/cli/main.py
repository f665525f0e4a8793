import argparse
import sys

from skyscout import __version__
from skyscout.cli.commands import run_gear, run_moon, run_recommend, run_targets
from skyscout.planner.types import FocalLengthBand, TargetType


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="Enable logging at this level",
    )
    parser.add_argument("--json", action="store_true", help="Output result as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skyscout")
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")
    type_choices = [t.value for t in TargetType]

    rec = subparsers.add_parser("recommend", help="Rank targets for a site and time")
    _add_common(rec)
    rec.add_argument("--lat", type=float, help="Observer latitude (deg, north positive)")
    rec.add_argument("--lon", type=float, help="Observer longitude (deg, east positive)")
    rec.add_argument("--at", help="ISO-8601 instant (default: now, UTC if no offset)")
    rec.add_argument("--type", dest="types", action="append", choices=type_choices, help="Only this target type (repeatable)")
    rec.add_argument("--focal-length", choices=[b.value for b in FocalLengthBand], help="Only targets suited to this focal length band")
    rec.add_argument("--min-score", type=int, help="Drop targets scoring below this")
    rec.add_argument("--min-altitude", type=float, help="Drop targets currently below this altitude (deg)")
    rec.add_argument("--setup", help="Only targets that suit this setup id")
    rec.add_argument("--limit", type=int, help="Maximum number of targets")
    rec.add_argument("--verbose", action="store_true", help="Show moon separation")

    moon = subparsers.add_parser("moon", help="Moon phase and position")
    _add_common(moon)
    moon.add_argument("--at", help="ISO-8601 instant (default: now)")

    gear = subparsers.add_parser("gear", help="Rank imaging setups for one target")
    _add_common(gear)
    gear.add_argument("target_id", help="Catalog id, e.g. M31")

    targets = subparsers.add_parser("targets", help="List catalog targets")
    _add_common(targets)
    targets.add_argument("--type", dest="types", action="append", choices=type_choices)
    targets.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12", help="Only targets in season this month")
    targets.add_argument("--search", help="Match id, name or alternate names")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"skyscout {__version__}")
        return 0

    if args.command == "recommend":
        return run_recommend(args)

    if args.command == "moon":
        return run_moon(args)

    if args.command == "gear":
        return run_gear(args)

    if args.command == "targets":
        return run_targets(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
