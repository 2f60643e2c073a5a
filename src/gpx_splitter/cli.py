"""
Split a long GPX file into separate files that won't overload the
directions calculations on a Wahoo or other navigation device.

Assumes a single track with a single segment. Each output file runs a bit
past ``KM_PER_FILE`` (it is cut after the first point that exceeds it) and
every file after the first repeats the final point of the one before, so
no directions are lost between files.

Usage:
    gpx-splitter tour_divide.gpx 150
    gpx-splitter tour_divide.gpx 150 --output-dir out/ --report out/report.json
    gpx-splitter https://example.com/route.gpx 100 --dry-run
"""
from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gpx_splitter.config import settings
from gpx_splitter.core.engine import describe_route, split_gpx
from gpx_splitter.core.models import RouteInfo, SplitReport
from gpx_splitter.errors import SplitError

log = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _finite_km(value: str) -> float:
    km = float(value)
    if not math.isfinite(km):
        raise argparse.ArgumentTypeError(f"km_per_file must be a finite number, got {value!r}")
    return km


def _save_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2), encoding="utf-8")


def _fmt_latlon(pt) -> str:
    if pt is None:
        return ""
    return f"{pt[0]:.5f}, {pt[1]:.5f}"


def _print_report(console: Console, report: SplitReport) -> None:
    title = f"{report.source} — {report.meters_per_file / 1000:g} km per file"
    if report.dry_run:
        title += " (dry run)"
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("File")
    table.add_column("Points", justify="right")
    table.add_column("km", justify="right")
    table.add_column("Start")
    table.add_column("End")

    for c in report.chunks:
        table.add_row(
            str(c.index),
            c.path or c.filename,
            str(c.point_count),
            f"{c.distance_km:.2f}",
            _fmt_latlon(c.start),
            _fmt_latlon(c.end),
        )

    console.print(table)
    console.print(
        f"{len(report.chunks)} file(s), {report.total_points} points, "
        f"{report.total_distance_m / 1000:.2f} km ({report.distance_method})"
    )


def _print_info(console: Console, info: RouteInfo) -> None:
    table = Table(title=info.source, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Track name", info.track_name or "(unnamed)")
    table.add_row("Tracks", str(info.track_count))
    table.add_row("Segments in track 0", str(info.segment_count))
    table.add_row("Points", str(info.point_count))
    table.add_row("Distance", f"{info.distance_m / 1000:.2f} km")
    if info.bounds:
        min_lon, min_lat, max_lon, max_lat = info.bounds
        table.add_row("Bounds", f"({min_lat:.6f}, {min_lon:.6f}) → ({max_lat:.6f}, {max_lon:.6f})")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gpx-splitter",
        description="Split a single-track GPX file into numbered files of roughly KM_PER_FILE each.",
    )
    ap.add_argument("gpx", help="GPX file (or http(s) URL) to split")
    ap.add_argument(
        "km_per_file",
        type=_finite_km,
        help="Kilometers per file; each file ends at the first point past this distance",
    )
    ap.add_argument("--output-dir", type=Path, default=None, help="Where to write files (default: next to the input)")
    ap.add_argument(
        "--method",
        choices=["haversine", "geodesic"],
        default=None,
        help=f"Distance formula (default: {settings.distance_method})",
    )
    ap.add_argument("--dry-run", action="store_true", help="Plan the split without writing files")
    ap.add_argument("--info", action="store_true", help="Show route info and exit")
    ap.add_argument("--report", type=Path, default=None, help="Save the split report as JSON")
    ap.add_argument("--map", type=Path, default=None, help="Write an HTML preview map of the chunks")
    ap.add_argument("--debug", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    console = Console()
    err_console = Console(stderr=True)

    try:
        if args.info:
            _print_info(console, describe_route(args.gpx, method=args.method))
            return 0

        report = split_gpx(
            args.gpx,
            args.km_per_file,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
            method=args.method,
        )
        _print_report(console, report)

        if args.report:
            _save_json(args.report, report.model_dump())
            console.print(f"Saved: {args.report.resolve()}")

        if args.map and report.chunks:
            from gpx_splitter.tools.make_map import write_map

            write_map(args.gpx, args.km_per_file, args.map, method=args.method)
            console.print(f"Saved: {args.map.resolve()}")
    except SplitError as exc:
        log.debug("split failed", exc_info=True)
        err_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
