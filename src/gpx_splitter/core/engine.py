from __future__ import annotations

import logging
from dataclasses import replace
from math import isfinite
from pathlib import Path
from typing import Iterator, Optional, Tuple

import gpxpy.gpx

from gpx_splitter.contracts.chunk_contract import ChunkPlan
from gpx_splitter.core.models import ChunkSummary, RouteInfo, SplitReport, point_bounds
from gpx_splitter.core.partition import ChunkCursor, chunk_length_m
from gpx_splitter.errors import GeometryError
from gpx_splitter.geo.distance import distance_function
from gpx_splitter.gpx.document import (
    Source,
    chunk_filename,
    get_segment,
    get_track,
    is_url,
    load_gpx,
    source_basename,
    write_new_gpx,
)
from gpx_splitter.providers.http import HTTPClient

log = logging.getLogger(__name__)


def _resolve_method(method: Optional[str]) -> str:
    if method is not None:
        return method
    from gpx_splitter.config import settings

    return settings.distance_method


def _output_dir(source: Source, output_dir: Optional[Path]) -> Path:
    if output_dir is not None:
        return Path(output_dir)
    if is_url(source):
        return Path.cwd()
    return Path(source).parent


def _drop_extra_structure(gpx: gpxpy.gpx.GPX) -> Tuple[int, int]:
    """Remove tracks after track 0 and segments after segment 0; return the counts."""
    track = get_track(gpx)
    ignored_tracks = len(gpx.tracks) - 1
    ignored_segments = len(track.segments) - 1
    if ignored_tracks:
        del gpx.tracks[1:]
    if ignored_segments:
        del track.segments[1:]
    return ignored_tracks, ignored_segments


def plan_chunks(
    points: list,
    meters_per_file: float,
    basename: str,
    method: Optional[str] = None,
) -> Iterator[ChunkPlan]:
    """
    Lazily partition ``points`` and number the chunks.

    A failed distance computation is re-raised as ``GeometryError`` naming
    the chunk that was being built.
    """
    distance = distance_function(_resolve_method(method))
    cursor = ChunkCursor(points, meters_per_file, distance=distance)
    index = 0
    while True:
        index += 1
        try:
            chunk = cursor.next_chunk()
        except GeometryError as exc:
            raise GeometryError(f"chunk {index} of {basename}: {exc}") from exc
        if chunk is None:
            return
        yield ChunkPlan(
            index=index,
            filename=chunk_filename(basename, index),
            points=chunk,
            distance_m=chunk_length_m(chunk, distance=distance),
        )


def split_gpx(
    source: Source,
    km_per_file: float,
    output_dir: Optional[Path] = None,
    dry_run: bool = False,
    method: Optional[str] = None,
    http: Optional[HTTPClient] = None,
) -> SplitReport:
    """
    Split the single track/segment of ``source`` into numbered GPX files.

    Each file runs until the accumulated distance passes ``km_per_file`` and
    starts with the last point of the file before it. Files are written next
    to the input (or in ``output_dir``) as ``<basename>_NN.gpx`` and are
    never overwritten. Errors abort the run; files already written stay.
    """
    if not isfinite(km_per_file):
        raise ValueError(f"km_per_file must be finite, got {km_per_file!r}")
    method = _resolve_method(method)
    gpx = load_gpx(source, http=http)

    # structure problems surface before anything is partitioned or written
    track = get_track(gpx)
    segment = get_segment(gpx)
    ignored_tracks, ignored_segments = _drop_extra_structure(gpx)
    if ignored_tracks or ignored_segments:
        log.warning(
            "%s: using track 0 / segment 0 only, leaving out %d track(s) and %d segment(s)",
            source, ignored_tracks, ignored_segments,
        )

    points = segment.points
    segment.points = []

    meters_per_file = km_per_file * 1000.0
    basename = source_basename(source)
    out_dir = _output_dir(source, output_dir)

    log.info(
        "Splitting %s: %d points, %.1f km per file (%s)",
        source, len(points), km_per_file, method,
    )

    report = SplitReport(
        source=str(source),
        meters_per_file=meters_per_file,
        distance_method=method,
        total_points=len(points),
        dry_run=dry_run,
        ignored_tracks=ignored_tracks,
        ignored_segments=ignored_segments,
    )

    for plan in plan_chunks(points, meters_per_file, basename, method=method):
        if not dry_run:
            # update the document with this chunk, then write it to a numbered file
            track.name = plan.filename
            segment.points = plan.points
            path = write_new_gpx(gpx, out_dir / plan.filename)
            plan = replace(plan, path=path)
            log.info("Wrote %s (%d points, %.2f km)", path, len(plan.points), plan.distance_m / 1000)
        report.chunks.append(ChunkSummary.from_plan(plan))
        report.total_distance_m += plan.distance_m

    if not report.chunks:
        log.info("%s: segment 0 has no points, nothing written", source)

    return report


def describe_route(
    source: Source,
    method: Optional[str] = None,
    http: Optional[HTTPClient] = None,
) -> RouteInfo:
    """Summarise track 0 / segment 0 of ``source`` without splitting it."""
    gpx = load_gpx(source, http=http)
    track = get_track(gpx)
    segment = get_segment(gpx)
    points = segment.points
    return RouteInfo(
        source=str(source),
        track_count=len(gpx.tracks),
        segment_count=len(track.segments),
        point_count=len(points),
        distance_m=chunk_length_m(points, distance=distance_function(_resolve_method(method))),
        track_name=track.name,
        bounds=point_bounds(points),
    )
