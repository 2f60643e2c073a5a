"""GPX read/write through gpxpy, plus track 0 / segment 0 access."""
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import urlparse

import gpxpy
import gpxpy.gpx
import requests

from gpx_splitter.errors import RouteIOError, StructureError
from gpx_splitter.providers.http import HTTPClient

log = logging.getLogger(__name__)

Source = Union[str, Path]


def is_url(source: Source) -> bool:
    return isinstance(source, str) and urlparse(source).scheme in ("http", "https")


def source_basename(source: Source) -> str:
    """File stem of a path or URL: ``/rides/tour_divide.gpx`` -> ``tour_divide``."""
    if is_url(source):
        stem = PurePosixPath(urlparse(str(source)).path).stem
        return stem or "route"
    return Path(source).stem


def chunk_filename(basename: str, index: int) -> str:
    """Numbered output name, 1-based and zero padded to two digits."""
    return f"{basename}_{index:02d}.gpx"


def _read_text(source: Source, http: Optional[HTTPClient]) -> str:
    if is_url(source):
        http = http or HTTPClient.from_settings()
        try:
            return http.get_text(str(source))
        except (requests.RequestException, RuntimeError) as exc:
            raise RouteIOError(f"failed to fetch {source}: {exc}") from exc
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RouteIOError(f"failed to read {path}: {exc}") from exc


def load_gpx(source: Source, http: Optional[HTTPClient] = None) -> gpxpy.gpx.GPX:
    """Read and parse a GPX file from a local path or an http(s) URL."""
    text = _read_text(source, http)
    try:
        gpx = gpxpy.parse(text)
    except gpxpy.gpx.GPXException as exc:
        raise RouteIOError(f"failed to parse {source}: {exc}") from exc
    log.debug("Parsed %s: %d track(s)", source, len(gpx.tracks))
    return gpx


def get_track(gpx: gpxpy.gpx.GPX) -> gpxpy.gpx.GPXTrack:
    if not gpx.tracks:
        raise StructureError("gpx file missing track 0")
    return gpx.tracks[0]


def get_segment(gpx: gpxpy.gpx.GPX) -> gpxpy.gpx.GPXTrackSegment:
    track = get_track(gpx)
    if not track.segments:
        raise StructureError("gpx track 0 missing segment 0")
    return track.segments[0]


def write_new_gpx(gpx: gpxpy.gpx.GPX, path: Path) -> Path:
    """Serialize ``gpx`` to ``path``; refuses to overwrite an existing file."""
    xml = gpx.to_xml()
    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(xml)
    except FileExistsError as exc:
        raise RouteIOError(f"failed to create file {path}: file exists") from exc
    except OSError as exc:
        raise RouteIOError(f"failed to write file {path}: {exc}") from exc
    return path
