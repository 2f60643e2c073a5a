"""Error types raised while splitting a route.

Everything the splitter raises on purpose derives from ``SplitError`` so the
CLI can report it and exit non-zero.
"""
from __future__ import annotations


class SplitError(Exception):
    """Base class for failures that abort a split run."""


class StructureError(SplitError):
    """The GPX document is missing track 0 or segment 0."""


class GeometryError(SplitError, ValueError):
    """A distance could not be computed from a pair of coordinates."""


class RouteIOError(SplitError, OSError):
    """Reading, fetching, parsing or writing a GPX file failed."""
