from __future__ import annotations

from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field
from shapely.geometry import MultiPoint

from gpx_splitter.contracts.chunk_contract import ChunkPlan


def point_bounds(points: List[Any]) -> Optional[Tuple[float, float, float, float]]:
    """(min_lon, min_lat, max_lon, max_lat) of the points, lon as x."""
    if not points:
        return None
    return tuple(MultiPoint([(p.longitude, p.latitude) for p in points]).bounds)


class ChunkSummary(BaseModel):
    index: int
    filename: str
    path: Optional[str] = None  # None on dry runs
    point_count: int
    distance_m: float
    bounds: Optional[Tuple[float, float, float, float]] = None
    start: Optional[Tuple[float, float]] = None  # (lat, lon)
    end: Optional[Tuple[float, float]] = None

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0

    @classmethod
    def from_plan(cls, plan: ChunkPlan) -> "ChunkSummary":
        first = plan.points[0] if plan.points else None
        last = plan.points[-1] if plan.points else None
        return cls(
            index=plan.index,
            filename=plan.filename,
            path=str(plan.path) if plan.path is not None else None,
            point_count=len(plan.points),
            distance_m=plan.distance_m,
            bounds=point_bounds(plan.points),
            start=(first.latitude, first.longitude) if first is not None else None,
            end=(last.latitude, last.longitude) if last is not None else None,
        )


class RouteInfo(BaseModel):
    source: str
    track_count: int
    segment_count: int  # segments in track 0
    point_count: int  # points in track 0 / segment 0
    distance_m: float
    track_name: Optional[str] = None
    bounds: Optional[Tuple[float, float, float, float]] = None


class SplitReport(BaseModel):
    source: str
    meters_per_file: float
    distance_method: Literal["haversine", "geodesic"]
    total_points: int
    total_distance_m: float = 0.0
    dry_run: bool = False

    # Everything beyond track 0 / segment 0 is left out of the output files
    ignored_tracks: int = 0
    ignored_segments: int = 0

    chunks: List[ChunkSummary] = Field(default_factory=list)

    @property
    def written_paths(self) -> List[str]:
        return [c.path for c in self.chunks if c.path]
