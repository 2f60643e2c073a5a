"""Distance-bounded partitioning of a waypoint sequence into chunks."""
from __future__ import annotations

import copy
from math import isnan
from typing import Any, Callable, Iterable, Iterator, List, Optional

from gpx_splitter.geo.distance import distance_function

DistanceFn = Callable[[Any, Any], float]


class ChunkCursor:
    """
    Pull-based cursor over an upstream waypoint iterator.

    Each ``next_chunk()`` call consumes waypoints until the accumulated path
    length strictly exceeds ``meters_per_chunk`` (or the input runs out) and
    returns them as one chunk. The budget is checked before each further
    waypoint is pulled, so a chunk first exceeds it at its last point.
    Every chunk after the first starts with a copy of the previous chunk's
    last waypoint, so navigation between the two files is not lost.
    """

    def __init__(
        self,
        waypoints: Iterable[Any],
        meters_per_chunk: float,
        distance: Optional[DistanceFn] = None,
    ) -> None:
        if isnan(meters_per_chunk):
            raise ValueError("meters_per_chunk must not be NaN")
        self._waypoints = iter(waypoints)
        self.meters_per_chunk = meters_per_chunk
        self.distance = distance or distance_function()
        self.prev_last: Optional[Any] = None
        self.exhausted = False

    def next_chunk(self) -> Optional[List[Any]]:
        """Return the next chunk, or ``None`` once the input is exhausted."""
        if self.exhausted:
            return None

        first = next(self._waypoints, None)
        if first is None:
            self.exhausted = True
            return None

        try:
            if self.prev_last is not None:
                accumulated_m = self.distance(self.prev_last, first)
                points = [copy.deepcopy(self.prev_last), first]
            else:
                # first chunk of the run has nothing to carry over
                accumulated_m = 0.0
                points = [first]

            # a chunk is never a lone point while input remains
            while len(points) < 2 or accumulated_m <= self.meters_per_chunk:
                waypoint = next(self._waypoints, None)
                if waypoint is None:
                    break
                accumulated_m += self.distance(points[-1], waypoint)
                points.append(waypoint)
        except Exception:
            self.exhausted = True
            raise

        self.prev_last = points[-1]
        return points

    def __iter__(self) -> Iterator[List[Any]]:
        return self

    def __next__(self) -> List[Any]:
        chunk = self.next_chunk()
        if chunk is None:
            raise StopIteration
        return chunk


def iter_chunks(
    waypoints: Iterable[Any],
    meters_per_chunk: float,
    distance: Optional[DistanceFn] = None,
) -> Iterator[List[Any]]:
    """Lazily yield distance-bounded chunks; distance errors propagate to the caller."""
    cursor = ChunkCursor(waypoints, meters_per_chunk, distance=distance)
    while True:
        chunk = cursor.next_chunk()
        if chunk is None:
            return
        yield chunk


def chunk_length_m(points: List[Any], distance: Optional[DistanceFn] = None) -> float:
    """Sum of consecutive waypoint-to-waypoint distances."""
    distance = distance or distance_function()
    total = 0.0
    for i in range(1, len(points)):
        total += distance(points[i - 1], points[i])
    return total
