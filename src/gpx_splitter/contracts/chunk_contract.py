# path: gpx-splitter/src/gpx_splitter/contracts/chunk_contract.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional
from pathlib import Path


@dataclass(frozen=True)
class ChunkPlan:
    index: int  # 1-based, matches the NN in the filename
    filename: str
    points: List[Any]  # gpxpy track points, boundary point already duplicated
    distance_m: float
    path: Optional[Path] = None  # set once written
