"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...models.domain import Activity


@dataclass(slots=True)
class Location:
    lat: float
    lng: float
    source_index: int
    activity: Activity


@dataclass(slots=True)
class TravelMatrix:
    """Pairwise distances (metres) and durations (seconds) between locations.

    Indices refer to positions in the filtered location list, not to the
    caller's activity list.
    """

    distances: List[List[float]]
    durations: List[List[float]]
    source: str
    estimated_cells: int = 0


@dataclass(slots=True)
class Segment:
    from_title: str
    to_title: str
    duration_minutes: int
    distance_km: float


@dataclass(slots=True)
class OptimizationResult:
    original_order: List[Activity]
    optimized_order: List[Activity]
    original_total_time: int
    optimized_total_time: int
    time_saved: int
    segments: List[Segment] = field(default_factory=list)
    matrix_source: str = "none"
    routed_count: int = 0
