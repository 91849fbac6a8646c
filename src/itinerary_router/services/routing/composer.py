"""Assembly of the optimizer's result from a tour."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Activity
from ..geospatial import round_half_up
from .models import Location, OptimizationResult, Segment, TravelMatrix
from .solver import tour_duration


def identity_result(activities: Sequence[Activity], routed_count: int = 0) -> OptimizationResult:
    """Result for a day that cannot be reordered."""
    return OptimizationResult(
        original_order=list(activities),
        optimized_order=list(activities),
        original_total_time=0,
        optimized_total_time=0,
        time_saved=0,
        segments=[],
        matrix_source="none",
        routed_count=routed_count,
    )


def build_segments(locations: Sequence[Location], matrix: TravelMatrix, tour: Sequence[int]) -> list[Segment]:
    segments: list[Segment] = []
    for from_idx, to_idx in zip(tour, tour[1:]):
        segments.append(
            Segment(
                from_title=locations[from_idx].activity.title,
                to_title=locations[to_idx].activity.title,
                duration_minutes=round_half_up(matrix.durations[from_idx][to_idx] / 60),
                distance_km=round_half_up(matrix.distances[from_idx][to_idx] / 100) / 10,
            )
        )
    return segments


def compose_result(
    activities: Sequence[Activity],
    locations: Sequence[Location],
    unrouted: Sequence[Activity],
    matrix: TravelMatrix,
    tour: Sequence[int],
) -> OptimizationResult:
    original_tour = list(range(len(locations)))
    original_total = round_half_up(tour_duration(original_tour, matrix.durations) / 60)
    optimized_total = round_half_up(tour_duration(tour, matrix.durations) / 60)

    optimized_order = [locations[index].activity for index in tour]
    optimized_order.extend(unrouted)

    return OptimizationResult(
        original_order=list(activities),
        optimized_order=optimized_order,
        original_total_time=original_total,
        optimized_total_time=optimized_total,
        time_saved=original_total - optimized_total,
        segments=build_segments(locations, matrix, tour),
        matrix_source=matrix.source,
        routed_count=len(locations),
    )
