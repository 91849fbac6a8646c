"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Activity
from ...schemas.routing import (
    OptimizationRequest,
    OptimizationResponse,
    TravelTimeRequest,
    TravelTimeResponse,
)
from ..geospatial import haversine_km, round_half_up, travel_seconds
from ..outputs.routing_formatter import activities_from_models, result_to_response
from .composer import compose_result, identity_result
from .geo_filter import extract_locations
from .matrix import compute_matrix
from .models import OptimizationResult
from .solver import build_tour, tour_duration, two_opt

logger = logging.getLogger(__name__)


def optimize_route(activities: Sequence[Activity], api_key: str | None = None) -> OptimizationResult:
    """Reorder one day's activities to minimise travel time between them.

    Activities without usable coordinates keep their relative order and are
    appended after the routed ones.
    """
    locations, unrouted = extract_locations(activities)
    if len(locations) < 2:
        logger.info(f"Skipping route optimization: {len(locations)} of {len(activities)} activities have coordinates")
        return identity_result(activities, routed_count=len(locations))

    matrix = compute_matrix(locations, api_key=api_key)

    tour = build_tour(matrix.durations)
    original_tour = list(range(len(locations)))
    if tour_duration(tour, matrix.durations) > tour_duration(original_tour, matrix.durations):
        # Greedy start landed above the input order; improve the input order instead.
        logger.debug("Nearest-neighbour tour is slower than the input order, refining the input order")
        tour = two_opt(original_tour, matrix.durations)

    result = compose_result(activities, locations, unrouted, matrix, tour)
    logger.info(
        f"Optimized {len(locations)} stops via {matrix.source}: "
        f"{result.original_total_time} -> {result.optimized_total_time} min "
        f"({len(unrouted)} without coordinates)"
    )
    return result


def estimate_total_travel_time(activities: Sequence[Activity]) -> int:
    """Minutes of travel along the given order using straight-line estimates."""
    locations, _ = extract_locations(activities)
    if len(locations) < 2:
        return 0

    total_seconds = 0.0
    for origin, destination in zip(locations, locations[1:]):
        distance_km = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
        total_seconds += travel_seconds(distance_km, settings.fallback_speed_kmh)
    return round_half_up(total_seconds / 60)


def optimize_day(payload: OptimizationRequest) -> OptimizationResponse:
    activities = activities_from_models(payload.activities)
    result = optimize_route(activities, api_key=payload.api_key)
    return result_to_response(result)


def travel_time(payload: TravelTimeRequest) -> TravelTimeResponse:
    activities = activities_from_models(payload.activities)
    return TravelTimeResponse(total_minutes=estimate_total_travel_time(activities))
