"""Travel matrix providers.

A provider turns a list of locations into pairwise distances (metres) and
durations (seconds). API-backed providers never fail the optimization: a
transport problem yields the haversine estimate for the whole matrix, and a
single unresolved cell is estimated on its own while the rest of the API
answer is kept.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Protocol, Sequence

import httpx

from ...config import settings
from ..geospatial import haversine_km, travel_seconds
from .google_client import GoogleDistanceMatrixClient
from .models import Location, TravelMatrix
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


class MatrixClient(Protocol):
    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict: ...


class MatrixProvider(ABC):
    """Contract for travel matrix implementations."""

    source: str

    @abstractmethod
    def matrix(self, locations: Sequence[Location]) -> TravelMatrix:
        raise NotImplementedError


def estimate_cell(origin: Location, destination: Location, speed_kmh: float) -> tuple[float, float]:
    """Return ``(distance_m, duration_s)`` for one pair using the haversine estimate."""
    distance_km = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
    return distance_km * 1000.0, travel_seconds(distance_km, speed_kmh)


class HaversineMatrixProvider(MatrixProvider):
    """Great-circle distances at a constant average speed. Pure and offline."""

    source = "haversine"

    def __init__(self, speed_kmh: float | None = None) -> None:
        self.speed_kmh = speed_kmh if speed_kmh is not None else settings.fallback_speed_kmh

    def matrix(self, locations: Sequence[Location]) -> TravelMatrix:
        n = len(locations)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                distance_m, duration_s = estimate_cell(locations[i], locations[j], self.speed_kmh)
                distances[i][j] = distances[j][i] = distance_m
                durations[i][j] = durations[j][i] = duration_s
        return TravelMatrix(distances=distances, durations=durations, source=self.source)


class ApiMatrixProvider(MatrixProvider):
    """Matrix from a routing API client with haversine fallback."""

    def __init__(self, client: MatrixClient, source: str, fallback: HaversineMatrixProvider | None = None) -> None:
        self.client = client
        self.source = source
        self.fallback = fallback or HaversineMatrixProvider()

    def matrix(self, locations: Sequence[Location]) -> TravelMatrix:
        coordinates = [(location.lat, location.lng) for location in locations]
        try:
            table = self.client.table(coordinates)
            return self._merge(table, locations)
        except (httpx.HTTPError, ValueError, TypeError, KeyError, IndexError) as exc:
            logger.warning(f"{self.source} matrix request failed: {_describe_failure(exc)}. Using haversine fallback.")
            return self.fallback.matrix(locations)

    def _merge(self, table: dict, locations: Sequence[Location]) -> TravelMatrix:
        n = len(locations)
        raw_durations = table["durations"]
        raw_distances = table["distances"]
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0.0] * n for _ in range(n)]
        estimated = 0

        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                distance = _as_cost(raw_distances[i][j])
                duration = _as_cost(raw_durations[i][j])
                if distance is None or duration is None:
                    distance, duration = estimate_cell(locations[i], locations[j], self.fallback.speed_kmh)
                    estimated += 1
                distances[i][j] = distance
                durations[i][j] = duration

        if estimated:
            logger.info(f"Estimated {estimated}/{n * (n - 1)} unresolved {self.source} cells with haversine")

        return TravelMatrix(distances=distances, durations=durations, source=self.source, estimated_cells=estimated)


def _as_cost(value: object) -> float | None:
    """Finite, non-negative number from an API cell, or None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        cost = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(cost) or cost < 0:
        return None
    return cost


def _describe_failure(exc: Exception) -> str:
    # httpx messages embed the request URL, which carries the API key.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.HTTPError):
        return type(exc).__name__
    return f"{type(exc).__name__}: {exc}"


def get_provider(api_key: str | None = None) -> MatrixProvider:
    """Pick the configured routing backend, or the haversine estimate when none is usable."""
    match settings.routing_backend:
        case "google":
            key = api_key or settings.google_maps_api_key
            if key:
                return ApiMatrixProvider(GoogleDistanceMatrixClient(api_key=key), source="google")
        case "osrm":
            if settings.osrm_base_url:
                return ApiMatrixProvider(OSRMClient(), source="osrm")
        case _:
            raise ValueError(f"Unknown routing backend '{settings.routing_backend}'.")
    return HaversineMatrixProvider()


def compute_matrix(locations: Sequence[Location], api_key: str | None = None) -> TravelMatrix:
    provider = get_provider(api_key)
    logger.debug(f"Computing {len(locations)}x{len(locations)} travel matrix via {provider.source}")
    return provider.matrix(locations)
