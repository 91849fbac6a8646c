"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def travel_seconds(distance_km: float, speed_kmh: float) -> float:
    """Convert a distance into travel time at a constant average speed."""

    return distance_km / speed_kmh * 3600.0


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Return True if the pair is finite and within latitude/longitude ranges."""

    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, like ``Math.round``."""

    return math.floor(value + 0.5)
