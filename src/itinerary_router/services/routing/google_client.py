"""HTTP client for the Google Distance Matrix API."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)

# Distance Matrix rejects requests above this many origin x destination elements.
MAX_ELEMENTS_PER_REQUEST = 100


class DistanceMatrixError(ValueError):
    """Raised when the Distance Matrix API answers with an unusable payload."""


class GoogleDistanceMatrixClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        mode: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Distance Matrix API key is not configured.")
        self.base_url = base_url or settings.google_distance_matrix_url
        self.mode = mode or settings.google_travel_mode
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Fetch the all-pairs matrix for ``(lat, lng)`` coordinates.

        Cells the API could not resolve are returned as ``None``. Transport
        problems and malformed payloads raise; there is no retry. Days with
        more than 10 stops exceed ``MAX_ELEMENTS_PER_REQUEST`` and raise
        before any request is sent.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for a distance matrix.")
        if len(coordinates) ** 2 > MAX_ELEMENTS_PER_REQUEST:
            raise DistanceMatrixError(
                f"{len(coordinates)} stops need {len(coordinates) ** 2} matrix elements; "
                f"the API accepts at most {MAX_ELEMENTS_PER_REQUEST} per request."
            )

        waypoints = "|".join(f"{lat},{lng}" for lat, lng in coordinates)
        params = {
            "origins": waypoints,
            "destinations": waypoints,
            "mode": self.mode,
            "key": self.api_key,
        }

        client = self._get_client()
        try:
            response = client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        finally:
            client.close()

        return _parse_matrix(data, len(coordinates))


def _parse_matrix(data: dict, count: int) -> dict:
    if not isinstance(data, dict):
        raise DistanceMatrixError("Distance Matrix response is not a JSON object.")
    status = data.get("status")
    if status != "OK":
        message = data.get("error_message") or status or "missing status"
        raise DistanceMatrixError(f"Distance Matrix API error: {message}")

    rows = data.get("rows")
    if not isinstance(rows, list) or len(rows) != count:
        raise DistanceMatrixError(f"Distance Matrix returned {len(rows or [])} rows for {count} origins.")

    durations: list[list[float | None]] = [[None] * count for _ in range(count)]
    distances: list[list[float | None]] = [[None] * count for _ in range(count)]
    failed_cells = 0

    for i, row in enumerate(rows):
        elements = row.get("elements") if isinstance(row, dict) else None
        if not isinstance(elements, list) or len(elements) != count:
            raise DistanceMatrixError(f"Distance Matrix row {i} does not have {count} elements.")
        for j, element in enumerate(elements):
            if not isinstance(element, dict) or element.get("status") != "OK":
                failed_cells += 1
                continue
            try:
                distances[i][j] = float(element["distance"]["value"])
                durations[i][j] = float(element["duration"]["value"])
            except (KeyError, TypeError, ValueError):
                failed_cells += 1
                distances[i][j] = None
                durations[i][j] = None

    if failed_cells:
        logger.debug(f"Distance Matrix left {failed_cells}/{count * count} cells unresolved")

    return {"durations": durations, "distances": distances}


def check_health(api_key: str | None = None) -> bool:
    """Probe the Distance Matrix API with a two-point request."""
    key = api_key or settings.google_maps_api_key
    if not key:
        return False
    try:
        client = GoogleDistanceMatrixClient(api_key=key, timeout=5.0)
        client.table([(52.517037, 13.388860), (52.496891, 13.385983)])
        return True
    except (httpx.HTTPError, ValueError):
        return False
