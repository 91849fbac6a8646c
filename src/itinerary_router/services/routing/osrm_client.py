"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get the all-pairs duration/distance matrix for ``(lat, lon)`` coordinates.

        Unroutable pairs come back from OSRM as ``null`` and are left as ``None``.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM table.")

        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {"annotations": "duration,distance"}
        url = f"{self.base_url}/table/v1/{self.profile}/{coordinate_str}"

        client = self._get_client()
        try:
            response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        finally:
            client.close()

        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "Unknown OSRM table error") if isinstance(data, dict) else "invalid payload"
            raise ValueError(f"OSRM table request failed: {message}")
        durations = data.get("durations")
        distances = data.get("distances")
        if durations is None or distances is None:
            raise ValueError("OSRM response missing durations/distances.")

        count = len(coordinates)
        for name, matrix in (("durations", durations), ("distances", distances)):
            if len(matrix) != count or any(len(row) != count for row in matrix):
                raise ValueError(f"OSRM {name} matrix is not {count}x{count}.")

        return {"durations": durations, "distances": distances}


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by making a simple table request.

    Public OSRM endpoints may not have a /health endpoint, so we test
    connectivity by making a minimal table request with two coordinates.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, timeout=5.0)
        client.table([(52.517037, 13.388860), (52.496891, 13.385983)])
        return True
    except (httpx.HTTPError, ValueError):
        return False
