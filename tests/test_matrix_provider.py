import logging

import httpx
import pytest

from itinerary_router.config import settings
from itinerary_router.models.domain import Activity
from itinerary_router.services.routing import matrix as matrix_module
from itinerary_router.services.routing.google_client import GoogleDistanceMatrixClient
from itinerary_router.services.routing.matrix import (
    ApiMatrixProvider,
    HaversineMatrixProvider,
    compute_matrix,
    estimate_cell,
    get_provider,
)
from itinerary_router.services.routing.models import Location


def _location(index: int, lat: float, lng: float) -> Location:
    return Location(lat=lat, lng=lng, source_index=index, activity=Activity(title=f"Stop {index}", latitude=lat, longitude=lng))


@pytest.fixture
def locations() -> list[Location]:
    return [
        _location(0, 40.7580, -73.9855),
        _location(1, 40.7484, -73.9857),
        _location(2, 40.7061, -73.9969),
    ]


class FailingClient:
    def table(self, coordinates):
        raise httpx.ConnectError("connection refused")


class StaticClient:
    def __init__(self, durations, distances):
        self.durations = durations
        self.distances = distances
        self.calls = []

    def table(self, coordinates):
        self.calls.append(list(coordinates))
        return {"durations": self.durations, "distances": self.distances}


def test_haversine_matrix_is_symmetric_with_zero_diagonal(locations):
    result = HaversineMatrixProvider().matrix(locations)

    assert result.source == "haversine"
    for i in range(len(locations)):
        assert result.distances[i][i] == 0
        assert result.durations[i][i] == 0
        for j in range(len(locations)):
            assert result.distances[i][j] == result.distances[j][i]
            assert result.durations[i][j] == result.durations[j][i]


def test_haversine_durations_use_thirty_kmh(locations):
    result = HaversineMatrixProvider().matrix(locations)
    distance_km = result.distances[0][1] / 1000.0
    assert result.durations[0][1] == pytest.approx(distance_km / 30.0 * 3600.0)


def test_api_failure_falls_back_to_haversine(locations):
    provider = ApiMatrixProvider(FailingClient(), source="google")

    result = provider.matrix(locations)
    expected = HaversineMatrixProvider().matrix(locations)

    assert result.source == "haversine"
    assert result.durations == expected.durations
    assert result.distances == expected.distances


def test_unresolved_cells_are_estimated_individually(locations):
    durations = [[0, 600, 1200], [610, 0, None], [1190, 700, 0]]
    distances = [[0, 1500, 6000], [1400, 0, None], [5900, 4500, 0]]
    client = StaticClient(durations, distances)

    result = ApiMatrixProvider(client, source="google").matrix(locations)
    distance_m, duration_s = estimate_cell(locations[1], locations[2], settings.fallback_speed_kmh)

    assert result.source == "google"
    assert result.estimated_cells == 1
    assert result.distances[1][2] == pytest.approx(distance_m)
    assert result.durations[1][2] == pytest.approx(duration_s)
    assert result.durations[1][2] > 0
    # Everything the API resolved is kept as-is, including asymmetry.
    assert result.durations[0][1] == 600
    assert result.durations[1][0] == 610
    assert result.distances[2][1] == 4500
    assert client.calls == [[(loc.lat, loc.lng) for loc in locations]]


def test_api_diagonal_is_forced_to_zero(locations):
    durations = [[5, 600, 1200], [610, 5, 300], [1190, 700, 5]]
    client = StaticClient(durations, durations)
    result = ApiMatrixProvider(client, source="osrm").matrix(locations)
    assert [result.durations[i][i] for i in range(3)] == [0, 0, 0]


def test_non_numeric_cells_are_estimated_individually(locations):
    durations = [[0, "fast", 1200], [610, 0, 300], [1190, 700, 0]]
    distances = [[0, 1500, 6000], [1400, 0, -1], [5900, 4500, 0]]
    client = StaticClient(durations, distances)

    result = ApiMatrixProvider(client, source="google").matrix(locations)

    assert result.source == "google"
    assert result.estimated_cells == 2
    for i, j in [(0, 1), (1, 2)]:
        distance_m, duration_s = estimate_cell(locations[i], locations[j], settings.fallback_speed_kmh)
        assert result.distances[i][j] == pytest.approx(distance_m)
        assert result.durations[i][j] == pytest.approx(duration_s)
    assert all(isinstance(cell, float) for row in result.durations for cell in row)
    assert result.durations[2][0] == 1190


def test_table_with_wrong_shape_falls_back_to_haversine(locations):
    durations = [[0, 600], [610, 0], [1190, 700]]
    client = StaticClient(durations, durations)

    result = ApiMatrixProvider(client, source="osrm").matrix(locations)

    assert result.source == "haversine"
    assert result.durations == HaversineMatrixProvider().matrix(locations).durations


def test_fallback_warning_does_not_log_api_key(locations, caplog):
    client = GoogleDistanceMatrixClient(
        api_key="sekret-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(403)),
    )

    with caplog.at_level(logging.WARNING):
        result = ApiMatrixProvider(client, source="google").matrix(locations)

    assert result.source == "haversine"
    assert "HTTP 403" in caplog.text
    assert "sekret-key" not in caplog.text


def test_day_above_element_limit_uses_haversine_without_request():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(500)

    client = GoogleDistanceMatrixClient(api_key="test-key", transport=httpx.MockTransport(handler))
    many = [_location(i, 40.70 + i * 0.01, -73.99) for i in range(11)]

    result = ApiMatrixProvider(client, source="google").matrix(many)

    assert requests == []
    assert result.source == "haversine"
    assert len(result.durations) == 11


def test_get_provider_without_credentials_is_haversine():
    assert isinstance(get_provider(), HaversineMatrixProvider)


def test_get_provider_uses_request_key_for_google():
    provider = get_provider(api_key="request-key")
    assert isinstance(provider, ApiMatrixProvider)
    assert provider.source == "google"
    assert provider.client.api_key == "request-key"


def test_get_provider_uses_configured_osrm(monkeypatch):
    monkeypatch.setattr(settings, "routing_backend", "osrm")
    monkeypatch.setattr(settings, "osrm_base_url", "http://osrm.local:5000")
    provider = get_provider(api_key="ignored")
    assert isinstance(provider, ApiMatrixProvider)
    assert provider.source == "osrm"
    assert provider.client.base_url == "http://osrm.local:5000"


def test_compute_matrix_with_failing_backend_matches_offline(monkeypatch, locations):
    monkeypatch.setattr(matrix_module, "GoogleDistanceMatrixClient", lambda *args, **kwargs: FailingClient())

    with_key = compute_matrix(locations, api_key="secret")
    without_key = compute_matrix(locations)

    assert with_key == without_key
