import csv
import io

import httpx
import pytest
from fastapi.testclient import TestClient

from itinerary_router.config import settings
from itinerary_router.main import create_app
from itinerary_router.services.routing import matrix as matrix_module
from itinerary_router.services.routing.osrm_client import OSRMClient

DAY = [
    {"id": "a", "title": "Sagrada Familia", "latitude": 10.00, "longitude": 20.00, "time": "09:00"},
    {"id": "b", "title": "Park Guell", "latitude": 10.01, "longitude": 20.01, "time": "11:00"},
    {"id": "lunch", "title": "Lunch somewhere", "latitude": None, "longitude": None},
    {"id": "c", "title": "Casa Batllo", "latitude": 10.00, "longitude": 20.01, "time": "14:00"},
    {"id": "d", "title": "La Boqueria", "latitude": 10.01, "longitude": 20.00, "time": "16:00"},
]


class FailingMatrixClient:
    def table(self, coordinates):
        raise httpx.ConnectError("network down")


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_routing_health_reports_unconfigured_backend(api_client: TestClient):
    response = api_client.get("/api/health/routing")
    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == "google"
    assert payload["configured"] is False
    assert payload["healthy"] is False


def test_optimize_endpoint_returns_camel_case_result(api_client: TestClient):
    response = api_client.post("/api/routes/optimize", json={"activities": DAY})

    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["originalOrder"]] == ["a", "b", "lunch", "c", "d"]
    assert [item["id"] for item in payload["optimizedOrder"]] == ["a", "c", "b", "d", "lunch"]
    assert payload["optimizedOrder"][0]["time"] == "09:00"
    assert payload["timeSaved"] == payload["originalTotalTime"] - payload["optimizedTotalTime"]
    assert payload["timeSaved"] > 0
    assert payload["matrixSource"] == "haversine"
    assert payload["routedCount"] == 4
    assert payload["segments"][0]["from"] == "Sagrada Familia"
    assert payload["segments"][0]["to"] == "Casa Batllo"
    assert set(payload["segments"][0]) == {"from", "to", "durationMinutes", "distanceKm"}


def test_optimize_endpoint_with_failing_api_matches_offline(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    offline = api_client.post("/api/routes/optimize", json={"activities": DAY}).json()

    monkeypatch.setattr(matrix_module, "GoogleDistanceMatrixClient", lambda *args, **kwargs: FailingMatrixClient())
    degraded = api_client.post("/api/routes/optimize", json={"activities": DAY, "apiKey": "abc"}).json()

    assert degraded == offline


def test_optimize_endpoint_survives_non_numeric_osrm_cell(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    durations = [[0, 300, 120, 240], [300, 0, "x", 150], [120, 200, 0, 180], [240, 150, 180, 0]]
    distances = [[0, 2000, 900, 1700], [2000, 0, 1500, 1100], [900, 1500, 0, 1300], [1700, 1100, 1300, 0]]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": "Ok", "durations": durations, "distances": distances})

    monkeypatch.setattr(settings, "routing_backend", "osrm")
    monkeypatch.setattr(settings, "osrm_base_url", "http://osrm.local")
    monkeypatch.setattr(
        matrix_module,
        "OSRMClient",
        lambda *args, **kwargs: OSRMClient(base_url="http://osrm.local", transport=httpx.MockTransport(handler)),
    )

    response = api_client.post("/api/routes/optimize", json={"activities": DAY})

    assert response.status_code == 200
    payload = response.json()
    assert payload["matrixSource"] == "osrm"
    assert payload["optimizedTotalTime"] <= payload["originalTotalTime"]
    assert all(isinstance(segment["durationMinutes"], int) for segment in payload["segments"])


def test_optimize_endpoint_rejects_activity_without_title(api_client: TestClient):
    response = api_client.post("/api/routes/optimize", json={"activities": [{"latitude": 1.0, "longitude": 2.0}]})
    assert response.status_code == 422


def test_optimize_csv_endpoint(api_client: TestClient):
    response = api_client.post("/api/routes/optimize/csv", json={"activities": DAY})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["sequence"] for row in rows] == ["1", "2", "3"]
    assert rows[0]["from"] == "Sagrada Familia"
    assert rows[-1]["to"] == "La Boqueria"


def test_travel_time_endpoint(api_client: TestClient):
    response = api_client.post("/api/routes/travel-time", json={"activities": DAY})
    assert response.status_code == 200
    # a -> b diagonal, b -> c side, c -> d diagonal: about 4.2 km at 30 km/h
    assert response.json() == {"totalMinutes": 8}
