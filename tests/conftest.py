import pytest

from itinerary_router.config import settings


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch: pytest.MonkeyPatch):
    """Keep every test on the haversine path unless it opts into a backend."""
    monkeypatch.setattr(settings, "routing_backend", "google")
    monkeypatch.setattr(settings, "google_maps_api_key", None)
    monkeypatch.setattr(settings, "osrm_base_url", None)
    monkeypatch.setattr(settings, "fallback_speed_kmh", 30.0)
    monkeypatch.setattr(settings, "zero_coordinates_are_unset", True)
    monkeypatch.setattr(settings, "two_opt_max_improvements", 10_000)
    yield
