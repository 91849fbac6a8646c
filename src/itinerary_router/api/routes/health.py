"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_backend_health_check():
    """Lazy import to avoid startup failures."""
    if settings.routing_backend == "osrm":
        from ...services.routing.osrm_client import check_health
    else:
        from ...services.routing.google_client import check_health
    return check_health


@router.get("/health/routing", status_code=status.HTTP_200_OK)
def health_routing() -> dict:
    """Report the configured routing backend and whether it answers."""
    configured = bool(
        settings.osrm_base_url if settings.routing_backend == "osrm" else settings.google_maps_api_key
    )
    payload = {
        "service": settings.routing_backend,
        "configured": configured,
        "fallback": "haversine",
        "fallback_speed_kmh": settings.fallback_speed_kmh,
    }
    if not configured:
        payload["healthy"] = False
        return payload
    try:
        payload["healthy"] = _get_backend_health_check()()
    except Exception as e:
        payload["healthy"] = False
        payload["error"] = str(e)
    return payload
