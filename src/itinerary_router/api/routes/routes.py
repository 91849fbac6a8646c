"""Route optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ...schemas.routing import (
    OptimizationRequest,
    OptimizationResponse,
    TravelTimeRequest,
    TravelTimeResponse,
)
from ...services.outputs.routing_formatter import activities_from_models, result_to_csv
from ...services.routing.service import optimize_day, optimize_route, travel_time

router = APIRouter(prefix="/routes", tags=["routes"])
logger = logging.getLogger(__name__)


@router.post("/optimize", response_model=OptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizationRequest) -> OptimizationResponse:
    try:
        return optimize_day(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}"
        ) from exc


@router.post("/optimize/csv", status_code=status.HTTP_200_OK)
def optimize_csv(payload: OptimizationRequest) -> Response:
    """Optimize and return the hop-by-hop plan as a CSV download."""
    try:
        result = optimize_route(activities_from_models(payload.activities), api_key=payload.api_key)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error exporting optimized route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export optimized route: {str(exc)}"
        ) from exc
    return Response(
        content=result_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="optimized_route.csv"'},
    )


@router.post("/travel-time", response_model=TravelTimeResponse, status_code=status.HTTP_200_OK)
def estimate_travel_time(payload: TravelTimeRequest) -> TravelTimeResponse:
    """Straight-line travel estimate for the activities in their current order."""
    return travel_time(payload)
