"""Route optimization request/response schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ActivityModel(BaseModel):
    """Activity as sent by the itinerary UI. Unknown fields are passed through."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[Union[str, int]] = None
    title: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class OptimizationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    activities: List[ActivityModel] = Field(default_factory=list)
    api_key: Optional[str] = Field(
        default=None,
        alias="apiKey",
        description="Distance Matrix API key; the server-side key is used when omitted.",
    )


class TravelTimeRequest(BaseModel):
    activities: List[ActivityModel] = Field(default_factory=list)


class TravelTimeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_minutes: int = Field(alias="totalMinutes")


class SegmentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_title: str = Field(alias="from")
    to_title: str = Field(alias="to")
    duration_minutes: int = Field(alias="durationMinutes")
    distance_km: float = Field(alias="distanceKm")


class OptimizationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_order: List[ActivityModel]
    optimized_order: List[ActivityModel]
    original_total_time: int
    optimized_total_time: int
    time_saved: int
    segments: List[SegmentModel]
    matrix_source: str
    routed_count: int
